# =============================================================================
# Appeal Drafter
# =============================================================================
# Drafts marketplace suspension appeal letters from a guided form. The case
# is embedded, a fixed corpus of prior successful appeal letters is ranked by
# similarity (with a per-category keyword boost), and five constrained LLM
# calls write the letter section by section.
#
# Package structure:
#   app/
#   ├── api/          → FastAPI route handlers (appeals, reference data,
#   │                    wizard validation, template ingestion)
#   ├── agents/       → Section prompts, section writer, and the LangGraph
#   │                    orchestration of the five-section pipeline
#   ├── db/           → Database engine, session, and ORM models
#   ├── models/       → Pydantic V2 request/response schemas
#   └── services/     → Business logic (storage, conversion, embedding,
#                        ranking, fallback letter, export)
# =============================================================================
