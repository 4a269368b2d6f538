# =============================================================================
# Services Package — Business Logic
# =============================================================================
# Contains the core business logic, separated from API handlers:
#   - storage.py: Object storage adapter (S3 or local directory)
#   - converter.py: Document-to-text extraction (Docling, csv, txt)
#   - tokens.py: tiktoken helpers (token counting and truncation)
#   - embedder.py: OpenAI embedding generation
#   - ranker.py: Cosine similarity ranking with category keyword boost
#   - reference_data.py: Static wizard label lists and per-type guidance
#   - wizard.py: Wizard step names and step validation
#   - llm.py: Multi-provider streaming LLM abstraction
#   - corpus.py: Template corpus loading, caching, and ingestion
#   - appeal_store.py: Appeal records (put / get / scan)
#   - fallback.py: Static appeal template used when generation fails
#   - export.py: HTML / PDF rendering of finished letters
#   - pricing.py: Token cost estimation
# =============================================================================
