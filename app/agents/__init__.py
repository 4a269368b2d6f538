# =============================================================================
# Agents Package — LangGraph Appeal Drafting
# =============================================================================
# Drafts an appeal letter section by section from ranked template letters:
#   - prompts.py: The five section definitions, the case summary and the
#     per-section system prompt
#   - writer.py: Streams one section from the configured LLM
#   - orchestrator.py: LangGraph graph — retrieve → five sections → assemble,
#     with a fallback branch when no templates are available
# =============================================================================
