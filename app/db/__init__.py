# =============================================================================
# Database Package
# =============================================================================
# Async SQLAlchemy engine, session management, and ORM models.
#
# Key exports:
#   - get_async_session: FastAPI dependency for database sessions
#   - async_session_factory: sessions for code outside a request
#   - Appeal, TemplateDocument: ORM models
# =============================================================================
