# =============================================================================
# Models Package — Pydantic V2 Schemas
# =============================================================================
# Request/response schemas for the API, kept separate from the database
# models in app/db/models.py. Both use camelCase on the wire.
# =============================================================================
