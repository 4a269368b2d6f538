# =============================================================================
# API Package — FastAPI Route Handlers
# =============================================================================
# Each module defines a FastAPI APIRouter for one feature:
#   - reference.py: Wizard options, step names and step validation
#   - appeals.py: Letter generation (JSON, SSE, per-section), records, export
#   - templates.py: Template corpus ingestion and status (admin)
#   - deps.py: Shared-password access dependencies
# =============================================================================
