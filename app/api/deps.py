# =============================================================================
# Access Dependencies — Shared-Password Gate
# =============================================================================
#
# Two FastAPI dependencies protect the routes:
#
#   require_access() — any caller of the wizard and generation endpoints
#   require_admin()  — record listing, stats and template processing
#
# Both read the X-Access-Password header and compare it in constant time.
# An empty configured password disables that check (local development).
# Tests override get_settings() or these dependencies directly.
# =============================================================================

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, Header, HTTPException

from app.config import Settings, get_settings

logger = logging.getLogger(__name__)


def _check_password(supplied: str | None, expected: str, realm: str) -> None:
    if not expected:
        return

    if supplied is None:
        raise HTTPException(
            status_code=401,
            detail="Missing access password. Provide the 'X-Access-Password' header.",
        )

    if not secrets.compare_digest(supplied.encode(), expected.encode()):
        logger.warning("Rejected %s request: wrong password", realm)
        raise HTTPException(status_code=403, detail="Invalid access password.")


async def require_access(
    x_access_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Gate for the seller-facing endpoints."""
    _check_password(x_access_password, settings.access_password, "access")


async def require_admin(
    x_access_password: str | None = Header(default=None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Gate for admin endpoints; checked against admin_password."""
    _check_password(x_access_password, settings.admin_password, "admin")
