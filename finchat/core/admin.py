"""Admin password verification.

The admin dashboard is protected by a single shared password taken from the
environment. There is no built-in default: when ``ADMIN_PASSWORD`` is unset,
every verification fails.

Design principles:
- Pure check (``verify_admin_password``) separate from the FastAPI dependency
- Constant-time comparison
- Never log the provided password, only its length
"""

from __future__ import annotations

import hmac
import logging
from typing import Annotated

from fastapi import Header, HTTPException, status

from finchat.core.config import settings
from finchat.core.errors import AuthenticationAppError

logger = logging.getLogger(__name__)


def verify_admin_password(provided: str) -> bool:
    """Check a candidate admin password.

    Args:
        provided: Password supplied by the client.

    Returns:
        True when it matches the configured password.
    """
    expected = settings.admin.password
    if not expected:
        logger.error(
            "admin.verify_failed",
            extra={"reason": "admin_password_not_configured"},
        )
        return False

    verified = hmac.compare_digest(provided.encode(), expected.encode())
    if not verified:
        logger.warning(
            "admin.verify_failed",
            extra={"reason": "password_mismatch", "provided_length": len(provided)},
        )
    return verified


def require_admin_password(provided: str | None) -> None:
    """Raise unless ``provided`` is the admin password.

    Raises:
        AuthenticationAppError: If the password is missing or wrong.
    """
    if not provided or not verify_admin_password(provided):
        raise AuthenticationAppError(
            code="admin_auth_failed",
            message="Invalid or missing admin password",
            details={"hint": "Provide the X-Admin-Password header"},
        )


async def verify_admin_header(
    x_admin_password: Annotated[str | None, Header(alias="X-Admin-Password")] = None,
) -> None:
    """FastAPI dependency protecting admin-only routes.

    Usage:
        @router.get("/analytics", dependencies=[Depends(verify_admin_header)])

    Raises:
        HTTPException: 403 Forbidden if the header is missing or wrong.
    """
    try:
        require_admin_password(x_admin_password)
    except AuthenticationAppError as exc:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=exc.message,
        ) from exc
