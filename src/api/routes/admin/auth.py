"""Autenticação da API administrativa (Bearer ADMIN_API_TOKEN)."""

from __future__ import annotations

import hmac
import logging

from fastapi import HTTPException, Request, status

from config.settings import get_base_settings

logger = logging.getLogger(__name__)

_BEARER_PREFIX = "bearer "


def _extract_bearer(authorization: str | None) -> str | None:
    if not authorization or not authorization.lower().startswith(_BEARER_PREFIX):
        return None
    return authorization[len(_BEARER_PREFIX) :].strip() or None


async def require_admin(request: Request) -> None:
    """Dependency FastAPI que protege as rotas /admin.

    Sem ADMIN_API_TOKEN configurado a API só é liberada em development.

    Raises:
        HTTPException: 401 token ausente/inválido, 503 token não configurado
    """
    settings = get_base_settings()
    expected = settings.admin_api_token

    if not expected:
        if settings.is_development:
            return
        logger.warning("admin_token_not_configured", extra={"environment": settings.environment})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Admin API disabled",
        )

    provided = _extract_bearer(request.headers.get("authorization"))
    if provided is None or not hmac.compare_digest(provided, expected):
        logger.warning("admin_auth_failed", extra={"path": request.url.path})
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Unauthorized",
            headers={"WWW-Authenticate": "Bearer"},
        )
