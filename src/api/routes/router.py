"""Agregador de rotas: registra health, webhook WhatsApp e admin.

Uso:
    from api.routes import create_api_router

    app = FastAPI()
    app.include_router(create_api_router())
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.admin.router import router as admin_router
from api.routes.health.router import router as health_router
from api.routes.whatsapp.webhook import router as whatsapp_router

WHATSAPP_WEBHOOK_PATH = "/webhook/whatsapp"
WHATSAPP_WEBHOOK_ALIAS = "/api/webhook"


def create_api_router() -> APIRouter:
    """Cria router principal com todos os sub-routers registrados.

    Returns:
        APIRouter configurado com todos os endpoints.
    """
    api_router = APIRouter()

    # Health checks (sem prefixo para /health e /ready na raiz)
    api_router.include_router(health_router, tags=["health"])

    api_router.include_router(whatsapp_router, prefix=WHATSAPP_WEBHOOK_PATH, tags=["whatsapp"])
    # Alias sem entrada no OpenAPI
    api_router.include_router(
        whatsapp_router,
        prefix=WHATSAPP_WEBHOOK_ALIAS,
        include_in_schema=False,
    )

    api_router.include_router(admin_router, prefix="/admin", tags=["admin"])

    return api_router
