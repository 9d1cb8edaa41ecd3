"""Rotas HTTP da API: adapters de entrada.

Responsabilidades:
- Definir endpoints HTTP (webhook, health, admin)
- Validação inicial de request (headers, query params, auth)
- Delegação para connectors/use_cases via container
- Respostas HTTP apropriadas

Estrutura:
- routes/whatsapp/: webhook WhatsApp (GET verificação, POST eventos)
- routes/admin/: API do painel (flows, contatos, mensagens, logs, quota)
- routes/health/: health checks e readiness

Agregação:
- router.py: registra todos os routers no app principal
"""

from __future__ import annotations

from api.routes.router import create_api_router

__all__ = ["create_api_router"]
