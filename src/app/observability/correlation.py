"""correlation_id por requisição de webhook.

Cada entrega da Meta (ou chamada administrativa) recebe um id que é
injetado em todos os logs pelo CorrelationIdFilter. ContextVar mantém o
valor isolado entre tasks asyncio concorrentes.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")


def get_correlation_id() -> str:
    """Retorna o correlation_id corrente ("" fora de uma requisição)."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id; gera um UUID quando ausente.

    Returns:
        Token para reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return uuid.uuid4().hex
