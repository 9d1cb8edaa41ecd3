"""Registro best-effort de chamadas ao webhook (tabela webhook_logs).

Nunca levanta: uma falha ao gravar o log não pode bloquear a resposta
para a Meta.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.domain.webhook_log import WebhookLog

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.stores import WebhookLogStoreProtocol

logger = logging.getLogger(__name__)

# Headers que nunca são persistidos.
_REDACTED_HEADERS = frozenset({"authorization", "cookie", "x-hub-signature-256"})


def redact_headers(headers: Mapping[str, str]) -> dict[str, str]:
    return {
        key: ("[redacted]" if key.lower() in _REDACTED_HEADERS else value)
        for key, value in headers.items()
    }


class WebhookLogger:
    def __init__(self, store: WebhookLogStoreProtocol) -> None:
        self._store = store

    async def record(self, log: WebhookLog) -> None:
        try:
            await self._store.append(log)
        except Exception as exc:
            logger.warning(
                "webhook_log_write_failed",
                extra={"log_type": log.type, "error_type": type(exc).__name__},
            )

    async def record_call(
        self,
        *,
        method: str,
        url: str,
        headers: Mapping[str, str],
        body: Any,
        response: Any = None,
        status_code: int | None = None,
    ) -> None:
        await self.record(
            WebhookLog(
                type="webhook",
                method=method,
                url=url,
                headers=redact_headers(headers),
                body=body,
                response=response,
                status_code=status_code,
            )
        )

    async def record_error(
        self,
        error_message: str,
        *,
        method: str | None = None,
        url: str | None = None,
        phone_number: str | None = None,
    ) -> None:
        await self.record(
            WebhookLog(
                type="error",
                method=method,
                url=url,
                error_message=error_message,
                status_code=500,
                phone_number=phone_number,
            )
        )
