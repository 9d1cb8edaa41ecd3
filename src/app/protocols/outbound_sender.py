"""Protocolo de envio outbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from .models import OutboundMessageRequest, OutboundMessageResponse


class OutboundSenderProtocol(Protocol):
    """Envia um pedido outbound ao provedor.

    Implementações não levantam exceções de rede: falhas viram
    OutboundMessageResponse(success=False).
    """

    async def send(
        self,
        request: OutboundMessageRequest,
    ) -> OutboundMessageResponse: ...
