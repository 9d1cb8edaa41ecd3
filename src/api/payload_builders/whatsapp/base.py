"""Contrato e campos comuns dos payloads da Cloud API."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from app.constants.whatsapp import MESSAGING_PRODUCT

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest


class PayloadBuilder(Protocol):
    """Builder de um tipo de mensagem: devolve type + bloco específico."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]: ...


def build_base_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    return {
        "messaging_product": MESSAGING_PRODUCT,
        "recipient_type": "individual",
        "to": request.to,
    }
