"""Factory para obter o builder correto por tipo de pedido outbound."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from api.payload_builders.whatsapp.base import PayloadBuilder, build_base_payload
from api.payload_builders.whatsapp.interactive import InteractivePayloadBuilder
from api.payload_builders.whatsapp.media import ImagePayloadBuilder
from api.payload_builders.whatsapp.text import TextPayloadBuilder

if TYPE_CHECKING:
    from app.protocols.models import OutboundKind, OutboundMessageRequest

_BUILDERS: dict[str, PayloadBuilder] = {
    "text": TextPayloadBuilder(),
    "buttons": InteractivePayloadBuilder(),
    "image": ImagePayloadBuilder(),
}


def get_payload_builder(kind: OutboundKind) -> PayloadBuilder | None:
    return _BUILDERS.get(kind)


def build_full_payload(request: OutboundMessageRequest) -> dict[str, Any]:
    """Constrói o payload completo para POST /messages.

    Raises:
        ValueError: Se o tipo não for suportado ou faltar dado obrigatório
    """
    builder = get_payload_builder(request.kind)
    if builder is None:
        raise ValueError(f"Tipo de mensagem não suportado: {request.kind}")

    payload = build_base_payload(request)
    payload.update(builder.build(request))
    return payload
