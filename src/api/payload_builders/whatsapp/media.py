"""Builder para mensagens de imagem por link."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import MessageType

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest


class ImagePayloadBuilder:
    """Imagem hospedada (link) com legenda opcional."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        if not request.media_url:
            raise ValueError("media_url é obrigatório para imagem")
        return {
            "type": MessageType.IMAGE.value,
            "image": {
                "link": request.media_url,
                "caption": request.text or "",
            },
        }
