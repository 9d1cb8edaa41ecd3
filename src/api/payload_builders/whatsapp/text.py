"""Builder para mensagens de texto."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import MessageType

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest


class TextPayloadBuilder:
    """Builder para mensagens de texto simples."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        return {
            "type": MessageType.TEXT.value,
            "text": {
                "preview_url": False,
                "body": request.text,
            },
        }
