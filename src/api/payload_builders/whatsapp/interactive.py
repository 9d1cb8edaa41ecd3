"""Builder para mensagens interativas com botões de resposta.

A Cloud API aceita no máximo 3 botões com títulos de até 20 caracteres;
o excedente é descartado/truncado aqui, nunca rejeitado.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import (
    MAX_BUTTON_TITLE_LENGTH,
    MAX_REPLY_BUTTONS,
    InteractiveType,
    MessageType,
)

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest


class InteractivePayloadBuilder:
    """Builder para interactive.type=button."""

    def build(self, request: OutboundMessageRequest) -> dict[str, Any]:
        buttons = [
            {
                "type": "reply",
                "reply": {
                    "id": button.id or f"btn_{index}",
                    "title": button.title[:MAX_BUTTON_TITLE_LENGTH],
                },
            }
            for index, button in enumerate(request.buttons[:MAX_REPLY_BUTTONS])
        ]
        return {
            "type": MessageType.INTERACTIVE.value,
            "interactive": {
                "type": InteractiveType.BUTTON.value,
                "body": {"text": request.text},
                "action": {"buttons": buttons},
            },
        }
