"""Modelos de transporte entre camadas (api <-> app).

Dataclasses imutáveis; sem dependência de pydantic para manter a camada
de protocolos leve.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

OutboundKind = Literal["text", "buttons", "image"]


@dataclass(frozen=True, slots=True)
class InboundMessage:
    """Mensagem recebida, já extraída do envelope do webhook.

    ``content`` é o texto útil para o executor: corpo do texto, texto do
    botão ou título do reply interativo ("" para mídia).
    """

    message_id: str
    from_number: str
    message_type: str
    content: str = ""
    timestamp: str | None = None
    whatsapp_name: str | None = None
    reply_id: str | None = None


@dataclass(frozen=True, slots=True)
class DeliveryStatusEvent:
    """Item de value.statuses[] (sent/delivered/read/failed)."""

    message_id: str
    status: str
    recipient_id: str | None = None
    timestamp: str | None = None


@dataclass(frozen=True, slots=True)
class ReplyButton:
    id: str
    title: str


@dataclass(frozen=True, slots=True)
class OutboundMessageRequest:
    """Pedido de envio gerado pelo executor de fluxos."""

    to: str
    kind: OutboundKind
    text: str = ""
    buttons: tuple[ReplyButton, ...] = ()
    media_url: str | None = None
    flow_id: str | None = None
    node_id: str | None = None


@dataclass(frozen=True, slots=True)
class OutboundMessageResponse:
    success: bool
    message_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None


@dataclass(slots=True)
class WebhookProcessingSummary:
    """Contadores de uma entrega POST do webhook."""

    received: int = 0
    processed: int = 0
    skipped_duplicates: int = 0
    statuses: int = 0
    errors: list[str] = field(default_factory=list)
