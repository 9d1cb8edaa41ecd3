"""Enums e limites da Cloud API do WhatsApp usados pelo executor."""

from __future__ import annotations

from enum import StrEnum

# Limites de mensagens interativas com botões de resposta.
MAX_REPLY_BUTTONS: int = 3
MAX_BUTTON_TITLE_LENGTH: int = 20

MESSAGING_PRODUCT: str = "whatsapp"


class MessageType(StrEnum):
    """Tipos de mensagem enviados/recebidos pelo webhook."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    DOCUMENT = "document"
    INTERACTIVE = "interactive"
    BUTTON = "button"
    TEMPLATE = "template"


class InteractiveType(StrEnum):
    """Subtipos de mensagens interativas."""

    BUTTON = "button"
    BUTTON_REPLY = "button_reply"
    LIST_REPLY = "list_reply"


class DeliveryStatus(StrEnum):
    """Status de entrega reportados em value.statuses[]."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"
