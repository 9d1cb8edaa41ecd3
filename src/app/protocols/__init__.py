"""Protocolos e contratos do core da aplicação."""

from .condition_evaluator import ConditionEvaluatorProtocol
from .dedupe import AsyncDedupeProtocol
from .http_client import WhatsAppHttpClientProtocol
from .models import (
    DeliveryStatusEvent,
    InboundMessage,
    OutboundMessageRequest,
    OutboundMessageResponse,
    ReplyButton,
    WebhookProcessingSummary,
)
from .outbound_sender import OutboundSenderProtocol
from .stores import (
    ContactStoreProtocol,
    FlowStoreProtocol,
    MessageStoreProtocol,
    QuotaStoreProtocol,
    WebhookLogStoreProtocol,
)

__all__ = [
    "AsyncDedupeProtocol",
    "ConditionEvaluatorProtocol",
    "ContactStoreProtocol",
    "DeliveryStatusEvent",
    "FlowStoreProtocol",
    "InboundMessage",
    "MessageStoreProtocol",
    "OutboundMessageRequest",
    "OutboundMessageResponse",
    "OutboundSenderProtocol",
    "QuotaStoreProtocol",
    "ReplyButton",
    "WebhookLogStoreProtocol",
    "WebhookProcessingSummary",
    "WhatsAppHttpClientProtocol",
]
