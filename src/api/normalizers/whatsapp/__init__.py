"""Extração de mensagens e status do webhook WhatsApp Business API."""

from .extractor import extract_payload_messages, extract_payload_statuses

__all__ = [
    "extract_payload_messages",
    "extract_payload_statuses",
]
