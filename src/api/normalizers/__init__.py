"""Normalizers: conversão de payloads externos para modelos internos."""

from .whatsapp import extract_payload_messages, extract_payload_statuses

__all__ = [
    "extract_payload_messages",
    "extract_payload_statuses",
]
