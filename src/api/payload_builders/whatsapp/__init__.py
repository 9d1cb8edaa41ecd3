"""Builders de payload para a Cloud API do WhatsApp."""

from api.payload_builders.whatsapp.base import PayloadBuilder, build_base_payload
from api.payload_builders.whatsapp.factory import build_full_payload, get_payload_builder

__all__ = [
    "PayloadBuilder",
    "build_base_payload",
    "build_full_payload",
    "get_payload_builder",
]
