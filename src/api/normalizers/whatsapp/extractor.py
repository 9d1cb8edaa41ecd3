"""Extrator do envelope do webhook WhatsApp Business.

Percorre entry[].changes[].value e devolve mensagens recebidas e status
de entrega. Não faz validação de negócio, apenas extração estrutural;
itens malformados são ignorados.
"""

from __future__ import annotations

import logging
from typing import Any

from app.protocols.models import DeliveryStatusEvent, InboundMessage

from ._extraction_helpers import extract_message_content

logger = logging.getLogger(__name__)


def _iter_values(payload: dict[str, Any]) -> list[dict[str, Any]]:
    values: list[dict[str, Any]] = []
    entries = payload.get("entry")
    if not isinstance(entries, list):
        return values
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        changes = entry.get("changes")
        if not isinstance(changes, list):
            continue
        for change in changes:
            if not isinstance(change, dict):
                continue
            value = change.get("value")
            if isinstance(value, dict):
                values.append(value)
    return values


def _profile_name(value: dict[str, Any]) -> str | None:
    contacts = value.get("contacts") or []
    if contacts and isinstance(contacts, list) and isinstance(contacts[0], dict):
        profile = contacts[0].get("profile") or {}
        if isinstance(profile, dict):
            return profile.get("name")
    return None


def extract_payload_messages(payload: dict[str, Any]) -> list[InboundMessage]:
    """Extrai mensagens recebidas, na ordem do envelope."""
    messages: list[InboundMessage] = []
    for value in _iter_values(payload):
        whatsapp_name = _profile_name(value)
        raw_messages = value.get("messages") or []
        if not isinstance(raw_messages, list):
            continue
        for msg in raw_messages:
            if not isinstance(msg, dict):
                continue
            message_id = msg.get("id")
            from_number = msg.get("from")
            if not message_id or not from_number:
                logger.info("inbound_message_missing_ids")
                continue
            content, reply_id = extract_message_content(msg)
            messages.append(
                InboundMessage(
                    message_id=str(message_id),
                    from_number=str(from_number),
                    message_type=str(msg.get("type") or "unknown"),
                    content=content,
                    timestamp=msg.get("timestamp"),
                    whatsapp_name=whatsapp_name,
                    reply_id=reply_id,
                )
            )
    return messages


def extract_payload_statuses(payload: dict[str, Any]) -> list[DeliveryStatusEvent]:
    """Extrai value.statuses[] (sent/delivered/read/failed)."""
    statuses: list[DeliveryStatusEvent] = []
    for value in _iter_values(payload):
        raw_statuses = value.get("statuses") or []
        if not isinstance(raw_statuses, list):
            continue
        for item in raw_statuses:
            if not isinstance(item, dict):
                continue
            message_id = item.get("id")
            status = item.get("status")
            if not message_id or not status:
                continue
            statuses.append(
                DeliveryStatusEvent(
                    message_id=str(message_id),
                    status=str(status),
                    recipient_id=item.get("recipient_id"),
                    timestamp=item.get("timestamp"),
                )
            )
    return statuses
