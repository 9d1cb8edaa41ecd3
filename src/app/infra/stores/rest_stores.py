"""Stores PostgREST: tabelas flows, contacts, messages, webhook_logs, meta_quota.

Filtros seguem a sintaxe do PostgREST (``coluna=eq.valor``). Linhas que
não validam contra o modelo de domínio são descartadas com log.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from app.domain.contact import Contact, contact_id_for
from app.domain.flow import Flow
from app.domain.message import Message
from app.domain.quota import QUOTA_ID, MetaQuota
from app.domain.webhook_log import WebhookLog
from app.protocols.stores import (
    ContactStoreProtocol,
    FlowStoreProtocol,
    MessageStoreProtocol,
    QuotaStoreProtocol,
    WebhookLogStoreProtocol,
)

if TYPE_CHECKING:
    from app.infra.stores.rest_client import PostgrestClient

logger = logging.getLogger(__name__)

FLOWS_TABLE = "flows"
CONTACTS_TABLE = "contacts"
MESSAGES_TABLE = "messages"
WEBHOOK_LOGS_TABLE = "webhook_logs"
QUOTA_TABLE = "meta_quota"


def _json_fields(fields: dict[str, Any]) -> dict[str, Any]:
    """Converte datetimes para ISO antes de enviar no corpo JSON."""
    return {
        key: value.isoformat() if hasattr(value, "isoformat") else value
        for key, value in fields.items()
    }


class RestFlowStore(FlowStoreProtocol):
    def __init__(self, client: PostgrestClient) -> None:
        self._client = client

    def _parse(self, rows: list[dict[str, Any]]) -> list[Flow]:
        flows: list[Flow] = []
        for row in rows:
            try:
                flows.append(Flow.model_validate(row))
            except ValidationError as exc:
                logger.warning(
                    "flow_row_invalid",
                    extra={"flow_id": row.get("id"), "error_count": exc.error_count()},
                )
        return flows

    async def list_active(self) -> list[Flow]:
        rows = await self._client.select(
            FLOWS_TABLE, {"is_active": "eq.true", "order": "created_at.asc"}
        )
        return self._parse(rows)

    async def list_all(self) -> list[Flow]:
        rows = await self._client.select(FLOWS_TABLE, {"order": "created_at.desc"})
        return self._parse(rows)

    async def get(self, flow_id: str) -> Flow | None:
        flows = self._parse(
            await self._client.select(FLOWS_TABLE, {"id": f"eq.{flow_id}"})
        )
        return flows[0] if flows else None

    async def upsert(self, flow: Flow) -> Flow:
        rows = await self._client.upsert(FLOWS_TABLE, flow.to_record(), on_conflict="id")
        parsed = self._parse(rows)
        return parsed[0] if parsed else flow

    async def delete(self, flow_id: str) -> bool:
        rows = await self._client.delete(FLOWS_TABLE, {"id": f"eq.{flow_id}"})
        return bool(rows)


class RestContactStore(ContactStoreProtocol):
    def __init__(self, client: PostgrestClient) -> None:
        self._client = client

    async def get(self, phone: str) -> Contact | None:
        rows = await self._client.select(CONTACTS_TABLE, {"phone": f"eq.{phone}"})
        if not rows:
            return None
        try:
            return Contact.model_validate(rows[0])
        except ValidationError:
            logger.warning("contact_row_invalid")
            return None

    async def upsert(self, phone: str, fields: dict[str, Any]) -> None:
        row = {"id": contact_id_for(phone), "phone": phone, **_json_fields(fields)}
        await self._client.upsert(CONTACTS_TABLE, row, on_conflict="id")

    async def update(self, phone: str, fields: dict[str, Any]) -> None:
        await self._client.update(
            CONTACTS_TABLE, {"phone": f"eq.{phone}"}, _json_fields(fields)
        )

    async def list_all(self) -> list[Contact]:
        rows = await self._client.select(
            CONTACTS_TABLE, {"order": "last_interaction.desc"}
        )
        contacts: list[Contact] = []
        for row in rows:
            try:
                contacts.append(Contact.model_validate(row))
            except ValidationError:
                logger.warning("contact_row_invalid")
        return contacts


class RestMessageStore(MessageStoreProtocol):
    def __init__(self, client: PostgrestClient) -> None:
        self._client = client

    async def append(self, message: Message) -> None:
        await self._client.insert(MESSAGES_TABLE, message.to_record())

    async def update_status(self, provider_message_id: str, status: str) -> None:
        await self._client.update(
            MESSAGES_TABLE,
            {"message_id": f"eq.{provider_message_id}"},
            {"status": status},
        )

    async def list_recent(self, limit: int = 100) -> list[Message]:
        rows = await self._client.select(
            MESSAGES_TABLE, {"order": "timestamp.desc", "limit": str(limit)}
        )
        messages: list[Message] = []
        for row in rows:
            try:
                messages.append(Message.model_validate(row))
            except ValidationError:
                logger.warning("message_row_invalid", extra={"row_id": row.get("id")})
        return messages


class RestWebhookLogStore(WebhookLogStoreProtocol):
    def __init__(self, client: PostgrestClient) -> None:
        self._client = client

    async def append(self, log: WebhookLog) -> None:
        await self._client.insert(WEBHOOK_LOGS_TABLE, log.to_record())

    async def list_recent(self, limit: int = 100) -> list[WebhookLog]:
        rows = await self._client.select(
            WEBHOOK_LOGS_TABLE, {"order": "timestamp.desc", "limit": str(limit)}
        )
        logs: list[WebhookLog] = []
        for row in rows:
            try:
                logs.append(WebhookLog.model_validate(row))
            except ValidationError:
                logger.warning("webhook_log_row_invalid", extra={"row_id": row.get("id")})
        return logs


class RestQuotaStore(QuotaStoreProtocol):
    def __init__(self, client: PostgrestClient) -> None:
        self._client = client

    async def get(self) -> MetaQuota | None:
        rows = await self._client.select(QUOTA_TABLE, {"id": f"eq.{QUOTA_ID}"})
        if not rows:
            return None
        try:
            return MetaQuota.model_validate(rows[0])
        except ValidationError:
            logger.warning("quota_row_invalid")
            return None

    async def update(self, fields: dict[str, Any]) -> None:
        await self._client.update(
            QUOTA_TABLE, {"id": f"eq.{QUOTA_ID}"}, _json_fields(fields)
        )

    async def ping(self) -> None:
        await self._client.select(QUOTA_TABLE, {"id": f"eq.{QUOTA_ID}", "limit": "1"})
