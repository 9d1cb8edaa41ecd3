"""Stores em memória para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.domain.contact import Contact
from app.domain.quota import MetaQuota
from app.protocols.dedupe import AsyncDedupeProtocol
from app.protocols.stores import (
    ContactStoreProtocol,
    FlowStoreProtocol,
    MessageStoreProtocol,
    QuotaStoreProtocol,
    WebhookLogStoreProtocol,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.domain.flow import Flow
    from app.domain.message import Message
    from app.domain.webhook_log import WebhookLog


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe em memória."""

    def __init__(self) -> None:
        self._store: dict[str, float] = {}  # key -> expires_at

    def _cleanup_expired(self) -> None:
        now = time.time()
        expired = [k for k, v in self._store.items() if v < now]
        for k in expired:
            del self._store[k]

    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        self._cleanup_expired()
        return key in self._store and self._store[key] > time.time()

    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        self._store[key] = time.time() + ttl

    async def release(self, key: str) -> None:
        self._store.pop(key, None)


class MemoryFlowStore(FlowStoreProtocol):
    """Fluxos em memória; a ordem de inserção é a ordem armazenada."""

    def __init__(self, flows: Iterable[Flow] = ()) -> None:
        self._flows: dict[str, Flow] = {flow.id: flow for flow in flows}

    async def list_active(self) -> list[Flow]:
        return [flow for flow in self._flows.values() if flow.is_active]

    async def list_all(self) -> list[Flow]:
        return sorted(self._flows.values(), key=lambda f: f.created_at, reverse=True)

    async def get(self, flow_id: str) -> Flow | None:
        return self._flows.get(flow_id)

    async def upsert(self, flow: Flow) -> Flow:
        self._flows[flow.id] = flow
        return flow

    async def delete(self, flow_id: str) -> bool:
        return self._flows.pop(flow_id, None) is not None


class MemoryContactStore(ContactStoreProtocol):
    def __init__(self) -> None:
        self._contacts: dict[str, Contact] = {}

    async def get(self, phone: str) -> Contact | None:
        return self._contacts.get(phone)

    async def upsert(self, phone: str, fields: dict[str, Any]) -> None:
        current = self._contacts.get(phone)
        if current is None:
            self._contacts[phone] = Contact(phone=phone, **fields)
            return
        self._contacts[phone] = current.model_copy(update=fields)

    async def update(self, phone: str, fields: dict[str, Any]) -> None:
        current = self._contacts.get(phone)
        if current is not None:
            self._contacts[phone] = current.model_copy(update=fields)

    async def list_all(self) -> list[Contact]:
        return sorted(
            self._contacts.values(),
            key=lambda c: c.last_interaction,
            reverse=True,
        )


class MemoryMessageStore(MessageStoreProtocol):
    def __init__(self) -> None:
        self.messages: list[Message] = []

    async def append(self, message: Message) -> None:
        self.messages.append(message)

    async def update_status(self, provider_message_id: str, status: str) -> None:
        self.messages = [
            msg.model_copy(update={"status": status})
            if msg.message_id == provider_message_id
            else msg
            for msg in self.messages
        ]

    async def list_recent(self, limit: int = 100) -> list[Message]:
        return sorted(self.messages, key=lambda m: m.timestamp, reverse=True)[:limit]


class MemoryWebhookLogStore(WebhookLogStoreProtocol):
    def __init__(self, max_records: int = 10000) -> None:
        self.logs: list[WebhookLog] = []
        self._max_records = max_records

    async def append(self, log: WebhookLog) -> None:
        self.logs.append(log)
        if len(self.logs) > self._max_records:
            self.logs = self.logs[-self._max_records:]

    async def list_recent(self, limit: int = 100) -> list[WebhookLog]:
        return list(reversed(self.logs))[:limit]


class MemoryQuotaStore(QuotaStoreProtocol):
    """Quota em memória; começa com o registro padrão criado."""

    def __init__(self, quota: MetaQuota | None = None) -> None:
        self._quota: MetaQuota | None = quota or MetaQuota(last_reset=datetime.now(UTC))

    async def get(self) -> MetaQuota | None:
        return self._quota

    async def update(self, fields: dict[str, Any]) -> None:
        if self._quota is not None:
            self._quota = self._quota.model_copy(update=fields)

    async def ping(self) -> None:
        return None
