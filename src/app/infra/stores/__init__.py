"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - memory_stores: stores em memória para desenvolvimento/testes
    - rest_client / rest_stores: PostgREST (Supabase)
    - redis_dedupe_store: dedupe usando Redis
"""

from __future__ import annotations

from app.infra.stores.memory_stores import (
    MemoryContactStore,
    MemoryDedupeStore,
    MemoryFlowStore,
    MemoryMessageStore,
    MemoryQuotaStore,
    MemoryWebhookLogStore,
)
from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from app.infra.stores.rest_client import PostgrestClient, create_postgrest_client
from app.infra.stores.rest_stores import (
    RestContactStore,
    RestFlowStore,
    RestMessageStore,
    RestQuotaStore,
    RestWebhookLogStore,
)

__all__ = [
    "MemoryContactStore",
    "MemoryDedupeStore",
    "MemoryFlowStore",
    "MemoryMessageStore",
    "MemoryQuotaStore",
    "MemoryWebhookLogStore",
    "PostgrestClient",
    "RedisDedupeStore",
    "RestContactStore",
    "RestFlowStore",
    "RestMessageStore",
    "RestQuotaStore",
    "RestWebhookLogStore",
    "create_postgrest_client",
]
