"""Factories de stores conforme as settings de ambiente.

- PERSISTENCE_BACKEND: memory | rest
- DEDUPE_BACKEND: none | memory | redis
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.bootstrap.clients import create_async_redis_client, get_postgrest_client
from app.infra.stores import (
    MemoryContactStore,
    MemoryDedupeStore,
    MemoryFlowStore,
    MemoryMessageStore,
    MemoryQuotaStore,
    MemoryWebhookLogStore,
    RedisDedupeStore,
    RestContactStore,
    RestFlowStore,
    RestMessageStore,
    RestQuotaStore,
    RestWebhookLogStore,
)
from config.settings import get_base_settings, get_dedupe_settings, get_persistence_settings

if TYPE_CHECKING:
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.stores import (
        ContactStoreProtocol,
        FlowStoreProtocol,
        MessageStoreProtocol,
        QuotaStoreProtocol,
        WebhookLogStoreProtocol,
    )

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class StoreBundle:
    """Conjunto de stores de persistência de um backend."""

    flows: FlowStoreProtocol
    contacts: ContactStoreProtocol
    messages: MessageStoreProtocol
    webhook_logs: WebhookLogStoreProtocol
    quota: QuotaStoreProtocol


def create_memory_stores() -> StoreBundle:
    return StoreBundle(
        flows=MemoryFlowStore(),
        contacts=MemoryContactStore(),
        messages=MemoryMessageStore(),
        webhook_logs=MemoryWebhookLogStore(),
        quota=MemoryQuotaStore(),
    )


def create_rest_stores() -> StoreBundle:
    client = get_postgrest_client()
    return StoreBundle(
        flows=RestFlowStore(client),
        contacts=RestContactStore(client),
        messages=RestMessageStore(client),
        webhook_logs=RestWebhookLogStore(client),
        quota=RestQuotaStore(client),
    )


def create_stores() -> StoreBundle:
    """Cria stores de persistência conforme PERSISTENCE_BACKEND."""
    backend = get_persistence_settings().backend

    if backend == "rest":
        stores = create_rest_stores()
        logger.info("persistence_stores_created", extra={"backend": "rest"})
        return stores

    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    logger.info("persistence_stores_created", extra={"backend": "memory"})
    return create_memory_stores()


def create_dedupe_store() -> AsyncDedupeProtocol | None:
    """Cria store de dedupe conforme DEDUPE_BACKEND (None = desligado)."""
    backend = get_dedupe_settings().backend

    if backend == "none":
        logger.info("dedupe_store_disabled")
        return None

    if backend == "redis":
        store = RedisDedupeStore(create_async_redis_client())
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return store

    logger.info("dedupe_store_created", extra={"backend": "memory"})
    return MemoryDedupeStore()
