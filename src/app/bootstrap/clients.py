"""Factories de clientes externos (Redis, PostgREST)."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from app.infra.stores.rest_client import PostgrestClient, create_postgrest_client
from config.settings import get_base_settings, get_persistence_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis:
    """Cria cliente Redis assíncrono (singleton).

    Raises:
        ValueError: Se REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        msg = "REDIS_URL não configurado"
        raise ValueError(msg)

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        decode_responses=False,
        socket_timeout=5.0,
        socket_connect_timeout=5.0,
    )
    logger.info("async_redis_client_created")
    return client


@lru_cache(maxsize=1)
def get_postgrest_client() -> PostgrestClient:
    """Cliente PostgREST (singleton) a partir de PersistenceSettings."""
    settings = get_persistence_settings()
    client = create_postgrest_client(settings)
    logger.info("postgrest_client_created", extra={"timeout": settings.timeout_seconds})
    return client
