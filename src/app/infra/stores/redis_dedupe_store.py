"""Redis Dedupe Store: deduplicação de message_id entre réplicas.

Usa SET NX EX para marcar de forma atômica.

Contrato de Keys:
    As keys são ids opacos do provedor (wamid). NUNCA passar telefones
    como key; keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

DEDUPE_PREFIX = "dedupe:"


def _mask_key(key: str) -> str:
    return key[:8] + "..." if len(key) > 8 else key


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando redis.asyncio."""

    def __init__(self, redis_client: AsyncRedis) -> None:
        self._redis = redis_client

    def _key(self, key: str) -> str:
        return f"{DEDUPE_PREFIX}{key}"

    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        try:
            exists = await self._redis.exists(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc
        return bool(exists)

    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        try:
            await self._redis.setex(self._key(key), ttl, "1")
        except Exception as exc:
            raise RedisConnectionError("Falha ao marcar dedupe no Redis") from exc
        logger.debug("dedupe_marked", extra={"key": _mask_key(key), "ttl": ttl})

    async def release(self, key: str) -> None:
        try:
            await self._redis.delete(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao liberar dedupe no Redis") from exc

    async def check_and_mark(self, key: str, ttl: int = 86400) -> bool:
        """SET NX EX: True se a chave já existia (duplicado)."""
        try:
            was_set = await self._redis.set(self._key(key), "1", nx=True, ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao marcar dedupe no Redis") from exc
        is_duplicate = not was_set
        if is_duplicate:
            logger.debug("dedupe_duplicate_detected", extra={"key": _mask_key(key)})
        return is_duplicate
