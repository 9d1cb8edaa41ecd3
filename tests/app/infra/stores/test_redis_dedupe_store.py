"""Testes do RedisDedupeStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from utils.errors import RedisConnectionError


class TestRedisDedupeStore:
    """Testes do RedisDedupeStore."""

    @pytest.mark.asyncio
    async def test_check_and_mark_returns_false_for_new(self) -> None:
        """SET NX criou a chave: não é duplicado."""
        redis = MagicMock()
        redis.set = AsyncMock(return_value=True)
        store = RedisDedupeStore(redis)

        result = await store.check_and_mark("wamid.new", ttl=3600)

        assert result is False
        redis.set.assert_awaited_once_with("dedupe:wamid.new", "1", nx=True, ex=3600)

    @pytest.mark.asyncio
    async def test_check_and_mark_returns_true_for_duplicate(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(return_value=None)
        store = RedisDedupeStore(redis)

        assert await store.check_and_mark("wamid.dup", ttl=3600) is True

    @pytest.mark.asyncio
    async def test_is_duplicate_and_mark_processed_use_prefix(self) -> None:
        redis = MagicMock()
        redis.exists = AsyncMock(return_value=1)
        redis.setex = AsyncMock()
        store = RedisDedupeStore(redis)

        assert await store.is_duplicate("wamid.1") is True
        await store.mark_processed("wamid.1", ttl=60)

        redis.exists.assert_awaited_once_with("dedupe:wamid.1")
        redis.setex.assert_awaited_once_with("dedupe:wamid.1", 60, "1")

    @pytest.mark.asyncio
    async def test_release_deletes_prefixed_key(self) -> None:
        redis = MagicMock()
        redis.delete = AsyncMock(return_value=1)
        store = RedisDedupeStore(redis)

        await store.release("wamid.retry")

        redis.delete.assert_awaited_once_with("dedupe:wamid.retry")

    @pytest.mark.asyncio
    async def test_redis_errors_are_wrapped(self) -> None:
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=Exception("redis down"))
        store = RedisDedupeStore(redis)

        with pytest.raises(RedisConnectionError, match="marcar dedupe"):
            await store.check_and_mark("wamid.1")
