"""Contadores diários de uso da Meta (mensagens enviadas e chamadas de API).

Read-modify-write sem transação: sob carga os contadores podem
sub-contar. Na virada do dia (UTC) ambos os contadores zeram antes do
incremento. Falhas de leitura devolvem a quota padrão em memória;
falhas de escrita são logadas e engolidas.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from app.domain.quota import MetaQuota, QuotaCounter
from utils.errors import PersistenceError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.stores import QuotaStoreProtocol

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class QuotaService:
    def __init__(
        self,
        store: QuotaStoreProtocol,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._store = store
        self._clock = clock

    async def get_quota(self) -> MetaQuota:
        """Quota corrente ou padrão (1000 msgs / 100000 chamadas, tier free)."""
        try:
            quota = await self._store.get()
        except PersistenceError as exc:
            logger.warning("quota_fetch_failed", extra={"error": str(exc)})
            return MetaQuota(last_reset=self._clock())
        return quota or MetaQuota(last_reset=self._clock())

    async def increment_api_calls(self) -> None:
        await self._increment("api_calls_today")

    async def increment_messages_sent(self) -> None:
        await self._increment("messages_sent_today")

    async def _increment(self, counter: QuotaCounter) -> None:
        try:
            quota = await self._store.get()
        except PersistenceError as exc:
            logger.warning(
                "quota_fetch_failed",
                extra={"counter": counter, "error": str(exc)},
            )
            return
        if quota is None:
            logger.info("quota_record_missing", extra={"counter": counter})
            return

        now = self._clock()
        if quota.is_stale(now):
            updates: dict[str, object] = {
                "messages_sent_today": 0,
                "api_calls_today": 0,
                "last_reset": now,
            }
            updates[counter] = 1
        else:
            updates = {counter: getattr(quota, counter) + 1}

        try:
            await self._store.update(updates)
        except PersistenceError as exc:
            logger.warning(
                "quota_update_failed",
                extra={"counter": counter, "error": str(exc)},
            )

    async def reset(self) -> MetaQuota:
        """Zera os dois contadores (ação manual do painel)."""
        now = self._clock()
        await self._store.update(
            {"messages_sent_today": 0, "api_calls_today": 0, "last_reset": now}
        )
        return await self.get_quota()
