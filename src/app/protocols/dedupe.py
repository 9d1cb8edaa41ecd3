"""Protocolo de dedupe de mensagens inbound."""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Contrato assíncrono para stores de deduplicação.

    - is_duplicate(key, ttl): True se a chave já foi vista.
    - mark_processed(key, ttl): marca a chave com TTL.
    - check_and_mark(key, ttl): verifica e marca numa só operação.
    - release(key): desfaz a marca (processamento falhou).
    """

    @abstractmethod
    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        """Verifica se a chave já foi processada."""

    @abstractmethod
    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        """Marca a chave como processada."""

    @abstractmethod
    async def release(self, key: str) -> None:
        """Remove a marca para que uma reentrega seja processada."""

    async def check_and_mark(self, key: str, ttl: int = 86400) -> bool:
        """Retorna True se duplicado; caso contrário marca e retorna False."""
        if await self.is_duplicate(key, ttl):
            return True
        await self.mark_processed(key, ttl)
        return False
