"""Settings de dedupe de mensagens inbound.

A Meta pode reentregar o mesmo evento; o dedupe usa o message_id do
provedor como chave. "none" desliga o dedupe por completo.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING, Literal

if TYPE_CHECKING:
    from config.settings.base.core import BaseSettings

DedupeBackend = Literal["none", "memory", "redis"]

_VALID_BACKENDS = ("none", "memory", "redis")


@dataclass(frozen=True)
class DedupeSettings:
    """Configurações de dedupe.

    Attributes:
        backend: Backend para dedupe (none|memory|redis)
        ttl_seconds: TTL para entradas de dedupe
    """

    backend: DedupeBackend = "memory"
    ttl_seconds: int = 86400  # 24h

    def validate(self, base: BaseSettings) -> list[str]:
        """Valida configurações de dedupe contra o ambiente."""
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"DEDUPE_BACKEND inválido: {self.backend}")

        if self.backend == "redis" and not base.redis_url:
            errors.append("DEDUPE_BACKEND=redis requer REDIS_URL configurado")

        if self.ttl_seconds <= 0:
            errors.append("DEDUPE_TTL_SECONDS deve ser > 0")

        return errors


def _load_dedupe_from_env() -> DedupeSettings:
    """Carrega DedupeSettings de variáveis de ambiente."""
    backend_str = os.getenv("DEDUPE_BACKEND", "memory").lower()
    backend: DedupeBackend = backend_str if backend_str in _VALID_BACKENDS else "memory"  # type: ignore[assignment]
    return DedupeSettings(
        backend=backend,
        ttl_seconds=int(os.getenv("DEDUPE_TTL_SECONDS", "86400")),
    )


@lru_cache(maxsize=1)
def get_dedupe_settings() -> DedupeSettings:
    """Retorna instância cacheada de DedupeSettings."""
    return _load_dedupe_from_env()
