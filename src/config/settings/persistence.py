"""Settings de persistência (flows, contatos, mensagens, logs, quota).

Backend "rest" fala com um serviço PostgREST (Supabase); "memory" mantém
tudo no processo e serve para desenvolvimento e testes.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

PersistenceBackend = Literal["memory", "rest"]

_VALID_BACKENDS = ("memory", "rest")


@dataclass(frozen=True)
class PersistenceSettings:
    """Configurações de persistência.

    Attributes:
        backend: memory|rest
        supabase_url: URL base do projeto (sem /rest/v1)
        service_role_key: Chave de serviço usada como apikey e Bearer
        timeout_seconds: Timeout das chamadas REST
    """

    backend: PersistenceBackend = "memory"
    supabase_url: str = ""
    service_role_key: str = ""
    timeout_seconds: float = 10.0

    @property
    def rest_base_url(self) -> str:
        """URL base do PostgREST."""
        return f"{self.supabase_url.rstrip('/')}/rest/v1"

    def validate(self) -> list[str]:
        """Valida configurações de persistência."""
        errors: list[str] = []

        if self.backend not in _VALID_BACKENDS:
            errors.append(f"PERSISTENCE_BACKEND inválido: {self.backend}")

        if self.backend == "rest":
            if not self.supabase_url:
                errors.append("PERSISTENCE_BACKEND=rest requer SUPABASE_URL")
            if not self.service_role_key:
                errors.append(
                    "PERSISTENCE_BACKEND=rest requer SUPABASE_SERVICE_ROLE_KEY"
                )

        if self.timeout_seconds <= 0:
            errors.append("PERSISTENCE_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_persistence_from_env() -> PersistenceSettings:
    """Carrega PersistenceSettings de variáveis de ambiente."""
    backend_str = os.getenv("PERSISTENCE_BACKEND", "memory").lower()
    backend: PersistenceBackend = backend_str if backend_str in _VALID_BACKENDS else "memory"  # type: ignore[assignment]
    return PersistenceSettings(
        backend=backend,
        supabase_url=os.getenv("SUPABASE_URL", ""),
        service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
        timeout_seconds=float(os.getenv("PERSISTENCE_TIMEOUT_SECONDS", "10")),
    )


@lru_cache(maxsize=1)
def get_persistence_settings() -> PersistenceSettings:
    """Retorna instância cacheada de PersistenceSettings."""
    return _load_persistence_from_env()
