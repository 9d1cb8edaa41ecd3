"""Exceções de domínio para falhas recuperáveis de infraestrutura e configuração."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class PersistenceError(InfrastructureError):
    """Falha de leitura/escrita no serviço de persistência."""


class ProviderConfigurationError(RuntimeError):
    """Configuração do provedor WhatsApp ausente ou incompleta."""


class FlowValidationError(ValueError):
    """Fluxo com grafo inválido (ids duplicados ou arestas órfãs)."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors) or "fluxo inválido")
        self.errors = errors
