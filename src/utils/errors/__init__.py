"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    FlowValidationError,
    InfrastructureError,
    PersistenceError,
    ProviderConfigurationError,
    RedisConnectionError,
)

__all__ = [
    "FlowValidationError",
    "InfrastructureError",
    "PersistenceError",
    "ProviderConfigurationError",
    "RedisConnectionError",
]
