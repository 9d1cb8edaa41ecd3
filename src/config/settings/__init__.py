"""Agregador de settings do Atende Paróquia.

Re-exporta todas as settings e funções de cada módulo.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)
from config.settings.flow import FlowSettings, get_flow_settings
from config.settings.persistence import (
    PersistenceBackend,
    PersistenceSettings,
    get_persistence_settings,
)
from config.settings.whatsapp import (
    DEFAULT_VERIFY_TOKEN,
    GRAPH_API_BASE_URL,
    GRAPH_API_VERSION,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    "DEFAULT_VERIFY_TOKEN",
    "GRAPH_API_BASE_URL",
    "GRAPH_API_VERSION",
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "FlowSettings",
    "PersistenceBackend",
    "PersistenceSettings",
    "WhatsAppSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_flow_settings",
    "get_persistence_settings",
    "get_whatsapp_settings",
]
