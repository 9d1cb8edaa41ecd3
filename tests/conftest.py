"""Configuração do pytest para o projeto Atende Paróquia."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    """Settings e container são cacheados por processo; cada teste parte do zero."""
    from app.bootstrap.clients import create_async_redis_client, get_postgrest_client
    from app.bootstrap.container import get_container
    from config.settings import (
        get_base_settings,
        get_dedupe_settings,
        get_flow_settings,
        get_persistence_settings,
        get_whatsapp_settings,
    )

    cached = (
        get_base_settings,
        get_dedupe_settings,
        get_flow_settings,
        get_persistence_settings,
        get_whatsapp_settings,
        get_container,
        get_postgrest_client,
        create_async_redis_client,
    )
    for getter in cached:
        getter.cache_clear()
    yield
    for getter in cached:
        getter.cache_clear()
