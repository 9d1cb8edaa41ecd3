"""Testes do bootstrap: validação de settings e factories de stores."""

from __future__ import annotations

import pytest

from app.bootstrap import collect_settings_errors, get_container, validate_runtime_settings
from app.bootstrap.dependencies import create_dedupe_store, create_stores
from app.infra.stores import (
    MemoryDedupeStore,
    MemoryFlowStore,
    RedisDedupeStore,
    RestFlowStore,
    RestQuotaStore,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "ENVIRONMENT",
        "ADMIN_API_TOKEN",
        "REDIS_URL",
        "DEDUPE_BACKEND",
        "PERSISTENCE_BACKEND",
        "SUPABASE_URL",
        "SUPABASE_SERVICE_ROLE_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_development_defaults_are_valid() -> None:
    assert collect_settings_errors() == []
    validate_runtime_settings()


def test_errors_are_prefixed_by_section(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEDUPE_BACKEND", "redis")
    monkeypatch.setenv("PERSISTENCE_BACKEND", "rest")

    errors = collect_settings_errors()

    assert any(error.startswith("dedupe: ") for error in errors)
    assert sum(error.startswith("persistence: ") for error in errors) == 2


def test_production_without_admin_token_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("ENVIRONMENT", "production")

    with pytest.raises(RuntimeError, match="ADMIN_API_TOKEN"):
        validate_runtime_settings()


def test_development_only_warns(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DEDUPE_BACKEND", "redis")

    validate_runtime_settings()


def test_memory_stores_by_default() -> None:
    stores = create_stores()

    assert isinstance(stores.flows, MemoryFlowStore)


def test_rest_stores_share_one_client(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PERSISTENCE_BACKEND", "rest")
    monkeypatch.setenv("SUPABASE_URL", "https://paroquia.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "service-key")

    stores = create_stores()

    assert isinstance(stores.flows, RestFlowStore)
    assert isinstance(stores.quota, RestQuotaStore)
    assert stores.flows._client is stores.quota._client


@pytest.mark.parametrize(
    ("backend", "expected"),
    [("none", type(None)), ("memory", MemoryDedupeStore), ("redis", RedisDedupeStore)],
)
def test_dedupe_store_by_backend(
    monkeypatch: pytest.MonkeyPatch,
    backend: str,
    expected: type,
) -> None:
    monkeypatch.setenv("DEDUPE_BACKEND", backend)
    monkeypatch.setenv("REDIS_URL", "redis://localhost:6379/0")

    assert isinstance(create_dedupe_store(), expected)


def test_container_is_cached() -> None:
    assert get_container() is get_container()
