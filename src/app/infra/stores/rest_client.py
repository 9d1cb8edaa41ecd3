"""Cliente PostgREST (Supabase) sobre o HttpClient base.

Autentica com a service role key (header apikey + Bearer). Qualquer
falha de rede ou status >= 400 vira PersistenceError.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig, HttpError
from utils.errors import PersistenceError

if TYPE_CHECKING:
    import httpx

    from config.settings.persistence import PersistenceSettings

logger = logging.getLogger(__name__)


class PostgrestClient:
    """Operações de tabela: select, insert, upsert, update, delete."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        *,
        timeout_seconds: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = HttpClient(
            HttpClientConfig(
                timeout_seconds=timeout_seconds,
                default_headers={
                    "apikey": service_key,
                    "Authorization": f"Bearer {service_key}",
                    "Content-Type": "application/json",
                },
                transport=transport,
            )
        )

    def _url(self, table: str) -> str:
        return f"{self._base_url}/{table}"

    async def _call(
        self,
        method: str,
        table: str,
        *,
        params: dict[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> Any:
        headers = {"Prefer": prefer} if prefer else None
        try:
            response = await self._http.request(
                method, self._url(table), json=json, params=params, headers=headers
            )
        except HttpError as exc:
            raise PersistenceError(f"{method} {table}: {exc}") from exc

        if response.status_code >= 400:
            logger.warning(
                "postgrest_error_status",
                extra={
                    "method": method,
                    "table": table,
                    "status_code": response.status_code,
                },
            )
            raise PersistenceError(f"{method} {table}: status {response.status_code}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            raise PersistenceError(f"{method} {table}: resposta inválida") from exc

    async def select(self, table: str, params: dict[str, str]) -> list[dict[str, Any]]:
        rows = await self._call("GET", table, params={"select": "*", **params})
        return rows if isinstance(rows, list) else []

    async def insert(self, table: str, row: dict[str, Any]) -> None:
        await self._call("POST", table, json=row, prefer="return=minimal")

    async def upsert(
        self,
        table: str,
        row: dict[str, Any],
        on_conflict: str | None = None,
    ) -> list[dict[str, Any]]:
        params = {"on_conflict": on_conflict} if on_conflict else None
        rows = await self._call(
            "POST",
            table,
            params=params,
            json=row,
            prefer="resolution=merge-duplicates,return=representation",
        )
        return rows if isinstance(rows, list) else []

    async def update(
        self,
        table: str,
        filters: dict[str, str],
        fields: dict[str, Any],
    ) -> list[dict[str, Any]]:
        rows = await self._call(
            "PATCH", table, params=filters, json=fields, prefer="return=representation"
        )
        return rows if isinstance(rows, list) else []

    async def delete(self, table: str, filters: dict[str, str]) -> list[dict[str, Any]]:
        rows = await self._call(
            "DELETE", table, params=filters, prefer="return=representation"
        )
        return rows if isinstance(rows, list) else []


def create_postgrest_client(settings: PersistenceSettings) -> PostgrestClient:
    return PostgrestClient(
        settings.rest_base_url,
        settings.service_role_key,
        timeout_seconds=settings.timeout_seconds,
    )
