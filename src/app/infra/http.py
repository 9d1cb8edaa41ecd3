"""Cliente HTTP base (httpx) compartilhado por WhatsApp e PostgREST.

Uma tentativa por chamada: não há retry nem backoff. Falhas de rede viram
HttpError sem dados sensíveis (nunca inclui headers ou tokens).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

logger = logging.getLogger(__name__)


@dataclass
class HttpClientConfig:
    """Configuração do cliente HTTP.

    ``transport`` permite injetar httpx.MockTransport em testes.
    """

    timeout_seconds: float = 30.0
    default_headers: dict[str, str] = field(default_factory=dict)
    verify_ssl: bool = True
    transport: httpx.AsyncBaseTransport | None = None


class HttpError(Exception):
    """Erro de requisição HTTP sem dados sensíveis."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        is_retryable: bool = False,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.is_retryable = is_retryable


class HttpClient:
    """Cliente HTTP simples para chamadas externas."""

    def __init__(self, config: HttpClientConfig | None = None) -> None:
        self._config = config or HttpClientConfig()

    async def request(
        self,
        method: str,
        url: str,
        *,
        json: Any = None,
        params: dict[str, str] | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        merged_headers = {**self._config.default_headers, **(headers or {})}
        try:
            async with httpx.AsyncClient(
                verify=self._config.verify_ssl,
                transport=self._config.transport,
            ) as client:
                return await client.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=merged_headers,
                    timeout=self._config.timeout_seconds,
                )
        except httpx.TimeoutException as exc:
            logger.warning("http_timeout", extra={"method": method})
            raise HttpError("http_timeout", is_retryable=True) from exc
        except httpx.HTTPError as exc:
            logger.warning(
                "http_connection_error",
                extra={"method": method, "error_type": type(exc).__name__},
            )
            raise HttpError("http_connection_error", is_retryable=True) from exc

    async def post(
        self,
        url: str,
        json: Any,
        headers: dict[str, str] | None = None,
        params: dict[str, str] | None = None,
    ) -> httpx.Response:
        return await self.request("POST", url, json=json, params=params, headers=headers)
