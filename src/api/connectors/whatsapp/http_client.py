"""Cliente HTTP para a Graph API do WhatsApp (POST /messages).

Acrescenta ao HttpClient base:
- header Authorization Bearer
- parsing do objeto ``error`` da Meta
- status não-2xx vira HttpError
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.connectors.whatsapp.meta_errors import parse_meta_error
from api.connectors.whatsapp.meta_logging import log_meta_error, log_success
from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    import httpx

    from config.settings import WhatsAppSettings

logger: logging.Logger = logging.getLogger(__name__)


def extract_provider_message_id(response_data: dict[str, Any]) -> str | None:
    """Lê messages[0].id do corpo de sucesso."""
    messages = response_data.get("messages")
    if isinstance(messages, list) and messages and isinstance(messages[0], dict):
        message_id = messages[0].get("id")
        return str(message_id) if message_id else None
    return None


class WhatsAppHttpClient(HttpClient):
    """Cliente HTTP especializado para a Cloud API."""

    async def send_message(
        self,
        endpoint: str,
        access_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        """Envia mensagem e retorna o JSON de resposta.

        Raises:
            ValueError: access_token vazio
            HttpError: falha de rede, status não-2xx ou erro Meta
        """
        if not access_token or not access_token.strip():
            raise ValueError("access_token é obrigatório para envio de mensagens")

        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {access_token}",
        }
        response = await self.post(endpoint, json=payload, headers=headers)
        return self._process_response(response)

    def _process_response(self, response: httpx.Response) -> dict[str, Any]:
        try:
            response_data = response.json()
        except ValueError:
            response_data = None

        meta_error = parse_meta_error(response_data)
        if meta_error is not None:
            log_meta_error(meta_error, response.status_code)
            raise HttpError(
                f"Meta API error: {meta_error.error_type} ({meta_error.error_code})",
                status_code=response.status_code,
                is_retryable=not meta_error.is_permanent,
            )

        if not response.is_success:
            logger.warning(
                "whatsapp_api_error_status",
                extra={"status_code": response.status_code},
            )
            raise HttpError("http_error_status", status_code=response.status_code)

        if not isinstance(response_data, dict):
            raise HttpError("Response JSON inválido", status_code=response.status_code)

        log_success(response.status_code, extract_provider_message_id(response_data))
        return response_data


def create_whatsapp_http_client(
    settings: WhatsAppSettings | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> WhatsAppHttpClient:
    """Factory com timeout das settings."""
    from config.settings import get_whatsapp_settings

    whatsapp = settings or get_whatsapp_settings()
    return WhatsAppHttpClient(
        HttpClientConfig(
            timeout_seconds=whatsapp.request_timeout_seconds,
            transport=transport,
        )
    )
