"""Adapters concretos para WhatsApp (wiring em app/bootstrap).

Este módulo é o único autorizado a acoplar app <-> api.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.whatsapp.http_client import (
    create_whatsapp_http_client,
    extract_provider_message_id,
)
from api.payload_builders.whatsapp.factory import build_full_payload
from app.infra.http import HttpError
from app.protocols.models import OutboundMessageRequest, OutboundMessageResponse
from app.protocols.outbound_sender import OutboundSenderProtocol
from config.settings import WhatsAppSettings, get_whatsapp_settings
from utils.errors import ProviderConfigurationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from app.protocols.http_client import WhatsAppHttpClientProtocol

logger = logging.getLogger(__name__)


class GraphApiOutboundSender(OutboundSenderProtocol):
    """Sender outbound usando o cliente HTTP da Graph API.

    Settings são lidas a cada envio, então credenciais rotacionadas valem
    após o cache de settings ser limpo.

    Raises:
        ProviderConfigurationError: access token ou phone number id ausentes
    """

    def __init__(
        self,
        settings_getter: Callable[[], WhatsAppSettings] = get_whatsapp_settings,
        http_client: WhatsAppHttpClientProtocol | None = None,
    ) -> None:
        self._settings_getter = settings_getter
        self._http_client = http_client

    async def send(self, request: OutboundMessageRequest) -> OutboundMessageResponse:
        whatsapp = self._settings_getter()
        if not whatsapp.access_token or not whatsapp.phone_number_id:
            raise ProviderConfigurationError(
                "WHATSAPP_ACCESS_TOKEN e WHATSAPP_PHONE_NUMBER_ID são obrigatórios"
            )

        try:
            payload = build_full_payload(request)
        except ValueError as exc:
            return OutboundMessageResponse(
                success=False,
                error_code="PAYLOAD_BUILD_ERROR",
                error_message=str(exc),
            )

        http_client: WhatsAppHttpClientProtocol = (
            self._http_client or create_whatsapp_http_client(whatsapp)
        )
        try:
            response = await http_client.send_message(
                endpoint=whatsapp.get_messages_endpoint(),
                access_token=whatsapp.access_token,
                payload=payload,
            )
        except HttpError as exc:
            logger.error(
                "whatsapp_send_failed",
                extra={
                    "error": str(exc),
                    "status_code": exc.status_code,
                    "message_kind": request.kind,
                    "node_id": request.node_id,
                },
            )
            return OutboundMessageResponse(
                success=False,
                error_code="WHATSAPP_API_ERROR",
                error_message=str(exc),
            )

        message_id = extract_provider_message_id(response)
        logger.info(
            "message_sent_to_whatsapp_api",
            extra={
                "provider_message_id": message_id,
                "message_kind": request.kind,
                "node_id": request.node_id,
            },
        )
        return OutboundMessageResponse(success=True, message_id=message_id)
