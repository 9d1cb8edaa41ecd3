"""Envio outbound com registro da mensagem e contagem de quota.

Cada envio vira um Message com status sent ou failed. Configuração
ausente do provedor aborta só aquele passo (sem registro).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.message import BOT_ADDRESS, Message
from app.protocols.models import OutboundMessageResponse
from config.logging import mask_phone
from utils.errors import PersistenceError, ProviderConfigurationError

if TYPE_CHECKING:
    from app.protocols.models import OutboundMessageRequest
    from app.protocols.outbound_sender import OutboundSenderProtocol
    from app.protocols.stores import MessageStoreProtocol
    from app.services.quota_service import QuotaService

logger = logging.getLogger(__name__)

# Tipo registrado na tabela messages por tipo de pedido.
_RECORDED_TYPES = {"text": "text", "buttons": "button", "image": "image"}


def _recorded_content(request: OutboundMessageRequest) -> str:
    if request.kind == "image":
        return request.text or "Image"
    return request.text


class OutboundMessenger:
    def __init__(
        self,
        sender: OutboundSenderProtocol,
        message_store: MessageStoreProtocol,
        quota_service: QuotaService,
    ) -> None:
        self._sender = sender
        self._message_store = message_store
        self._quota = quota_service

    async def send(self, request: OutboundMessageRequest) -> OutboundMessageResponse:
        try:
            response = await self._sender.send(request)
        except ProviderConfigurationError as exc:
            logger.error(
                "outbound_send_aborted_missing_config",
                extra={"node_id": request.node_id, "error": str(exc)},
            )
            return OutboundMessageResponse(
                success=False,
                error_code="PROVIDER_NOT_CONFIGURED",
                error_message=str(exc),
            )
        except Exception as exc:
            logger.exception(
                "outbound_send_exception",
                extra={"node_id": request.node_id, "error_type": type(exc).__name__},
            )
            response = OutboundMessageResponse(
                success=False,
                error_code="SEND_EXCEPTION",
                error_message=str(exc),
            )

        await self._record(request, response)
        if response.success:
            await self._quota.increment_messages_sent()
        return response

    async def _record(
        self,
        request: OutboundMessageRequest,
        response: OutboundMessageResponse,
    ) -> None:
        message = Message(
            sender=BOT_ADDRESS,
            to=request.to,
            content=_recorded_content(request),
            type=_RECORDED_TYPES.get(request.kind, request.kind),
            status="sent" if response.success else "failed",
            flow_id=request.flow_id,
            node_id=request.node_id,
            message_id=response.message_id,
        )
        try:
            await self._message_store.append(message)
        except PersistenceError as exc:
            logger.warning(
                "outbound_message_log_failed",
                extra={"to": mask_phone(request.to), "error": str(exc)},
            )
