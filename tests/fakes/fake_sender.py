"""Sender fake que captura pedidos outbound sem rede."""

from __future__ import annotations

from app.protocols.models import OutboundMessageRequest, OutboundMessageResponse
from app.protocols.outbound_sender import OutboundSenderProtocol
from utils.errors import ProviderConfigurationError


class FakeSender(OutboundSenderProtocol):
    def __init__(
        self,
        *,
        success: bool = True,
        missing_config: bool = False,
        raise_error: Exception | None = None,
    ) -> None:
        self._success = success
        self._missing_config = missing_config
        self._raise_error = raise_error
        self.requests: list[OutboundMessageRequest] = []

    async def send(self, request: OutboundMessageRequest) -> OutboundMessageResponse:
        if self._missing_config:
            raise ProviderConfigurationError("WHATSAPP_ACCESS_TOKEN ausente")
        self.requests.append(request)
        if self._raise_error is not None:
            raise self._raise_error
        if self._success:
            return OutboundMessageResponse(
                success=True,
                message_id=f"wamid.out.{len(self.requests)}",
            )
        return OutboundMessageResponse(
            success=False,
            error_code="WHATSAPP_API_ERROR",
            error_message="http_error_status",
        )
