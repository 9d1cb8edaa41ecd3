"""Testes do GraphApiOutboundSender com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.whatsapp.http_client import create_whatsapp_http_client
from app.bootstrap.whatsapp_adapters import GraphApiOutboundSender
from app.protocols.models import OutboundMessageRequest, ReplyButton
from config.settings import WhatsAppSettings
from utils.errors import ProviderConfigurationError

SETTINGS = WhatsAppSettings(access_token="EAAG-token", phone_number_id="1234567890")


def _sender(
    handler,
    settings: WhatsAppSettings = SETTINGS,
) -> GraphApiOutboundSender:
    http_client = create_whatsapp_http_client(settings, transport=httpx.MockTransport(handler))
    return GraphApiOutboundSender(settings_getter=lambda: settings, http_client=http_client)


@pytest.mark.asyncio
async def test_send_buttons_posts_to_messages_endpoint() -> None:
    captured: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        return httpx.Response(200, json={"messages": [{"id": "wamid.OUT1"}]})

    request = OutboundMessageRequest(
        to="5511999998888",
        kind="buttons",
        text="Deseja agendar uma missa?",
        buttons=tuple(ReplyButton(id=f"b{i}", title=f"Opção {i}") for i in range(5)),
    )

    response = await _sender(_handler).send(request)

    assert response.success is True
    assert response.message_id == "wamid.OUT1"
    sent = captured[0]
    assert str(sent.url) == "https://graph.facebook.com/v18.0/1234567890/messages"
    assert sent.headers["authorization"] == "Bearer EAAG-token"
    body = json.loads(sent.content)
    assert body["to"] == "5511999998888"
    assert len(body["interactive"]["action"]["buttons"]) == 3


@pytest.mark.asyncio
async def test_meta_error_object_becomes_failure_response() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            400,
            json={"error": {"type": "OAuthException", "code": 190, "message": "expired"}},
        )

    response = await _sender(_handler).send(
        OutboundMessageRequest(to="55", kind="text", text="oi")
    )

    assert response.success is False
    assert response.error_code == "WHATSAPP_API_ERROR"
    assert "OAuthException" in (response.error_message or "")


@pytest.mark.asyncio
async def test_non_2xx_without_error_object_is_failure() -> None:
    def _handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(502, text="bad gateway")

    response = await _sender(_handler).send(
        OutboundMessageRequest(to="55", kind="text", text="oi")
    )

    assert response.success is False


@pytest.mark.asyncio
async def test_payload_error_is_reported_without_http_call() -> None:
    calls: list[httpx.Request] = []

    def _handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(200, json={})

    response = await _sender(_handler).send(OutboundMessageRequest(to="55", kind="image"))

    assert response.error_code == "PAYLOAD_BUILD_ERROR"
    assert calls == []


@pytest.mark.asyncio
async def test_missing_credentials_raise_configuration_error() -> None:
    sender = GraphApiOutboundSender(settings_getter=lambda: WhatsAppSettings())

    with pytest.raises(ProviderConfigurationError):
        await sender.send(OutboundMessageRequest(to="55", kind="text", text="oi"))
