"""Testes para api.payload_builders.whatsapp.

Cobre: base, text, interactive (botões de resposta), image e factory.
"""

from __future__ import annotations

import pytest

from api.payload_builders.whatsapp.base import build_base_payload
from api.payload_builders.whatsapp.factory import build_full_payload, get_payload_builder
from api.payload_builders.whatsapp.interactive import InteractivePayloadBuilder
from api.payload_builders.whatsapp.media import ImagePayloadBuilder
from api.payload_builders.whatsapp.text import TextPayloadBuilder
from app.protocols.models import OutboundMessageRequest, ReplyButton

TO = "5511999998888"


class TestBuildBasePayload:
    def test_base_fields(self) -> None:
        payload = build_base_payload(OutboundMessageRequest(to=TO, kind="text"))

        assert payload == {
            "messaging_product": "whatsapp",
            "recipient_type": "individual",
            "to": TO,
        }


class TestTextPayloadBuilder:
    def test_text_body(self) -> None:
        built = TextPayloadBuilder().build(OutboundMessageRequest(to=TO, kind="text", text="Paz e bem"))

        assert built == {"type": "text", "text": {"preview_url": False, "body": "Paz e bem"}}


class TestInteractivePayloadBuilder:
    def test_at_most_three_buttons_with_truncated_titles(self) -> None:
        request = OutboundMessageRequest(
            to=TO,
            kind="buttons",
            text="Escolha",
            buttons=(
                ReplyButton(id="a", title="Agendar"),
                ReplyButton(id="", title="Cancelar o agendamento da missa"),
                ReplyButton(id="c", title="Horários"),
                ReplyButton(id="d", title="Secretaria"),
            ),
        )

        built = InteractivePayloadBuilder().build(request)

        interactive = built["interactive"]
        assert built["type"] == "interactive"
        assert interactive["type"] == "button"
        assert interactive["body"] == {"text": "Escolha"}
        buttons = interactive["action"]["buttons"]
        assert len(buttons) == 3
        assert buttons[0] == {"type": "reply", "reply": {"id": "a", "title": "Agendar"}}
        assert buttons[1]["reply"]["id"] == "btn_1"
        assert buttons[1]["reply"]["title"] == "Cancelar o agendamen"
        assert all(len(b["reply"]["title"]) <= 20 for b in buttons)


class TestImagePayloadBuilder:
    def test_link_and_caption(self) -> None:
        built = ImagePayloadBuilder().build(
            OutboundMessageRequest(to=TO, kind="image", text="Cartaz", media_url="https://x/a.png")
        )

        assert built == {"type": "image", "image": {"link": "https://x/a.png", "caption": "Cartaz"}}

    def test_missing_url_raises(self) -> None:
        with pytest.raises(ValueError, match="media_url"):
            ImagePayloadBuilder().build(OutboundMessageRequest(to=TO, kind="image"))


class TestFactory:
    def test_get_payload_builder_known_and_unknown(self) -> None:
        assert isinstance(get_payload_builder("buttons"), InteractivePayloadBuilder)
        assert get_payload_builder("video") is None  # type: ignore[arg-type]

    def test_build_full_payload_merges_base(self) -> None:
        payload = build_full_payload(OutboundMessageRequest(to=TO, kind="text", text="oi"))

        assert payload["to"] == TO
        assert payload["messaging_product"] == "whatsapp"
        assert payload["text"]["body"] == "oi"

    def test_build_full_payload_unknown_kind_raises(self) -> None:
        with pytest.raises(ValueError, match="não suportado"):
            build_full_payload(OutboundMessageRequest(to=TO, kind="video"))  # type: ignore[arg-type]
