"""Testes dos modelos de fluxo (união discriminada por type)."""

from __future__ import annotations

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from app.domain.contact import Contact
from app.domain.flow import ButtonsNode, ConditionNode, Flow, ImageNode, TemplateNode, WebhookNode
from app.domain.quota import MetaQuota
from tests.fakes.parish_flows import mass_booking_flow


def test_node_payload_is_selected_by_type() -> None:
    flow = Flow.model_validate(
        {
            "id": "f",
            "nodes": [
                {"id": "b", "type": "buttons", "data": {"buttons": [{"text": "Sim", "nextNodeId": "c"}]}},
                {"id": "c", "type": "condition", "data": {"condition": "contains sim"}},
                {"id": "i", "type": "image", "data": {"fileUrl": "https://x/a.png"}},
                {"id": "t", "type": "template", "data": {"templateId": "tpl_1"}},
                {"id": "w", "type": "webhook", "data": {"webhookUrl": "https://hooks/x"}},
            ],
        }
    )

    buttons, condition, image, template, hook = flow.nodes
    assert isinstance(buttons, ButtonsNode)
    assert buttons.data.buttons[0].next_node_id == "c"
    assert isinstance(condition, ConditionNode)
    assert condition.data.condition == "contains sim"
    assert isinstance(image, ImageNode)
    assert image.data.file_url == "https://x/a.png"
    assert isinstance(template, TemplateNode)
    assert template.data.template_id == "tpl_1"
    assert isinstance(hook, WebhookNode)
    assert hook.data.webhook_url == "https://hooks/x"


def test_unknown_node_type_is_rejected() -> None:
    with pytest.raises(ValidationError):
        Flow.model_validate({"id": "f", "nodes": [{"id": "x", "type": "audio"}]})


def test_to_record_uses_camel_case_aliases() -> None:
    record = mass_booking_flow().to_record()

    assert "nextNodeId" in record["nodes"][0]["data"]["buttons"][0]
    assert Flow.model_validate(record).to_record() == record


def test_validation_errors_detects_duplicates_and_dangling_edges() -> None:
    flow = Flow.model_validate(
        {
            "id": "f",
            "nodes": [{"id": "a", "type": "text"}, {"id": "a", "type": "text"}],
            "edges": [{"id": "e", "source": "a", "target": "b"}],
        }
    )

    errors = flow.validation_errors()

    assert any("duplicado" in error for error in errors)
    assert any("target inexistente b" in error for error in errors)
    assert mass_booking_flow().validation_errors() == []


def test_keyword_match_is_case_insensitive_substring() -> None:
    flow = mass_booking_flow(trigger_keywords=["Missa", ""])

    assert flow.matches_keyword("quero agendar uma missa") is True
    assert flow.matches_keyword("batizado") is False


def test_contact_id_derived_from_phone() -> None:
    contact = Contact(phone="5511")

    assert contact.id == "contact_5511"
    assert contact.has_position is False
    assert contact.conversation_state == "active"


def test_quota_staleness_by_utc_date() -> None:
    quota = MetaQuota(last_reset=datetime(2026, 10, 17, 23, 59, tzinfo=UTC))

    assert quota.is_stale(datetime(2026, 10, 18, 0, 1, tzinfo=UTC)) is True
    assert quota.is_stale(datetime(2026, 10, 17, 0, 0, tzinfo=UTC)) is False
