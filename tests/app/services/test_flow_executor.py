"""Testes do executor de fluxos."""

from __future__ import annotations

import asyncio

import pytest

from app.domain.flow import ButtonOption, Flow
from app.infra.stores.memory_stores import (
    MemoryContactStore,
    MemoryFlowStore,
    MemoryMessageStore,
    MemoryQuotaStore,
)
from app.protocols.models import InboundMessage
from app.services.flow_executor import (
    FlowExecutor,
    find_next_node,
    match_button,
    select_flow,
)
from app.services.messaging import OutboundMessenger
from app.services.quota_service import QuotaService
from config.settings import FlowSettings
from tests.fakes.fake_sender import FakeSender
from tests.fakes.parish_flows import condition_flow, mass_booking_flow, welcome_flow

PHONE = "5511999998888"


class _Harness:
    def __init__(
        self,
        flows: list[Flow],
        sender: FakeSender | None = None,
        settings: FlowSettings | None = None,
    ) -> None:
        self.sender = sender or FakeSender()
        self.contacts = MemoryContactStore()
        self.messages = MemoryMessageStore()
        self.messenger = OutboundMessenger(
            self.sender, self.messages, QuotaService(MemoryQuotaStore())
        )
        self.flows = MemoryFlowStore(flows)
        self.executor = FlowExecutor(
            flow_store=self.flows,
            contact_store=self.contacts,
            messenger=self.messenger,
            settings=settings,
        )
        self._counter = 0

    async def receive(self, content: str, reply_id: str | None = None):
        self._counter += 1
        # O use case cria o contato antes de chamar o executor.
        await self.contacts.upsert(PHONE, {})
        return await self.executor.execute(
            InboundMessage(
                message_id=f"wamid.in.{self._counter}",
                from_number=PHONE,
                message_type="text",
                content=content,
                reply_id=reply_id,
            )
        )


# ----------------------------------------------------------------------------
# Funções puras
# ----------------------------------------------------------------------------


def test_select_flow_prefers_keyword_match() -> None:
    flows = [welcome_flow(), mass_booking_flow()]

    assert select_flow(flows, "Quero agendar uma MISSA").id == "flow_missa"


def test_select_flow_falls_back_to_first_active() -> None:
    flows = [welcome_flow(is_active=False), mass_booking_flow(), welcome_flow(id="outro")]

    assert select_flow(flows, "bom dia").id == "flow_missa"


def test_select_flow_without_active_returns_none() -> None:
    assert select_flow([welcome_flow(is_active=False)], "missa") is None


def test_match_button_by_reply_id_text_or_value() -> None:
    flow = mass_booking_flow()
    buttons = flow.get_node("n_menu").data.buttons

    assert match_button(buttons, "qualquer", "b_cancelar").id == "b_cancelar"
    assert match_button(buttons, "quero agendar", None).id == "b_agendar"
    assert match_button(buttons, "nada a ver", None) is None


def test_match_button_reply_id_wins_over_overlapping_title() -> None:
    buttons = [
        ButtonOption(id="b_sim", text="Sim"),
        ButtonOption(id="b_sim_conf", text="Sim, confirmo"),
    ]

    assert match_button(buttons, "Sim, confirmo", "b_sim_conf").id == "b_sim_conf"
    assert match_button(buttons, "Sim, confirmo", None).id == "b_sim"


def test_match_button_text_wins_over_value_of_earlier_button() -> None:
    buttons = [
        ButtonOption(id="b1", text="Manhã", value="Tarde"),
        ButtonOption(id="b2", text="Tarde"),
    ]

    assert match_button(buttons, "Tarde", None).id == "b2"


def test_find_next_node_follows_edge_labelled_with_button_text() -> None:
    flow = mass_booking_flow()
    menu = flow.get_node("n_menu")

    assert find_next_node(flow, menu, "Cancelar").id == "n_cancelar"
    assert find_next_node(flow, menu, "Agendar").id == "n_agendar"


def test_find_next_node_uses_button_next_node_id_without_labelled_edge() -> None:
    flow = mass_booking_flow(
        edges=[{"id": "e1", "source": "n_menu", "target": "n_agendar"}],
    )
    menu = flow.get_node("n_menu")
    menu.data.buttons[1].next_node_id = "n_cancelar"

    assert find_next_node(flow, menu, "Cancelar").id == "n_cancelar"


def test_find_next_node_without_edges_returns_none() -> None:
    flow = welcome_flow()

    assert find_next_node(flow, flow.get_node("t_horarios"), "oi") is None


# ----------------------------------------------------------------------------
# Execução
# ----------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_mass_booking_end_to_end() -> None:
    harness = _Harness([welcome_flow(), mass_booking_flow()])

    first = await harness.receive("Quero agendar uma missa")

    assert first.flow_id == "flow_missa"
    assert len(harness.sender.requests) == 1
    request = harness.sender.requests[0]
    assert request.kind == "buttons"
    assert request.text == "Deseja agendar uma missa?"
    assert [b.title for b in request.buttons] == ["Agendar", "Cancelar"]

    contact = await harness.contacts.get(PHONE)
    assert contact.current_flow == "flow_missa"
    assert contact.current_node == "n_menu"
    assert contact.conversation_state == "waiting"

    second = await harness.receive("Agendar", reply_id="b_agendar")

    assert second.executed_nodes == ["n_agendar"]
    assert harness.sender.requests[-1].text == "Qual a data da missa?"
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "n_agendar"
    assert contact.conversation_state == "completed"


@pytest.mark.asyncio
async def test_cancel_button_follows_cancel_edge() -> None:
    harness = _Harness([mass_booking_flow()])

    await harness.receive("missa")
    await harness.receive("Cancelar")

    assert harness.sender.requests[-1].text == "Tudo bem, até logo!"
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "n_cancelar"


@pytest.mark.asyncio
async def test_unmatched_reply_follows_first_edge() -> None:
    harness = _Harness([mass_booking_flow()])

    await harness.receive("missa")
    await harness.receive("talvez")

    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "n_agendar"


@pytest.mark.asyncio
async def test_text_nodes_advance_one_per_message_and_terminal_node_repeats() -> None:
    harness = _Harness([welcome_flow()])

    await harness.receive("bom dia")
    contact = await harness.contacts.get(PHONE)
    assert harness.sender.requests[-1].text == "Paz e bem!"
    assert contact.current_node == "t_horarios"
    assert contact.conversation_state == "active"

    await harness.receive("e os horários?")
    contact = await harness.contacts.get(PHONE)
    assert harness.sender.requests[-1].text == "Missas às 8h e 19h."
    assert contact.current_node == "t_horarios"
    assert contact.conversation_state == "completed"

    await harness.receive("oi de novo")
    contact = await harness.contacts.get(PHONE)
    assert harness.sender.requests[-1].text == "Missas às 8h e 19h."
    assert contact.current_flow == "flow_boas_vindas"
    assert contact.current_node == "t_horarios"
    assert contact.conversation_state == "completed"


@pytest.mark.asyncio
async def test_text_node_without_content_uses_default_text() -> None:
    flow = welcome_flow(nodes=[{"id": "t1", "type": "text", "data": {}}], edges=[])
    harness = _Harness([flow], settings=FlowSettings(default_text="Bem-vindo"))

    await harness.receive("oi")

    assert harness.sender.requests[0].text == "Bem-vindo"


@pytest.mark.asyncio
async def test_no_active_flow_sends_nothing() -> None:
    harness = _Harness([welcome_flow(is_active=False)])

    result = await harness.receive("oi")

    assert result.skipped_reason == "no_active_flow"
    assert harness.sender.requests == []
    contact = await harness.contacts.get(PHONE)
    assert contact.current_flow is None


@pytest.mark.asyncio
async def test_condition_true_executes_true_edge_target() -> None:
    harness = _Harness([condition_flow()])

    result = await harness.receive("Gostaria de informações sobre BATISMO")

    assert result.executed_nodes == ["c1", "t_batismo"]
    assert [r.text for r in harness.sender.requests] == ["Curso de batismo às terças."]


@pytest.mark.asyncio
async def test_condition_false_sends_nothing() -> None:
    harness = _Harness([condition_flow()])

    result = await harness.receive("casamento")

    assert result.executed_nodes == ["c1"]
    assert harness.sender.requests == []


@pytest.mark.asyncio
async def test_condition_chain_stops_at_hop_limit() -> None:
    looping = Flow.model_validate(
        {
            "id": "loop",
            "is_active": True,
            "nodes": [
                {"id": "c1", "type": "condition", "data": {"condition": "contains a"}},
                {"id": "c2", "type": "condition", "data": {"condition": "contains a"}},
            ],
            "edges": [
                {"id": "e1", "source": "c1", "target": "c2", "label": "yes"},
                {"id": "e2", "source": "c2", "target": "c1", "label": "yes"},
            ],
        }
    )
    harness = _Harness([looping], settings=FlowSettings(max_condition_hops=3))

    result = await harness.receive("a")

    assert len(result.executed_nodes) == 3
    assert harness.sender.requests == []


@pytest.mark.asyncio
async def test_image_node_sends_link_and_unsupported_nodes_are_noop() -> None:
    flow = Flow.model_validate(
        {
            "id": "midia",
            "is_active": True,
            "nodes": [
                {"id": "img", "type": "image", "data": {"fileUrl": "https://x/cartaz.png"}},
                {"id": "pdf", "type": "pdf", "data": {"fileUrl": "https://x/folheto.pdf"}},
            ],
            "edges": [{"id": "e1", "source": "img", "target": "pdf"}],
        }
    )
    harness = _Harness([flow])

    await harness.receive("oi")
    await harness.receive("e agora?")

    assert len(harness.sender.requests) == 1
    assert harness.sender.requests[0].kind == "image"
    assert harness.sender.requests[0].media_url == "https://x/cartaz.png"
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "pdf"
    assert contact.conversation_state == "completed"


@pytest.mark.asyncio
async def test_send_failure_still_advances_position() -> None:
    harness = _Harness([welcome_flow()], sender=FakeSender(success=False))

    result = await harness.receive("oi")

    assert result.sent_messages == 0
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "t_horarios"
    assert harness.messages.messages[0].status == "failed"


@pytest.mark.asyncio
async def test_missing_provider_config_records_no_message() -> None:
    harness = _Harness([welcome_flow()], sender=FakeSender(missing_config=True))

    await harness.receive("oi")

    assert harness.messages.messages == []
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "t_horarios"


@pytest.mark.asyncio
async def test_deactivated_flow_restarts_selection() -> None:
    harness = _Harness([mass_booking_flow(), welcome_flow()])

    await harness.receive("missa")
    await harness.flows.upsert(mass_booking_flow(is_active=False))
    result = await harness.receive("Agendar")

    assert result.flow_id == "flow_boas_vindas"


@pytest.mark.asyncio
async def test_same_phone_messages_are_serialized() -> None:
    harness = _Harness([mass_booking_flow()])
    await harness.contacts.upsert(PHONE, {})

    await asyncio.gather(
        harness.executor.execute(
            InboundMessage(message_id="m1", from_number=PHONE, message_type="text", content="missa")
        ),
        harness.executor.execute(
            InboundMessage(message_id="m2", from_number=PHONE, message_type="text", content="Agendar")
        ),
    )

    assert [r.kind for r in harness.sender.requests] == ["buttons", "text"]
    contact = await harness.contacts.get(PHONE)
    assert contact.current_node == "n_agendar"
