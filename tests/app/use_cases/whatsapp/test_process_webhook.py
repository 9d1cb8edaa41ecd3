"""Testes do ProcessWebhookUseCase."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.infra.stores.memory_stores import (
    MemoryContactStore,
    MemoryDedupeStore,
    MemoryFlowStore,
    MemoryMessageStore,
    MemoryQuotaStore,
)
from app.protocols.models import DeliveryStatusEvent, InboundMessage
from app.services.flow_executor import FlowExecutor
from app.services.messaging import OutboundMessenger
from app.services.quota_service import QuotaService
from app.use_cases.whatsapp import ProcessWebhookUseCase
from tests.fakes.fake_sender import FakeSender
from tests.fakes.parish_flows import welcome_flow
from utils.errors import PersistenceError, RedisConnectionError

PHONE = "5511999998888"


def _inbound(message_id: str = "wamid.1", content: str = "oi") -> InboundMessage:
    return InboundMessage(
        message_id=message_id,
        from_number=PHONE,
        message_type="text",
        content=content,
        timestamp="1760780000",
        whatsapp_name="José",
    )


class _Setup:
    def __init__(self, dedupe_store=None, contacts=None, messages=None) -> None:
        self.sender = FakeSender()
        self.contacts = contacts or MemoryContactStore()
        self.messages = messages or MemoryMessageStore()
        self.quota_store = MemoryQuotaStore()
        quota = QuotaService(self.quota_store)
        executor = FlowExecutor(
            flow_store=MemoryFlowStore([welcome_flow()]),
            contact_store=self.contacts,
            messenger=OutboundMessenger(self.sender, self.messages, quota),
        )
        self.use_case = ProcessWebhookUseCase(
            flow_executor=executor,
            contact_store=self.contacts,
            message_store=self.messages,
            quota_service=quota,
            dedupe_store=dedupe_store,
        )


@pytest.mark.asyncio
async def test_records_inbound_upserts_contact_and_runs_flow() -> None:
    setup = _Setup(dedupe_store=MemoryDedupeStore())

    summary = await setup.use_case.execute([_inbound()])

    assert summary.received == 1
    assert summary.processed == 1
    inbound = setup.messages.messages[0]
    assert inbound.status == "received"
    assert inbound.to == "bot"
    assert inbound.timestamp.year == 2025
    contact = await setup.contacts.get(PHONE)
    assert contact.name == "José"
    assert contact.current_node == "t_horarios"
    assert setup.sender.requests[0].text == "Paz e bem!"
    assert (await setup.quota_store.get()).api_calls_today == 1


@pytest.mark.asyncio
async def test_duplicate_in_same_delivery_is_skipped() -> None:
    setup = _Setup(dedupe_store=MemoryDedupeStore())

    summary = await setup.use_case.execute([_inbound("wamid.X"), _inbound("wamid.X")])

    assert summary.processed == 1
    assert summary.skipped_duplicates == 1
    assert len(setup.sender.requests) == 1


@pytest.mark.asyncio
async def test_without_dedupe_redelivery_keeps_state_valid() -> None:
    setup = _Setup(dedupe_store=None)

    await setup.use_case.execute([_inbound("wamid.X")])
    await setup.use_case.execute([_inbound("wamid.X")])

    contact = await setup.contacts.get(PHONE)
    assert contact.current_flow == "flow_boas_vindas"
    assert contact.current_node == "t_horarios"
    assert contact.conversation_state == "completed"


@pytest.mark.asyncio
async def test_dedupe_unavailable_processes_anyway() -> None:
    dedupe = AsyncMock()
    dedupe.check_and_mark.side_effect = RedisConnectionError("down")
    setup = _Setup(dedupe_store=dedupe)

    summary = await setup.use_case.execute([_inbound()])

    assert summary.processed == 1


@pytest.mark.asyncio
async def test_inbound_log_failure_does_not_stop_flow() -> None:
    messages = MemoryMessageStore()
    failing = AsyncMock(wraps=messages)
    failing.append.side_effect = [PersistenceError("down"), None]
    setup = _Setup(messages=failing)

    await setup.use_case.execute([_inbound()])

    assert setup.sender.requests[0].text == "Paz e bem!"


@pytest.mark.asyncio
async def test_statuses_update_known_and_ignore_unknown() -> None:
    setup = _Setup()
    update_status = AsyncMock()
    setup.messages.update_status = update_status

    summary = await setup.use_case.execute(
        [],
        [
            DeliveryStatusEvent(message_id="wamid.OUT", status="delivered"),
            DeliveryStatusEvent(message_id="wamid.OUT", status="deleted"),
        ],
    )

    assert summary.statuses == 2
    update_status.assert_awaited_once_with("wamid.OUT", "delivered")


@pytest.mark.asyncio
async def test_failed_processing_releases_dedupe_for_redelivery() -> None:
    dedupe = MemoryDedupeStore()
    setup = _Setup(dedupe_store=dedupe)
    execute = setup.use_case._executor.execute
    setup.use_case._executor.execute = AsyncMock(side_effect=RuntimeError("boom"))

    with pytest.raises(RuntimeError):
        await setup.use_case.execute([_inbound("wamid.RETRY")])

    setup.use_case._executor.execute = execute
    summary = await setup.use_case.execute([_inbound("wamid.RETRY")])

    assert summary.processed == 1
    assert summary.skipped_duplicates == 0
    assert setup.sender.requests[0].text == "Paz e bem!"
