"""Use case do POST do webhook: mensagens recebidas e status de entrega.

Para cada mensagem recebida, em ordem:
    dedupe -> quota de chamadas -> registro da mensagem -> upsert do
    contato -> executor de fluxos

Falhas de persistência em cada passo são logadas e não interrompem os
passos seguintes. Erros inesperados sobem para a rota (resposta 500).
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.constants.whatsapp import DeliveryStatus
from app.domain.message import BOT_ADDRESS, Message
from app.observability import record_counter
from app.protocols.models import WebhookProcessingSummary
from config.logging import mask_phone
from utils.errors import InfrastructureError, PersistenceError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.models import DeliveryStatusEvent, InboundMessage
    from app.protocols.stores import ContactStoreProtocol, MessageStoreProtocol
    from app.services.flow_executor import FlowExecutor
    from app.services.quota_service import QuotaService

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = frozenset(item.value for item in DeliveryStatus)


def _parse_unix_timestamp(raw: str | None) -> datetime:
    if raw:
        try:
            return datetime.fromtimestamp(int(raw), tz=UTC)
        except (TypeError, ValueError, OverflowError, OSError):
            pass
    return datetime.now(UTC)


class ProcessWebhookUseCase:
    """Processa uma entrega do webhook já extraída do envelope."""

    def __init__(
        self,
        *,
        flow_executor: FlowExecutor,
        contact_store: ContactStoreProtocol,
        message_store: MessageStoreProtocol,
        quota_service: QuotaService,
        dedupe_store: AsyncDedupeProtocol | None = None,
        dedupe_ttl_seconds: int = 86400,
    ) -> None:
        self._executor = flow_executor
        self._contacts = contact_store
        self._messages = message_store
        self._quota = quota_service
        self._dedupe = dedupe_store
        self._dedupe_ttl = dedupe_ttl_seconds

    async def execute(
        self,
        messages: Sequence[InboundMessage],
        statuses: Sequence[DeliveryStatusEvent] = (),
    ) -> WebhookProcessingSummary:
        summary = WebhookProcessingSummary(received=len(messages))

        for status in statuses:
            await self._apply_status(status)
            summary.statuses += 1

        for inbound in messages:
            if await self._is_duplicate(inbound):
                summary.skipped_duplicates += 1
                record_counter("dedupe", "duplicate_skipped")
                logger.info(
                    "inbound_duplicate_skipped",
                    extra={"message_id": inbound.message_id},
                )
                continue
            try:
                await self._process_message(inbound)
            except Exception:
                # A reentrega da Meta precisa encontrar a chave livre.
                await self._release_dedupe(inbound)
                raise
            summary.processed += 1

        return summary

    async def _release_dedupe(self, inbound: InboundMessage) -> None:
        if self._dedupe is None:
            return
        try:
            await self._dedupe.release(inbound.message_id)
        except InfrastructureError as exc:
            logger.warning(
                "dedupe_release_failed",
                extra={"message_id": inbound.message_id, "error": str(exc)},
            )

    async def _is_duplicate(self, inbound: InboundMessage) -> bool:
        if self._dedupe is None:
            return False
        try:
            return await self._dedupe.check_and_mark(inbound.message_id, self._dedupe_ttl)
        except InfrastructureError as exc:
            # Sem dedupe disponível processa assim mesmo.
            logger.warning(
                "dedupe_unavailable",
                extra={"message_id": inbound.message_id, "error": str(exc)},
            )
            return False

    async def _process_message(self, inbound: InboundMessage) -> None:
        await self._quota.increment_api_calls()
        await self._record_inbound(inbound)
        await self._upsert_contact(inbound)
        await self._executor.execute(inbound)

    async def _record_inbound(self, inbound: InboundMessage) -> None:
        message = Message(
            sender=inbound.from_number,
            to=BOT_ADDRESS,
            content=inbound.content,
            type=inbound.message_type,
            status="received",
            message_id=inbound.message_id,
            timestamp=_parse_unix_timestamp(inbound.timestamp),
        )
        try:
            await self._messages.append(message)
        except PersistenceError as exc:
            logger.warning(
                "inbound_message_log_failed",
                extra={"message_id": inbound.message_id, "error": str(exc)},
            )

    async def _upsert_contact(self, inbound: InboundMessage) -> None:
        fields: dict[str, Any] = {"last_interaction": datetime.now(UTC)}
        if inbound.whatsapp_name:
            fields["name"] = inbound.whatsapp_name
        try:
            await self._contacts.upsert(inbound.from_number, fields)
        except PersistenceError as exc:
            logger.warning(
                "contact_upsert_failed",
                extra={"from": mask_phone(inbound.from_number), "error": str(exc)},
            )

    async def _apply_status(self, status: DeliveryStatusEvent) -> None:
        if status.status not in _KNOWN_STATUSES:
            logger.info("message_status_ignored", extra={"status": status.status})
            return
        try:
            await self._messages.update_status(status.message_id, status.status)
        except PersistenceError as exc:
            logger.warning(
                "message_status_update_failed",
                extra={"message_id": status.message_id, "error": str(exc)},
            )
