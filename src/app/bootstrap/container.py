"""Composition root: liga stores, serviços e use cases.

Rotas obtêm tudo via get_container(); testes constroem um container em
memória com build_container(create_memory_stores(), ...).
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from typing import TYPE_CHECKING

from app.bootstrap.dependencies import StoreBundle, create_dedupe_store, create_stores
from app.bootstrap.whatsapp_adapters import GraphApiOutboundSender
from app.services.flow_executor import FlowExecutor
from app.services.messaging import OutboundMessenger
from app.services.quota_service import QuotaService
from app.services.webhook_logger import WebhookLogger
from app.use_cases.whatsapp.process_webhook import ProcessWebhookUseCase
from config.settings import get_dedupe_settings, get_flow_settings

if TYPE_CHECKING:
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.outbound_sender import OutboundSenderProtocol
    from config.settings import FlowSettings


@dataclass(frozen=True, slots=True)
class AppContainer:
    stores: StoreBundle
    quota_service: QuotaService
    webhook_logger: WebhookLogger
    flow_executor: FlowExecutor
    process_webhook: ProcessWebhookUseCase


def build_container(
    stores: StoreBundle,
    *,
    sender: OutboundSenderProtocol,
    dedupe_store: AsyncDedupeProtocol | None = None,
    dedupe_ttl_seconds: int = 86400,
    flow_settings: FlowSettings | None = None,
) -> AppContainer:
    quota_service = QuotaService(stores.quota)
    messenger = OutboundMessenger(sender, stores.messages, quota_service)
    executor = FlowExecutor(
        flow_store=stores.flows,
        contact_store=stores.contacts,
        messenger=messenger,
        settings=flow_settings,
    )
    use_case = ProcessWebhookUseCase(
        flow_executor=executor,
        contact_store=stores.contacts,
        message_store=stores.messages,
        quota_service=quota_service,
        dedupe_store=dedupe_store,
        dedupe_ttl_seconds=dedupe_ttl_seconds,
    )
    return AppContainer(
        stores=stores,
        quota_service=quota_service,
        webhook_logger=WebhookLogger(stores.webhook_logs),
        flow_executor=executor,
        process_webhook=use_case,
    )


@lru_cache(maxsize=1)
def get_container() -> AppContainer:
    """Container do processo (singleton, criado na primeira requisição)."""
    return build_container(
        create_stores(),
        sender=GraphApiOutboundSender(),
        dedupe_store=create_dedupe_store(),
        dedupe_ttl_seconds=get_dedupe_settings().ttl_seconds,
        flow_settings=get_flow_settings(),
    )
