"""Serviços de aplicação.

Executor de fluxos, envio outbound, quota e log de webhook. IO apenas
através dos protocolos; implementações concretas ficam em app/infra/.
"""

from app.services.condition_evaluator import KeywordConditionEvaluator
from app.services.flow_executor import FlowExecutionResult, FlowExecutor
from app.services.messaging import OutboundMessenger
from app.services.quota_service import QuotaService
from app.services.webhook_logger import WebhookLogger

__all__ = [
    "FlowExecutionResult",
    "FlowExecutor",
    "KeywordConditionEvaluator",
    "OutboundMessenger",
    "QuotaService",
    "WebhookLogger",
]
