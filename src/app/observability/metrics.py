"""Métricas via structured logging.

Sem backend de métricas dedicado: cada ponto é um log JSON com
metric_type, agregável no destino dos logs.

Uso:
    start = time.perf_counter()
    ...
    record_latency("webhook", "process", (time.perf_counter() - start) * 1000)
    record_counter("dedupe", "duplicate_skipped")
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "webhook", "flow_executor")
        operation: Nome da operação (ex: "process", "send")
        latency_ms: Latência em milissegundos
        correlation_id: Usa o do contexto quando None
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_counter(
    component: str,
    name: str,
    value: int = 1,
    metadata: dict[str, str | int] | None = None,
) -> None:
    """Registra incremento de contador (ex: mensagens duplicadas)."""
    extra: dict[str, object] = {
        "metric_type": "counter",
        "component": component,
        "counter": name,
        "value": value,
        "correlation_id": get_correlation_id(),
    }
    if metadata:
        extra.update(metadata)
    logger.info("metric_counter", extra=extra)
