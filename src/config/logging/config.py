"""Configuração centralizada de logging.

Logging estruturado JSON com campos obrigatórios (correlation_id, service,
level, logger, message) e nível configurável por ambiente.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="atende_paroquia")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("flow_node_executed", extra={"node_type": "text"})

Telefones nunca vão crus para o log: use mask_phone().
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "atende_paroquia"

# Dígitos visíveis no fim do telefone mascarado
_PHONE_VISIBLE_DIGITS = 4


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON estruturado para o serviço.

    Deve ser chamada uma vez no bootstrap. Substitui os handlers do root
    logger para evitar duplicação quando chamada novamente (ex.: testes).

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço injetado em cada record.
        correlation_id_getter: Função que retorna o correlation_id atual.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    # httpx loga cada request em INFO com a URL completa
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo (service e correlation_id vêm do filter)."""
    return logging.getLogger(name)


def mask_phone(phone: str | None) -> str:
    """Mascara telefone para logs, mantendo apenas os últimos dígitos.

    Exemplo:
        mask_phone("5511999998888") -> "*********8888"
    """
    if not phone:
        return ""
    if len(phone) <= _PHONE_VISIBLE_DIGITS:
        return "*" * len(phone)
    hidden = len(phone) - _PHONE_VISIBLE_DIGITS
    return "*" * hidden + phone[-_PHONE_VISIBLE_DIGITS:]
