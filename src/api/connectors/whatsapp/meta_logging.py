"""Logs das chamadas à Graph API (sem tokens nem telefones)."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .meta_errors import WhatsAppApiError

logger = logging.getLogger(__name__)


def log_meta_error(
    meta_error: WhatsAppApiError,
    status_code: int,
) -> None:
    logger.warning(
        "whatsapp_api_error",
        extra={
            "status_code": status_code,
            "error_type": meta_error.error_type,
            "error_code": meta_error.error_code,
            "is_permanent": meta_error.is_permanent,
        },
    )


def log_success(status_code: int, provider_message_id: str | None) -> None:
    logger.debug(
        "whatsapp_api_success",
        extra={
            "status_code": status_code,
            "provider_message_id": provider_message_id,
        },
    )
