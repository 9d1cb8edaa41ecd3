"""Erros e parsing do objeto ``error`` retornado pela Graph API."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class WhatsAppApiError:
    """Erro retornado pela API Meta/WhatsApp."""

    error_type: str
    error_code: int
    error_message: str
    is_permanent: bool


def is_permanent_error(error_code: int, error_type: str) -> bool:
    """Classifica erro: 4xx de autenticação/requisição é permanente.

    Sem retry neste serviço; a classificação só vai para os logs.
    """
    if error_code in {400, 401, 403, 404, 413}:
        return True
    return error_type in {"OAuthException", "InvalidRequest"}


def parse_meta_error(response_data: Any) -> WhatsAppApiError | None:
    """Extrai o erro do corpo de resposta; None quando não há erro."""
    if not isinstance(response_data, dict):
        return None
    error_obj = response_data.get("error")
    if not error_obj or not isinstance(error_obj, dict):
        return None

    error_type = str(error_obj.get("type", "unknown"))
    raw_code = error_obj.get("code", 0)
    error_code = raw_code if isinstance(raw_code, int) else 0
    return WhatsAppApiError(
        error_type=error_type,
        error_code=error_code,
        error_message=str(error_obj.get("message", "Erro desconhecido")),
        is_permanent=is_permanent_error(error_code, error_type),
    )
