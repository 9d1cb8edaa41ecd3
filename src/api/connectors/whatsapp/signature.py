"""Validação HMAC-SHA256 do header X-Hub-Signature-256 da Meta."""

from __future__ import annotations

import hashlib
import hmac
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping

SIGNATURE_HEADER = "x-hub-signature-256"
_PREFIX = "sha256="


@dataclass(frozen=True, slots=True)
class SignatureResult:
    """Resultado da verificação.

    ``skipped`` é True quando não há secret configurado (checagem desligada).
    """

    valid: bool
    skipped: bool = False
    error: str | None = None


def compute_signature(raw_body: bytes, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()
    return f"{_PREFIX}{digest}"


def _get_header(headers: Mapping[str, str], name: str) -> str | None:
    value = headers.get(name)
    if value is not None:
        return value
    for key, header_value in headers.items():
        if key.lower() == name:
            return header_value
    return None


def verify_meta_signature(
    raw_body: bytes,
    headers: Mapping[str, str],
    secret: str | None,
) -> SignatureResult:
    """Compara a assinatura recebida com o HMAC do corpo bruto."""
    if not secret:
        return SignatureResult(valid=True, skipped=True)

    received = _get_header(headers, SIGNATURE_HEADER)
    if not received:
        return SignatureResult(valid=False, error="missing_signature")
    if not received.startswith(_PREFIX):
        return SignatureResult(valid=False, error="malformed_signature")

    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected, received.strip()):
        return SignatureResult(valid=False, error="signature_mismatch")
    return SignatureResult(valid=True)
