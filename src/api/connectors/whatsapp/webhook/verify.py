"""Verificação de webhook exigida pela Meta (GET hub.*)."""

from __future__ import annotations

SUBSCRIBE_MODE = "subscribe"


class WebhookChallengeError(ValueError):
    """Erro de verificação do desafio do webhook.

    ``reason`` distingue pedido inválido (modo diferente de subscribe)
    de token divergente.
    """

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class InvalidVerificationRequestError(WebhookChallengeError):
    """hub.mode ausente ou diferente de subscribe."""


class VerifyTokenMismatchError(WebhookChallengeError):
    """hub.verify_token não confere com o token configurado."""


def verify_webhook_challenge(
    hub_mode: str | None,
    hub_verify_token: str | None,
    hub_challenge: str | None,
    expected_token: str,
) -> str:
    """Valida o desafio e retorna o conteúdo a ser ecoado.

    Raises:
        InvalidVerificationRequestError: modo diferente de subscribe
        VerifyTokenMismatchError: token diferente do configurado

    Returns:
        hub.challenge literal (string vazia se ausente)
    """
    if hub_mode != SUBSCRIBE_MODE:
        raise InvalidVerificationRequestError("invalid_mode")

    if hub_verify_token != expected_token:
        raise VerifyTokenMismatchError("verify_token_mismatch")

    return hub_challenge or ""
