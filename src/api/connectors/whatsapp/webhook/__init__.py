"""Webhook WhatsApp: verificação, assinatura e parsing seguro."""

from ..signature import SignatureResult, verify_meta_signature
from .receive import (
    InvalidJsonError,
    InvalidSignatureError,
    WebhookRequestError,
    parse_webhook_request,
)
from .verify import (
    InvalidVerificationRequestError,
    VerifyTokenMismatchError,
    WebhookChallengeError,
    verify_webhook_challenge,
)

__all__ = [
    "InvalidJsonError",
    "InvalidSignatureError",
    "InvalidVerificationRequestError",
    "SignatureResult",
    "VerifyTokenMismatchError",
    "WebhookChallengeError",
    "WebhookRequestError",
    "parse_webhook_request",
    "verify_meta_signature",
    "verify_webhook_challenge",
]
