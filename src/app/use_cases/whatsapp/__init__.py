"""Use cases específicos de WhatsApp."""

from .process_webhook import ProcessWebhookUseCase

__all__ = [
    "ProcessWebhookUseCase",
]
