"""Settings do canal WhatsApp (Cloud API)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

GRAPH_API_VERSION: str = "v18.0"
GRAPH_API_BASE_URL: str = "https://graph.facebook.com"

# Usado quando WHATSAPP_VERIFY_TOKEN não está configurado.
DEFAULT_VERIFY_TOKEN: str = "default_verify_token"


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do canal WhatsApp.

    Attributes:
        verify_token: Token para verificação de webhook (GET)
        app_secret: Secret do app Meta para validação HMAC (opcional)
        access_token: Token de acesso à Graph API
        phone_number_id: ID do número de telefone no Meta Business
        api_version: Versão da Graph API (ex: v18.0)
        api_base_url: URL base da Graph API
        request_timeout_seconds: Timeout para requisições HTTP
    """

    verify_token: str = DEFAULT_VERIFY_TOKEN
    app_secret: str = ""
    access_token: str = ""
    phone_number_id: str = ""

    api_version: str = GRAPH_API_VERSION
    api_base_url: str = GRAPH_API_BASE_URL

    request_timeout_seconds: float = 30.0

    @property
    def api_endpoint(self) -> str:
        """URL base completa da API com versão."""
        return f"{self.api_base_url}/{self.api_version}"

    @property
    def signature_check_enabled(self) -> bool:
        """True quando o POST deve trazer X-Hub-Signature-256 válido."""
        return bool(self.app_secret)

    def get_messages_endpoint(self, phone_number_id: str | None = None) -> str:
        """Retorna URL para envio de mensagens.

        Raises:
            ValueError: Se phone_number_id não informado e não configurado.
        """
        pid = phone_number_id or self.phone_number_id
        if not pid:
            raise ValueError("phone_number_id é obrigatório")
        return f"{self.api_endpoint}/{pid}/messages"

    def validate(self) -> list[str]:
        """Valida configurações mínimas de WhatsApp.

        Credenciais ausentes não impedem o boot: o envio é abortado
        passo a passo e logado.
        """
        errors: list[str] = []

        if not self.verify_token:
            errors.append("WHATSAPP_VERIFY_TOKEN não pode ser vazio")

        if self.request_timeout_seconds <= 0:
            errors.append("WHATSAPP_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        verify_token=os.getenv("WHATSAPP_VERIFY_TOKEN") or DEFAULT_VERIFY_TOKEN,
        app_secret=os.getenv("WHATSAPP_APP_SECRET", ""),
        access_token=os.getenv("WHATSAPP_ACCESS_TOKEN", ""),
        phone_number_id=os.getenv("WHATSAPP_PHONE_NUMBER_ID", ""),
        api_version=os.getenv("WHATSAPP_API_VERSION", GRAPH_API_VERSION),
        api_base_url=os.getenv("WHATSAPP_API_BASE_URL", GRAPH_API_BASE_URL),
        request_timeout_seconds=float(
            os.getenv("WHATSAPP_REQUEST_TIMEOUT_SECONDS", "30")
        ),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings."""
    return _load_from_env()
