"""Protocolos de persistência (flows, contatos, mensagens, logs, quota).

Cada store tem implementação em memória e REST (PostgREST). Erros de
infraestrutura sobem como PersistenceError; quem chama decide se engole.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Sequence

    from app.domain.contact import Contact
    from app.domain.flow import Flow
    from app.domain.message import Message
    from app.domain.quota import MetaQuota
    from app.domain.webhook_log import WebhookLog


class FlowStoreProtocol(ABC):
    """Fluxos publicados.

    Invariantes:
        - list_active preserva a ordem de armazenamento (created_at)
        - upsert substitui o fluxo inteiro
    """

    @abstractmethod
    async def list_active(self) -> Sequence[Flow]:
        """Fluxos com is_active=True, na ordem armazenada."""

    @abstractmethod
    async def list_all(self) -> Sequence[Flow]:
        """Todos os fluxos (admin), mais recentes primeiro."""

    @abstractmethod
    async def get(self, flow_id: str) -> Flow | None: ...

    @abstractmethod
    async def upsert(self, flow: Flow) -> Flow: ...

    @abstractmethod
    async def delete(self, flow_id: str) -> bool:
        """Remove o fluxo. Retorna False se não existia."""


class ContactStoreProtocol(ABC):
    """Contatos indexados por telefone."""

    @abstractmethod
    async def get(self, phone: str) -> Contact | None: ...

    @abstractmethod
    async def upsert(self, phone: str, fields: dict[str, Any]) -> None:
        """Cria ou mescla campos do contato (merge-duplicates)."""

    @abstractmethod
    async def update(self, phone: str, fields: dict[str, Any]) -> None:
        """Atualiza campos de um contato existente."""

    @abstractmethod
    async def list_all(self) -> Sequence[Contact]:
        """Contatos, interação mais recente primeiro."""


class MessageStoreProtocol(ABC):
    """Log append-only de mensagens."""

    @abstractmethod
    async def append(self, message: Message) -> None: ...

    @abstractmethod
    async def update_status(self, provider_message_id: str, status: str) -> None:
        """Atualiza status pelo id do provedor (wamid)."""

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> Sequence[Message]: ...


class WebhookLogStoreProtocol(ABC):
    @abstractmethod
    async def append(self, log: WebhookLog) -> None: ...

    @abstractmethod
    async def list_recent(self, limit: int = 100) -> Sequence[WebhookLog]: ...


class QuotaStoreProtocol(ABC):
    """Registro único de quota (id="default")."""

    @abstractmethod
    async def get(self) -> MetaQuota | None: ...

    @abstractmethod
    async def update(self, fields: dict[str, Any]) -> None: ...

    @abstractmethod
    async def ping(self) -> None:
        """Checagem leve de disponibilidade (readiness)."""
