"""Mensagens registradas (entrada e saída)."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

MessageStatus = Literal["received", "sent", "delivered", "read", "failed"]

# Destinatário/remetente lógico do lado do bot.
BOT_ADDRESS: str = "bot"


def new_message_id() -> str:
    return f"msg_{uuid.uuid4().hex[:16]}"


class Message(BaseModel):
    """Registro de mensagem.

    ``from`` é palavra reservada; o campo é ``sender`` com alias ``from``
    no formato persistido. ``message_id`` é o id do provedor (wamid).
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(default_factory=new_message_id)
    sender: str = Field(alias="from")
    to: str
    content: str = ""
    type: str = "text"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    status: MessageStatus = "sent"
    flow_id: str | None = None
    node_id: str | None = None
    message_id: str | None = None

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
