"""Contato (fiel) que conversa com o bot, indexado pelo telefone."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

ConversationState = Literal["active", "waiting", "completed"]


def _utcnow() -> datetime:
    return datetime.now(UTC)


def contact_id_for(phone: str) -> str:
    return f"contact_{phone}"


class Contact(BaseModel):
    """Contato e sua posição corrente num fluxo.

    ``current_flow``/``current_node`` ficam vazios até o primeiro fluxo
    ser selecionado. ``waiting`` indica que o último nó enviado foi um
    buttons e a próxima resposta decide o caminho.
    """

    model_config = ConfigDict(extra="ignore")

    phone: str
    id: str = ""
    name: str | None = None
    current_flow: str | None = None
    current_node: str | None = None
    variables: dict[str, Any] = Field(default_factory=dict)
    last_interaction: datetime = Field(default_factory=_utcnow)
    conversation_state: ConversationState = "active"

    def model_post_init(self, __context: Any) -> None:
        if not self.id:
            self.id = contact_id_for(self.phone)

    @property
    def has_position(self) -> bool:
        return bool(self.current_flow and self.current_node)

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
