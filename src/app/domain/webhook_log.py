"""Registro de auditoria de chamadas ao webhook."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

WebhookLogType = Literal["incoming", "outgoing", "error", "webhook"]


def new_log_id() -> str:
    return f"log_{uuid.uuid4().hex[:16]}"


class WebhookLog(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = Field(default_factory=new_log_id)
    type: WebhookLogType
    method: str | None = None
    url: str | None = None
    headers: dict[str, Any] | None = None
    body: Any = None
    response: Any = None
    status_code: int | None = None
    error_message: str | None = None
    phone_number: str | None = None
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
