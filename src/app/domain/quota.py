"""Contadores diários de uso da API Meta (registro único ``default``)."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

QUOTA_ID: str = "default"

QuotaTier = Literal["free", "basic", "standard", "unlimited"]
QuotaCounter = Literal["messages_sent_today", "api_calls_today"]


class MetaQuota(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str = QUOTA_ID
    messages_sent_today: int = 0
    messages_limit: int = 1000
    api_calls_today: int = 0
    api_calls_limit: int = 100000
    last_reset: datetime = Field(default_factory=lambda: datetime.now(UTC))
    tier: QuotaTier = "free"

    def is_stale(self, now: datetime) -> bool:
        """True quando last_reset é de outro dia (UTC)."""
        last = self.last_reset
        if last.tzinfo is None:
            last = last.replace(tzinfo=UTC)
        return last.astimezone(UTC).date() != now.astimezone(UTC).date()

    def to_record(self) -> dict[str, Any]:
        return self.model_dump(mode="json")
