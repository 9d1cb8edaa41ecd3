"""Settings do executor de fluxos."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_TEXT: str = "Olá!"
DEFAULT_BUTTONS_TEXT: str = "Escolha uma opção:"


@dataclass(frozen=True)
class FlowSettings:
    """Textos padrão e limites do executor.

    Attributes:
        default_text: Enviado por nós text sem conteúdo
        default_buttons_text: Corpo de nós buttons sem conteúdo
        max_condition_hops: Limite de nós condition encadeados por execução
    """

    default_text: str = DEFAULT_TEXT
    default_buttons_text: str = DEFAULT_BUTTONS_TEXT
    max_condition_hops: int = 10

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.max_condition_hops < 1:
            errors.append("FLOW_MAX_CONDITION_HOPS deve ser >= 1")
        return errors


def _load_flow_from_env() -> FlowSettings:
    return FlowSettings(
        default_text=os.getenv("FLOW_DEFAULT_TEXT") or DEFAULT_TEXT,
        default_buttons_text=os.getenv("FLOW_DEFAULT_BUTTONS_TEXT")
        or DEFAULT_BUTTONS_TEXT,
        max_condition_hops=int(os.getenv("FLOW_MAX_CONDITION_HOPS", "10")),
    )


@lru_cache(maxsize=1)
def get_flow_settings() -> FlowSettings:
    """Retorna instância cacheada de FlowSettings."""
    return _load_flow_from_env()
