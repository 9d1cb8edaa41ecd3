"""Protocolo do avaliador de condições de nós condition."""

from __future__ import annotations

from typing import Protocol


class ConditionEvaluatorProtocol(Protocol):
    """Avalia a expressão de um nó condition contra o texto recebido."""

    def evaluate(self, expression: str | None, content: str) -> bool: ...
