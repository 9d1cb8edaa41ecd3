"""Avaliador da mini-linguagem de condições dos nós condition.

Formas aceitas (case-insensitive, aspas opcionais no termo):
    contains <termo>
    not contains <termo>
    equals <termo>

O termo é procurado no texto recebido. Expressão vazia, operador
desconhecido ou termo vazio avaliam como False.
"""

from __future__ import annotations

import logging
import re

from app.protocols.condition_evaluator import ConditionEvaluatorProtocol

logger = logging.getLogger(__name__)

_EXPRESSION_RE = re.compile(
    r"^\s*(?P<op>not\s+contains|contains|equals)\s*[:=]?\s*(?P<term>.*?)\s*$",
    re.IGNORECASE | re.DOTALL,
)
_QUOTES = "\"'"


def _normalize(text: str) -> str:
    return " ".join(text.lower().split())


def _strip_quotes(term: str) -> str:
    if len(term) >= 2 and term[0] == term[-1] and term[0] in _QUOTES:
        return term[1:-1]
    return term


class KeywordConditionEvaluator(ConditionEvaluatorProtocol):
    """Implementação padrão baseada em substring."""

    def evaluate(self, expression: str | None, content: str) -> bool:
        if not expression:
            return False

        match = _EXPRESSION_RE.match(expression)
        if match is None:
            logger.info("condition_expression_unrecognized")
            return False

        operator = _normalize(match.group("op"))
        term = _normalize(_strip_quotes(match.group("term")))
        if not term:
            return False

        text = _normalize(content or "")
        if operator == "contains":
            return term in text
        if operator == "not contains":
            return term not in text
        return text == term
