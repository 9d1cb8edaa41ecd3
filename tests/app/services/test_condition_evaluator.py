"""Testes da mini-linguagem de condições."""

from __future__ import annotations

import pytest

from app.services.condition_evaluator import KeywordConditionEvaluator


@pytest.fixture
def evaluator() -> KeywordConditionEvaluator:
    return KeywordConditionEvaluator()


@pytest.mark.parametrize(
    ("expression", "content", "expected"),
    [
        ("contains missa", "Quero agendar uma MISSA", True),
        ("contains 'missa'", "quero uma missa", True),
        ('contains: "missa de sétimo dia"', "Missa de   sétimo dia amanhã", True),
        ("contains batismo", "casamento", False),
        ("not contains batismo", "casamento", True),
        ("not contains batismo", "batismo", False),
        ("equals sim", "  SIM ", True),
        ("equals sim", "sim, claro", False),
        ("EQUALS=sim", "sim", True),
    ],
)
def test_evaluate_supported_forms(
    evaluator: KeywordConditionEvaluator,
    expression: str,
    content: str,
    expected: bool,
) -> None:
    assert evaluator.evaluate(expression, content) is expected


@pytest.mark.parametrize("expression", [None, "", "startswith missa", "contains", "contains ''"])
def test_unrecognized_or_empty_expressions_are_false(
    evaluator: KeywordConditionEvaluator,
    expression: str | None,
) -> None:
    assert evaluator.evaluate(expression, "missa") is False
