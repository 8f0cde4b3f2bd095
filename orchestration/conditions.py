"""Condition evaluation for condition nodes."""

import logging
import math
from collections.abc import Mapping
from typing import Any

from .models import ExecutionContext

logger = logging.getLogger(__name__)

_MISSING = object()


def _to_number(value: Any) -> float:
    """Numeric coercion: booleans count as 0/1, unparseable values are NaN.

    ``None`` is NaN as well, not 0, so a null field never passes a
    greaterThan or lessThan check.
    """
    if value is _MISSING or value is None:
        return math.nan
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def _to_text(value: Any) -> str:
    """Missing and ``None`` values read as the empty string."""
    if value is _MISSING or value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def evaluate_condition(condition: Any, context: ExecutionContext) -> bool:
    """Evaluate ``{field, operator, value}`` against the context.

    A missing condition, or an unknown operator, evaluates to True.
    NaN comparisons are always False.
    """
    if not condition:
        return True
    if not isinstance(condition, Mapping):
        logger.warning(f"Ignoring malformed condition {condition!r}")
        return True

    field = condition.get("field")
    operator = condition.get("operator")
    expected = condition.get("value")
    actual = context.get(field, _MISSING) if field is not None else _MISSING

    if operator == "equals":
        return actual is not _MISSING and actual == expected
    if operator == "notEquals":
        return actual is _MISSING or actual != expected
    if operator == "greaterThan":
        return _to_number(actual) > _to_number(expected)
    if operator == "lessThan":
        return _to_number(actual) < _to_number(expected)
    if operator == "contains":
        return _to_text(expected) in _to_text(actual)

    logger.warning(f"Unknown condition operator {operator!r}, treating as true")
    return True
