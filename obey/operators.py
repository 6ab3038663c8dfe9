"""Comparison predicates behind each Operator."""

from __future__ import annotations

from numbers import Number
from typing import Any, Callable

from obey.models import Operator


class ConditionError(Exception):
    """Raised when a condition tree cannot be evaluated."""


class UnknownOperatorError(ConditionError):
    """Raised for an operator outside the known set."""


def _is_number(value: Any) -> bool:
    return isinstance(value, Number) and not isinstance(value, bool)


def strict_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion.

    ``True`` is not ``1`` and ``"10"`` is not ``10``; ints and floats still
    compare numerically.
    """
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def strict_not_equal(left: Any, right: Any) -> bool:
    return not strict_equal(left, right)


def _ordered(predicate: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    """Wrap an ordering predicate so absent or unorderable operands are False."""

    def compare(left: Any, right: Any) -> bool:
        if left is None or right is None:
            return False
        if isinstance(left, bool) != isinstance(right, bool):
            return False
        try:
            return bool(predicate(left, right))
        except TypeError:
            return False

    return compare


OPERATORS: dict[Operator, Callable[[Any, Any], bool]] = {
    Operator.STRICT_EQUAL: strict_equal,
    Operator.STRICT_NOT_EQUAL: strict_not_equal,
    Operator.GREATER_THAN: _ordered(lambda a, b: a > b),
    Operator.GREATER_THAN_OR_EQUAL: _ordered(lambda a, b: a >= b),
    Operator.LESS_THAN: _ordered(lambda a, b: a < b),
    Operator.LESS_THAN_OR_EQUAL: _ordered(lambda a, b: a <= b),
}


def compare(operator: Any, left: Any, right: Any) -> bool:
    """Apply ``operator`` to a fact value (left) and a literal (right).

    Raises:
        UnknownOperatorError: If the operator is not an Operator value.
        ConditionError: If the operands raise while being compared.
    """
    try:
        op = Operator(operator)
    except ValueError:
        raise UnknownOperatorError(f"Unknown operator: {operator!r}") from None
    try:
        return bool(OPERATORS[op](left, right))
    except Exception as exc:
        raise ConditionError(f"Cannot compare {left!r} {op.value} {right!r}: {exc}") from exc
