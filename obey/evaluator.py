"""Condition evaluator: walks an AND/OR condition tree over a fact mapping."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Union

from pydantic import ValidationError

from obey.models import Condition, ConditionGroup
from obey.operators import ConditionError, UnknownOperatorError, compare

logger = logging.getLogger(__name__)

__all__ = ["ConditionError", "UnknownOperatorError", "evaluate", "evaluate_condition"]


def evaluate_condition(condition: Condition, facts: Mapping[str, Any]) -> bool:
    """Look up ``condition.fact`` and compare it with ``condition.value``.

    A fact missing from the mapping is compared as None.
    """
    actual = facts.get(condition.fact)
    result = compare(condition.operator, actual, condition.value)
    logger.debug(
        "%s %s %r (actual %r) -> %s",
        condition.fact,
        getattr(condition.operator, "value", condition.operator),
        condition.value,
        actual,
        result,
    )
    return result


def _evaluate_node(node: Union[Condition, ConditionGroup], facts: Mapping[str, Any]) -> bool:
    if isinstance(node, Condition):
        return evaluate_condition(node, facts)
    if isinstance(node, ConditionGroup):
        return _evaluate_group(node, facts)
    raise ConditionError(f"Expected a condition or condition group, got {type(node).__name__}")


def _evaluate_group(group: ConditionGroup, facts: Mapping[str, Any]) -> bool:
    if group.and_ is None and group.or_ is None:
        return True

    verdict = True
    if group.and_ is not None:
        verdict = all(_evaluate_node(node, facts) for node in group.and_)
    if verdict and group.or_ is not None:
        # An empty or-list has no true member, so it is false.
        verdict = any(_evaluate_node(node, facts) for node in group.or_)
    return verdict


def evaluate(group: Union[ConditionGroup, Mapping[str, Any]], facts: Mapping[str, Any]) -> bool:
    """Evaluate a condition tree against a fact mapping.

    Args:
        group: A ConditionGroup, or a raw mapping of the same shape.
        facts: Fact name -> value, usually a before-action's result.

    Returns:
        True when the tree is satisfied.

    Raises:
        ConditionError: If the tree is malformed or uses an unknown operator.
    """
    if not isinstance(group, ConditionGroup):
        try:
            group = ConditionGroup.model_validate(group)
        except ValidationError as exc:
            raise ConditionError(f"Malformed condition group: {exc}") from exc
    return _evaluate_group(group, facts)
