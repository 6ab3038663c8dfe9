"""Static checks over rules, and dry evaluation of their conditions."""

from __future__ import annotations

from typing import Any, Iterator, Mapping, Optional, Union

from obey.evaluator import ConditionError, evaluate
from obey.models import (
    CheckIssue,
    CheckReport,
    Condition,
    ConditionGroup,
    ConditionVerdict,
    Rule,
    Severity,
)
from obey.registry import FunctionRegistry
from obey.engine import not_found_message


def _walk(group: ConditionGroup) -> Iterator[Union[Condition, ConditionGroup]]:
    yield group
    for nodes in (group.and_, group.or_):
        for node in nodes or []:
            if isinstance(node, ConditionGroup):
                yield from _walk(node)
            else:
                yield node


def check_rules(rules: list[Rule], registry: Optional[FunctionRegistry] = None) -> CheckReport:
    """Check rules without running any action.

    With a registry, every before/after function must resolve. Empty
    or-lists are flagged because they can never be satisfied.
    """
    issues: list[CheckIssue] = []
    for index, rule in enumerate(rules):
        if registry is not None:
            for action in (rule.before, rule.after):
                if registry.resolve(action.func) is None:
                    issues.append(
                        CheckIssue(index=index, name=rule.name, message=not_found_message(action.func))
                    )
        for node in _walk(rule.conditions):
            if isinstance(node, ConditionGroup) and node.or_ is not None and not node.or_:
                issues.append(
                    CheckIssue(
                        index=index,
                        name=rule.name,
                        severity=Severity.WARNING,
                        message="Empty 'or' list is never satisfied; the after-action cannot run.",
                    )
                )
    return CheckReport(rule_count=len(rules), issues=issues)


def evaluate_rules(rules: list[Rule], facts: Mapping[str, Any], only: Optional[int] = None) -> list[ConditionVerdict]:
    """Evaluate each rule's conditions against ``facts`` without calling actions.

    Args:
        rules: Parsed rules.
        facts: Fact mapping, as a before-action would return it.
        only: 0-based index of a single rule to evaluate.
    """
    verdicts: list[ConditionVerdict] = []
    for index, rule in enumerate(rules):
        if only is not None and index != only:
            continue
        try:
            satisfied = evaluate(rule.conditions, facts)
            verdicts.append(ConditionVerdict(index=index, name=rule.name, satisfied=satisfied))
        except ConditionError as exc:
            verdicts.append(ConditionVerdict(index=index, name=rule.name, error=str(exc)))
    return verdicts
