"""Rule engine: stores rules and runs before -> conditions -> after cycles.

Each rule cycle is independent. A missing function, a failing action or a
malformed rule is reported through the engine's Reporter and ends only
that rule's cycle; ``obey()`` itself does not raise for them.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from typing import Any, Iterable, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from obey.config import EngineSettings
from obey.evaluator import evaluate
from obey.models import ActionRef, Rule, RuleOutcome, RuleStatus, RunReport
from obey.registry import FunctionRegistry, as_registry
from obey.reporting import LoggingReporter, Reporter

logger = logging.getLogger(__name__)

RuleLike = Union[Rule, Mapping[str, Any]]


class _CycleAbort(Exception):
    """Internal: a rule cycle was abandoned after reporting ``message``."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def not_found_message(name: str) -> str:
    return f"Function '{name}' not found or not a function."


class RuleEngine:
    """Registers rules and evaluates them against caller-supplied actions.

    Usage::

        engine = RuleEngine({"get_courier": get_courier, "log_courier": log_courier})
        engine.add_rule({
            "before": {"func": "get_courier", "params": {"courier_id": "42"}},
            "conditions": {"and": [{"fact": "status", "operator": "===", "value": 200}]},
            "after": "log_courier",
        })
        await engine.obey()
    """

    def __init__(
        self,
        functions: Union[Mapping[str, Any], FunctionRegistry],
        reporter: Optional[Reporter] = None,
        settings: Optional[EngineSettings] = None,
    ) -> None:
        self.functions = as_registry(functions)
        self.reporter: Reporter = reporter or LoggingReporter()
        self.settings = settings or EngineSettings()
        self._rules: list[RuleLike] = []

    # --- Rule store ---

    def add_rule(self, rule: RuleLike) -> None:
        """Append a rule. It is stored as given and parsed when run."""
        self._rules.append(rule)

    def add_rules(self, rules: Iterable[RuleLike]) -> None:
        for rule in rules:
            self.add_rule(rule)

    @property
    def rules(self) -> list[RuleLike]:
        """Registered rules in insertion order (a new list, same objects)."""
        return list(self._rules)

    # --- Execution ---

    async def obey(self) -> None:
        """Run one evaluation pass over every registered rule."""
        await self.run()

    def obey_sync(self) -> RunReport:
        """Run one pass from synchronous code and return its report."""
        return asyncio.run(self.run())

    async def run(self) -> RunReport:
        """Run one evaluation pass and return the outcome of every rule."""
        snapshot = list(enumerate(self._rules))
        logger.debug(
            "Running %d rule(s) %s",
            len(snapshot),
            "concurrently" if self.settings.concurrent else "sequentially",
        )
        if self.settings.concurrent:
            outcomes = list(await asyncio.gather(*(self._cycle(i, r) for i, r in snapshot)))
        else:
            outcomes = [await self._cycle(i, r) for i, r in snapshot]
        return RunReport(outcomes=outcomes)

    async def _cycle(self, index: int, raw: RuleLike) -> RuleOutcome:
        """Run before -> conditions -> after for one rule."""
        name = _rule_name(raw)
        label = name or f"#{index + 1}"
        try:
            rule = _parse_rule(raw, label)
            result = await self._invoke(rule.before, None, before=True)
            facts = _as_facts(result, rule.before.func)

            try:
                satisfied = evaluate(rule.conditions, facts)
            except Exception as exc:
                raise _CycleAbort(f"Invalid conditions in rule {label}: {exc}") from exc

            if not satisfied:
                logger.debug("Rule %s: conditions not met", label)
                return RuleOutcome(index=index, name=name, status=RuleStatus.SKIPPED, message="Conditions not met.")

            await self._invoke(rule.after, result, before=False)
        except _CycleAbort as abort:
            cause = abort.__cause__
            self.reporter.report(abort.message, cause)
            return RuleOutcome(index=index, name=name, status=RuleStatus.ERROR, message=abort.message)

        logger.debug("Rule %s: fired %s", label, rule.after.func)
        return RuleOutcome(
            index=index,
            name=name,
            status=RuleStatus.FIRED,
            message=f"{rule.before.func} -> {rule.after.func}",
        )

    async def _invoke(self, action: ActionRef, before_result: Any, *, before: bool) -> Any:
        """Resolve ``action`` and call it, awaiting the result if needed."""
        func = self.functions.resolve(action.func)
        if func is None:
            raise _CycleAbort(not_found_message(action.func))

        args: list[Any] = [] if before else [before_result]
        if action.has_params:
            args.append(action.params)

        try:
            result = func(*args)
            if inspect.isawaitable(result):
                result = await self._await(action.func, result)
        except _CycleAbort:
            raise
        except Exception as exc:
            raise _CycleAbort(f"Error executing function '{action.func}': {exc}") from exc
        return result

    async def _await(self, name: str, awaitable: Any) -> Any:
        timeout = self.settings.action_timeout
        if timeout is None:
            return await awaitable
        # Run as a task so an expired wait is told apart from a TimeoutError
        # raised by the action itself.
        task = asyncio.ensure_future(awaitable)
        try:
            done, _ = await asyncio.wait({task}, timeout=timeout)
        except asyncio.CancelledError:
            task.cancel()
            raise
        if not done:
            task.cancel()
            await asyncio.wait({task})
            raise _CycleAbort(f"Function '{name}' timed out after {timeout:g} seconds.")
        return task.result()


def _rule_name(raw: Any) -> Optional[str]:
    if isinstance(raw, Rule):
        return raw.name
    if isinstance(raw, Mapping):
        name = raw.get("name")
        return str(name) if name is not None else None
    return None


def _parse_rule(raw: Any, label: str) -> Rule:
    if isinstance(raw, Rule):
        return raw
    try:
        return Rule.model_validate(raw)
    except ValidationError as exc:
        raise _CycleAbort(f"Invalid rule {label}: {exc}") from exc


def _as_facts(result: Any, func_name: str) -> Mapping[str, Any]:
    """Treat a before-action's result as the fact mapping."""
    if result is None:
        return {}
    if isinstance(result, Mapping):
        return result
    if isinstance(result, BaseModel):
        return result.model_dump()
    raise _CycleAbort(
        f"Function '{func_name}' returned {type(result).__name__}, expected a fact mapping."
    )
