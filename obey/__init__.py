"""obey -- declarative before/condition/after rule engine."""

from obey.engine import RuleEngine
from obey.evaluator import ConditionError, evaluate
from obey.models import ActionRef, Condition, ConditionGroup, Operator, Rule, RunReport
from obey.registry import FunctionRegistry
from obey.reporting import CollectingReporter, LoggingReporter, Reporter

__all__ = [
    "ActionRef",
    "CollectingReporter",
    "Condition",
    "ConditionError",
    "ConditionGroup",
    "FunctionRegistry",
    "LoggingReporter",
    "Operator",
    "Reporter",
    "Rule",
    "RuleEngine",
    "RunReport",
    "evaluate",
]
