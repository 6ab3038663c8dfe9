"""Domain models for obey.

Pydantic models for rules, their condition trees and action references,
and the per-run report produced by the engine.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


# --- Enums ---


class Operator(str, Enum):
    """Comparison operators usable in a condition."""

    STRICT_EQUAL = "==="
    STRICT_NOT_EQUAL = "!=="
    GREATER_THAN = ">"
    GREATER_THAN_OR_EQUAL = ">="
    LESS_THAN = "<"
    LESS_THAN_OR_EQUAL = "<="


class RuleStatus(str, Enum):
    """How a single rule cycle ended."""

    FIRED = "fired"  # after-action completed
    SKIPPED = "skipped"  # conditions evaluated false
    ERROR = "error"  # cycle abandoned, reported


class Severity(str, Enum):
    """Rule-file check severity."""

    VIOLATION = "violation"  # rule cannot run as written
    WARNING = "warning"  # runs, but probably not as intended


# --- Rule Models ---


class Condition(BaseModel):
    """A single comparison of a fact against a literal value."""

    fact: str
    operator: Operator
    value: Any

    model_config = ConfigDict(extra="forbid")

    @field_validator("operator", mode="before")
    @classmethod
    def operator_by_name(cls, v: Any) -> Any:
        if isinstance(v, str) and v.upper() in Operator.__members__:
            return Operator[v.upper()]
        return v


class ConditionGroup(BaseModel):
    """AND/OR node of a condition tree.

    A key that was never given is None, which is not the same as an empty
    list: an absent ``or`` leaves the verdict alone, an empty one is false.
    """

    and_: Optional[list[Union[Condition, "ConditionGroup"]]] = Field(default=None, alias="and")
    or_: Optional[list[Union[Condition, "ConditionGroup"]]] = Field(default=None, alias="or")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)


class ActionRef(BaseModel):
    """A named action plus the literal arguments passed to it."""

    func: str = Field(min_length=1)
    params: Any = None

    @model_validator(mode="before")
    @classmethod
    def bare_name(cls, data: Any) -> Any:
        if isinstance(data, str):
            return {"func": data}
        return data

    @property
    def has_params(self) -> bool:
        """True when ``params`` was supplied, even as null."""
        return "params" in self.model_fields_set


class Rule(BaseModel):
    """A before-action / condition tree / after-action triple."""

    before: ActionRef
    conditions: ConditionGroup
    after: ActionRef
    name: Optional[str] = None


ConditionGroup.model_rebuild()


# --- Result Models ---


class RuleOutcome(BaseModel):
    """Result of one rule cycle."""

    index: int
    name: Optional[str] = None
    status: RuleStatus
    message: str = ""

    @property
    def label(self) -> str:
        return self.name or f"#{self.index + 1}"


class RunReport(BaseModel):
    """Outcomes of one evaluation pass over all registered rules."""

    outcomes: list[RuleOutcome] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.errors

    @property
    def fired(self) -> list[RuleOutcome]:
        return [o for o in self.outcomes if o.status == RuleStatus.FIRED]

    @property
    def skipped(self) -> list[RuleOutcome]:
        return [o for o in self.outcomes if o.status == RuleStatus.SKIPPED]

    @property
    def errors(self) -> list[RuleOutcome]:
        return [o for o in self.outcomes if o.status == RuleStatus.ERROR]

    @property
    def fired_count(self) -> int:
        return len(self.fired)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)

    @property
    def error_count(self) -> int:
        return len(self.errors)


class CheckIssue(BaseModel):
    """A problem found in a rule before running it."""

    index: int
    name: Optional[str] = None
    severity: Severity = Severity.VIOLATION
    message: str

    @property
    def label(self) -> str:
        return self.name or f"#{self.index + 1}"


class CheckReport(BaseModel):
    """Static check of a set of rules."""

    rule_count: int = 0
    issues: list[CheckIssue] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return not self.violations

    @property
    def violations(self) -> list[CheckIssue]:
        return [i for i in self.issues if i.severity == Severity.VIOLATION]

    @property
    def warnings(self) -> list[CheckIssue]:
        return [i for i in self.issues if i.severity == Severity.WARNING]


class ConditionVerdict(BaseModel):
    """Result of evaluating one rule's conditions against given facts."""

    index: int
    name: Optional[str] = None
    satisfied: bool = False
    error: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or f"#{self.index + 1}"
