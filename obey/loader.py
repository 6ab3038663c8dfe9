"""Load rule files and fact files from YAML (JSON is valid YAML too).

A rule file looks like::

    settings:
      concurrent: false
    rules:
      - name: courier-ok
        before: {func: get_courier, params: {courier_id: "42"}}
        conditions:
          and:
            - {fact: status, operator: "===", value: 200}
        after: log_courier_info
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from obey.config import EngineSettings
from obey.models import Rule


class RuleFileError(Exception):
    """Raised when a rule or facts file cannot be read or validated."""


class RuleFile(BaseModel):
    """Parsed contents of a rule file."""

    settings: Optional[EngineSettings] = None
    rules: list[Rule] = Field(default_factory=list)


def _read_yaml(file: str | Path) -> Any:
    path = Path(file)
    if not path.exists():
        hint = ""
        if not path.is_absolute():
            hint = f" (looked in {Path.cwd()})"
        raise RuleFileError(f"File not found: {file}{hint}")

    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except yaml.YAMLError as exc:
        msg = f"YAML parse error in {file}"
        mark = getattr(exc, "problem_mark", None)
        if mark is not None:
            msg += f" at line {mark.line + 1}, column {mark.column + 1}"
        problem = getattr(exc, "problem", None)
        if problem:
            msg += f": {problem}"
        raise RuleFileError(msg) from exc


def _format_validation_error(file: str | Path, exc: ValidationError) -> str:
    lines = [f"Validation errors in {file}:"]
    for err in exc.errors():
        loc = " -> ".join(str(x) for x in err["loc"])
        lines.append(f"  {loc}: {err['msg']}")
    return "\n".join(lines)


def parse_rule_file(raw: Any, source: str | Path = "<data>") -> RuleFile:
    """Validate already-loaded data as a rule file.

    A bare list is accepted as a list of rules without settings.
    """
    if isinstance(raw, list):
        raw = {"rules": raw}
    if not isinstance(raw, dict):
        raise RuleFileError(
            f"Expected a mapping with a 'rules' list in {source}, got {type(raw).__name__}"
        )
    try:
        return RuleFile.model_validate(raw)
    except ValidationError as exc:
        raise RuleFileError(_format_validation_error(source, exc)) from exc


def load_rule_file(file: str | Path) -> RuleFile:
    """Read and validate a rule file."""
    return parse_rule_file(_read_yaml(file), file)


def load_facts(file: str | Path) -> dict[str, Any]:
    """Read a facts mapping (fact name -> value)."""
    raw = _read_yaml(file)
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise RuleFileError(f"Expected a YAML mapping of facts in {file}, got {type(raw).__name__}")
    return raw
