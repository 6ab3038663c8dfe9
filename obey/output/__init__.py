"""Output formatters for obey.

Provides a Formatter protocol and three implementations:
- RichFormatter: colored Rich tables and panels
- PlainFormatter: plain text without ANSI escapes
- JsonFormatter: valid JSON for piping to jq
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from obey.models import CheckReport, ConditionVerdict, RunReport


class Formatter(Protocol):
    """Protocol for formatting engine results."""

    def format_run(self, report: RunReport) -> str:
        """Format the outcome of one evaluation pass."""
        ...

    def format_check(self, report: CheckReport) -> str:
        """Format a rule-file check."""
        ...

    def format_evaluation(self, verdicts: list[ConditionVerdict]) -> str:
        """Format condition verdicts from a dry evaluation."""
        ...


def get_formatter(name: str = "rich") -> Formatter:
    """Get a formatter by name.

    Args:
        name: One of "rich", "plain", "json".

    Returns:
        A Formatter instance.

    Raises:
        ValueError: If the name is not recognized.
    """
    if name == "rich":
        from obey.output.rich_formatter import RichFormatter

        return RichFormatter()
    elif name == "plain":
        from obey.output.plain_formatter import PlainFormatter

        return PlainFormatter()
    elif name == "json":
        from obey.output.json_formatter import JsonFormatter

        return JsonFormatter()
    else:
        raise ValueError(f"Unknown formatter: {name!r}. Use 'rich', 'plain', or 'json'.")
