"""Rich-based output formatter with colored tables, panels, and status coding."""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from obey.models import CheckReport, ConditionVerdict, RuleStatus, RunReport, Severity

# Status -> Rich style mapping
_STATUS_STYLES = {
    RuleStatus.FIRED: "bold green",
    RuleStatus.SKIPPED: "dim",
    RuleStatus.ERROR: "bold red",
}

_SEVERITY_STYLES = {
    Severity.VIOLATION: "bold red",
    Severity.WARNING: "yellow",
}


def _render(renderable) -> str:
    """Render a Rich object to a string."""
    buf = StringIO()
    console = Console(file=buf, force_terminal=True, width=120)
    console.print(renderable)
    return buf.getvalue()


def _status_text(passed: bool) -> Text:
    return Text("PASS", style="bold green") if passed else Text("FAIL", style="bold red")


class RichFormatter:
    """Format engine results using Rich tables and panels."""

    def format_run(self, report: RunReport) -> str:
        """Format a run report with color-coded outcomes."""
        parts: list[str] = []

        summary = Text()
        summary.append("Status:  ")
        summary.append_text(_status_text(report.passed))
        summary.append("\n")
        summary.append(f"Rules:   {len(report.outcomes)}\n")
        summary.append(f"Fired:   {report.fired_count}\n")
        summary.append(f"Skipped: {report.skipped_count}\n")
        summary.append(f"Errors:  {report.error_count}\n")
        parts.append(_render(Panel(summary, title="Run Summary", border_style="cyan")))

        table = Table(title="Rule Outcomes", show_lines=True)
        table.add_column("#", style="dim", justify="right")
        table.add_column("Rule", style="cyan", min_width=10)
        table.add_column("Status", min_width=7)
        table.add_column("Message", min_width=30)

        for o in report.outcomes:
            table.add_row(
                str(o.index + 1),
                o.name or "",
                Text(o.status.value.upper(), style=_STATUS_STYLES.get(o.status, "")),
                o.message,
            )

        parts.append(_render(table))
        return "\n".join(parts)

    def format_check(self, report: CheckReport) -> str:
        """Format a check report."""
        parts: list[str] = []

        summary = Text()
        summary.append("Status:     ")
        summary.append_text(_status_text(report.passed))
        summary.append("\n")
        summary.append(f"Rules:      {report.rule_count}\n")
        summary.append(f"Violations: {len(report.violations)}\n")
        summary.append(f"Warnings:   {len(report.warnings)}\n")
        parts.append(_render(Panel(summary, title="Rule Check", border_style="cyan")))

        if report.issues:
            table = Table(title="Issues", show_lines=True)
            table.add_column("Rule", style="cyan", min_width=10)
            table.add_column("Severity", min_width=9)
            table.add_column("Message", min_width=30)
            for i in report.issues:
                table.add_row(
                    i.label,
                    Text(i.severity.value.upper(), style=_SEVERITY_STYLES.get(i.severity, "")),
                    i.message,
                )
            parts.append(_render(table))

        return "\n".join(parts)

    def format_evaluation(self, verdicts: list[ConditionVerdict]) -> str:
        """Format condition verdicts as a table."""
        table = Table(title="Condition Verdicts", show_lines=True)
        table.add_column("Rule", style="cyan", min_width=10)
        table.add_column("Verdict", min_width=10)

        for v in verdicts:
            if v.error:
                verdict = Text(f"ERROR: {v.error}", style="bold red")
            elif v.satisfied:
                verdict = Text("MATCH", style="bold green")
            else:
                verdict = Text("NO MATCH", style="yellow")
            table.add_row(v.label, verdict)

        return _render(table)
