"""Plain text output formatter -- no ANSI escapes."""

from __future__ import annotations

from obey.models import CheckReport, ConditionVerdict, RunReport


def _header(title: str) -> str:
    """Create a plain text section header."""
    return f"\n{'=' * 60}\n  {title}\n{'=' * 60}\n"


def _subheader(title: str) -> str:
    """Create a plain text sub-header."""
    return f"\n--- {title} ---\n"


class PlainFormatter:
    """Format engine results as plain text without ANSI escapes."""

    def format_run(self, report: RunReport) -> str:
        """Format a run report."""
        lines: list[str] = []
        status = "PASS" if report.passed else "FAIL"

        lines.append(_header("Run Summary"))
        lines.append(f"  Status:  {status}")
        lines.append(f"  Rules:   {len(report.outcomes)}")
        lines.append(f"  Fired:   {report.fired_count}")
        lines.append(f"  Skipped: {report.skipped_count}")
        lines.append(f"  Errors:  {report.error_count}")

        lines.append(_subheader("Rule Outcomes"))
        lines.append(f"  {'Rule':<25} {'Status':<8} Message")
        lines.append(f"  {'-' * 25} {'-' * 8} {'-' * 40}")
        for o in report.outcomes:
            lines.append(f"  {o.label:<25} {o.status.value.upper():<8} {o.message}")

        return "\n".join(lines)

    def format_check(self, report: CheckReport) -> str:
        """Format a check report."""
        lines: list[str] = []
        status = "PASS" if report.passed else "FAIL"

        lines.append(_header("Rule Check"))
        lines.append(f"  Status:     {status}")
        lines.append(f"  Rules:      {report.rule_count}")
        lines.append(f"  Violations: {len(report.violations)}")
        lines.append(f"  Warnings:   {len(report.warnings)}")

        if report.issues:
            lines.append(_subheader("Issues"))
            lines.append(f"  {'Rule':<25} {'Severity':<12} Message")
            lines.append(f"  {'-' * 25} {'-' * 12} {'-' * 40}")
            for i in report.issues:
                lines.append(f"  {i.label:<25} {i.severity.value:<12} {i.message}")

        return "\n".join(lines)

    def format_evaluation(self, verdicts: list[ConditionVerdict]) -> str:
        """Format condition verdicts."""
        lines: list[str] = []
        lines.append(_header("Condition Verdicts"))
        lines.append(f"  {'Rule':<25} Verdict")
        lines.append(f"  {'-' * 25} {'-' * 30}")
        for v in verdicts:
            if v.error:
                verdict = f"ERROR: {v.error}"
            else:
                verdict = "MATCH" if v.satisfied else "NO MATCH"
            lines.append(f"  {v.label:<25} {verdict}")
        return "\n".join(lines)
