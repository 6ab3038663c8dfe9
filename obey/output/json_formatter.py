"""JSON output formatter -- valid JSON suitable for piping to jq."""

from __future__ import annotations

import json

from obey.models import CheckReport, ConditionVerdict, RunReport


class JsonFormatter:
    """Format engine results as pretty-printed JSON."""

    def format_run(self, report: RunReport) -> str:
        """Format a run report as JSON."""
        data = {
            "type": "run_report",
            "summary": {
                "passed": report.passed,
                "fired": report.fired_count,
                "skipped": report.skipped_count,
                "errors": report.error_count,
                "total_rules": len(report.outcomes),
            },
            "outcomes": [o.model_dump(mode="json") for o in report.outcomes],
        }
        return json.dumps(data, indent=2)

    def format_check(self, report: CheckReport) -> str:
        """Format a check report as JSON."""
        data = {
            "type": "check_report",
            "summary": {
                "passed": report.passed,
                "rule_count": report.rule_count,
                "violation_count": len(report.violations),
                "warning_count": len(report.warnings),
            },
            "issues": [i.model_dump(mode="json") for i in report.issues],
        }
        return json.dumps(data, indent=2)

    def format_evaluation(self, verdicts: list[ConditionVerdict]) -> str:
        """Format condition verdicts as JSON."""
        data = {
            "type": "condition_verdicts",
            "satisfied_count": sum(1 for v in verdicts if v.satisfied),
            "verdicts": [v.model_dump(mode="json") for v in verdicts],
        }
        return json.dumps(data, indent=2)
