"""End-to-end CLI tests using typer.testing.CliRunner.

Runs obey commands against real fixtures and the demo function registry.
"""

import json
from pathlib import Path

from typer.testing import CliRunner

from obey.cli import app

runner = CliRunner()

FIXTURES_DIR = Path(__file__).parent / "fixtures"
COURIER_RULES = str(FIXTURES_DIR / "courier_rules.yaml")
MISSING_RULES = str(FIXTURES_DIR / "missing_function_rules.yaml")
EMPTY_OR_RULES = str(FIXTURES_DIR / "empty_or_rules.yaml")
INVALID_RULES = str(FIXTURES_DIR / "invalid_rules.yaml")
COURIER_FACTS = str(FIXTURES_DIR / "courier_facts.yaml")
DEMO_FUNCTIONS = "obey.demo:FUNCTIONS"


def _json_tail(output: str) -> dict:
    """Parse the JSON document at the end of output (after-actions may print first)."""
    start = output.rindex('{\n  "type"')
    return json.loads(output[start:])


# ---------------------------------------------------------------------------
# Help
# ---------------------------------------------------------------------------


class TestHelp:
    def test_root_help(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        assert "rule engine" in result.output
        for command in ("run", "check", "evaluate", "demo", "config"):
            assert command in result.output

    def test_run_help(self):
        result = runner.invoke(app, ["run", "--help"])
        assert result.exit_code == 0
        assert "--functions" in result.output


# ---------------------------------------------------------------------------
# run
# ---------------------------------------------------------------------------


class TestRun:
    def test_courier_rules(self):
        result = runner.invoke(app, ["run", COURIER_RULES, "-f", DEMO_FUNCTIONS, "--plain"])
        assert result.exit_code == 0
        assert '"vehicle": "Bike"' in result.output
        assert "Rule work with success!" in result.output
        assert "Fired:   1" in result.output
        assert "Skipped: 1" in result.output

    def test_json_output(self):
        result = runner.invoke(app, ["run", COURIER_RULES, "-f", DEMO_FUNCTIONS, "--json"])
        assert result.exit_code == 0
        data = _json_tail(result.output)
        assert data["type"] == "run_report"
        assert [o["status"] for o in data["outcomes"]] == ["fired", "skipped"]

    def test_missing_function_exits_1(self):
        result = runner.invoke(app, ["run", MISSING_RULES, "-f", DEMO_FUNCTIONS, "--json"])
        assert result.exit_code == 1
        data = _json_tail(result.output)
        assert data["outcomes"][0]["message"] == "Function 'fetchGhost' not found or not a function."
        assert data["outcomes"][1]["status"] == "fired"

    def test_sequential_flag_overrides_file(self):
        result = runner.invoke(
            app, ["run", MISSING_RULES, "-f", DEMO_FUNCTIONS, "--sequential", "--timeout", "2", "--plain"]
        )
        assert result.exit_code == 1
        assert "Errors:  1" in result.output

    def test_functions_required(self):
        result = runner.invoke(app, ["run", COURIER_RULES])
        assert result.exit_code != 0
        assert "--functions" in result.output

    def test_bad_registry_path(self):
        result = runner.invoke(app, ["run", COURIER_RULES, "-f", "obey.demo"])
        assert result.exit_code != 0
        assert "module:attribute" in result.output

    def test_nonexistent_file(self):
        result = runner.invoke(app, ["run", "nonexistent.yaml", "-f", DEMO_FUNCTIONS])
        assert result.exit_code != 0
        assert "not found" in result.output.lower()

    def test_invalid_rule_file(self):
        result = runner.invoke(app, ["run", INVALID_RULES, "-f", DEMO_FUNCTIONS])
        assert result.exit_code != 0
        assert "Validation errors" in result.output

    def test_bad_config_file(self, isolated_config):
        isolated_config.write_text("parallelism: 4\n")
        result = runner.invoke(app, ["run", COURIER_RULES, "-f", DEMO_FUNCTIONS])
        assert result.exit_code != 0
        assert "Invalid settings" in result.output


# ---------------------------------------------------------------------------
# check / evaluate
# ---------------------------------------------------------------------------


class TestCheck:
    def test_valid_file(self):
        result = runner.invoke(app, ["check", COURIER_RULES, "-f", DEMO_FUNCTIONS, "--plain"])
        assert result.exit_code == 0
        assert "PASS" in result.output

    def test_missing_function(self):
        result = runner.invoke(app, ["check", MISSING_RULES, "-f", DEMO_FUNCTIONS, "--json"])
        assert result.exit_code == 1
        data = json.loads(result.output)
        assert data["summary"]["violation_count"] == 1

    def test_structure_only(self):
        result = runner.invoke(app, ["check", MISSING_RULES, "--plain"])
        assert result.exit_code == 0

    def test_empty_or_warning(self):
        result = runner.invoke(app, ["check", EMPTY_OR_RULES, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["summary"]["warning_count"] == 1


class TestEvaluate:
    def test_all_rules(self):
        result = runner.invoke(app, ["evaluate", COURIER_RULES, COURIER_FACTS, "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [v["satisfied"] for v in data["verdicts"]] == [True, False]

    def test_single_rule(self):
        result = runner.invoke(app, ["evaluate", COURIER_RULES, COURIER_FACTS, "--rule", "2", "--plain"])
        assert result.exit_code == 0
        assert "NO MATCH" in result.output
        assert "courier-available" not in result.output

    def test_rule_out_of_range(self):
        result = runner.invoke(app, ["evaluate", COURIER_RULES, COURIER_FACTS, "--rule", "9"])
        assert result.exit_code != 0
        assert "out of range" in result.output

    def test_missing_facts_file(self):
        result = runner.invoke(app, ["evaluate", COURIER_RULES, "nope.yaml"])
        assert result.exit_code != 0


# ---------------------------------------------------------------------------
# demo / config
# ---------------------------------------------------------------------------


class TestDemo:
    def test_demo_runs(self):
        result = runner.invoke(app, ["demo", "--plain"])
        assert result.exit_code == 0
        assert '"status": 200' in result.output
        assert "courier-available" in result.output
        assert "SKIPPED" in result.output

    def test_demo_json_stdout_is_only_the_report(self):
        result = runner.invoke(app, ["demo", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["type"] == "run_report"
        assert '"courierInfo"' in result.stderr


class TestConfig:
    def test_show_defaults(self):
        result = runner.invoke(app, ["config", "show"])
        assert result.exit_code == 0
        assert "not found, using defaults" in result.output
        assert "concurrent: false" in result.output

    def test_show_json(self, isolated_config):
        isolated_config.write_text("action_timeout: 3\n")
        result = runner.invoke(app, ["config", "show", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exists"] is True
        assert data["settings"]["action_timeout"] == 3.0
