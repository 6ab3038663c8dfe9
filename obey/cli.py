"""obey CLI -- run declarative before/condition/after rules.

Provides commands for running a rule file against a function registry,
checking a rule file, dry-evaluating conditions against facts, running the
courier demo, and showing engine settings.
"""

import logging
import sys
from typing import TYPE_CHECKING, Annotated, Optional

import typer
import yaml
from pydantic import ValidationError

from obey.config import ConfigError, EngineSettings, config_path, load_settings
from obey.loader import RuleFile, RuleFileError, load_facts, load_rule_file
from obey.registry import RegistryImportError, import_registry

if TYPE_CHECKING:
    from obey.registry import FunctionRegistry

# ---------------------------------------------------------------------------
# App and sub-apps
# ---------------------------------------------------------------------------

app = typer.Typer(
    name="obey",
    help="Declarative rule engine -- run before/condition/after rules against named functions.",
    no_args_is_help=True,
)

config_app = typer.Typer(
    name="config",
    help="Inspect engine configuration.",
    no_args_is_help=True,
)

app.add_typer(config_app, name="config")


# ---------------------------------------------------------------------------
# Global option types
# ---------------------------------------------------------------------------

JsonFlag = Annotated[bool, typer.Option("--json", help="Output as JSON.")]
PlainFlag = Annotated[bool, typer.Option("--plain", help="Output as plain text (no color).")]
VerboseFlag = Annotated[bool, typer.Option("--verbose", "-v", help="Verbose output.")]
QuietFlag = Annotated[bool, typer.Option("--quiet", "-q", help="Suppress non-essential output.")]
FunctionsOption = Annotated[
    Optional[str],
    typer.Option("--functions", "-f", help="Function registry as module:attribute."),
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _get_format(json_flag: bool = False, plain_flag: bool = False) -> str:
    """Determine output format: json > plain > TTY auto-detect > rich."""
    if json_flag:
        return "json"
    if plain_flag:
        return "plain"
    if sys.stdout.isatty():
        return "rich"
    return "plain"


def _setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure logging based on verbosity flags."""
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)


def _load_rules(file: str) -> RuleFile:
    try:
        return load_rule_file(file)
    except RuleFileError as exc:
        raise typer.BadParameter(str(exc))


def _load_registry(path: str) -> "FunctionRegistry":
    try:
        return import_registry(path)
    except RegistryImportError as exc:
        raise typer.BadParameter(f"{exc}\n  Hint: pass --functions package.module:FUNCTIONS")


def _resolve_settings(
    rule_file: Optional[RuleFile] = None,
    concurrent: Optional[bool] = None,
    timeout: Optional[float] = None,
) -> EngineSettings:
    """Config file < rule file ``settings:`` < command-line flags."""
    try:
        settings = load_settings()
        if rule_file is not None and rule_file.settings is not None:
            settings = settings.merged(rule_file.settings.model_dump(exclude_unset=True))
        return settings.merged({"concurrent": concurrent, "action_timeout": timeout})
    except ConfigError as exc:
        raise typer.BadParameter(str(exc))
    except ValidationError as exc:
        raise typer.BadParameter(f"Invalid settings: {exc}")


def _error_panel(message: str) -> None:
    """Print an error message, using Rich panel if available."""
    try:
        from rich.console import Console
        from rich.panel import Panel

        console = Console(stderr=True)
        console.print(Panel(message, title="Error", border_style="red"))
    except Exception:
        typer.echo(f"Error: {message}", err=True)


# ---------------------------------------------------------------------------
# Core commands
# ---------------------------------------------------------------------------


@app.command()
def run(
    file: str = typer.Argument(help="Path to rule YAML file"),
    functions: FunctionsOption = None,
    concurrent: Annotated[
        Optional[bool],
        typer.Option("--concurrent/--sequential", help="Run rule cycles concurrently."),
    ] = None,
    timeout: Annotated[
        Optional[float],
        typer.Option("--timeout", help="Seconds to wait for each async action."),
    ] = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Run every rule in a rule file once."""
    _setup_logging(verbose, quiet)
    try:
        if not functions:
            raise typer.BadParameter("--functions is required to run rules.")
        rule_file = _load_rules(file)
        registry = _load_registry(functions)
        settings = _resolve_settings(rule_file, concurrent, timeout)

        from obey.engine import RuleEngine
        from obey.output import get_formatter

        engine = RuleEngine(registry, settings=settings)
        engine.add_rules(rule_file.rules)
        report = engine.obey_sync()
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_run(report))

        if not report.passed:
            raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def check(
    file: str = typer.Argument(help="Path to rule YAML file"),
    functions: FunctionsOption = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Check a rule file's structure and, with --functions, its function names."""
    _setup_logging(verbose, quiet)
    try:
        rule_file = _load_rules(file)
        registry = _load_registry(functions) if functions else None

        from obey.check import check_rules
        from obey.output import get_formatter

        report = check_rules(rule_file.rules, registry)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_check(report))

        if not report.passed:
            raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def evaluate(
    file: str = typer.Argument(help="Path to rule YAML file"),
    facts_file: str = typer.Argument(help="Path to YAML/JSON facts mapping"),
    rule: Annotated[Optional[int], typer.Option("--rule", "-r", min=1, help="Only this rule (1-based).")] = None,
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Evaluate rule conditions against a facts file without running actions."""
    _setup_logging(verbose, quiet)
    try:
        rule_file = _load_rules(file)
        try:
            facts = load_facts(facts_file)
        except RuleFileError as exc:
            raise typer.BadParameter(str(exc))

        if rule is not None and rule > len(rule_file.rules):
            raise typer.BadParameter(f"--rule {rule} is out of range (file has {len(rule_file.rules)} rules).")

        from obey.check import evaluate_rules
        from obey.output import get_formatter

        verdicts = evaluate_rules(rule_file.rules, facts, None if rule is None else rule - 1)
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_evaluation(verdicts))

        if any(v.error for v in verdicts):
            raise typer.Exit(code=1)
    except typer.Exit:
        raise
    except typer.BadParameter:
        raise
    except Exception as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=2)


@app.command()
def demo(
    json: JsonFlag = False,
    plain: PlainFlag = False,
    verbose: VerboseFlag = False,
    quiet: QuietFlag = False,
) -> None:
    """Run the courier example: one rule fires, one is skipped."""
    _setup_logging(verbose, quiet)
    from obey.demo import DEMO_RULES, FUNCTIONS
    from obey.engine import RuleEngine
    from obey.output import get_formatter

    engine = RuleEngine(FUNCTIONS, settings=_resolve_settings())
    engine.add_rules(DEMO_RULES)
    report = engine.obey_sync()
    if not quiet:
        fmt = get_formatter(_get_format(json, plain))
        typer.echo(fmt.format_run(report))
    if not report.passed:
        raise typer.Exit(code=1)


# ---------------------------------------------------------------------------
# Config commands
# ---------------------------------------------------------------------------


@config_app.command(name="show")
def config_show(
    json: JsonFlag = False,
) -> None:
    """Show the effective engine settings and where they come from."""
    import json as json_mod

    path = config_path()
    try:
        settings = load_settings(path)
    except ConfigError as exc:
        _error_panel(str(exc))
        raise typer.Exit(code=1)

    if json:
        data = {
            "config_path": str(path),
            "exists": path.exists(),
            "settings": settings.model_dump(mode="json"),
        }
        typer.echo(json_mod.dumps(data, indent=2))
        return

    source = str(path) if path.exists() else f"{path} (not found, using defaults)"
    typer.echo(f"Config: {source}")
    typer.echo(yaml.safe_dump(settings.model_dump(mode="json"), sort_keys=False).rstrip())


def main() -> None:
    app()


if __name__ == "__main__":
    main()
