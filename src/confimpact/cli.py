"""Command-line interface for confimpact."""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from rich.console import Console as RichConsole
from rich.logging import RichHandler

from confimpact import __version__
from confimpact.analysis import ComparisonResult, compare_files
from confimpact.config import HISTORY_ENV_VAR, AppConfig, load_config
from confimpact.exceptions import ConfImpactError, HistoryError
from confimpact.history.analyzer import analyze
from confimpact.history.models import HistoryInsight
from confimpact.history.store import JsonHistoryStore, build_entry
from confimpact.report.renderer import render_markdown
from confimpact.report.summary import build_report
from confimpact.ui.console import Console

logger = logging.getLogger("confimpact.cli")

console = Console()


def _setup_logging(verbose: bool) -> None:
    if not verbose:
        return
    logging.basicConfig(
        level=logging.DEBUG,
        format="%(message)s",
        handlers=[RichHandler(console=RichConsole(stderr=True), show_path=False)],
    )


def _load_app_config(config_path: str | None, history_file: str | None) -> AppConfig:
    try:
        config = load_config(config_path)
    except ConfImpactError as e:
        console.error(str(e))
        sys.exit(1)
    if history_file:
        config.history.path = history_file
    return config


def _report_text(
    result: ComparisonResult, insights: list[HistoryInsight], markdown: bool
) -> str:
    if markdown:
        return render_markdown(result, insights)
    return json.dumps(build_report(result, insights), indent=2, ensure_ascii=False)


def _write_report(
    output_path: str, result: ComparisonResult, insights: list[HistoryInsight]
) -> Path:
    """Write the report file: markdown for .md destinations, JSON otherwise."""
    path = Path(output_path)
    markdown = path.suffix.lower() in (".md", ".markdown")
    path.write_text(_report_text(result, insights, markdown) + "\n", encoding="utf-8")
    return path


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("file_a", required=False)
@click.argument("file_b", required=False)
@click.option(
    "--format", "output_format",
    type=click.Choice(["console", "json", "markdown"]),
    default="console",
    help="Output format (default: console).",
)
@click.option("--output", "-o", "output_path", default=None, help="Also save the report to a file.")
@click.option("--schema", "schema_path", default=None, help="Validate both files against a schema.")
@click.option("--save", "save_name", default=None, help="Save this run to history under a name.")
@click.option("--history", "show_history", is_flag=True, help="Show comparison history and exit.")
@click.option(
    "--history-file", envvar=HISTORY_ENV_VAR, default=None,
    help=f"History file location (env: {HISTORY_ENV_VAR}).",
)
@click.option("--config", "config_path", default=None, help="Path to a config file.")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
@click.version_option(version=__version__, prog_name="confimpact")
@click.pass_context
def main(
    ctx: click.Context,
    file_a: str | None,
    file_b: str | None,
    output_format: str,
    output_path: str | None,
    schema_path: str | None,
    save_name: str | None,
    show_history: bool,
    history_file: str | None,
    config_path: str | None,
    verbose: bool,
):
    """Compare two configuration files (JSON or YAML) and flag risky changes.

    Examples:

        confimpact config-v1.json config-v2.json

        confimpact old.yaml new.yaml --output=report.json

        confimpact a.json b.json --format=json > report.json

        confimpact a.yaml b.yaml --schema=schema.json --save=release-42
    """
    _setup_logging(verbose)
    config = _load_app_config(config_path, history_file)
    console.report = config.report
    store = JsonHistoryStore(config.history.path, max_entries=config.history.max_entries)

    if show_history:
        console.show_history(store.list(config.history.show_limit))
        return

    if not file_a or not file_b:
        console.error("Two files are required: <file-a> <file-b>")
        click.echo(ctx.get_help(), err=True)
        sys.exit(1)

    try:
        result = compare_files(file_a, file_b, schema_path)
        insights = analyze(store.load())
        logger.debug(
            f"{len(result.changes)} change(s), {len(result.impacts)} impact(s), "
            f"{len(insights)} insight(s)"
        )

        if output_format == "json":
            click.echo(_report_text(result, insights, markdown=False))
        elif output_format == "markdown":
            click.echo(_report_text(result, insights, markdown=True))
        else:
            console.banner()
            console.success(f"Version A: {result.file_a}")
            console.success(f"Version B: {result.file_b}")
            if schema_path:
                console.show_validation_issues(result.validation_issues)
            console.show_insights(insights)
            console.show_changes(result.changes)
            console.show_impacts(result.impacts)
            console.show_summary(result.changes, result.impacts)

        if output_path:
            written = _write_report(output_path, result, insights)
            if output_format == "console":
                console.success(f"Report saved: {written}")

    except (ConfImpactError, OSError) as e:
        console.error(f"Error: {e}")
        sys.exit(1)

    # The report is already out; a history failure does not fail the run.
    if save_name or result.changes:
        entry = build_entry(result, save_name)
        try:
            store.append(entry)
        except HistoryError as e:
            console.warning(f"History not saved: {e}")
        else:
            if save_name and output_format == "console":
                console.success(f"Saved to history as '{entry.name}'")


if __name__ == "__main__":
    main()
