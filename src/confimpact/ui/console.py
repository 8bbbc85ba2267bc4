"""Rich-powered console output for confimpact."""

from __future__ import annotations

from datetime import datetime

from rich.console import Console as RichConsole
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from confimpact import __version__
from confimpact.config import ReportConfig
from confimpact.diff.models import ChangeKind, ChangeRecord
from confimpact.history.models import HistoryEntry, HistoryInsight
from confimpact.report.summary import group_by_level, summarize
from confimpact.risk.models import ImpactRecord, RiskLevel
from confimpact.risk.rules import display
from confimpact.schema.validator import Severity, ValidationIssue

LEVEL_STYLES: dict[RiskLevel, tuple[str, str, str]] = {
    # level: (icon, label, color)
    RiskLevel.CRITICAL: ("⚠", "CRITICAL", "red"),
    RiskLevel.HIGH: ("◆", "High", "yellow"),
    RiskLevel.MEDIUM: ("●", "Medium", "blue"),
    RiskLevel.LOW: ("○", "Low", "green"),
}

_KIND_STYLES: dict[ChangeKind, tuple[str, str, str]] = {
    ChangeKind.ADDED: ("✚", "Added", "green"),
    ChangeKind.MODIFIED: ("⟳", "Modified", "yellow"),
    ChangeKind.REMOVED: ("✖", "Removed", "red"),
}


class Console:
    """Terminal output for comparison reports using Rich."""

    def __init__(self, report: ReportConfig | None = None) -> None:
        self.console = RichConsole(highlight=False)
        self.err_console = RichConsole(stderr=True, highlight=False)
        self.report = report or ReportConfig()

    def banner(self) -> None:
        self.console.print(
            Panel(
                f"[bold cyan]confimpact[/bold cyan] [dim]v{__version__}[/dim]\n"
                "[dim]Configuration change impact analysis[/dim]",
                border_style="cyan",
                padding=(0, 2),
            )
        )

    def success(self, message: str) -> None:
        self.console.print(f"[green]✓[/green] {message}")

    def error(self, message: str) -> None:
        self.err_console.print(f"[red]✗[/red] {escape(message)}")

    def warning(self, message: str) -> None:
        # stderr, so --format=json output stays parseable
        self.err_console.print(f"[yellow]![/yellow] {escape(message)}")

    def _value(self, value) -> str:
        return escape(display(value, self.report.value_width))

    def show_changes(self, changes: list[ChangeRecord]) -> None:
        """Changes grouped by kind, at most report.max_listed per group."""
        self.console.print()
        self.console.print("[bold]━━━ Detected changes ━━━[/bold]")
        self.console.print()

        if not changes:
            self.console.print("  [green]No changes detected[/green]")
            return

        limit = self.report.max_listed
        for kind in (ChangeKind.ADDED, ChangeKind.MODIFIED, ChangeKind.REMOVED):
            items = [c for c in changes if c.kind == kind]
            if not items:
                continue
            icon, label, color = _KIND_STYLES[kind]
            self.console.print(f"[{color}]{icon} {label}: {len(items)}[/{color}]")
            for c in items[:limit]:
                self.console.print(f"  [dim]{escape(c.path)}[/dim]")
                if kind == ChangeKind.MODIFIED:
                    self.console.print(
                        f"    [red]{self._value(c.old_value)}[/red] [dim]→[/dim] "
                        f"[green]{self._value(c.new_value)}[/green]"
                    )
                else:
                    self.console.print(f"    [{color}]{self._value(c.value)}[/{color}]")
            if len(items) > limit:
                self.console.print(f"  [dim]... and {len(items) - limit} more[/dim]")
            self.console.print()

    def show_impacts(self, impacts: list[ImpactRecord]) -> None:
        """Impacts grouped by level, most severe first."""
        self.console.print()
        self.console.print("[bold]━━━ Impact analysis ━━━[/bold]")

        if not impacts:
            self.console.print()
            self.console.print("  [green]✓ No risky changes detected[/green]")
            self.console.print()
            return

        for level, items in group_by_level(impacts).items():
            if not items:
                continue
            icon, label, color = LEVEL_STYLES[level]
            self.console.print()
            self.console.print(f"[{color}]{icon} {label}: {len(items)}[/{color}]")
            for impact in items:
                self.console.print()
                self.console.print(f"  [bold]{escape(impact.title)}[/bold]")
                self.console.print(f"  [dim]Path: {escape(impact.path)}[/dim]")
                if impact.description:
                    self.console.print(f"  {escape(impact.description)}")
                if impact.recommendation:
                    self.console.print(f"  [cyan]💡 {escape(impact.recommendation)}[/cyan]")
        self.console.print()

    def show_summary(self, changes: list[ChangeRecord], impacts: list[ImpactRecord]) -> None:
        summary = summarize(changes, impacts)
        table = Table(title="Summary", border_style="cyan", show_header=False)
        table.add_column("Metric", style="bold")
        table.add_column("Count", justify="right")

        table.add_row("Total changes", str(summary.total))
        table.add_row("[green]+ added[/green]", str(summary.added))
        table.add_row("[yellow]~ modified[/yellow]", str(summary.modified))
        table.add_row("[red]- removed[/red]", str(summary.removed))
        table.add_section()
        for level in (RiskLevel.CRITICAL, RiskLevel.HIGH, RiskLevel.MEDIUM, RiskLevel.LOW):
            count = getattr(summary, level.value)
            if count:
                icon, label, color = LEVEL_STYLES[level]
                table.add_row(f"[{color}]{icon} {label}[/{color}]", str(count))

        self.console.print(table)
        _, label, color = LEVEL_STYLES[summary.overall_risk]
        self.console.print(f"  Overall risk: [bold {color}]{label}[/bold {color}]")
        self.console.print()

    def show_validation_issues(self, issues: list[ValidationIssue]) -> None:
        if not issues:
            self.console.print()
            self.console.print("  [green]✓ Schema validation passed[/green]")
            self.console.print()
            return

        self.console.print()
        self.console.print("[bold]━━━ Schema validation ━━━[/bold]")
        self.console.print()
        for issue in issues:
            symbol, color = ("✗", "red") if issue.severity == Severity.ERROR else ("⚠", "yellow")
            source = f"{escape(issue.source)}: " if issue.source else ""
            self.console.print(f"[{color}]{symbol} {source}{escape(issue.path)}[/{color}]")
            self.console.print(f"  {escape(issue.message)}")
        self.console.print()

    def show_history(self, entries: list[HistoryEntry]) -> None:
        if not entries:
            self.console.print()
            self.console.print("  [dim]History is empty[/dim]")
            self.console.print()
            return

        self.console.print()
        self.console.print("[bold]━━━ Comparison history ━━━[/bold]")
        self.console.print()
        for idx, entry in enumerate(entries, start=1):
            _, label, color = LEVEL_STYLES[entry.risk_level]
            self.console.print(f"[bold]{idx}. {escape(entry.name or 'Untitled')}[/bold]")
            self.console.print(f"   [dim]{_format_timestamp(entry.timestamp)}[/dim]")
            self.console.print(f"   [dim]{escape(entry.file_a)} → {escape(entry.file_b)}[/dim]")
            self.console.print(
                f"   [cyan]Changes: {entry.summary.total} | Risk: [/cyan]"
                f"[{color}]{label}[/{color}]"
            )
            self.console.print()

    def show_insights(self, insights: list[HistoryInsight]) -> None:
        if not insights:
            return

        self.console.print()
        self.console.print("[bold]━━━ History insights ━━━[/bold]")
        self.console.print()
        for insight in insights:
            if insight.kind == "frequent_changes":
                self.console.print("  [cyan]Frequently changed fields:[/cyan]")
                for pf in insight.paths:
                    self.console.print(f"    • {escape(pf.path)} ({pf.count}x)")
        self.console.print()


def _format_timestamp(value: str) -> str:
    try:
        return datetime.fromisoformat(value).strftime("%Y-%m-%d %H:%M:%S %Z").strip()
    except ValueError:
        return value
