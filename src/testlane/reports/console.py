"""Console output for testlane using Rich."""

from __future__ import annotations

import sys
import threading
from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.traceback import Traceback

import testlane
from testlane.reports.base import Reporter
from testlane.testing.models import RunStats, Stage, TestProperties, TestResult
from testlane.testing.outcomes import Outcome, Summary, classify, summarize


_OUTCOME_CONFIG: dict[Outcome, tuple[str, str, str]] = {
    Outcome.PASSED: ("✓", "green", "PASSED"),
    Outcome.BROKEN: ("!", "yellow", "BROKEN"),
    Outcome.FAILED: ("✗", "red", "FAILED"),
}

_RULE = "-" * 42


class ConsoleReporter(Reporter):
    """Prints one line per finished attempt, safe to share between threads."""

    def __init__(self, console: Console | None = None, verbosity: int = 0) -> None:
        self.console = console or Console(file=sys.__stdout__)
        self.verbosity = verbosity
        self._lock = threading.Lock()

    def narrate(self, thread_id: int, properties: TestProperties, message: str) -> None:
        if self.verbosity < 1:
            return
        with self._lock:
            self.console.print(f"    [dim]\\[{thread_id}] {escape(properties.full_name)}: {escape(message)}[/dim]")

    def test_finished(self, thread_id: int, result: TestResult) -> None:
        outcome = classify(result)
        symbol, color, label = _OUTCOME_CONFIG[outcome]
        retry = f" [dim]attempt {result.attempt}[/dim]" if result.attempt > 1 else ""
        line = (
            f"  [{color}]{symbol}[/{color}] {escape(result.test_properties.full_name)}"
            f" [dim]({result.duration_ms:.1f}ms)[/dim]{retry} [{color}]{label}[/{color}]"
        )
        with self._lock:
            self.console.print(line)
            if outcome is not Outcome.PASSED and self.verbosity >= 1:
                for stage, stage_result in zip(Stage, result.stage_results):
                    if stage_result.error is not None:
                        self.console.print(
                            f"    [{color}]{stage.value}: "
                            f"{escape(type(stage_result.error).__name__)}: {escape(str(stage_result.error))}[/{color}]"
                        )


def _format_error(error: BaseException, show_locals: bool) -> Traceback | str:
    if error.__traceback__:
        return Traceback.from_exception(
            type(error),
            error,
            error.__traceback__,
            suppress=[testlane],
            show_locals=show_locals,
        )
    return escape(f"{type(error).__name__}: {error}")


def print_failures(results: Sequence[TestResult], console: Console, verbosity: int = 0) -> None:
    """Print a panel per stage error of every non-passing result."""
    for result in results:
        outcome = classify(result)
        if outcome is Outcome.PASSED:
            continue
        color = _OUTCOME_CONFIG[outcome][1]
        for stage, stage_result in zip(Stage, result.stage_results):
            if stage_result.error is None:
                continue
            title = escape(f"{result.test_properties.full_name} [{stage.value}, attempt {result.attempt}]")
            console.print(
                Panel(
                    _format_error(stage_result.error, show_locals=verbosity >= 2),
                    title=title,
                    title_align="left",
                    border_style=color,
                    expand=True,
                    padding=(1, 1),
                )
            )


def print_summary(stats: RunStats, summary: Summary, status: int, console: Console | None = None) -> None:
    """Print run counters, the outcome tally and the exit code."""
    console = console or Console(file=sys.__stdout__)
    console.print(_RULE)
    console.print(f"Loaded:    {stats.loaded} tests")
    console.print(f"Prepared:  {stats.prepared} tests")
    console.print(f"Planned:   {stats.planned} tests")
    console.print(f"Executed:  {stats.executed} tests")
    if stats.requeued:
        console.print(f"Requeued:  {stats.requeued} tests")
    console.print(f"[green]Passed:    {summary.passed} tests[/green]")
    console.print(f"[yellow]Broken:    {summary.broken} tests[/yellow]")
    console.print(f"[red]Failed:    {summary.failed} tests[/red]")
    console.print(_RULE)
    console.print(f"Exit code: {status}")
    console.print(_RULE)


def finalize(
    results: Sequence[TestResult],
    stats: RunStats,
    console: Console | None = None,
    verbosity: int = 0,
) -> int:
    """Default ``exit`` hook: summarize, print the report, return the status."""
    console = console or Console(file=sys.__stdout__)
    summary = summarize(results)
    status = summary.status
    if verbosity >= 1:
        print_failures(results, console, verbosity)
    print_summary(stats, summary, status, console)
    return status
