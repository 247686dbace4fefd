"""CLI entry point for testlane.

Usage::

    testlane run tests/ --threads 4
    testlane run --policy policy.py -k login --verbose
    TESTLANE_THREAD_COUNT=8 testlane run
"""

from __future__ import annotations

import logging
from dataclasses import replace
from functools import partial

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from testlane.config import build_policy, default_exit, load_settings
from testlane.errors import TestlaneError
from testlane.reports.console import finalize
from testlane.testing.runner import Runner
from testlane.tracing import init_tracing
from testlane.version import __version__


EXIT_RUNNER_ERROR = 2

console = Console()
logger = logging.getLogger("testlane")


def _setup_logging(verbose: bool) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True, show_path=False)],
    )


@click.group()
@click.version_option(version=__version__, prog_name="testlane")
def main() -> None:
    """testlane - run tests across a pool of worker threads."""


@main.command()
@click.argument("test_path", required=False)
@click.option("--threads", "-t", "thread_count", type=int, default=None, help="Number of worker threads.")
@click.option(
    "--policy",
    "-p",
    type=click.Path(dir_okay=False),
    default=None,
    help="Python file overriding policy hooks.",
)
@click.option("--match", "-k", default=None, help="Only run tests whose name contains this.")
@click.option(
    "--trace-output",
    type=click.Path(dir_okay=False),
    default=None,
    help="Write one OpenTelemetry span per attempt to this JSONL file.",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging and failure details.")
def run(
    test_path: str | None,
    thread_count: int | None,
    policy: str | None,
    match: str | None,
    trace_output: str | None,
    verbose: bool,
) -> None:
    """Load tests from TEST_PATH and run them."""
    try:
        settings = load_settings(
            thread_count=thread_count,
            test_path=test_path,
            policy=policy,
            match=match,
            trace_output=trace_output,
            verbose=verbose or None,
        )
        _setup_logging(settings.verbose)

        run_policy = build_policy(settings)
        if settings.verbose and run_policy.exit is default_exit:
            run_policy = replace(run_policy, exit=partial(finalize, console=console, verbosity=1))

        if settings.trace_output:
            init_tracing(output_path=settings.trace_output)

        logger.debug(
            "Running %s with %d thread(s)", run_policy.test_path, run_policy.thread_count
        )
        runner = Runner(
            run_policy,
            match=settings.match,
            enable_tracing=settings.trace_output is not None,
        )
        report = runner.run()
    except TestlaneError as exc:
        console.print(f"[red]testlane:[/red] {escape(str(exc))}")
        raise SystemExit(EXIT_RUNNER_ERROR) from exc

    if report.stopped_early:
        console.print("[yellow]Run stopped early by the stop policy.[/yellow]")
    raise SystemExit(report.status)
