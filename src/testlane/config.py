"""Run configuration: the policy object and settings.

The policy holds every pluggable hook with its default. Settings come from
``TESTLANE_*`` environment variables or explicit overrides (the CLI), and
take precedence over values set by a policy module.
"""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from testlane.errors import ConfigError, LoaderError
from testlane.reports.base import LoggingReporter, Reporter
from testlane.reports.console import finalize
from testlane.testing.loader import load_module
from testlane.testing.models import RunStats, Test, TestProperties, TestResult
from testlane.testing.pipeline import ProvideHook, ReportHook
from testlane.testing.scheduler import WorkQueue


logger = logging.getLogger(__name__)

ScheduleHook = Callable[[list[Test]], Sequence[Test]]
AnalyzeHook = Callable[[Test, TestResult, WorkQueue], None]
StopHook = Callable[[TestResult], bool]
ExitHook = Callable[[list[TestResult], RunStats], int]


def default_schedule(tests: list[Test]) -> list[Test]:
    """Run tests in the order they were loaded."""
    return tests


def default_analyze(test: Test, result: TestResult, queue: WorkQueue) -> None:
    """Never retry."""


def default_stop(result: TestResult) -> bool:
    """Never abort the run."""
    return False


def default_provide(thread_id: int, test_properties: TestProperties) -> dict[str, Any]:
    return {}


def default_exit(results: list[TestResult], stats: RunStats) -> int:
    return finalize(results, stats)


default_reporter = LoggingReporter()


def default_report(thread_id: int, test_properties: TestProperties) -> Reporter:
    """Every attempt narrates to the same shared reporter."""
    return default_reporter


HOOK_NAMES = ("schedule", "analyze", "stop", "provide", "exit", "report")


@dataclass(frozen=True)
class Policy:
    """Pluggable hooks configuring a run.

    Attributes
    ----------
    schedule
        Builds the initial work order from the prepared tests.
    analyze
        Called after each attempt with the test, its result and the work
        queue; may ``queue.requeue(test)`` to retry. Retry limits are the
        hook's responsibility: a hook that always requeues never finishes.
    stop
        Returning True for any result stops dispatching new work.
    provide
        Builds the context handed to each stage of one attempt.
    exit
        Computes the process exit status from all results and run stats.
    report
        Returns the reporter narrating one attempt.
    thread_count
        Number of worker threads.
    test_path
        Root directory handed to the loader.
    """

    schedule: ScheduleHook = default_schedule
    analyze: AnalyzeHook = default_analyze
    stop: StopHook = default_stop
    provide: ProvideHook = default_provide
    exit: ExitHook = default_exit
    report: ReportHook = default_report
    thread_count: int = 1
    test_path: str = "test"

    def __post_init__(self) -> None:
        if not isinstance(self.thread_count, int) or self.thread_count < 1:
            msg = f"thread_count must be a positive integer, got {self.thread_count!r}"
            raise ConfigError(msg)
        if not isinstance(self.test_path, str):
            msg = f"test_path must be a string, got {self.test_path!r}"
            raise ConfigError(msg)
        for name in HOOK_NAMES:
            if not callable(getattr(self, name)):
                msg = f"policy hook '{name}' must be callable"
                raise ConfigError(msg)


def load_policy(path: Path | str, base: Policy | None = None) -> Policy:
    """Override ``base`` with the policy fields a Python file defines.

    Any module-level attribute named like a Policy field replaces the
    corresponding default; everything else in the module is ignored.
    """
    path = Path(path)
    if not path.is_file():
        msg = f"Policy module not found: {path}"
        raise ConfigError(msg)

    try:
        module = load_module(path, f"testlane_policy_{path.stem}")
    except LoaderError as e:
        msg = f"Policy module {path} failed to load: {e}"
        raise ConfigError(msg) from e
    overrides = {
        f.name: getattr(module, f.name)
        for f in fields(Policy)
        if hasattr(module, f.name) and not inspect.ismodule(getattr(module, f.name))
    }
    logger.debug("Policy %s overrides %s", path, sorted(overrides))
    return replace(base or Policy(), **overrides)


class RunSettings(BaseSettings):
    """Settings for a run.

    Loads from environment variables automatically:
        TESTLANE_THREAD_COUNT, TESTLANE_TEST_PATH, TESTLANE_POLICY,
        TESTLANE_MATCH, TESTLANE_TRACE_OUTPUT, TESTLANE_VERBOSE

    Unset values leave the policy's own value in place.
    """

    thread_count: int | None = Field(default=None, ge=1, description="Number of worker threads")
    test_path: str | None = Field(default=None, description="Root directory for the loader")
    policy: Path | None = Field(default=None, description="Python file overriding policy hooks")
    match: str | None = Field(default=None, description="Only prepare tests whose full name contains this")
    trace_output: Path | None = Field(default=None, description="JSONL file receiving attempt spans")
    verbose: bool = False

    model_config = SettingsConfigDict(
        extra="forbid",
        env_prefix="TESTLANE_",
    )

    def apply(self, policy: Policy) -> Policy:
        """Return ``policy`` with the explicitly set settings applied."""
        overrides: dict[str, Any] = {}
        if self.thread_count is not None:
            overrides["thread_count"] = self.thread_count
        if self.test_path is not None:
            overrides["test_path"] = self.test_path
        return replace(policy, **overrides) if overrides else policy


def load_settings(**overrides: Any) -> RunSettings:
    """Build settings from the environment, with non-None ``overrides`` on top."""
    try:
        return RunSettings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigError(str(e)) from e


def build_policy(settings: RunSettings) -> Policy:
    """Defaults, then the policy module, then explicit settings."""
    policy = load_policy(settings.policy) if settings.policy else Policy()
    return settings.apply(policy)
