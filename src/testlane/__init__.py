"""testlane - multi-threaded test lifecycle engine with pluggable policies."""

from .testing import (
    Outcome,
    Runner,
    RunReport,
    RunStats,
    Test,
    TestProperties,
    TestResult,
    WorkQueue,
    classify,
    fail,
    run,
    summarize,
)
from .config import Policy, RunSettings, load_policy
from .context import current_attempt, narrate
from .errors import ConfigError, LoaderError, PolicyError, TestlaneError
from .reports import ConsoleReporter, LoggingReporter, Reporter
from .tracing import init_tracing, trace_step
from .version import __version__


__all__ = [
    # Engine
    "Runner",
    "RunReport",
    "RunStats",
    "Test",
    "TestProperties",
    "TestResult",
    "WorkQueue",
    "run",
    # Outcomes
    "Outcome",
    "classify",
    "fail",
    "summarize",
    # Configuration
    "Policy",
    "RunSettings",
    "load_policy",
    # Attempt context
    "current_attempt",
    "narrate",
    # Errors
    "ConfigError",
    "LoaderError",
    "PolicyError",
    "TestlaneError",
    # Reporting
    "ConsoleReporter",
    "LoggingReporter",
    "Reporter",
    # Tracing
    "init_tracing",
    "trace_step",
]
