"""Test lifecycle engine.

Schedules tests over a pool of worker threads, runs each attempt through
before-each, body and after-each, and classifies the results.
"""

from .models import RunStats, Stage, StageResult, Test, TestProperties, TestResult
from .outcomes import Outcome, Summary, classify, exit_status, fail, summarize
from .scheduler import WorkQueue
from .pipeline import HookPipeline
from .controller import RunController, RunState
from .loader import load_tests
from .runner import RunReport, Runner, run


__all__ = [
    "HookPipeline",
    "Outcome",
    "RunController",
    "RunReport",
    "RunState",
    "RunStats",
    "Runner",
    "Stage",
    "StageResult",
    "Summary",
    "Test",
    "TestProperties",
    "TestResult",
    "WorkQueue",
    "classify",
    "exit_status",
    "fail",
    "load_tests",
    "run",
    "summarize",
]
