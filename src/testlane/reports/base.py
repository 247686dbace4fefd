"""Reporter interface and the default logging reporter."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from testlane.testing.outcomes import classify


if TYPE_CHECKING:
    from testlane.testing.models import Stage, StageResult, TestProperties, TestResult


class Reporter:
    """Sink for per-test narration.

    Every callback defaults to a no-op. A reporter may be shared between
    worker threads, so implementations must tolerate concurrent calls.
    """

    def test_started(self, thread_id: int, properties: TestProperties) -> None:
        """Called before the before-each stage of an attempt."""

    def stage_finished(
        self,
        thread_id: int,
        properties: TestProperties,
        stage: Stage,
        stage_result: StageResult,
    ) -> None:
        """Called after each stage with its captured result."""

    def narrate(self, thread_id: int, properties: TestProperties, message: str) -> None:
        """Free-form message emitted by test code through ``narrate()``."""

    def test_finished(self, thread_id: int, result: TestResult) -> None:
        """Called once the attempt's result is built."""


class LoggingReporter(Reporter):
    """Writes narration through the ``logging`` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger("testlane.report")

    def test_started(self, thread_id: int, properties: TestProperties) -> None:
        self.logger.debug("[%d] %s started", thread_id, properties.full_name)

    def stage_finished(
        self,
        thread_id: int,
        properties: TestProperties,
        stage: Stage,
        stage_result: StageResult,
    ) -> None:
        if stage_result.error is not None:
            self.logger.debug(
                "[%d] %s %s raised %s: %s",
                thread_id,
                properties.full_name,
                stage.value,
                type(stage_result.error).__name__,
                stage_result.error,
            )

    def narrate(self, thread_id: int, properties: TestProperties, message: str) -> None:
        self.logger.info("[%d] %s: %s", thread_id, properties.full_name, message)

    def test_finished(self, thread_id: int, result: TestResult) -> None:
        self.logger.info(
            "[%d] %s %s (%.1fms)",
            thread_id,
            result.test_properties.full_name,
            classify(result).value.upper(),
            result.duration_ms,
        )
