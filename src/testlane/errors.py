"""Exceptions raised by testlane itself.

Errors raised inside a test's stages are never wrapped in these; they are
captured as data on the TestResult.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar


T = TypeVar("T")


class TestlaneError(Exception):
    """Base class for runner-level errors."""

    __test__ = False  # Prevent pytest from collecting this as a test class


class PolicyError(TestlaneError):
    """A trusted policy hook raised. Fatal for the whole run."""

    def __init__(self, hook: str, cause: BaseException) -> None:
        self.hook = hook
        self.cause = cause
        super().__init__(f"policy hook '{hook}' raised {type(cause).__name__}: {cause}")


class ConfigError(TestlaneError):
    """Invalid settings or an unloadable policy module."""


class LoaderError(TestlaneError):
    """Tests could not be loaded from the given path."""


def call_hook(hook: str, fn: Callable[..., T], *args: Any) -> T:
    """Call a trusted hook, turning anything it raises into a PolicyError."""
    try:
        return fn(*args)
    except Exception as e:
        raise PolicyError(hook, e) from e
