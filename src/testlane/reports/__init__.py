"""Reporters and console output."""

from .base import LoggingReporter, Reporter
from .console import ConsoleReporter, finalize, print_summary


__all__ = [
    "ConsoleReporter",
    "LoggingReporter",
    "Reporter",
    "finalize",
    "print_summary",
]
