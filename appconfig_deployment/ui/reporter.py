"""
Progress Reporting

Progress, success and warning messages for long-running commands.
"""

import sys
from abc import ABC, abstractmethod
from typing import Optional, TextIO


class ProgressReporter(ABC):
    @abstractmethod
    def progress(self, message: str) -> None:
        pass

    @abstractmethod
    def success(self, message: str) -> None:
        pass

    @abstractmethod
    def warning(self, message: str) -> None:
        pass


class ConsoleReporter(ProgressReporter):
    """Writes decorated messages to stderr so stdout stays machine-readable."""

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream or sys.stderr

    def progress(self, message: str) -> None:
        print(f"⏳ {message}", file=self.stream)

    def success(self, message: str) -> None:
        print(f"✓ {message}", file=self.stream)

    def warning(self, message: str) -> None:
        print(f"⚠ {message}", file=self.stream)


class SilentReporter(ProgressReporter):
    """Drops all progress output (``--silent``)."""

    def progress(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warning(self, message: str) -> None:
        pass
