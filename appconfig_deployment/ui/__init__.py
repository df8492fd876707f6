"""
User Interface

Prompts, progress reporting and console rendering.
"""

from .display import (
    format_deployment_status,
    format_diff_header,
    format_diff_summary,
    format_duration,
)
from .prompt import Prompter, TerminalPrompter, is_affirmative
from .reporter import ConsoleReporter, ProgressReporter, SilentReporter

__all__ = [
    "Prompter",
    "TerminalPrompter",
    "is_affirmative",
    "ProgressReporter",
    "ConsoleReporter",
    "SilentReporter",
    "format_deployment_status",
    "format_diff_header",
    "format_diff_summary",
    "format_duration",
]
