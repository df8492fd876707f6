"""
Error Reporter

Logs deployment errors at a level derived from their severity and renders
errors for the terminal.
"""

import logging
import traceback
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .error_types import DeploymentSystemError, ErrorSeverity

logger = logging.getLogger(__name__)

SEVERITY_LOG_LEVELS = {
    ErrorSeverity.CRITICAL: logging.CRITICAL,
    ErrorSeverity.HIGH: logging.ERROR,
    ErrorSeverity.MEDIUM: logging.WARNING,
    ErrorSeverity.LOW: logging.INFO,
}


def _context_fields(error: DeploymentSystemError) -> List[Tuple[str, str]]:
    """Label/value pairs for the AppConfig resources an error refers to."""
    context = error.context
    fields = []
    if context.application:
        fields.append(("Application", context.application))
    if context.configuration_profile:
        fields.append(("Configuration profile", context.configuration_profile))
    if context.environment:
        fields.append(("Environment", context.environment))
    if context.file_path:
        location = context.file_path
        if context.line_number:
            location += f":{context.line_number}"
        fields.append(("File", location))
    return fields


@dataclass
class ErrorReport:
    """One error seen while running a command."""

    error: Exception
    operation: Optional[str] = None

    @property
    def traceback(self) -> str:
        return "".join(
            traceback.format_exception(
                type(self.error), self.error, self.error.__traceback__
            )
        )


class ErrorReporter:
    """Logs errors at a level derived from their severity."""

    def __init__(self, log_level: int = logging.ERROR, include_traceback: bool = True):
        # Level for exceptions outside the deployment error taxonomy
        self.log_level = log_level
        self.include_traceback = include_traceback

    def report_error(
        self,
        error: Exception,
        operation: Optional[str] = None,
    ) -> ErrorReport:
        report = ErrorReport(error=error, operation=operation)

        level = self.log_level
        if isinstance(error, DeploymentSystemError):
            level = SEVERITY_LOG_LEVELS.get(error.severity, self.log_level)
        logger.log(level, self._log_message(report))
        if self.include_traceback:
            logger.debug(f"Traceback:\n{report.traceback}")

        return report

    def _log_message(self, report: ErrorReport) -> str:
        error = report.error
        parts = []
        if report.operation:
            parts.append(f"Operation: {report.operation}")

        if not isinstance(error, DeploymentSystemError):
            parts.append(f"{type(error).__name__}: {error}")
            return " | ".join(parts)

        parts.append(f"[{error.error_code}] {error.message}")
        fields = _context_fields(error)
        if fields:
            parts.append(
                "Context: " + ", ".join(f"{label}: {value}" for label, value in fields)
            )
        if error.remediation:
            parts.append(f"Remediation: {error.remediation}")
        return " | ".join(parts)


def format_user_error(error: Exception) -> str:
    """Format an error message for end users.

    The first line is always ``Error: <message>``; context and remediation
    follow on indented lines when present.
    """
    if not isinstance(error, DeploymentSystemError):
        return f"Error: {error}"

    lines = [f"Error: {error.message}"]
    lines.extend(f"  {label}: {value}" for label, value in _context_fields(error))
    if error.remediation:
        lines.append(f"  Hint: {error.remediation}")
    return "\n".join(lines)
