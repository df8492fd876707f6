"""
AWS Error Classification

Maps botocore exceptions onto the deployment system's error taxonomy so that
callers only ever handle ``DeploymentSystemError`` subclasses.
"""

import logging
from typing import Optional

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectionClosedError,
    EndpointConnectionError,
    ReadTimeoutError,
)

from .error_types import (
    AppConfigAPIError,
    DeploymentSystemError,
    ErrorCodes,
    ErrorContext,
    ErrorMessages,
    TransientAPIError,
    ValidationError,
)

logger = logging.getLogger(__name__)

ACCESS_DENIED_CODES = frozenset(
    {"AccessDeniedException", "UnauthorizedException", "ForbiddenException"}
)

THROTTLING_CODES = frozenset(
    {
        "ThrottlingException",
        "ThrottledException",
        "TooManyRequestsException",
        "RequestLimitExceeded",
    }
)

SERVER_ERROR_CODES = frozenset(
    {"InternalServerException", "InternalFailure", "ServiceUnavailable"}
)

NOT_FOUND_CODES = frozenset({"ResourceNotFoundException"})


def error_code_of(error: ClientError) -> str:
    """Return the AWS error code carried by a ClientError."""
    return error.response.get("Error", {}).get("Code", "")


def is_validation_error(error: Exception) -> bool:
    """Check whether a ClientError is a request rejected as invalid.

    Validator failures arrive as ``BadRequestException`` with the violated
    constraints under ``Details.InvalidConfiguration``.
    """
    return (
        isinstance(error, ClientError)
        and error_code_of(error) == "BadRequestException"
    )


def format_validation_error(error: ClientError) -> str:
    """Render the provider message verbatim, then one line per violation."""
    message = error.response.get("Error", {}).get("Message", str(error))
    violations = error.response.get("Details", {}).get("InvalidConfiguration", [])

    lines = [message]
    for violation in violations:
        constraint = violation.get("Constraint", "")
        location = violation.get("Location", "")
        reason = violation.get("Reason", "")
        value = violation.get("Value", "")
        parts = [p for p in (location, reason or constraint) if p]
        line = "  - " + ": ".join(parts) if parts else "  - " + constraint
        if value:
            line += f" (value: {value})"
        lines.append(line)
    return "\n".join(lines)


def _http_status(error: ClientError) -> int:
    return error.response.get("ResponseMetadata", {}).get("HTTPStatusCode", 0) or 0


def classify_aws_error(
    error: Exception,
    operation: str,
    context: Optional[ErrorContext] = None,
) -> DeploymentSystemError:
    """Translate a botocore exception into a DeploymentSystemError.

    Throttling, 5xx and connection failures become ``TransientAPIError``;
    validator rejections become ``ValidationError``; everything else is an
    ``AppConfigAPIError``.
    """
    if isinstance(error, DeploymentSystemError):
        return error

    context = context or ErrorContext(operation=operation)
    if context.operation is None:
        context.operation = operation

    if isinstance(
        error, (EndpointConnectionError, ConnectionClosedError, ReadTimeoutError)
    ):
        return TransientAPIError(
            f"{operation} failed: {error}",
            error_code=ErrorCodes.APPCONFIG_UNAVAILABLE,
            context=context,
            cause=error,
        )

    if isinstance(error, ClientError):
        code = error_code_of(error)
        message = error.response.get("Error", {}).get("Message", str(error))

        if code in THROTTLING_CODES:
            return TransientAPIError(
                f"{operation} failed: {code}: {message}",
                error_code=ErrorCodes.APPCONFIG_THROTTLED,
                context=context,
                remediation=ErrorMessages.get_remediation(
                    ErrorCodes.APPCONFIG_THROTTLED
                ),
                cause=error,
            )

        if code in SERVER_ERROR_CODES or _http_status(error) >= 500:
            return TransientAPIError(
                f"{operation} failed: {code}: {message}",
                error_code=ErrorCodes.APPCONFIG_UNAVAILABLE,
                context=context,
                cause=error,
            )

        if is_validation_error(error):
            return ValidationError(
                format_validation_error(error),
                error_code=ErrorCodes.REMOTE_VALIDATION_FAILED,
                context=context,
                remediation="Fix the configuration data so it satisfies the profile's validators",
                cause=error,
            )

        if code in ACCESS_DENIED_CODES:
            return AppConfigAPIError(
                f"Access denied for operation: {operation}",
                error_code=ErrorCodes.APPCONFIG_ACCESS_DENIED,
                context=context,
                remediation=(
                    f"Required IAM permission: appconfig:{operation}. "
                    + ErrorMessages.get_remediation(ErrorCodes.APPCONFIG_ACCESS_DENIED)
                ),
                cause=error,
            )

        if code in NOT_FOUND_CODES:
            return AppConfigAPIError(
                f"{operation} failed: {message}",
                error_code=ErrorCodes.RESOURCE_NOT_FOUND,
                context=context,
                remediation=(
                    f"Resource not found during {operation} operation. Please verify "
                    "the resource exists and you have access to it."
                ),
                cause=error,
            )

        return AppConfigAPIError(
            f"{operation} failed: {code}: {message}",
            context=context,
            cause=error,
        )

    if isinstance(error, (BotoCoreError, ConnectionError)):
        return TransientAPIError(
            f"{operation} failed: {error}",
            context=context,
            cause=error,
        )

    logger.debug(f"Unclassified error during {operation}: {error!r}")
    return AppConfigAPIError(f"{operation} failed: {error}", context=context, cause=error)
