"""
Error Handling

Error taxonomy, AWS error classification, retry logic and error reporting
for the deployment tool.
"""

from .error_types import (
    AmbiguousResourceError,
    AppConfigAPIError,
    ConfigurationError,
    ConflictError,
    DeploymentError,
    DeploymentSystemError,
    DeploymentTimeoutError,
    ErrorCategory,
    ErrorCodes,
    ErrorContext,
    ErrorMessages,
    ErrorSeverity,
    InteractiveUnavailableError,
    NoOngoingDeploymentError,
    ParseError,
    ResourceNotFoundError,
    TransientAPIError,
    UserDeclinedError,
    ValidationError,
)
from .aws_errors import classify_aws_error
from .retry_handler import RetryHandler, RetryPolicies, RetryPolicy, RetryStrategy
from .error_reporter import ErrorReport, ErrorReporter, format_user_error

__all__ = [
    # Error Types
    "DeploymentSystemError",
    "ResourceNotFoundError",
    "AmbiguousResourceError",
    "ParseError",
    "ValidationError",
    "ConfigurationError",
    "AppConfigAPIError",
    "TransientAPIError",
    "DeploymentError",
    "ConflictError",
    "DeploymentTimeoutError",
    "UserDeclinedError",
    "InteractiveUnavailableError",
    "NoOngoingDeploymentError",
    "ErrorContext",
    "ErrorSeverity",
    "ErrorCategory",
    "ErrorCodes",
    "ErrorMessages",
    # AWS
    "classify_aws_error",
    # Retry Handling
    "RetryHandler",
    "RetryPolicy",
    "RetryStrategy",
    "RetryPolicies",
    # Error Reporting
    "ErrorReporter",
    "ErrorReport",
    "format_user_error",
]
