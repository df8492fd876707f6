"""
Error Types

Exception hierarchy for AppConfig deployments. Every error carries a code,
a category, a severity, the resources involved and a hint for the user.
"""

from typing import Optional, Dict, Any, List
from dataclasses import dataclass
from enum import Enum


class ErrorSeverity(Enum):
    """How badly an error affects the current command."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(Enum):
    """Which part of a deployment an error came from."""

    RESOLUTION = "resolution"
    CONTENT = "content"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"
    APPCONFIG_API = "appconfig_api"
    DEPLOYMENT = "deployment"
    USER_INTERACTION = "user_interaction"
    NETWORK = "network"


@dataclass
class ErrorContext:
    """AppConfig resources and local files an error refers to."""

    application: Optional[str] = None
    configuration_profile: Optional[str] = None
    environment: Optional[str] = None
    resource_type: Optional[str] = None
    resource_name: Optional[str] = None
    file_path: Optional[str] = None
    line_number: Optional[int] = None
    operation: Optional[str] = None
    additional_info: Optional[Dict[str, Any]] = None


class DeploymentSystemError(Exception):
    """Base class for every error the tool reports to the user."""

    def __init__(
        self,
        message: str,
        error_code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.remediation = remediation or ""
        self.cause = cause

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary representation."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "context": {
                "application": self.context.application,
                "configuration_profile": self.context.configuration_profile,
                "environment": self.context.environment,
                "resource_type": self.context.resource_type,
                "resource_name": self.context.resource_name,
                "file_path": self.context.file_path,
                "line_number": self.context.line_number,
                "operation": self.context.operation,
                "additional_info": self.context.additional_info,
            },
            "remediation": self.remediation,
            "cause": str(self.cause) if self.cause else None,
        }


class ResourceNotFoundError(DeploymentSystemError):
    """A resource name matched nothing in its scope."""

    def __init__(
        self,
        resource_type: str,
        name: str,
        error_code: str = "RESOURCE_NOT_FOUND",
        remediation: Optional[str] = None,
    ):
        self.resource_type = resource_type
        self.name = name
        super().__init__(
            message=f"{resource_type} not found: {name}",
            error_code=error_code,
            category=ErrorCategory.RESOLUTION,
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(resource_type=resource_type, resource_name=name),
            remediation=remediation
            or f"Check that the {resource_type} '{name}' exists in this region "
            "(names are case-sensitive)",
        )


class AmbiguousResourceError(DeploymentSystemError):
    """A resource name matched more than one resource in its scope."""

    def __init__(
        self,
        resource_type: str,
        name: str,
        candidate_ids: List[str],
        error_code: str = "RESOURCE_AMBIGUOUS",
    ):
        self.resource_type = resource_type
        self.name = name
        self.candidate_ids = list(candidate_ids)
        super().__init__(
            message=(
                f"multiple {resource_type}s found with name: {name} "
                f"(ids: {', '.join(self.candidate_ids)})"
            ),
            error_code=error_code,
            category=ErrorCategory.RESOLUTION,
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(
                resource_type=resource_type,
                resource_name=name,
                additional_info={"candidate_ids": self.candidate_ids},
            ),
            remediation=f"Rename the duplicate {resource_type}s so the name is unique",
        )


class ParseError(DeploymentSystemError):
    """Configuration content could not be parsed in its declared format."""

    def __init__(
        self,
        format: str,
        detail: str,
        line_number: Optional[int] = None,
        column: Optional[int] = None,
        cause: Optional[Exception] = None,
    ):
        self.format = format
        self.detail = detail
        self.column = column
        super().__init__(
            message=f"invalid {format.upper()}: {detail}",
            error_code="CONTENT_PARSE_FAILED",
            category=ErrorCategory.CONTENT,
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(
                line_number=line_number,
                additional_info={"format": format, "column": column},
            ),
            remediation=f"Fix the {format.upper()} syntax in the data file",
            cause=cause,
        )


class ValidationError(DeploymentSystemError):
    """Errors related to validation failures, local or remote."""

    def __init__(
        self,
        message: str,
        error_code: str = "VALIDATION_ERROR",
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.VALIDATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            remediation=remediation,
            cause=cause,
        )


class ConfigurationError(DeploymentSystemError):
    """Errors related to configuration issues."""

    def __init__(
        self,
        message: str,
        error_code: str = "CONFIGURATION_ERROR",
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            remediation=remediation,
            cause=cause,
        )


class AppConfigAPIError(DeploymentSystemError):
    """Non-transient failures reported by the AppConfig API."""

    def __init__(
        self,
        message: str,
        error_code: str = "APPCONFIG_API_ERROR",
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.APPCONFIG_API,
            severity=ErrorSeverity.HIGH,
            context=context,
            remediation=remediation,
            cause=cause,
        )


class TransientAPIError(AppConfigAPIError):
    """Throttling, server-side or connection failures that may succeed on retry."""

    def __init__(
        self,
        message: str,
        error_code: str = "TEMPORARY_FAILURE",
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            context=context,
            remediation=remediation or "Wait a moment and try again",
            cause=cause,
        )
        self.category = ErrorCategory.NETWORK
        self.severity = ErrorSeverity.MEDIUM


class DeploymentError(DeploymentSystemError):
    """Errors related to deployment operations."""

    def __init__(
        self,
        message: str,
        error_code: str = "DEPLOYMENT_ERROR",
        context: Optional[ErrorContext] = None,
        remediation: Optional[str] = None,
        cause: Optional[Exception] = None,
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            category=ErrorCategory.DEPLOYMENT,
            severity=ErrorSeverity.HIGH,
            context=context,
            remediation=remediation,
            cause=cause,
        )


class ConflictError(DeploymentError):
    """A deployment is already in progress for the application/environment."""

    def __init__(
        self,
        deployment_number: int,
        state: str,
        started_at: Optional[Any] = None,
        context: Optional[ErrorContext] = None,
    ):
        self.deployment_number = deployment_number
        self.state = state
        self.started_at = started_at
        started = f", started {started_at}" if started_at else ""
        super().__init__(
            message=(
                f"deployment already in progress: "
                f"deployment #{deployment_number} is {state}{started}"
            ),
            error_code=ErrorCodes.DEPLOYMENT_IN_PROGRESS,
            context=context,
            remediation=(
                "Wait for the current deployment to finish, or stop it "
                "with the rollback command"
            ),
        )


class DeploymentTimeoutError(DeploymentError):
    """Waiting for a deployment exceeded its time budget."""

    def __init__(
        self,
        timeout: float,
        last_observed_state: Optional[str] = None,
        deployment_number: Optional[int] = None,
    ):
        self.timeout = timeout
        self.last_observed_state = last_observed_state
        self.deployment_number = deployment_number
        observed = (
            f" (last observed state: {last_observed_state})"
            if last_observed_state
            else ""
        )
        super().__init__(
            message=f"deployment timed out after {timeout:g}s{observed}",
            error_code=ErrorCodes.DEPLOYMENT_TIMEOUT,
            remediation=(
                "The deployment keeps running remotely; check it with the "
                "status command or raise --timeout"
            ),
        )


class UserDeclinedError(DeploymentSystemError):
    """The user answered no to a confirmation prompt."""

    def __init__(self, message: str = "operation declined by user"):
        super().__init__(
            message=message,
            error_code=ErrorCodes.USER_DECLINED,
            category=ErrorCategory.USER_INTERACTION,
            severity=ErrorSeverity.LOW,
        )


class InteractiveUnavailableError(DeploymentSystemError):
    """Confirmation was required but no interactive terminal is attached."""

    def __init__(self, message: str = "interactive mode requires a TTY"):
        super().__init__(
            message=message,
            error_code=ErrorCodes.NO_TTY,
            category=ErrorCategory.USER_INTERACTION,
            severity=ErrorSeverity.MEDIUM,
            remediation="Use --yes to skip confirmation",
        )


class NoOngoingDeploymentError(DeploymentError):
    """There is no DEPLOYING or BAKING deployment to stop."""

    def __init__(self, message: str = "no ongoing deployment found"):
        super().__init__(
            message=message,
            error_code=ErrorCodes.NO_ONGOING_DEPLOYMENT,
            remediation="Only deployments in DEPLOYING or BAKING state can be stopped",
        )
        self.severity = ErrorSeverity.MEDIUM


# Predefined error codes and messages
class ErrorCodes:
    """Common error codes and their default messages."""

    # Resolution Errors
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_AMBIGUOUS = "RESOURCE_AMBIGUOUS"

    # Content Errors
    CONTENT_PARSE_FAILED = "CONTENT_PARSE_FAILED"
    CONTENT_TOO_LARGE = "CONTENT_TOO_LARGE"
    UNSUPPORTED_CONTENT_TYPE = "UNSUPPORTED_CONTENT_TYPE"

    # Configuration Errors
    CONFIG_FILE_NOT_FOUND = "CONFIG_FILE_NOT_FOUND"
    CONFIG_INVALID_FORMAT = "CONFIG_INVALID_FORMAT"
    CONFIG_MISSING_REQUIRED_FIELD = "CONFIG_MISSING_REQUIRED_FIELD"
    CONFIG_FILE_EXISTS = "CONFIG_FILE_EXISTS"
    DATA_FILE_NOT_FOUND = "DATA_FILE_NOT_FOUND"
    REGION_NOT_CONFIGURED = "REGION_NOT_CONFIGURED"

    # AppConfig API Errors
    APPCONFIG_API_ERROR = "APPCONFIG_API_ERROR"
    APPCONFIG_ACCESS_DENIED = "APPCONFIG_ACCESS_DENIED"
    APPCONFIG_THROTTLED = "APPCONFIG_THROTTLED"
    APPCONFIG_UNAVAILABLE = "APPCONFIG_UNAVAILABLE"
    REMOTE_VALIDATION_FAILED = "REMOTE_VALIDATION_FAILED"
    TEMPORARY_FAILURE = "TEMPORARY_FAILURE"

    # Deployment Errors
    DEPLOYMENT_IN_PROGRESS = "DEPLOYMENT_IN_PROGRESS"
    DEPLOYMENT_TIMEOUT = "DEPLOYMENT_TIMEOUT"
    DEPLOYMENT_ROLLED_BACK = "DEPLOYMENT_ROLLED_BACK"
    DEPLOYMENT_UNEXPECTED_STATE = "DEPLOYMENT_UNEXPECTED_STATE"
    DEPLOYMENT_NOT_FOUND = "DEPLOYMENT_NOT_FOUND"
    NO_ONGOING_DEPLOYMENT = "NO_ONGOING_DEPLOYMENT"
    NO_DEPLOYMENT = "NO_DEPLOYMENT"

    # User Interaction Errors
    USER_DECLINED = "USER_DECLINED"
    NO_TTY = "NO_TTY"


class ErrorMessages:
    """Default error messages and remediation steps."""

    MESSAGES = {
        ErrorCodes.RESOURCE_NOT_FOUND: {
            "message": "AppConfig resource not found",
            "remediation": "Check the resource name in the config file and the region",
        },
        ErrorCodes.CONTENT_TOO_LARGE: {
            "message": "Configuration data exceeds the 2MB limit",
            "remediation": "Reduce the size of the data file",
        },
        ErrorCodes.CONFIG_FILE_NOT_FOUND: {
            "message": "Configuration file not found",
            "remediation": "Run the init command or pass --config with the correct path",
        },
        ErrorCodes.REGION_NOT_CONFIGURED: {
            "message": "AWS region is not configured",
            "remediation": "Set region in the config file, pass --region, or export AWS_REGION",
        },
        ErrorCodes.APPCONFIG_ACCESS_DENIED: {
            "message": "Access denied by AWS AppConfig",
            "remediation": (
                "Ensure your IAM user/role has the necessary AppConfig permissions. "
                "See https://docs.aws.amazon.com/appconfig/latest/userguide/security-iam.html"
            ),
        },
        ErrorCodes.APPCONFIG_THROTTLED: {
            "message": "Rate limit exceeded",
            "remediation": "Please wait a moment and try again",
        },
        ErrorCodes.DEPLOYMENT_IN_PROGRESS: {
            "message": "Another deployment is in progress",
            "remediation": "Wait for it to finish or stop it with the rollback command",
        },
    }

    @classmethod
    def get_message(cls, error_code: str) -> str:
        """Get default message for error code."""
        return cls.MESSAGES.get(error_code, {}).get("message", "Unknown error")

    @classmethod
    def get_remediation(cls, error_code: str) -> str:
        """Get default remediation for error code."""
        return cls.MESSAGES.get(error_code, {}).get(
            "remediation", "No remediation available"
        )
