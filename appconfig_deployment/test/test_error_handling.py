"""
Tests for Error Handling

Tests the error taxonomy, AWS error classification, retry logic and error
reporting.
"""

import logging
from unittest.mock import Mock

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from appconfig_deployment.error_handling import (
    AppConfigAPIError,
    ConflictError,
    DeploymentSystemError,
    DeploymentTimeoutError,
    ErrorCategory,
    ErrorCodes,
    ErrorContext,
    ErrorReporter,
    ErrorSeverity,
    ResourceNotFoundError,
    RetryHandler,
    RetryPolicies,
    RetryPolicy,
    RetryStrategy,
    TransientAPIError,
    ValidationError,
    classify_aws_error,
    format_user_error,
)
from appconfig_deployment.error_handling.aws_errors import format_validation_error


def client_error(code, message="boom", status=400, **extra):
    response = {
        "Error": {"Code": code, "Message": message},
        "ResponseMetadata": {"HTTPStatusCode": status},
    }
    response.update(extra)
    return ClientError(response, "TestOperation")


class TestErrorTypes:
    """Test custom error types and error context."""

    def test_deployment_system_error_to_dict(self):
        """Errors serialize with their context and remediation."""
        context = ErrorContext(
            application="my-app",
            environment="production",
            file_path="apcdeploy.yml",
            line_number=3,
        )
        error = DeploymentSystemError(
            message="Test error message",
            error_code="TEST_ERROR",
            category=ErrorCategory.DEPLOYMENT,
            severity=ErrorSeverity.HIGH,
            context=context,
            remediation="Fix the test error",
        )

        data = error.to_dict()
        assert data["error_code"] == "TEST_ERROR"
        assert data["category"] == "deployment"
        assert data["severity"] == "high"
        assert data["context"]["application"] == "my-app"
        assert data["context"]["line_number"] == 3
        assert data["remediation"] == "Fix the test error"
        assert str(error) == "Test error message"

    def test_resource_not_found_message(self):
        error = ResourceNotFoundError("application", "missing-app")
        assert error.message == "application not found: missing-app"
        assert error.error_code == ErrorCodes.RESOURCE_NOT_FOUND

    def test_conflict_error_names_deployment(self):
        error = ConflictError(7, "BAKING")
        assert "#7" in error.message
        assert "BAKING" in error.message
        assert error.error_code == ErrorCodes.DEPLOYMENT_IN_PROGRESS

    def test_timeout_error_carries_last_state(self):
        error = DeploymentTimeoutError(60, "DEPLOYING", 4)
        assert error.last_observed_state == "DEPLOYING"
        assert error.deployment_number == 4
        assert "DEPLOYING" in error.message

    def test_transient_error_is_api_error(self):
        assert isinstance(TransientAPIError("throttled"), AppConfigAPIError)


class TestAWSErrorClassification:
    """Test translation of botocore failures into the error taxonomy."""

    @pytest.mark.parametrize(
        "code",
        [
            "ThrottlingException",
            "TooManyRequestsException",
            "RequestLimitExceeded",
            "ThrottledException",
        ],
    )
    def test_throttling_codes_are_transient(self, code):
        error = classify_aws_error(client_error(code), "GetDeployment")
        assert isinstance(error, TransientAPIError)
        assert error.error_code == ErrorCodes.APPCONFIG_THROTTLED

    def test_server_errors_are_transient(self):
        error = classify_aws_error(
            client_error("InternalServerException", status=500), "GetDeployment"
        )
        assert isinstance(error, TransientAPIError)

    def test_unknown_5xx_is_transient(self):
        error = classify_aws_error(client_error("Whatever", status=503), "GetDeployment")
        assert isinstance(error, TransientAPIError)

    def test_endpoint_connection_error_is_transient(self):
        error = classify_aws_error(
            EndpointConnectionError(endpoint_url="https://appconfig.example"),
            "ListApplications",
        )
        assert isinstance(error, TransientAPIError)
        assert error.error_code == ErrorCodes.APPCONFIG_UNAVAILABLE

    def test_access_denied_has_iam_hint(self):
        error = classify_aws_error(
            client_error("AccessDeniedException", status=403), "StartDeployment"
        )
        assert not isinstance(error, TransientAPIError)
        assert error.error_code == ErrorCodes.APPCONFIG_ACCESS_DENIED
        assert "appconfig:StartDeployment" in error.remediation

    def test_bad_request_is_validation_error(self):
        error = classify_aws_error(
            client_error(
                "BadRequestException",
                message="Configuration failed validation",
                Details={
                    "InvalidConfiguration": [
                        {
                            "Constraint": "required",
                            "Location": "$.flags",
                            "Reason": "missing property",
                            "Type": "JSON Schema",
                            "Value": "null",
                        }
                    ]
                },
            ),
            "CreateHostedConfigurationVersion",
        )
        assert isinstance(error, ValidationError)
        assert error.error_code == ErrorCodes.REMOTE_VALIDATION_FAILED
        assert error.message.startswith("Configuration failed validation")
        assert "$.flags: missing property" in error.message

    def test_format_validation_error_without_details(self):
        message = format_validation_error(
            client_error("BadRequestException", message="Invalid content")
        )
        assert message == "Invalid content"

    def test_other_client_errors_are_not_transient(self):
        error = classify_aws_error(client_error("ConflictException"), "StartDeployment")
        assert type(error) is AppConfigAPIError


class TestRetryHandler:
    """Test retry logic with an injected sleep function."""

    def test_retries_transient_then_succeeds(self):
        sleep = Mock()
        handler = RetryHandler(
            RetryPolicy(max_attempts=3, base_delay=0.1, jitter=False), sleep=sleep
        )
        func = Mock(side_effect=[TransientAPIError("throttled"), "ok"])

        assert handler.retry(func) == "ok"
        assert func.call_count == 2
        sleep.assert_called_once_with(0.1)

    def test_non_retryable_fails_immediately(self):
        sleep = Mock()
        handler = RetryHandler(RetryPolicy(max_attempts=5), sleep=sleep)
        func = Mock(side_effect=AppConfigAPIError("denied"))

        with pytest.raises(AppConfigAPIError):
            handler.retry(func)
        assert func.call_count == 1
        sleep.assert_not_called()

    def test_gives_up_after_max_attempts(self):
        handler = RetryHandler(
            RetryPolicy(max_attempts=3, base_delay=0.1, jitter=False), sleep=Mock()
        )
        func = Mock(side_effect=ConnectionError("reset"))

        with pytest.raises(ConnectionError):
            handler.retry(func)
        assert func.call_count == 3

    def test_deadline_stops_retries(self):
        now = [0.0]
        handler = RetryHandler(
            RetryPolicy(max_attempts=None, base_delay=2.0, jitter=False),
            sleep=lambda s: now.__setitem__(0, now[0] + s),
            clock=lambda: now[0],
        )
        func = Mock(side_effect=TransientAPIError("throttled"))

        with pytest.raises(TransientAPIError):
            handler.retry(func, deadline=5.0)
        # 2s then 4s backoff: the second retry would end past the deadline
        assert func.call_count == 2

    def test_delay_strategies(self):
        exponential = RetryHandler(
            RetryPolicy(base_delay=1.0, backoff_multiplier=2.0, jitter=False)
        )
        linear = RetryHandler(
            RetryPolicy(
                base_delay=1.0, strategy=RetryStrategy.LINEAR_BACKOFF, jitter=False
            )
        )
        fixed = RetryHandler(
            RetryPolicy(base_delay=1.5, strategy=RetryStrategy.FIXED_DELAY, jitter=False)
        )

        assert exponential.calculate_delay(3) == 4.0
        assert linear.calculate_delay(3) == 3.0
        assert fixed.calculate_delay(3) == 1.5

    def test_delay_is_capped(self):
        handler = RetryHandler(RetryPolicy(base_delay=10.0, max_delay=15.0, jitter=False))
        assert handler.calculate_delay(5) == 15.0

    def test_polling_policy_is_deadline_bound(self):
        assert RetryPolicies.POLLING_RETRY.max_attempts is None

    def test_shared_policy_is_not_modified(self):
        handler = RetryHandler(RetryPolicies.POLLING_RETRY)

        assert RetryPolicies.POLLING_RETRY.retryable_error_codes is None
        assert handler.policy is not RetryPolicies.POLLING_RETRY
        assert "APPCONFIG_THROTTLED" in handler.policy.retryable_error_codes
        assert (
            handler.policy.retryable_error_codes
            is not RetryHandler.DEFAULT_RETRYABLE_ERROR_CODES
        )


class TestErrorReporter:
    """Test error reporting and user-facing formatting."""

    def test_report_logs_at_severity_level(self, caplog):
        reporter = ErrorReporter()
        error = ValidationError("bad data", context=ErrorContext(file_path="data.json"))

        report = reporter.report_error(error, operation="run")

        assert report.operation == "run"
        assert any(
            r.levelno == logging.ERROR and "[VALIDATION_ERROR] bad data" in r.getMessage()
            for r in caplog.records
        )
    def test_traceback_only_when_requested(self, caplog):
        ErrorReporter(include_traceback=False).report_error(ValueError("plain"))
        assert not any("Traceback" in r.getMessage() for r in caplog.records)

        caplog.clear()
        ErrorReporter(include_traceback=True).report_error(ValueError("plain"))
        assert any(
            r.levelno == logging.DEBUG and r.getMessage().startswith("Traceback")
            for r in caplog.records
        )

    def test_unclassified_error_uses_default_level(self, caplog):
        ErrorReporter(log_level=logging.CRITICAL).report_error(
            ValueError("plain"), operation="diff"
        )

        assert any(
            r.levelno == logging.CRITICAL
            and r.getMessage() == "Operation: diff | ValueError: plain"
            for r in caplog.records
        )

    def test_format_user_error(self):
        error = ValidationError(
            "invalid JSON",
            context=ErrorContext(file_path="data.json", line_number=2),
            remediation="Fix the syntax",
        )

        text = format_user_error(error)
        lines = text.splitlines()
        assert lines[0] == "Error: invalid JSON"
        assert "  File: data.json:2" in lines
        assert lines[-1] == "  Hint: Fix the syntax"

    def test_format_plain_exception(self):
        assert format_user_error(RuntimeError("oops")) == "Error: oops"
