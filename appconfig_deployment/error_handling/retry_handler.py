"""
Retry Handler

Provides retry logic for transient failures with backoff and configurable
retry policies. Retries are bounded by an attempt count and, optionally, by an
absolute deadline on the handler's clock.
"""

import logging
import random
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, List, Optional, Type

from .error_types import DeploymentSystemError, TransientAPIError

logger = logging.getLogger(__name__)


class RetryStrategy(Enum):
    """Retry strategy types."""

    FIXED_DELAY = "fixed_delay"
    EXPONENTIAL_BACKOFF = "exponential_backoff"
    LINEAR_BACKOFF = "linear_backoff"


@dataclass
class RetryPolicy:
    """Configuration for retry behavior.

    ``max_attempts`` of ``None`` means attempts are limited only by the
    deadline passed to :meth:`RetryHandler.retry`.
    """

    max_attempts: Optional[int] = 3
    base_delay: float = 1.0
    max_delay: float = 60.0
    strategy: RetryStrategy = RetryStrategy.EXPONENTIAL_BACKOFF
    backoff_multiplier: float = 2.0
    jitter: bool = True
    retryable_exceptions: Optional[List[Type[Exception]]] = None
    retryable_error_codes: Optional[List[str]] = None


class RetryHandler:
    """Handles retry logic for operations that may fail transiently."""

    DEFAULT_RETRYABLE_EXCEPTIONS = [
        ConnectionError,
        TransientAPIError,
    ]

    DEFAULT_RETRYABLE_ERROR_CODES = [
        "APPCONFIG_THROTTLED",
        "APPCONFIG_UNAVAILABLE",
        "TEMPORARY_FAILURE",
    ]

    def __init__(
        self,
        policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        # Defaults are filled on a copy; policies are shared constants
        self.policy = replace(policy or RetryPolicy())
        self.sleep = sleep
        self.clock = clock

        if self.policy.retryable_exceptions is None:
            self.policy.retryable_exceptions = list(self.DEFAULT_RETRYABLE_EXCEPTIONS)

        if self.policy.retryable_error_codes is None:
            self.policy.retryable_error_codes = list(self.DEFAULT_RETRYABLE_ERROR_CODES)

    def is_retryable(self, exception: Exception) -> bool:
        """Check if an exception is retryable."""
        if any(
            isinstance(exception, exc_type)
            for exc_type in self.policy.retryable_exceptions
        ):
            return True

        if isinstance(exception, DeploymentSystemError):
            return exception.error_code in self.policy.retryable_error_codes

        return False

    def calculate_delay(self, attempt: int) -> float:
        """Calculate delay for the given attempt number."""
        if self.policy.strategy == RetryStrategy.EXPONENTIAL_BACKOFF:
            delay = self.policy.base_delay * (
                self.policy.backoff_multiplier ** (attempt - 1)
            )
        elif self.policy.strategy == RetryStrategy.LINEAR_BACKOFF:
            delay = self.policy.base_delay * attempt
        else:
            delay = self.policy.base_delay

        if self.policy.jitter:
            delay += random.uniform(0.1, 0.3) * delay

        return min(delay, self.policy.max_delay)

    def retry(
        self,
        func: Callable[..., Any],
        *args,
        deadline: Optional[float] = None,
        **kwargs,
    ) -> Any:
        """Execute function with retry logic.

        When ``deadline`` is given, no retry is scheduled whose delay would end
        past it; the last exception is raised instead.
        """
        attempt = 0

        while True:
            attempt += 1
            try:
                logger.debug(f"Attempting operation (attempt {attempt})")
                return func(*args, **kwargs)

            except Exception as e:
                if not self.is_retryable(e):
                    logger.debug(
                        f"Exception {type(e).__name__} is not retryable, failing immediately"
                    )
                    raise

                if (
                    self.policy.max_attempts is not None
                    and attempt >= self.policy.max_attempts
                ):
                    logger.error(f"Operation failed after {attempt} attempts")
                    raise

                delay = self.calculate_delay(attempt)
                if deadline is not None and self.clock() + delay > deadline:
                    logger.error(
                        f"Operation failed after {attempt} attempts; "
                        "no time left in the retry budget"
                    )
                    raise

                logger.warning(
                    f"Operation failed (attempt {attempt}): {e}. "
                    f"Retrying in {delay:.2f} seconds..."
                )
                self.sleep(delay)


class RetryPolicies:
    """Predefined retry policies for common use cases."""

    # Deployment polling: bounded by the wait deadline, not by attempts
    POLLING_RETRY = RetryPolicy(
        max_attempts=None,
        base_delay=1.0,
        max_delay=30.0,
        strategy=RetryStrategy.EXPONENTIAL_BACKOFF,
        jitter=True,
        retryable_exceptions=[ConnectionError, TransientAPIError],
    )
