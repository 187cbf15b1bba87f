"""Error types and retry policies for the external paper APIs.

Services raise typed errors instead of returning error dicts so that a
failed lookup propagates through ``cached_fetch`` and is never cached.
"""

import logging
from enum import Enum
from typing import Optional

from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Classification of errors for appropriate handling."""

    # Transient errors - should retry
    API_RATE_LIMIT = "rate_limit"
    API_TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"

    # Non-recoverable errors
    API_ERROR = "api_error"


class ServiceError(Exception):
    """Base exception for external API failures."""

    def __init__(
        self,
        error_type: ErrorType,
        message: str,
        source: str = "",
        status: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.error_type = error_type
        self.message = message
        self.source = source
        self.status = status
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        prefix = f"{self.source} " if self.source else ""
        return f"[{self.error_type.value}] {prefix}{self.message}"


class RateLimitError(ServiceError):
    """Raised when an API answers 429."""

    def __init__(self, message: str = "Rate limit exceeded. Please wait and try again.", **kwargs):
        super().__init__(ErrorType.API_RATE_LIMIT, message, **kwargs)


class APITimeoutError(ServiceError):
    """Raised when a request times out."""

    def __init__(self, message: str = "Request timed out", **kwargs):
        super().__init__(ErrorType.API_TIMEOUT, message, **kwargs)


class NetworkError(ServiceError):
    """Raised when the API cannot be reached."""

    def __init__(self, message: str = "Network error", **kwargs):
        super().__init__(ErrorType.NETWORK_ERROR, message, **kwargs)


class APIError(ServiceError):
    """Raised for unexpected HTTP status codes or malformed responses."""

    def __init__(self, message: str, **kwargs):
        super().__init__(ErrorType.API_ERROR, message, **kwargs)


def retry_on_rate_limit(
    max_attempts: int = 3,
    min_wait: float = 2.0,
    max_wait: float = 60.0,
):
    """Retry decorator for rate-limited API calls.

    Uses exponential backoff; the final failure is re-raised as is.
    """
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=2, min=min_wait, max=max_wait),
        retry=retry_if_exception_type((RateLimitError, APITimeoutError, NetworkError)),
        reraise=True,
        before_sleep=lambda retry_state: logger.warning(
            f"Request failed ({retry_state.outcome.exception()}), retrying in "
            f"{retry_state.next_action.sleep:.1f}s "
            f"(attempt {retry_state.attempt_number}/{max_attempts})"
        ),
    )


__all__ = [
    "ErrorType",
    "ServiceError",
    "RateLimitError",
    "APITimeoutError",
    "NetworkError",
    "APIError",
    "retry_on_rate_limit",
]
