"""
Dify datasets client exceptions.

Provides a hierarchy of exceptions that lets callers tell apart request
mistakes (validation, 4xx), server failures (5xx), network failures and
responses that do not match the expected schema.
"""

from typing import Any


class DifyError(Exception):
    """Base exception for all Dify client errors."""

    def __init__(self, message: str, details: Any = None):
        """
        Initialize DifyError.

        Args:
            message: Human-readable error message
            details: Additional error details (response data, error codes, etc.)
        """
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self):
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class DifyValidationError(DifyError):
    """Request rejected on the client side before anything was sent."""

    def __init__(self, message: str, field: str = None, errors: list = None):
        """
        Initialize DifyValidationError.

        Args:
            message: Human-readable error message
            field: Name of the offending field, when a single one is at fault
            errors: Structured errors as reported by pydantic
        """
        self.field = field
        self.errors = errors or []
        details = {}
        if field:
            details["field"] = field
        if errors:
            details["errors"] = errors
        super().__init__(message, details or None)


class DifyAPIError(DifyError):
    """Exception for non-2xx HTTP responses from the Dify API."""

    def __init__(
        self,
        message: str,
        status_code: int = None,
        response_data: Any = None,
        error_code: str = None,
    ):
        """
        Initialize DifyAPIError.

        Args:
            message: Human-readable error message
            status_code: HTTP status code
            response_data: Parsed JSON body, or the raw text when it was not JSON
            error_code: Dify error code from the response (e.g. "invalid_param")
        """
        self.status_code = status_code
        self.response_data = response_data
        self.error_code = error_code
        details = {
            "status_code": status_code,
            "error_code": error_code,
            "response": response_data,
        }
        super().__init__(message, details)

    @property
    def is_client_error(self) -> bool:
        return self.status_code is not None and 400 <= self.status_code < 500

    @property
    def is_server_error(self) -> bool:
        return self.status_code is not None and self.status_code >= 500

    def __str__(self):
        parts = [self.message]
        if self.status_code:
            parts.append(f"status={self.status_code}")
        if self.error_code:
            parts.append(f"code={self.error_code}")
        return " | ".join(parts)


class DifyRateLimitError(DifyAPIError):
    """Exception for rate limiting errors (HTTP 429)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        retry_after: int = None,
        response_data: Any = None,
        error_code: str = None,
    ):
        """
        Initialize DifyRateLimitError.

        Args:
            message: Human-readable error message
            retry_after: Number of seconds the server asked us to wait
            response_data: Raw response data from API
            error_code: Dify error code, if the body carried one
        """
        self.retry_after = retry_after
        super().__init__(
            message=message,
            status_code=429,
            response_data=response_data,
            error_code=error_code or "rate_limit_exceeded",
        )
        if retry_after:
            self.details["retry_after"] = retry_after

    def __str__(self):
        base = super().__str__()
        if self.retry_after:
            return f"{base} | retry_after={self.retry_after}s"
        return base


class DifyTransportError(DifyError):
    """The request never produced an HTTP response."""


class DifyTimeoutError(DifyTransportError):
    """Exception for timeout errors."""

    def __init__(self, message: str, timeout: float = None, operation: str = None):
        """
        Initialize DifyTimeoutError.

        Args:
            message: Human-readable error message
            timeout: Timeout value in seconds
            operation: Operation that timed out
        """
        self.timeout = timeout
        self.operation = operation
        details = {"timeout": timeout, "operation": operation}
        super().__init__(message, details)


class DifyConnectionError(DifyTransportError):
    """Exception for connection errors."""

    def __init__(self, message: str, base_url: str = None, cause: Exception = None):
        """
        Initialize DifyConnectionError.

        Args:
            message: Human-readable error message
            base_url: The URL that failed to connect
            cause: The underlying exception that caused the connection error
        """
        self.base_url = base_url
        self.cause = cause
        details = {"base_url": base_url, "cause": str(cause) if cause else None}
        super().__init__(message, details)


class DifyIndexingTimeoutError(DifyError):
    """Documents of an upload batch did not finish indexing in time."""

    def __init__(
        self,
        message: str,
        timeout: float = None,
        batch: str = None,
        statuses: list = None,
    ):
        """
        Initialize DifyIndexingTimeoutError.

        Args:
            message: Human-readable error message
            timeout: How long we waited, in seconds
            batch: Upload batch identifier
            statuses: Last indexing statuses seen for the batch
        """
        self.timeout = timeout
        self.batch = batch
        self.statuses = statuses or []
        details = {"timeout": timeout, "batch": batch}
        super().__init__(message, details)


class DifySerializationError(DifyError):
    """Response body is not JSON or does not match the expected schema."""

    def __init__(self, message: str, operation: str = None, body: Any = None):
        self.operation = operation
        self.body = body
        details = {"operation": operation}
        if body is not None:
            details["body"] = body if len(str(body)) <= 500 else f"{str(body)[:500]}..."
        super().__init__(message, details)


class DifyConfigurationError(DifyError):
    """Exception for configuration errors (missing API key, invalid settings, etc.)."""

    def __init__(self, message: str, config_key: str = None):
        """
        Initialize DifyConfigurationError.

        Args:
            message: Human-readable error message
            config_key: The configuration key that is missing or invalid
        """
        self.config_key = config_key
        details = {"config_key": config_key} if config_key else None
        super().__init__(message, details)
