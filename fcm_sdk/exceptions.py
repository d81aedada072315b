"""Exceptions for FCM SDK.

Per-recipient delivery failures are not exceptions: they are returned as
``RecipientError`` entries inside a ``PartialFailure`` outcome. The classes
below cover everything that prevents a request from being built, sent or
understood.
"""

from typing import Any

from .classifier import ErrorKind


class FCMError(Exception):
    """Base exception for all FCM SDK errors."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize FCMError.

        Args:
            message: Error message
            status_code: HTTP status code if applicable
            details: Raw diagnostic values (offending key, measured size, body excerpt)
        """
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to dictionary for logging or serialization."""
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "details": self.details,
        }

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, status_code={self.status_code})"


# =============================================================================
# Payload validation (raised before any network I/O)
# =============================================================================


class PayloadValidationError(FCMError):
    """Raised when a payload violates a provider constraint."""


class EmptyTargetSetError(PayloadValidationError):
    """Raised when a multicast target has no tokens."""

    def __init__(self) -> None:
        """Initialize EmptyTargetSetError."""
        super().__init__("Token set must contain at least one registration token")


class TargetSetTooLargeError(PayloadValidationError):
    """Raised when a multicast target exceeds the provider's batch size."""

    def __init__(self, count: int, limit: int) -> None:
        """Initialize TargetSetTooLargeError."""
        self.count = count
        self.limit = limit
        super().__init__(
            f"Token set has {count} tokens, maximum is {limit}",
            details={"count": count, "limit": limit},
        )


class ReservedDataKeyError(PayloadValidationError):
    """Raised when the data mapping uses a provider-reserved key."""

    def __init__(self, key: str) -> None:
        """Initialize ReservedDataKeyError."""
        self.key = key
        super().__init__(f"Data key {key!r} is reserved", details={"key": key})


class InvalidTimeToLiveError(PayloadValidationError):
    """Raised when time_to_live is negative or above the provider maximum."""

    def __init__(self, time_to_live: int, limit: int) -> None:
        """Initialize InvalidTimeToLiveError."""
        self.time_to_live = time_to_live
        self.limit = limit
        super().__init__(
            f"time_to_live must be between 0 and {limit} seconds, got {time_to_live}",
            details={"time_to_live": time_to_live, "limit": limit},
        )


class PayloadTooLargeError(PayloadValidationError):
    """Raised when the serialized payload exceeds the provider's size limit."""

    def __init__(self, measured_bytes: int, limit: int) -> None:
        """Initialize PayloadTooLargeError."""
        self.measured_bytes = measured_bytes
        self.limit = limit
        super().__init__(
            f"Payload is {measured_bytes} bytes, maximum is {limit}",
            details={"measured_bytes": measured_bytes, "limit": limit},
        )


class DataNotSerializableError(PayloadValidationError):
    """Raised when the data mapping cannot be encoded as JSON."""

    def __init__(self, reason: str) -> None:
        """Initialize DataNotSerializableError."""
        super().__init__(f"Data is not JSON-serializable: {reason}", details={"reason": reason})


# =============================================================================
# Protocol errors (the reply or request shape broke the documented contract)
# =============================================================================


class ProtocolError(FCMError):
    """Raised when a request or response violates the wire contract."""


class ResultCountMismatchError(ProtocolError):
    """Raised when the results array does not line up with the request tokens."""

    def __init__(self, expected: int, actual: int) -> None:
        """Initialize ResultCountMismatchError."""
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Expected {expected} results, got {actual}",
            status_code=200,
            details={"expected": expected, "actual": actual},
        )


class MalformedResponseError(ProtocolError):
    """Raised when the response body cannot be parsed into a SendResponse."""

    def __init__(self, message: str, raw: Any = None) -> None:
        """Initialize MalformedResponseError."""
        self.raw = raw
        super().__init__(message, status_code=200, details={"raw": raw})


class BadRequestError(ProtocolError):
    """Raised when the provider rejects the request as malformed (HTTP 400)."""

    def __init__(self, message: str = "Bad request") -> None:
        """Initialize BadRequestError."""
        super().__init__(message, status_code=400)


# =============================================================================
# Permanent whole-request failures
# =============================================================================


class AuthenticationError(FCMError):
    """Raised when the API key is rejected."""

    def __init__(self, message: str = "Authentication failed", status_code: int = 401) -> None:
        """Initialize AuthenticationError."""
        super().__init__(message, status_code=status_code)


class EndpointNotFoundError(FCMError):
    """Raised when the send endpoint does not exist (HTTP 404)."""

    def __init__(self, message: str = "Send endpoint not found") -> None:
        """Initialize EndpointNotFoundError."""
        super().__init__(message, status_code=404)


class UnexpectedStatusError(FCMError):
    """Raised for HTTP statuses the provider does not document."""


# =============================================================================
# Retryable whole-request failures
# =============================================================================


class RetryableError(FCMError):
    """Base for failures that the client retries with backoff."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        retry_after: float | None = None,
    ) -> None:
        """
        Initialize RetryableError.

        Args:
            message: Error message
            status_code: HTTP status code if a response was received
            retry_after: Provider-supplied minimum wait in seconds
        """
        self.retry_after = retry_after
        super().__init__(message, status_code=status_code)


class ServerError(RetryableError):
    """Raised on 5xx responses."""


class RateLimitError(RetryableError):
    """Raised when the whole request is throttled (HTTP 429)."""

    def __init__(self, message: str = "Rate limit exceeded", retry_after: float | None = None) -> None:
        """Initialize RateLimitError."""
        super().__init__(message, status_code=429, retry_after=retry_after)


class UnavailableError(RetryableError):
    """Raised when every recipient in a 200 reply reported a retryable error."""

    def __init__(self, error_kind: ErrorKind, retry_after: float | None = None) -> None:
        """Initialize UnavailableError."""
        self.error_kind = error_kind
        super().__init__(
            f"Provider reported {error_kind.value} for every recipient",
            status_code=200,
            retry_after=retry_after,
        )


class TransportError(RetryableError):
    """Raised when no HTTP response was obtained (timeout, connect, TLS)."""

    def __init__(self, message: str, original_error: Exception | None = None) -> None:
        """Initialize TransportError."""
        self.original_error = original_error
        super().__init__(message)


# =============================================================================
# Terminal outcomes of FCMClient.send
# =============================================================================


class RequestFailedError(FCMError):
    """Raised when a send is rejected outright or runs out of retries.

    Attributes:
        cause: The last underlying error
        attempts: Number of HTTP attempts made
        raw_error: Provider error string, if the provider sent one
        error_kind: Classified provider error, if any
    """

    def __init__(self, cause: FCMError, attempts: int) -> None:
        """Initialize RequestFailedError."""
        self.cause = cause
        self.attempts = attempts
        self.error_kind: ErrorKind | None = getattr(cause, "error_kind", None)
        self.raw_error: str | None = self.error_kind.value if self.error_kind else None
        super().__init__(
            f"Send failed after {attempts} attempt(s): {cause.message}",
            status_code=cause.status_code,
            details={**cause.details, "cause": cause.__class__.__name__, "attempts": attempts},
        )


class SendCancelledError(FCMError):
    """Raised when the caller's deadline expires before the send completes."""

    def __init__(self, attempts: int, deadline: float) -> None:
        """Initialize SendCancelledError."""
        self.attempts = attempts
        self.deadline = deadline
        super().__init__(
            f"Send cancelled after {attempts} attempt(s): deadline of {deadline}s expired",
            details={"attempts": attempts, "deadline": deadline},
        )
