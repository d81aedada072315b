"""Classification of FCM error strings and HTTP statuses into retry dispositions."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from .constants import RATE_LIMIT_STATUS_CODE


class RetryDisposition(str, Enum):
    """What the caller may do about a failure."""

    retryable = "retryable"
    permanent = "permanent"
    requires_registration_update = "requires_registration_update"


class ErrorKind(str, Enum):
    """Error strings the FCM send endpoint reports per recipient."""

    missing_registration = "MissingRegistration"
    invalid_registration = "InvalidRegistration"
    not_registered = "NotRegistered"
    invalid_package_name = "InvalidPackageName"
    mismatch_sender_id = "MismatchSenderId"
    message_too_big = "MessageTooBig"
    invalid_data_key = "InvalidDataKey"
    invalid_ttl = "InvalidTtl"
    invalid_parameters = "InvalidParameters"
    unavailable = "Unavailable"
    internal_server_error = "InternalServerError"
    device_message_rate_exceeded = "DeviceMessageRateExceeded"
    topics_message_rate_exceeded = "TopicsMessageRateExceeded"
    unknown = "Unknown"


ERROR_DISPOSITIONS: dict[ErrorKind, RetryDisposition] = {
    ErrorKind.missing_registration: RetryDisposition.permanent,
    ErrorKind.invalid_registration: RetryDisposition.permanent,
    ErrorKind.not_registered: RetryDisposition.permanent,
    ErrorKind.invalid_package_name: RetryDisposition.permanent,
    ErrorKind.mismatch_sender_id: RetryDisposition.permanent,
    ErrorKind.message_too_big: RetryDisposition.permanent,
    ErrorKind.invalid_data_key: RetryDisposition.permanent,
    ErrorKind.invalid_ttl: RetryDisposition.permanent,
    ErrorKind.invalid_parameters: RetryDisposition.permanent,
    ErrorKind.unavailable: RetryDisposition.retryable,
    ErrorKind.internal_server_error: RetryDisposition.retryable,
    # The caller must throttle; the client never retries these on its own
    ErrorKind.device_message_rate_exceeded: RetryDisposition.permanent,
    ErrorKind.topics_message_rate_exceeded: RetryDisposition.permanent,
    ErrorKind.unknown: RetryDisposition.permanent,
}

# Errors meaning the registration token should be removed from the caller's store
STALE_REGISTRATION_KINDS = frozenset(
    {
        ErrorKind.missing_registration,
        ErrorKind.invalid_registration,
        ErrorKind.not_registered,
    }
)

_KINDS_BY_STRING = {kind.value: kind for kind in ErrorKind if kind is not ErrorKind.unknown}


class ClassifiedError(BaseModel):
    """A provider error string together with its kind and disposition."""

    model_config = ConfigDict(frozen=True)

    kind: ErrorKind = Field(..., description="Classified error kind")
    raw_error: str = Field(..., description="Error string exactly as the provider sent it")
    disposition: RetryDisposition = Field(..., description="Retry disposition for this error")

    @property
    def is_retryable(self) -> bool:
        return self.disposition is RetryDisposition.retryable


def disposition_for(kind: ErrorKind) -> RetryDisposition:
    """Return the fixed retry disposition for an error kind."""
    return ERROR_DISPOSITIONS[kind]


def classify_error(raw_error: str) -> ClassifiedError:
    """
    Map a provider error string to a ClassifiedError.

    Unrecognized strings map to ErrorKind.unknown with a permanent
    disposition; the raw string is preserved for the caller.

    Args:
        raw_error: Value of the ``error`` field in a result entry

    Returns:
        ClassifiedError for the string
    """
    kind = _KINDS_BY_STRING.get(raw_error, ErrorKind.unknown)
    return ClassifiedError(kind=kind, raw_error=raw_error, disposition=ERROR_DISPOSITIONS[kind])


def classify_status(status_code: int) -> RetryDisposition:
    """
    Map a whole-request HTTP status to a retry disposition.

    429 and 5xx are retryable; everything else that is not a 2xx is permanent.
    """
    if status_code == RATE_LIMIT_STATUS_CODE or status_code >= 500:
        return RetryDisposition.retryable
    return RetryDisposition.permanent
