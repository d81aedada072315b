"""FCM Python SDK

Async client for the Firebase Cloud Messaging HTTP send endpoint.

Example:
    ```python
    from fcm_sdk import (
        FCMClient,
        FCMConfig,
        Notification,
        PartialFailure,
        RequestFailedError,
        build_payload,
    )

    payload = build_payload(
        ["token-a", "token-b", "token-c"],
        notification=Notification(title="Hi", body="New message"),
        data={"thread_id": "t-1"},
    )

    async with FCMClient(FCMConfig(api_key="server-key")) as client:
        try:
            outcome = await client.send(payload)
        except RequestFailedError as e:
            print(e.cause, e.status_code, e.attempts)
        else:
            if isinstance(outcome, PartialFailure):
                drop = outcome.response.invalid_tokens()
                replace = outcome.response.canonical_updates()
    ```
"""

from .classifier import (
    ClassifiedError,
    ErrorKind,
    RetryDisposition,
    classify_error,
    classify_status,
    disposition_for,
)
from .client import FCMClient
from .config import FCMConfig
from .exceptions import (
    AuthenticationError,
    BadRequestError,
    DataNotSerializableError,
    EmptyTargetSetError,
    EndpointNotFoundError,
    FCMError,
    InvalidTimeToLiveError,
    MalformedResponseError,
    PayloadTooLargeError,
    PayloadValidationError,
    ProtocolError,
    RateLimitError,
    RequestFailedError,
    ReservedDataKeyError,
    ResultCountMismatchError,
    RetryableError,
    SendCancelledError,
    ServerError,
    TargetSetTooLargeError,
    TransportError,
    UnavailableError,
    UnexpectedStatusError,
)
from .payload import (
    Condition,
    DeliveryOptions,
    Notification,
    Payload,
    Priority,
    Target,
    Token,
    Tokens,
    Topic,
    build_payload,
)
from .response import (
    Delivered,
    PartialFailure,
    RecipientError,
    RecipientResult,
    RecipientSuccess,
    SendOutcome,
    SendResponse,
    parse_send_response,
)

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Client
    "FCMClient",
    # Configuration
    "FCMConfig",
    # Payload
    "Target",
    "Token",
    "Tokens",
    "Topic",
    "Condition",
    "Notification",
    "DeliveryOptions",
    "Priority",
    "Payload",
    "build_payload",
    # Response
    "RecipientSuccess",
    "RecipientError",
    "RecipientResult",
    "SendResponse",
    "Delivered",
    "PartialFailure",
    "SendOutcome",
    "parse_send_response",
    # Classifier
    "ErrorKind",
    "RetryDisposition",
    "ClassifiedError",
    "classify_error",
    "classify_status",
    "disposition_for",
    # Exceptions
    "FCMError",
    "PayloadValidationError",
    "EmptyTargetSetError",
    "TargetSetTooLargeError",
    "ReservedDataKeyError",
    "InvalidTimeToLiveError",
    "PayloadTooLargeError",
    "DataNotSerializableError",
    "ProtocolError",
    "ResultCountMismatchError",
    "MalformedResponseError",
    "BadRequestError",
    "AuthenticationError",
    "EndpointNotFoundError",
    "UnexpectedStatusError",
    "RetryableError",
    "ServerError",
    "RateLimitError",
    "UnavailableError",
    "TransportError",
    "RequestFailedError",
    "SendCancelledError",
]
