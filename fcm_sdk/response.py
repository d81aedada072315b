"""Send response model and parsing.

The provider answers a send with one result entry per recipient, mixing
success and error shapes in a single array. ``parse_send_response`` turns
that array into ``RecipientSuccess`` / ``RecipientError`` values aligned
positionally with the request's recipients, and rejects anything that does
not match the documented shapes.
"""

from typing import Any, Literal, Union

import structlog
from pydantic import BaseModel, ConfigDict, Field

from .classifier import (
    STALE_REGISTRATION_KINDS,
    ErrorKind,
    RetryDisposition,
    classify_error,
)
from .exceptions import MalformedResponseError, ResultCountMismatchError
from .payload import Payload, Token, Tokens

logger = structlog.get_logger()


# =============================================================================
# Recipient results
# =============================================================================


class RecipientSuccess(BaseModel):
    """A recipient the provider accepted the message for."""

    model_config = ConfigDict(frozen=True)

    status: Literal["success"] = "success"
    token: str = Field(..., description="Recipient this result belongs to")
    message_id: str = Field(..., description="Provider message ID")
    registration_id: str | None = Field(
        None, description="Canonical registration ID that should replace the token"
    )

    @property
    def disposition(self) -> RetryDisposition | None:
        """requires_registration_update when a canonical ID was returned."""
        if self.registration_id is not None:
            return RetryDisposition.requires_registration_update
        return None


class RecipientError(BaseModel):
    """A recipient the provider could not deliver to."""

    model_config = ConfigDict(frozen=True)

    status: Literal["error"] = "error"
    token: str = Field(..., description="Recipient this result belongs to")
    error_kind: ErrorKind = Field(..., description="Classified error")
    raw_error: str = Field(..., description="Error string as sent by the provider")
    disposition: RetryDisposition

    @property
    def is_retryable(self) -> bool:
        return self.disposition is RetryDisposition.retryable


RecipientResult = Union[RecipientSuccess, RecipientError]


class SendResponse(BaseModel):
    """Parsed reply to a single HTTP round trip.

    ``success``, ``failure`` and ``canonical_ids`` are recomputed from
    ``results``. The values the server reported are kept in the
    ``reported_*`` fields, and any disagreement is listed in ``warnings``.
    """

    model_config = ConfigDict(frozen=True)

    multicast_id: int | None = None
    success: int
    failure: int
    canonical_ids: int
    results: tuple[RecipientResult, ...] = Field(default_factory=tuple)
    reported_success: int | None = None
    reported_failure: int | None = None
    reported_canonical_ids: int | None = None
    warnings: tuple[str, ...] = Field(default_factory=tuple)

    @property
    def all_delivered(self) -> bool:
        return self.failure == 0

    @property
    def errors(self) -> list[RecipientError]:
        return [r for r in self.results if isinstance(r, RecipientError)]

    def canonical_updates(self) -> dict[str, str]:
        """Map of request token to the canonical registration ID replacing it."""
        return {
            r.token: r.registration_id
            for r in self.results
            if isinstance(r, RecipientSuccess) and r.registration_id is not None
        }

    def invalid_tokens(self) -> list[str]:
        """Tokens whose registration is gone and should be dropped by the caller."""
        return [r.token for r in self.errors if r.error_kind in STALE_REGISTRATION_KINDS]

    def retryable_tokens(self) -> list[str]:
        """Tokens that failed with a retryable error, in request order."""
        return [r.token for r in self.errors if r.is_retryable]


# =============================================================================
# Parsing
# =============================================================================


def _optional_int(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedResponseError(f"{key!r} must be an integer", raw=value)
    return value


def _parse_entry(entry: Any, token: str) -> RecipientResult:
    if not isinstance(entry, dict):
        raise MalformedResponseError("Result entry must be an object", raw=entry)

    has_message = "message_id" in entry
    has_error = "error" in entry
    if has_message == has_error:
        raise MalformedResponseError(
            "Result entry must have exactly one of 'message_id' or 'error'", raw=entry
        )

    if has_error:
        raw_error = entry["error"]
        if not isinstance(raw_error, str):
            raise MalformedResponseError("'error' must be a string", raw=entry)
        classified = classify_error(raw_error)
        return RecipientError(
            token=token,
            error_kind=classified.kind,
            raw_error=classified.raw_error,
            disposition=classified.disposition,
        )

    message_id = entry["message_id"]
    registration_id = entry.get("registration_id")
    if not isinstance(message_id, str):
        raise MalformedResponseError("'message_id' must be a string", raw=entry)
    if registration_id is not None and not isinstance(registration_id, str):
        raise MalformedResponseError("'registration_id' must be a string", raw=entry)
    return RecipientSuccess(token=token, message_id=message_id, registration_id=registration_id)


def _topic_entry(body: dict[str, Any]) -> dict[str, Any]:
    # Topic and condition replies carry a single top-level message_id or error
    entry = {key: body[key] for key in ("message_id", "error") if key in body}
    if isinstance(entry.get("message_id"), int) and not isinstance(entry["message_id"], bool):
        entry["message_id"] = str(entry["message_id"])
    return entry


def parse_send_response(body: Any, payload: Payload) -> SendResponse:
    """
    Parse a 200 reply body into a SendResponse.

    Args:
        body: Decoded JSON reply
        payload: The payload that was sent; its recipients give the expected
            result count and order

    Returns:
        SendResponse with results aligned to ``payload.recipients``

    Raises:
        ResultCountMismatchError: Results do not line up with the request tokens
        MalformedResponseError: Body or an entry does not match the documented shapes
    """
    if not isinstance(body, dict):
        raise MalformedResponseError("Response body must be an object", raw=body)

    recipients = payload.recipients
    raw_results = body.get("results")
    if raw_results is None:
        if isinstance(payload.target, (Token, Tokens)):
            raise MalformedResponseError("Response is missing 'results'", raw=body)
        raw_results = [_topic_entry(body)]
    if not isinstance(raw_results, list):
        raise MalformedResponseError("'results' must be an array", raw=raw_results)
    if len(raw_results) != len(recipients):
        raise ResultCountMismatchError(expected=len(recipients), actual=len(raw_results))

    results = tuple(_parse_entry(entry, token) for entry, token in zip(raw_results, recipients))

    success = sum(1 for r in results if isinstance(r, RecipientSuccess))
    failure = len(results) - success
    canonical_ids = sum(
        1 for r in results if isinstance(r, RecipientSuccess) and r.registration_id is not None
    )

    reported = {
        "success": _optional_int(body, "success"),
        "failure": _optional_int(body, "failure"),
        "canonical_ids": _optional_int(body, "canonical_ids"),
    }
    computed = {"success": success, "failure": failure, "canonical_ids": canonical_ids}
    warnings = tuple(
        f"server reported {name}={reported[name]}, results contain {computed[name]}"
        for name in computed
        if reported[name] is not None and reported[name] != computed[name]
    )
    if warnings:
        logger.warning(
            "FCM aggregate counts disagree with results",
            multicast_id=body.get("multicast_id"),
            reported=reported,
            computed=computed,
        )

    return SendResponse(
        multicast_id=_optional_int(body, "multicast_id"),
        success=success,
        failure=failure,
        canonical_ids=canonical_ids,
        results=results,
        reported_success=reported["success"],
        reported_failure=reported["failure"],
        reported_canonical_ids=reported["canonical_ids"],
        warnings=warnings,
    )


# =============================================================================
# Send outcomes
# =============================================================================


class Delivered(BaseModel):
    """Every recipient accepted the message."""

    model_config = ConfigDict(frozen=True)

    status: Literal["delivered"] = "delivered"
    response: SendResponse
    attempts: int = Field(..., description="HTTP attempts made, including retries")
    status_code: int = 200


class PartialFailure(BaseModel):
    """At least one recipient failed; see ``response.results`` for details."""

    model_config = ConfigDict(frozen=True)

    status: Literal["partial_failure"] = "partial_failure"
    response: SendResponse
    attempts: int = Field(..., description="HTTP attempts made, including retries")
    status_code: int = 200


SendOutcome = Union[Delivered, PartialFailure]
