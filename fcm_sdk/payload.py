"""Notification payload model and build-time validation.

A ``Payload`` is what ``FCMClient.send`` puts on the wire. Build one with
``build_payload``, which checks every provider constraint up front so that
an invalid request never reaches the network.

Example:
    ```python
    from fcm_sdk import Notification, DeliveryOptions, Tokens, build_payload

    payload = build_payload(
        Tokens(tokens=["token-a", "token-b"]),
        notification=Notification(title="Match starts", body="Kick-off in 10 minutes"),
        data={"match_id": 42},
        options=DeliveryOptions(priority="high", time_to_live=600),
    )
    ```
"""

import json
from enum import Enum
from typing import Any, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import (
    MAX_PAYLOAD_BYTES,
    MAX_REGISTRATION_IDS,
    MAX_TIME_TO_LIVE,
    RESERVED_DATA_KEY_PREFIXES,
    RESERVED_DATA_KEYS,
    TOPIC_PREFIX,
)
from .exceptions import (
    DataNotSerializableError,
    EmptyTargetSetError,
    InvalidTimeToLiveError,
    PayloadTooLargeError,
    PayloadValidationError,
    ReservedDataKeyError,
    TargetSetTooLargeError,
)


def _dumps(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False, allow_nan=False).encode(
        "utf-8"
    )


# =============================================================================
# Enums
# =============================================================================


class Priority(str, Enum):
    """Message priority."""

    normal = "normal"
    high = "high"


# =============================================================================
# Targets
# =============================================================================


class Token(BaseModel):
    """A single registration token."""

    model_config = ConfigDict(frozen=True)

    token: str = Field(..., description="Registration token")

    @property
    def recipients(self) -> tuple[str, ...]:
        return (self.token,)

    def to_wire(self) -> dict[str, Any]:
        return {"to": self.token}


class Tokens(BaseModel):
    """A multicast set of registration tokens, in request order."""

    model_config = ConfigDict(frozen=True)

    tokens: tuple[str, ...] = Field(..., description="Registration tokens")

    @property
    def recipients(self) -> tuple[str, ...]:
        return self.tokens

    def to_wire(self) -> dict[str, Any]:
        return {"registration_ids": list(self.tokens)}


class Topic(BaseModel):
    """A topic name, with or without the ``/topics/`` prefix."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Topic name without the /topics/ prefix")

    @field_validator("name")
    @classmethod
    def strip_prefix(cls, value: str) -> str:
        if value.startswith(TOPIC_PREFIX):
            return value[len(TOPIC_PREFIX) :]
        return value

    @property
    def recipients(self) -> tuple[str, ...]:
        return (TOPIC_PREFIX + self.name,)

    def to_wire(self) -> dict[str, Any]:
        return {"to": TOPIC_PREFIX + self.name}


class Condition(BaseModel):
    """A topic condition such as ``'news' in topics && 'sports' in topics``."""

    model_config = ConfigDict(frozen=True)

    expression: str = Field(..., description="Topic condition expression")

    @property
    def recipients(self) -> tuple[str, ...]:
        return (self.expression,)

    def to_wire(self) -> dict[str, Any]:
        return {"condition": self.expression}


Target = Union[Token, Tokens, Topic, Condition]


# =============================================================================
# Notification & options
# =============================================================================


class Notification(BaseModel):
    """Human-visible notification fields. Every field is optional."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str | None = None
    body: str | None = None
    icon: str | None = None
    sound: str | None = None
    badge: str | None = None
    tag: str | None = None
    color: str | None = Field(None, description="Icon color in #rrggbb format")
    click_action: str | None = None
    body_loc_key: str | None = None
    body_loc_args: list[str] | None = None
    title_loc_key: str | None = None
    title_loc_args: list[str] | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class DeliveryOptions(BaseModel):
    """Delivery options sent alongside the notification."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    priority: Priority | None = None
    time_to_live: int | None = Field(
        None, description="Seconds to keep the message while the device is offline"
    )
    collapse_key: str | None = None
    restricted_package_name: str | None = None
    dry_run: bool | None = None
    content_available: bool | None = None
    mutable_content: bool | None = None
    delay_while_idle: bool | None = None

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_none=True)


# =============================================================================
# Payload
# =============================================================================


class Payload(BaseModel):
    """A validated send request. Construct through ``build_payload``."""

    model_config = ConfigDict(frozen=True)

    target: Target
    notification: Notification | None = None
    data: dict[str, Any] | None = None
    options: DeliveryOptions = Field(default_factory=DeliveryOptions)

    @property
    def recipients(self) -> tuple[str, ...]:
        """Recipients in the order the provider reports results for them."""
        return self.target.recipients

    def to_wire(self) -> dict[str, Any]:
        """Return the request body as a dict."""
        wire = self.target.to_wire()
        if self.notification is not None:
            wire["notification"] = self.notification.to_wire()
        if self.data is not None:
            wire["data"] = self.data
        wire.update(self.options.to_wire())
        return wire

    def to_json(self) -> bytes:
        """Return the request body as compact UTF-8 JSON."""
        return _dumps(self.to_wire())

    def ensure_valid(self) -> "Payload":
        """Re-run build-time validation; raises PayloadValidationError subclasses."""
        return build_payload(self.target, self.notification, self.data, self.options)

    @property
    def message_size(self) -> int:
        """Size in bytes of the serialized notification and data."""
        return _message_size(self.notification, self.data)

    @classmethod
    def from_wire(cls, wire: dict[str, Any]) -> "Payload":
        """Rebuild a Payload from a request body produced by ``to_wire``."""
        if "registration_ids" in wire:
            target: Target = Tokens(tokens=wire["registration_ids"])
        elif "condition" in wire:
            target = Condition(expression=wire["condition"])
        elif "to" not in wire:
            raise PayloadValidationError(
                "Wire payload needs one of 'to', 'registration_ids' or 'condition'"
            )
        elif str(wire["to"]).startswith(TOPIC_PREFIX):
            target = Topic(name=wire["to"])
        else:
            target = Token(token=wire["to"])

        notification = wire.get("notification")
        options = {name: wire[name] for name in DeliveryOptions.model_fields if name in wire}
        return build_payload(
            target,
            notification=Notification(**notification) if notification is not None else None,
            data=wire.get("data"),
            options=DeliveryOptions(**options),
        )


def _message_size(notification: Notification | None, data: dict[str, Any] | None) -> int:
    message: dict[str, Any] = {}
    if notification is not None:
        message["notification"] = notification.to_wire()
    if data is not None:
        message["data"] = data
    return len(_dumps(message))


def _coerce_target(target: Target | str | list[str] | tuple[str, ...]) -> Target:
    if isinstance(target, str):
        return Token(token=target)
    if isinstance(target, (list, tuple)):
        return Tokens(tokens=tuple(target))
    return target


def _check_data(data: dict[str, Any]) -> None:
    for key in data:
        if not isinstance(key, str):
            raise DataNotSerializableError(f"key {key!r} is not a string")
        lowered = key.lower()
        if lowered in RESERVED_DATA_KEYS or lowered.startswith(RESERVED_DATA_KEY_PREFIXES):
            raise ReservedDataKeyError(key)
    try:
        _dumps(data)
    except (TypeError, ValueError) as e:
        raise DataNotSerializableError(str(e)) from e


def build_payload(
    target: Target | str | list[str] | tuple[str, ...],
    notification: Notification | dict[str, Any] | None = None,
    data: dict[str, Any] | None = None,
    options: DeliveryOptions | dict[str, Any] | None = None,
) -> Payload:
    """
    Build and validate a Payload.

    Args:
        target: Token, Tokens, Topic or Condition. A bare string is a single
            token; a list or tuple of strings is a token set.
        notification: Human-visible notification fields
        data: Custom key/value data for the receiving app
        options: Delivery options

    Returns:
        Validated, immutable Payload

    Raises:
        EmptyTargetSetError: Token set is empty
        TargetSetTooLargeError: Token set exceeds the provider maximum
        ReservedDataKeyError: Data uses a reserved key
        InvalidTimeToLiveError: time_to_live outside 0..4 weeks
        DataNotSerializableError: Data cannot be encoded as JSON
        PayloadTooLargeError: Serialized notification and data exceed 4096 bytes
    """
    resolved = _coerce_target(target)
    if isinstance(resolved, Tokens):
        if not resolved.tokens:
            raise EmptyTargetSetError()
        if len(resolved.tokens) > MAX_REGISTRATION_IDS:
            raise TargetSetTooLargeError(len(resolved.tokens), MAX_REGISTRATION_IDS)

    if isinstance(notification, dict):
        notification = Notification(**notification)
    if options is None:
        options = DeliveryOptions()
    elif isinstance(options, dict):
        options = DeliveryOptions(**options)

    ttl = options.time_to_live
    if ttl is not None and not 0 <= ttl <= MAX_TIME_TO_LIVE:
        raise InvalidTimeToLiveError(ttl, MAX_TIME_TO_LIVE)

    if data is not None:
        _check_data(data)

    size = _message_size(notification, data)
    if size > MAX_PAYLOAD_BYTES:
        raise PayloadTooLargeError(size, MAX_PAYLOAD_BYTES)

    return Payload(target=resolved, notification=notification, data=data, options=options)
