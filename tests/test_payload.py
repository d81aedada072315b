"""Tests for payload building and validation."""

import json

import pytest

from fcm_sdk import (
    Condition,
    DataNotSerializableError,
    DeliveryOptions,
    EmptyTargetSetError,
    InvalidTimeToLiveError,
    Notification,
    Payload,
    PayloadTooLargeError,
    PayloadValidationError,
    Priority,
    ReservedDataKeyError,
    TargetSetTooLargeError,
    Token,
    Tokens,
    Topic,
    build_payload,
)


# =============================================================================
# Targets
# =============================================================================


class TestTargets:
    """Tests for target wire encoding."""

    def test_single_token(self):
        payload = build_payload(Token(token="abc"))
        assert payload.to_wire() == {"to": "abc"}
        assert payload.recipients == ("abc",)

    def test_bare_string_is_single_token(self):
        payload = build_payload("abc")
        assert payload.target == Token(token="abc")

    def test_token_list_is_multicast(self):
        payload = build_payload(["a", "b", "c"])
        assert payload.target == Tokens(tokens=("a", "b", "c"))
        assert payload.to_wire() == {"registration_ids": ["a", "b", "c"]}

    def test_multicast_keeps_order_and_duplicates(self):
        payload = build_payload(Tokens(tokens=["b", "a", "b"]))
        assert payload.recipients == ("b", "a", "b")

    def test_topic_gets_prefix(self):
        payload = build_payload(Topic(name="news"))
        assert payload.to_wire() == {"to": "/topics/news"}

    def test_topic_prefix_not_doubled(self):
        assert Topic(name="/topics/news") == Topic(name="news")
        assert build_payload(Topic(name="/topics/news")).to_wire() == {"to": "/topics/news"}

    def test_condition(self):
        expression = "'news' in topics && 'sports' in topics"
        payload = build_payload(Condition(expression=expression))
        assert payload.to_wire() == {"condition": expression}

    def test_empty_token_set_rejected(self):
        with pytest.raises(EmptyTargetSetError):
            build_payload(Tokens(tokens=[]))

    def test_token_set_at_limit_accepted(self):
        payload = build_payload([f"t{i}" for i in range(1000)])
        assert len(payload.recipients) == 1000

    def test_token_set_too_large_rejected(self):
        with pytest.raises(TargetSetTooLargeError) as exc_info:
            build_payload([f"t{i}" for i in range(1001)])
        assert exc_info.value.count == 1001
        assert exc_info.value.limit == 1000
        assert isinstance(exc_info.value, PayloadValidationError)


# =============================================================================
# Notification, data and options
# =============================================================================


class TestPayloadFields:
    """Tests for notification, data and option encoding."""

    def test_omitted_fields_are_not_serialized(self):
        payload = build_payload("abc", notification=Notification(title="Hi"))
        assert payload.to_wire() == {"to": "abc", "notification": {"title": "Hi"}}

    def test_notification_from_dict(self):
        payload = build_payload("abc", notification={"title": "Hi", "click_action": "OPEN"})
        assert payload.notification == Notification(title="Hi", click_action="OPEN")

    def test_notification_rejects_unknown_fields(self):
        with pytest.raises(ValueError):
            Notification(headline="Hi")

    def test_full_wire_format(self):
        payload = build_payload(
            ["a", "b"],
            notification=Notification(
                title="Match", body="Kick-off", icon="ball", sound="default",
                badge="3", click_action="OPEN_MATCH", color="#ff0000",
            ),
            data={"match_id": 42, "teams": ["A", "B"], "meta": {"live": True}},
            options=DeliveryOptions(
                priority=Priority.high,
                time_to_live=600,
                collapse_key="score",
                restricted_package_name="com.example.app",
                dry_run=True,
            ),
        )
        assert json.loads(payload.to_json()) == {
            "registration_ids": ["a", "b"],
            "notification": {
                "title": "Match",
                "body": "Kick-off",
                "icon": "ball",
                "sound": "default",
                "badge": "3",
                "click_action": "OPEN_MATCH",
                "color": "#ff0000",
            },
            "data": {"match_id": 42, "teams": ["A", "B"], "meta": {"live": True}},
            "priority": "high",
            "time_to_live": 600,
            "collapse_key": "score",
            "restricted_package_name": "com.example.app",
            "dry_run": True,
        }

    def test_options_from_dict(self):
        payload = build_payload("abc", options={"priority": "normal", "content_available": True})
        assert payload.to_wire() == {"to": "abc", "priority": "normal", "content_available": True}

    @pytest.mark.parametrize("key", ["from", "notification", "collapse_key", "google.sent", "gcm.n", "GoogleThing"])
    def test_reserved_data_key_rejected(self, key):
        with pytest.raises(ReservedDataKeyError) as exc_info:
            build_payload("abc", data={"ok": 1, key: "x"})
        assert exc_info.value.key == key
        assert exc_info.value.details == {"key": key}

    def test_non_string_data_key_rejected(self):
        with pytest.raises(DataNotSerializableError):
            build_payload("abc", data={1: "x"})

    def test_non_serializable_data_rejected(self):
        with pytest.raises(DataNotSerializableError):
            build_payload("abc", data={"when": object()})

    def test_nan_data_rejected(self):
        with pytest.raises(DataNotSerializableError):
            build_payload("abc", data={"score": float("nan")})

    @pytest.mark.parametrize("ttl", [0, 3600, 2_419_200])
    def test_ttl_in_range_accepted(self, ttl):
        payload = build_payload("abc", options=DeliveryOptions(time_to_live=ttl))
        assert payload.to_wire()["time_to_live"] == ttl

    @pytest.mark.parametrize("ttl", [-1, 2_419_201])
    def test_ttl_out_of_range_rejected(self, ttl):
        with pytest.raises(InvalidTimeToLiveError) as exc_info:
            build_payload("abc", options=DeliveryOptions(time_to_live=ttl))
        assert exc_info.value.time_to_live == ttl


# =============================================================================
# Size ceiling
# =============================================================================


class TestPayloadSize:
    """Tests for the 4096-byte message size ceiling."""

    def test_payload_at_limit_accepted(self):
        # {"data":{"k":"..."}} is 17 bytes plus the value
        payload = build_payload("abc", data={"k": "x" * 4079})
        assert payload.message_size == 4096

    def test_payload_over_limit_rejected(self):
        with pytest.raises(PayloadTooLargeError) as exc_info:
            build_payload("abc", data={"k": "x" * 4080})
        assert exc_info.value.measured_bytes == 4097
        assert exc_info.value.limit == 4096

    def test_size_counts_utf8_bytes(self):
        with pytest.raises(PayloadTooLargeError):
            build_payload("abc", notification=Notification(body="ż" * 2100))

    def test_target_does_not_count_toward_size(self):
        tokens = ["x" * 150 for _ in range(1000)]
        payload = build_payload(tokens, notification=Notification(title="Hi"))
        assert payload.message_size < 100


# =============================================================================
# Round trip & immutability
# =============================================================================


class TestPayloadRoundTrip:
    """Tests for wire round trips."""

    @pytest.mark.parametrize(
        "target",
        [
            Token(token="abc"),
            Tokens(tokens=("a", "b")),
            Topic(name="news"),
            Condition(expression="'a' in topics || 'b' in topics"),
        ],
    )
    def test_round_trip(self, target):
        payload = build_payload(
            target,
            notification=Notification(title="T", body_loc_key="KEY", body_loc_args=["1"]),
            data={"nested": {"list": [1, 2.5, None, "s"]}},
            options=DeliveryOptions(priority="high", time_to_live=0, mutable_content=True),
        )
        rebuilt = Payload.from_wire(json.loads(payload.to_json()))
        assert rebuilt == payload

    def test_round_trip_without_optionals(self):
        payload = build_payload("abc")
        assert Payload.from_wire(json.loads(payload.to_json())) == payload

    def test_from_wire_without_target_rejected(self):
        with pytest.raises(PayloadValidationError, match="registration_ids"):
            Payload.from_wire({"notification": {"title": "T"}, "data": {"k": "v"}})

    def test_payload_is_immutable(self):
        payload = build_payload("abc")
        with pytest.raises(ValueError):
            payload.data = {"k": "v"}

    def test_ensure_valid_catches_directly_constructed_payload(self):
        payload = Payload(target=Tokens(tokens=()))
        with pytest.raises(EmptyTargetSetError):
            payload.ensure_valid()
