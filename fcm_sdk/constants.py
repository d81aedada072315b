"""Constants for the FCM HTTP send endpoint."""

# Endpoint
FCM_BASE_URL = "https://fcm.googleapis.com"
FCM_SEND_PATH = "/fcm/send"

# Request limits
MAX_REGISTRATION_IDS = 1000
MAX_PAYLOAD_BYTES = 4096
MAX_TIME_TO_LIVE = 2_419_200  # 4 weeks

TOPIC_PREFIX = "/topics/"

# Keys that may not appear in the custom data mapping
RESERVED_DATA_KEYS = frozenset(
    {
        "from",
        "message_type",
        "notification",
        "data",
        "to",
        "registration_ids",
        "condition",
        "collapse_key",
        "priority",
        "time_to_live",
        "restricted_package_name",
        "dry_run",
        "content_available",
        "mutable_content",
        "delay_while_idle",
    }
)
RESERVED_DATA_KEY_PREFIXES = ("google", "gcm")

# HTTP status code to retry behavior mapping
RATE_LIMIT_STATUS_CODE = 429
AUTH_ERROR_STATUS_CODES = {401, 403}
