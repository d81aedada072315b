"""Configuration for FCM SDK."""

from dataclasses import dataclass

from .constants import FCM_BASE_URL, FCM_SEND_PATH


@dataclass
class FCMConfig:
    """
    Configuration for FCM SDK client.

    Attributes:
        api_key: FCM server key, sent as ``Authorization: key=<api_key>``
        base_url: Base URL override (default: https://fcm.googleapis.com)
        send_path: Path of the send endpoint (default: /fcm/send)
        timeout: Request timeout in seconds (default: 10.0)
        max_retries: Retries after the first attempt for retryable failures (default: 3)
        retry_min_wait: Base backoff delay in seconds, doubled per attempt (default: 1.0)
        retry_max_wait: Backoff cap in seconds (default: 30.0)
        retry_jitter: Maximum random seconds added to each backoff, at most
            retry_min_wait (default: 1.0)
        verify_ssl: Whether to verify SSL certificates (default: True)

    Example:
        ```python
        config = FCMConfig(
            api_key="your-server-key",
            timeout=5.0,
            max_retries=5,
        )
        ```
    """

    api_key: str
    base_url: str = FCM_BASE_URL
    send_path: str = FCM_SEND_PATH
    timeout: float = 10.0
    max_retries: int = 3
    retry_min_wait: float = 1.0
    retry_max_wait: float = 30.0
    retry_jitter: float = 1.0
    verify_ssl: bool = True

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.api_key:
            raise ValueError("api_key is required")

        # Remove trailing slash from base_url
        self.base_url = self.base_url.rstrip("/")
        if not self.send_path.startswith("/"):
            self.send_path = "/" + self.send_path

        if self.timeout <= 0:
            raise ValueError("timeout must be greater than 0")

        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")

        if self.retry_min_wait < 0:
            raise ValueError("retry_min_wait must be non-negative")

        if self.retry_max_wait < self.retry_min_wait:
            raise ValueError("retry_max_wait must be >= retry_min_wait")

        if self.retry_jitter < 0:
            raise ValueError("retry_jitter must be non-negative")

        # successive backoff delays only stay non-decreasing while jitter <= base delay
        if self.retry_jitter > self.retry_min_wait:
            raise ValueError("retry_jitter must be <= retry_min_wait")

    @property
    def send_url(self) -> str:
        return f"{self.base_url}{self.send_path}"
