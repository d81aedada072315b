"""Pytest configuration for FCM SDK tests."""

import pytest

from fcm_sdk import FCMConfig


@pytest.fixture(autouse=True)
def configure_structlog():
    """Configure structlog for testing."""
    import structlog

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.dev.ConsoleRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


@pytest.fixture
def config():
    """Create a test configuration with deterministic backoff."""
    return FCMConfig(
        api_key="test-server-key",
        base_url="http://test-fcm:8000",
        timeout=5.0,
        max_retries=3,
        retry_min_wait=1.0,
        retry_max_wait=10.0,
        retry_jitter=0.0,
    )
