"""Tests for FCMConfig."""

import pytest

from fcm_sdk import FCMConfig


def test_config_defaults():
    """Test default configuration values."""
    config = FCMConfig(api_key="test-key")
    assert config.base_url == "https://fcm.googleapis.com"
    assert config.send_path == "/fcm/send"
    assert config.send_url == "https://fcm.googleapis.com/fcm/send"
    assert config.timeout == 10.0
    assert config.max_retries == 3
    assert config.retry_min_wait == 1.0
    assert config.retry_max_wait == 30.0
    assert config.retry_jitter == 1.0
    assert config.verify_ssl is True


def test_config_custom_values():
    """Test configuration with custom values."""
    config = FCMConfig(
        api_key="test-key",
        base_url="http://fcm-proxy:8000",
        timeout=2.5,
        max_retries=5,
    )
    assert config.base_url == "http://fcm-proxy:8000"
    assert config.timeout == 2.5
    assert config.max_retries == 5


def test_config_trailing_slash_removed():
    """Test that trailing slash is removed from base_url."""
    config = FCMConfig(api_key="test-key", base_url="http://fcm-proxy:8000/")
    assert config.base_url == "http://fcm-proxy:8000"


def test_config_send_path_gets_leading_slash():
    """Test that send_path is normalized to start with a slash."""
    config = FCMConfig(api_key="test-key", send_path="fcm/send")
    assert config.send_path == "/fcm/send"


def test_config_requires_api_key():
    """Test that an empty API key raises ValueError."""
    with pytest.raises(ValueError, match="api_key is required"):
        FCMConfig(api_key="")


def test_config_invalid_timeout():
    """Test that invalid timeout raises ValueError."""
    with pytest.raises(ValueError, match="timeout must be greater than 0"):
        FCMConfig(api_key="test-key", timeout=0)


def test_config_invalid_max_retries():
    """Test that invalid max_retries raises ValueError."""
    with pytest.raises(ValueError, match="max_retries must be non-negative"):
        FCMConfig(api_key="test-key", max_retries=-1)


def test_config_invalid_retry_wait():
    """Test that invalid retry wait times raise ValueError."""
    with pytest.raises(ValueError, match="retry_max_wait must be >= retry_min_wait"):
        FCMConfig(api_key="test-key", retry_min_wait=10, retry_max_wait=5)


def test_config_invalid_jitter():
    """Test that negative jitter raises ValueError."""
    with pytest.raises(ValueError, match="retry_jitter must be non-negative"):
        FCMConfig(api_key="test-key", retry_jitter=-0.5)


def test_config_jitter_larger_than_min_wait():
    """Test that jitter above the base backoff delay raises ValueError."""
    with pytest.raises(ValueError, match="retry_jitter must be <= retry_min_wait"):
        FCMConfig(api_key="test-key", retry_min_wait=0.1, retry_jitter=5.0)


def test_config_jitter_equal_to_min_wait():
    """Test that jitter equal to the base backoff delay is accepted."""
    config = FCMConfig(api_key="test-key", retry_min_wait=2.0, retry_jitter=2.0)
    assert config.retry_jitter == 2.0
