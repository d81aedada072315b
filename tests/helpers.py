"""Shared helpers for FCM SDK tests."""

import json
from typing import Any
from unittest.mock import MagicMock


def make_response(
    status_code: int = 200,
    json_body: Any = None,
    headers: dict[str, str] | None = None,
    text: str | None = None,
) -> MagicMock:
    """Build a MagicMock shaped like an httpx.Response."""
    response = MagicMock()
    response.status_code = status_code
    response.headers = headers or {}
    if json_body is None:
        response.json.side_effect = ValueError("No JSON object could be decoded")
    else:
        response.json.return_value = json_body
    if text is None:
        text = json.dumps(json_body) if json_body is not None else ""
    response.text = text
    return response


def success_body(count: int, multicast_id: int = 108) -> dict[str, Any]:
    """A 200 reply body where every recipient succeeded."""
    return {
        "multicast_id": multicast_id,
        "success": count,
        "failure": 0,
        "canonical_ids": 0,
        "results": [{"message_id": f"0:{i}"} for i in range(count)],
    }


class SleepRecorder:
    """Async sleep replacement that records requested delays without waiting."""

    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
