"""
Basic usage example for FCM SDK.

This example demonstrates:
- Building a multicast payload
- Sending it with a deadline
- Reading per-recipient results (stale tokens, canonical IDs)
"""

import asyncio
import os

from fcm_sdk import (
    DeliveryOptions,
    FCMClient,
    FCMConfig,
    Notification,
    PartialFailure,
    PayloadValidationError,
    RequestFailedError,
    SendCancelledError,
    build_payload,
)


async def main() -> None:
    """Run basic usage example."""
    config = FCMConfig(api_key=os.environ.get("FCM_SERVER_KEY", "your-server-key"))

    print("=== FCM SDK Basic Usage Example ===\n")

    # 1. Build the payload
    print("1. Building payload...")
    try:
        payload = build_payload(
            ["device-token-1", "device-token-2"],
            notification=Notification(title="Match update", body="2:1 in the 78th minute"),
            data={"match_id": 42},
            options=DeliveryOptions(priority="high", time_to_live=600, dry_run=True),
        )
    except PayloadValidationError as e:
        print(f"✗ Invalid payload: {e}\n")
        return
    print(f"✓ Payload is {payload.message_size} bytes\n")

    # 2. Send it
    print("2. Sending...")
    async with FCMClient(config) as client:
        try:
            outcome = await client.send(payload, deadline=30.0)
        except RequestFailedError as e:
            print(f"✗ Send failed after {e.attempts} attempt(s): {e.cause!r}\n")
            return
        except SendCancelledError as e:
            print(f"✗ {e}\n")
            return

    # 3. Inspect per-recipient results
    response = outcome.response
    print(f"✓ {response.success} delivered, {response.failure} failed ({outcome.attempts} attempt(s))")
    if isinstance(outcome, PartialFailure):
        for result in response.errors:
            print(f"  {result.token}: {result.raw_error} ({result.disposition.value})")
        print(f"  Drop: {response.invalid_tokens()}")
    for token, canonical in response.canonical_updates().items():
        print(f"  Replace {token} with {canonical}")


if __name__ == "__main__":
    asyncio.run(main())
