"""FCM SDK Client implementation."""

import asyncio
from typing import Any, Awaitable, Callable, NoReturn

import httpx
import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from .classifier import RetryDisposition, classify_status
from .config import FCMConfig
from .constants import AUTH_ERROR_STATUS_CODES, RATE_LIMIT_STATUS_CODE
from .exceptions import (
    AuthenticationError,
    BadRequestError,
    EndpointNotFoundError,
    FCMError,
    MalformedResponseError,
    RateLimitError,
    RequestFailedError,
    RetryableError,
    SendCancelledError,
    ServerError,
    TransportError,
    UnavailableError,
    UnexpectedStatusError,
)
from .payload import Payload
from .response import (
    Delivered,
    PartialFailure,
    RecipientError,
    SendOutcome,
    SendResponse,
    parse_send_response,
)
from .retry import parse_retry_after, wait_retry_after

logger = structlog.get_logger()


class _AttemptCounter:
    """Attempts made by one send call."""

    def __init__(self) -> None:
        self.attempts = 0


class FCMClient:
    """
    Async client for the FCM HTTP send endpoint.

    ``send`` re-validates the payload before touching the network, performs
    the HTTP round trip, retries whole-request failures (5xx, 429, transport
    errors) with exponential backoff, and returns the per-recipient results.
    Per-recipient failures are never retried automatically, since resending
    a batch could duplicate notifications already delivered to the other
    recipients.

    Example:
        ```python
        from fcm_sdk import FCMClient, FCMConfig, Notification, build_payload

        payload = build_payload(
            ["token-a", "token-b"],
            notification=Notification(title="Hello", body="World"),
        )

        async with FCMClient(FCMConfig(api_key="server-key")) as client:
            outcome = await client.send(payload, deadline=30.0)

        for token, canonical in outcome.response.canonical_updates().items():
            ...
        ```
    """

    def __init__(
        self,
        config: FCMConfig,
        http_client: httpx.AsyncClient | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        """
        Initialize FCM client.

        Args:
            config: Client configuration
            http_client: Optional pre-configured httpx client. If None, one is
                created on first use and closed by ``close()``.
            sleep: Coroutine used for backoff sleeps
        """
        self.config = config
        self._client = http_client
        self._owns_client = http_client is None
        self._sleep = sleep
        logger.info("FCMClient initialized", base_url=self.config.base_url)

    async def __aenter__(self) -> "FCMClient":
        """Async context manager entry."""
        self._get_client()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Async context manager exit."""
        await self.close()

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.config.base_url,
                timeout=self.config.timeout,
                verify=self.config.verify_ssl,
            )
        return self._client

    def _get_headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"key={self.config.api_key}",
        }

    def _handle_error(self, response: httpx.Response) -> NoReturn:
        """
        Handle non-200 HTTP responses.

        Args:
            response: HTTP response

        Raises:
            BadRequestError: For 400 responses
            AuthenticationError: For 401 and 403 responses
            EndpointNotFoundError: For 404 responses
            RateLimitError: For 429 responses
            ServerError: For 5xx responses
            UnexpectedStatusError: For anything else
        """
        status_code = response.status_code
        message = response.text[:400] or f"HTTP {status_code}"

        if classify_status(status_code) is RetryDisposition.retryable:
            retry_after = parse_retry_after(response.headers.get("Retry-After"))
            if status_code == RATE_LIMIT_STATUS_CODE:
                raise RateLimitError(message, retry_after=retry_after)
            raise ServerError(message, status_code=status_code, retry_after=retry_after)

        if status_code == 400:
            raise BadRequestError(message)
        elif status_code in AUTH_ERROR_STATUS_CODES:
            raise AuthenticationError(message, status_code=status_code)
        elif status_code == 404:
            raise EndpointNotFoundError(message)
        else:
            raise UnexpectedStatusError(message, status_code=status_code)

    async def close(self) -> None:
        """Close the HTTP client and cleanup resources."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            logger.info("FCMClient closed")

    # =========================================================================
    # Sending
    # =========================================================================

    async def send(self, payload: Payload, *, deadline: float | None = None) -> SendOutcome:
        """
        Send a payload and interpret the per-recipient results.

        Args:
            payload: Payload built with ``build_payload``
            deadline: Optional overall time limit in seconds, covering every
                attempt and backoff sleep

        Returns:
            Delivered if every recipient succeeded, otherwise PartialFailure
            with per-recipient details in request order

        Raises:
            PayloadValidationError: The payload breaks a provider constraint
            RequestFailedError: The request was rejected outright, the
                response broke the wire contract, or retries ran out
            SendCancelledError: The deadline expired first
        """
        payload.ensure_valid()
        counter = _AttemptCounter()
        try:
            if deadline is None:
                response = await self._send_with_retries(payload, counter)
            else:
                response = await asyncio.wait_for(
                    self._send_with_retries(payload, counter), timeout=deadline
                )
        except asyncio.TimeoutError:
            logger.warning("FCM send cancelled", attempts=counter.attempts, deadline=deadline)
            raise SendCancelledError(counter.attempts, deadline) from None

        if response.all_delivered:
            logger.info(
                "FCM message delivered",
                multicast_id=response.multicast_id,
                success=response.success,
                attempts=counter.attempts,
            )
            return Delivered(response=response, attempts=counter.attempts)

        logger.info(
            "FCM message partially failed",
            multicast_id=response.multicast_id,
            success=response.success,
            failure=response.failure,
            attempts=counter.attempts,
        )
        return PartialFailure(response=response, attempts=counter.attempts)

    def _retrying(self) -> AsyncRetrying:
        backoff = wait_exponential_jitter(
            initial=self.config.retry_min_wait,
            max=self.config.retry_max_wait,
            jitter=self.config.retry_jitter,
        )
        return AsyncRetrying(
            sleep=self._sleep,
            stop=stop_after_attempt(self.config.max_retries + 1),
            wait=wait_retry_after(backoff),
            retry=retry_if_exception_type(RetryableError),
            before_sleep=self._log_retry,
            reraise=True,
        )

    @staticmethod
    def _log_retry(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "Retrying FCM send",
            attempt=retry_state.attempt_number,
            delay=retry_state.next_action.sleep if retry_state.next_action else None,
            error=str(error),
            status_code=getattr(error, "status_code", None),
        )

    async def _send_with_retries(self, payload: Payload, counter: _AttemptCounter) -> SendResponse:
        try:
            async for attempt in self._retrying():
                with attempt:
                    counter.attempts = attempt.retry_state.attempt_number
                    response = await self._send_once(payload)
        except FCMError as e:
            logger.error(
                "FCM send failed",
                attempts=counter.attempts,
                error=e.message,
                error_type=e.__class__.__name__,
                status_code=e.status_code,
            )
            raise RequestFailedError(e, attempts=counter.attempts) from e
        return response

    async def _send_once(self, payload: Payload) -> SendResponse:
        """One HTTP round trip. Raises RetryableError for failures worth retrying."""
        client = self._get_client()
        try:
            response = await client.post(
                self.config.send_path,
                headers=self._get_headers(),
                content=payload.to_json(),
            )
        except httpx.RequestError as e:
            logger.warning("FCM request failed", error=str(e), error_type=e.__class__.__name__)
            raise TransportError(f"FCM request failed: {e}", original_error=e) from e

        if response.status_code != 200:
            self._handle_error(response)

        try:
            body = response.json()
        except ValueError as e:
            raise MalformedResponseError(
                "Response body is not valid JSON", raw=response.text[:400]
            ) from e

        parsed = parse_send_response(body, payload)

        # Nothing was delivered, so resending cannot duplicate anything
        if parsed.results and all(
            isinstance(r, RecipientError) and r.is_retryable for r in parsed.results
        ):
            first = parsed.results[0]
            raise UnavailableError(
                first.error_kind,
                retry_after=parse_retry_after(response.headers.get("Retry-After")),
            )
        return parsed
