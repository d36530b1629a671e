"""HTTP transport with exponential backoff for rate-limited responses.

Only HTTP 429 is retried here. Network failures and every other non-200
status are reported immediately as a ``FetchError`` so that the caller can
record them against the entity being fetched.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable

import requests

from azrg_inventory.core.config import RetryConfig
from azrg_inventory.core.constants import (
    ERROR_BODY_PREVIEW_CHARS,
    HTTP_STATUS_OK,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    HTTP_TIMEOUT_SECONDS,
)
from azrg_inventory.core.exceptions import (
    FETCH_HTTP_STATUS,
    FETCH_RATE_LIMITED,
    FETCH_TRANSPORT,
    FetchError,
)


def _body_preview(response: requests.Response) -> str:
    try:
        text = response.text
    except Exception:
        return ""
    return text[:ERROR_BODY_PREVIEW_CHARS]


class RateLimitedTransport:
    """Issue GET requests, retrying 429 responses with backoff and jitter.

    Args:
        session: ``requests.Session`` (or compatible object with ``get``)
        retry_config: Retry cap, base delay and jitter bounds
        timeout: Per-request timeout in seconds
        logger: Logger for retry messages
        sleep: Sleep function, replaceable in tests
        rng: Random source for jitter, replaceable in tests
        quiet_retries: Log retries at DEBUG instead of WARNING
    """

    def __init__(
        self,
        session: requests.Session,
        retry_config: RetryConfig | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        logger: logging.Logger | None = None,
        sleep: Callable[[float], None] = time.sleep,
        rng: random.Random | None = None,
        quiet_retries: bool = False,
    ):
        self.session = session
        self.retry_config = retry_config or RetryConfig()
        self.timeout = timeout
        self.logger = logger or logging.getLogger(__name__)
        self.sleep = sleep
        self.rng = rng or random.Random()
        self.quiet_retries = quiet_retries

    def fetch(self, url: str, operation_name: str = "request") -> requests.Response:
        """Return the successful response for ``url``.

        Raises:
            FetchError: ``transport`` for network failures, ``rate-limited-exhausted``
                once the retry cap is exceeded, ``http-status`` for any other
                non-200 status.
        """
        max_retries = max(0, self.retry_config.max_retries)
        retry_log = self.logger.debug if self.quiet_retries else self.logger.warning

        for attempt in range(max_retries + 1):
            try:
                response = self.session.get(url, timeout=self.timeout)
            except requests.RequestException as e:
                raise FetchError(
                    FETCH_TRANSPORT,
                    f"Request failed for {operation_name}: {type(e).__name__}",
                    attempts=attempt + 1,
                    original_error=e,
                ) from e

            if response.status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
                body = _body_preview(response)
                response.close()
                if attempt >= max_retries:
                    self.logger.error(f"Rate limit retries exhausted for {operation_name} after {max_retries} retries")
                    raise FetchError(
                        FETCH_RATE_LIMITED,
                        f"API request failed after {max_retries} retries",
                        status_code=response.status_code,
                        body=body,
                        attempts=attempt + 1,
                    )
                delay = self.retry_config.delay_for(attempt, self.rng)
                retry_log(
                    f"⚠ Rate limited (429) on {operation_name}, retrying in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{max_retries})"
                )
                self.sleep(delay)
                continue

            if response.status_code != HTTP_STATUS_OK:
                body = _body_preview(response)
                response.close()
                raise FetchError(
                    FETCH_HTTP_STATUS,
                    "API request failed",
                    status_code=response.status_code,
                    body=body,
                    attempts=attempt + 1,
                )

            if attempt > 0:
                self.logger.info(f"✓ {operation_name} succeeded on attempt {attempt + 1}/{max_retries + 1}")
            return response

        # range() above always returns or raises on its last iteration
        raise AssertionError("unreachable")
