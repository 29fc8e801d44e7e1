from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import httpx

from swapbot.core.structures.errors import DiscoveryError, DiscoveryErrorKind
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

T = TypeVar("T")

DEFAULT_MAX_RETRIES: int = 3
DEFAULT_BASE_DELAY_SECONDS: float = 1.0


def classify_http_error(error: BaseException) -> Optional[DiscoveryError]:
    """
    Map an HTTP client failure onto the retry taxonomy.

    Returns:
        A DiscoveryError describing the failure, or None when the error is not a
        network error at all (it must then propagate unchanged).
    """
    if isinstance(error, DiscoveryError):
        return error

    if isinstance(error, httpx.HTTPStatusError):
        status_code = error.response.status_code
        if status_code == 429:
            return DiscoveryError(DiscoveryErrorKind.RATE_LIMITED, "rate limited", True, status_code)
        if 500 <= status_code <= 599:
            return DiscoveryError(DiscoveryErrorKind.SERVER_ERROR, "server error", True, status_code)
        return DiscoveryError(DiscoveryErrorKind.CLIENT_ERROR, f"HTTP {status_code}", False, status_code)

    # TimeoutException derives from TransportError, so it is checked first.
    if isinstance(error, httpx.TimeoutException):
        return DiscoveryError(DiscoveryErrorKind.TIMEOUT, "timeout", True)

    # RemoteProtocolError: server dropped the connection mid-response.
    if isinstance(error, (httpx.NetworkError, httpx.RemoteProtocolError)):
        return DiscoveryError(DiscoveryErrorKind.NETWORK_ERROR, "network error", True)

    return None


async def retry_with_backoff(
        operation: Callable[[], Awaitable[T]],
        *,
        max_retries: int = DEFAULT_MAX_RETRIES,
        base_delay_seconds: float = DEFAULT_BASE_DELAY_SECONDS,
        classify: Callable[[BaseException], Optional[DiscoveryError]] = classify_http_error,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        label: str = "request",
) -> T:
    """
    Run `operation` with sequential exponential-backoff retries.

    The first attempt is followed by at most `max_retries` retries; the delay before
    retry n (1-based) is `base_delay_seconds * 2 ** (n - 1)`.

    Raises:
        DiscoveryError immediately for non-retryable failures, or after the last
        attempt for retryable ones. Unclassified exceptions propagate unchanged.
    """
    if max_retries < 0:
        raise ValueError("max_retries must be >= 0")

    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as exc:
            classified = classify(exc)
            if classified is None:
                raise
            if not classified.retryable:
                log.warning("[RETRY] %s failed with non-retryable error: %s", label, classified.message)
                if classified is exc:
                    raise
                raise classified from exc
            if attempt >= max_retries:
                log.warning("[RETRY] %s failed after %d attempt(s): %s", label, attempt + 1, classified.message)
                if classified is exc:
                    raise
                raise classified from exc

            delay = base_delay_seconds * (2 ** attempt)
            attempt += 1
            log.warning(
                "[RETRY] %s failed (%s); retry %d/%d in %.1fs.",
                label,
                classified.message,
                attempt,
                max_retries,
                delay,
            )
            await sleep(delay)
