from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Optional

import httpx

from swapbot.core.utils.retry_utils import retry_with_backoff
from swapbot.integrations.dexscreener.dexscreener_constants import (
    HTTP_TIMEOUT_SECONDS,
    LATEST_TOKENS_ENDPOINT,
    MAX_RETRIES,
    RETRY_BASE_DELAY_SECONDS,
)
from swapbot.integrations.dexscreener.dexscreener_helpers import _http_get_json, _parse_pairs_payload
from swapbot.integrations.dexscreener.dexscreener_structures import DexscreenerPair
from swapbot.logging.logger import get_logger

log = get_logger(__name__)


class DexscreenerClient:
    """
    Pool discovery against the Dexscreener token endpoint.

    Each attempt carries a 5 s timeout; transient failures (timeouts, 429, 5xx,
    connection errors) are retried with exponential backoff (1 s, 2 s, 4 s).
    """

    def __init__(
            self,
            tokens_endpoint: str = LATEST_TOKENS_ENDPOINT,
            *,
            transport: Optional[httpx.AsyncBaseTransport] = None,
            max_retries: int = MAX_RETRIES,
            base_delay_seconds: float = RETRY_BASE_DELAY_SECONDS,
            sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.tokens_endpoint = tokens_endpoint.rstrip("/")
        self._transport = transport
        self._max_retries = max_retries
        self._base_delay_seconds = base_delay_seconds
        self._sleep = sleep

    async def fetch_pools(self, token_address: str) -> List[DexscreenerPair]:
        """
        Fetch every pool listing Dexscreener knows for `token_address`.

        Returns:
            The listings in payload order; never None (a null 'pairs' becomes []).

        Raises:
            DiscoveryError when the request fails permanently or retries are exhausted.
        """
        url = f"{self.tokens_endpoint}/{token_address}"

        async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS, transport=self._transport) as client:
            async def _attempt() -> List[DexscreenerPair]:
                log.debug("[DEX][FETCH] GET %s", url)
                payload = await _http_get_json(client, url)
                return _parse_pairs_payload(payload)

            pairs = await retry_with_backoff(
                _attempt,
                max_retries=self._max_retries,
                base_delay_seconds=self._base_delay_seconds,
                sleep=self._sleep,
                label=f"Dexscreener fetch for {token_address}",
            )

        log.info("[DEX][FETCH] Received %d pair(s) for token %s.", len(pairs), token_address)
        return pairs
