from __future__ import annotations

from typing import Dict, List, Union

import httpx

from swapbot.integrations.dexscreener.dexscreener_constants import JSON, HTTP_TIMEOUT_SECONDS
from swapbot.integrations.dexscreener.dexscreener_structures import DexscreenerPair
from swapbot.logging.logger import get_logger

log = get_logger(__name__)


async def _http_get_json(client: httpx.AsyncClient, url: str) -> Union[Dict[str, JSON], List[JSON], None]:
    """
    Perform an HTTP GET request and parse the response as JSON.

    Raises:
        httpx.HTTPStatusError on non-2xx responses.
        httpx.TimeoutException / httpx.NetworkError on transport failures.

    Returns:
        The decoded JSON document (object or array) or None if parsing fails.
    """
    response = await client.get(url, timeout=HTTP_TIMEOUT_SECONDS)
    response.raise_for_status()
    try:
        return response.json()
    except ValueError:
        log.warning("[DEX][HTTP] Non-JSON body (HTTP %d) for URL '%s'; treating as no pairs.",
                    response.status_code, url)
        return None


def _parse_pairs_payload(payload: Union[Dict[str, JSON], List[JSON], None]) -> List[DexscreenerPair]:
    """
    Extract the 'pairs' array from a /tokens payload.

    Dexscreener sometimes returns HTTP 200 with {"pairs": null}; that and any other
    missing shape normalize to an empty list.
    """
    if not isinstance(payload, dict):
        return []
    raw_list = payload.get("pairs")
    if not isinstance(raw_list, list):
        return []
    return [DexscreenerPair.from_json(item) for item in raw_list if isinstance(item, dict)]
