from typing import Union, Dict, List

from swapbot.configuration.config import settings

BASE_URL: str = settings.DEXSCREENER_BASE_URL.rstrip("/")
LATEST_TOKENS_ENDPOINT: str = f"{BASE_URL}/latest/dex/tokens"

HTTP_TIMEOUT_SECONDS: float = 5.0
MAX_RETRIES: int = 3
RETRY_BASE_DELAY_SECONDS: float = 1.0

JSONScalar = Union[str, int, float, bool, None]
JSON = Union[JSONScalar, Dict[str, "JSON"], List["JSON"]]
