import time
from typing import Callable


def deadline_from_now(window_seconds: int, clock: Callable[[], float] = time.time) -> int:
    """Absolute unix timestamp (seconds) `window_seconds` from now."""
    return int(clock()) + int(window_seconds)
