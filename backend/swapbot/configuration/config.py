from __future__ import annotations

import math
import os
from dataclasses import dataclass
from decimal import Decimal, ROUND_FLOOR
from typing import Optional

from swapbot.core.structures.errors import SwapValidationError

MIN_SLIPPAGE_PERCENT: float = 0.01
MAX_SLIPPAGE_PERCENT: float = 99.99


def _as_bool(value: str | None, default: bool = False) -> bool:
    """Parse a truthy/falsey string into a boolean."""
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "y", "on"}


class Settings:
    # Wallet / chain
    PRIVATE_KEY: str = os.getenv("PRIVATE_KEY", "")
    RPC_URL: str = os.getenv("RPC_URL", "") or "https://bsc-dataseed.binance.org/"
    CHAIN_ID_KEY: str = os.getenv("CHAIN_ID_KEY", "bsc").lower()
    EXPLORER_TX_URL: str = os.getenv("EXPLORER_TX_URL", "https://bscscan.com/tx/")

    # Swap
    SLIPPAGE: str = os.getenv("SLIPPAGE", "1")
    DEADLINE_SECONDS: int = int(os.getenv("DEADLINE_SECONDS", "30"))
    MIN_LIQUIDITY_USD: float = float(os.getenv("MIN_LIQUIDITY_USD", "1000"))
    USE_UNIVERSAL_ROUTER: bool = _as_bool(os.getenv("USE_UNIVERSAL_ROUTER"), False)

    # Dexscreener client
    DEXSCREENER_BASE_URL: str = os.getenv("DEXSCREENER_BASE_URL", "https://api.dexscreener.com")

    # Debug / logging
    NO_COLOR: bool = _as_bool(os.getenv("NO_COLOR"), False)
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    LOG_LEVEL_SWAPBOT: str = os.getenv("LOG_LEVEL_SWAPBOT", "INFO").upper()
    LOG_LEVEL_LIB_HTTPX: str = os.getenv("LOG_LEVEL_LIB_HTTPX", "WARNING").upper()
    LOG_LEVEL_LIB_HTTPCORE: str = os.getenv("LOG_LEVEL_LIB_HTTPCORE", "WARNING").upper()
    LOG_LEVEL_LIB_WEB3: str = os.getenv("LOG_LEVEL_LIB_WEB3", "WARNING").upper()
    LOG_LEVEL_LIB_ASYNCIO: str = os.getenv("LOG_LEVEL_LIB_ASYNCIO", "WARNING").upper()


settings = Settings()


@dataclass(frozen=True)
class SwapConfig:
    """Validated, per-invocation view of the settings."""
    private_key: str
    rpc_url: str
    chain_id_key: str
    slippage_percent: float
    slippage_bps: int
    deadline_seconds: int
    min_liquidity_usd: float
    use_universal_router: bool
    explorer_tx_url: str = ""
    slippage_overridden: bool = False


def validate_slippage(value: float) -> float:
    """
    Validate a human slippage percentage.

    Raises:
        SwapValidationError if the value is NaN, outside [0.01, 99.99] or has
        more than 2 decimal places.
    """
    if math.isnan(value):
        raise SwapValidationError("slippage", "a number", "Invalid slippage: not a number")
    if value < MIN_SLIPPAGE_PERCENT or value > MAX_SLIPPAGE_PERCENT:
        raise SwapValidationError(
            "slippage",
            f"between {MIN_SLIPPAGE_PERCENT}% and {MAX_SLIPPAGE_PERCENT}%",
            "Slippage must be between 0.01% and 99.99%",
        )
    multiplied = value * 100
    if abs(multiplied - round(multiplied)) > 1e-9:
        raise SwapValidationError(
            "slippage",
            "at most 2 decimal places",
            "Slippage must have at most 2 decimal places",
        )
    return value


def slippage_to_bps(percent: float) -> int:
    """Convert a validated percentage to basis points, i.e. floor(percent * 100)."""
    scaled = Decimal(repr(float(percent))) * 100
    return int(scaled.to_integral_value(rounding=ROUND_FLOOR))


def _parse_slippage(raw: object) -> float:
    if isinstance(raw, (int, float)):
        return float(raw)
    try:
        return float(str(raw).strip())
    except ValueError:
        return math.nan


def resolve_swap_config(source: Settings = settings, slippage_override: Optional[str] = None) -> SwapConfig:
    """
    Build the validated swap configuration; the CLI override wins over the environment.

    All validation happens here, before any network call.
    """
    private_key = (source.PRIVATE_KEY or "").strip()
    if not source.PRIVATE_KEY:
        raise SwapValidationError("PRIVATE_KEY", "required",
                                  "Missing required environment variable: PRIVATE_KEY")
    if not private_key:
        raise SwapValidationError("PRIVATE_KEY", "not blank", "PRIVATE_KEY cannot be empty or whitespace")

    overridden = slippage_override is not None and str(slippage_override).strip() != ""
    raw_slippage = slippage_override if overridden else source.SLIPPAGE
    slippage_percent = validate_slippage(_parse_slippage(raw_slippage))

    deadline_seconds = int(source.DEADLINE_SECONDS)
    if deadline_seconds <= 0:
        raise SwapValidationError("DEADLINE_SECONDS", "greater than 0")

    min_liquidity_usd = float(source.MIN_LIQUIDITY_USD)
    if math.isnan(min_liquidity_usd) or min_liquidity_usd < 0:
        raise SwapValidationError("MIN_LIQUIDITY_USD", "a non-negative number")

    return SwapConfig(
        private_key=private_key,
        rpc_url=source.RPC_URL,
        chain_id_key=source.CHAIN_ID_KEY,
        slippage_percent=slippage_percent,
        slippage_bps=slippage_to_bps(slippage_percent),
        deadline_seconds=deadline_seconds,
        min_liquidity_usd=min_liquidity_usd,
        use_universal_router=bool(source.USE_UNIVERSAL_ROUTER),
        explorer_tx_url=source.EXPLORER_TX_URL,
        slippage_overridden=overridden,
    )
