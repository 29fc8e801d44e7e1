from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from swapbot.integrations.dexscreener.dexscreener_constants import JSON


def _to_optional_float(value: JSON) -> Optional[float]:
    """Convert a JSON scalar into an optional float, returning None on failure."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _to_str(value: JSON) -> str:
    return str(value) if isinstance(value, (str, int)) and not isinstance(value, bool) else ""


@dataclass(frozen=True)
class DexscreenerToken:
    address: str
    name: str
    symbol: str

    @staticmethod
    def from_json(payload: Dict[str, JSON]) -> "DexscreenerToken":
        return DexscreenerToken(
            address=_to_str(payload.get("address")),
            name=_to_str(payload.get("name")),
            symbol=_to_str(payload.get("symbol")),
        )


@dataclass(frozen=True)
class DexscreenerLiquidityStats:
    """
    Liquidity snapshot. `usd` is normalized to 0.0 when the API omits it so that
    selection never has to re-check for absence; `base`/`quote` stay optional.
    """
    usd: float
    base: Optional[float]
    quote: Optional[float]

    @staticmethod
    def from_json(payload: Dict[str, JSON]) -> "DexscreenerLiquidityStats":
        return DexscreenerLiquidityStats(
            usd=_to_optional_float(payload.get("usd")) or 0.0,
            base=_to_optional_float(payload.get("base")),
            quote=_to_optional_float(payload.get("quote")),
        )


@dataclass(frozen=True)
class DexscreenerPair:
    """
    Strongly-typed representation of a Dexscreener 'pair' document.

    Field names are pythonic; they intentionally differ from the raw JSON keys.
    `labels` keeps the payload order, which matters for version resolution.
    """
    chain_id: str
    pair_address: str
    base_token: DexscreenerToken
    quote_token: DexscreenerToken
    labels: Tuple[str, ...]
    liquidity: DexscreenerLiquidityStats
    dex_id: str
    url: str

    @property
    def liquidity_usd(self) -> float:
        return self.liquidity.usd

    @staticmethod
    def from_json(payload: Dict[str, JSON]) -> "DexscreenerPair":
        base = payload.get("baseToken")
        base_token = DexscreenerToken.from_json(base) if isinstance(base, dict) else DexscreenerToken("", "", "")
        quote = payload.get("quoteToken")
        quote_token = DexscreenerToken.from_json(quote) if isinstance(quote, dict) else DexscreenerToken("", "", "")
        labels_raw = payload.get("labels")
        labels = tuple(label for label in labels_raw if isinstance(label, str)) if isinstance(labels_raw, list) else ()
        liquidity_raw = payload.get("liquidity")
        liquidity = DexscreenerLiquidityStats.from_json(liquidity_raw) \
            if isinstance(liquidity_raw, dict) else DexscreenerLiquidityStats(0.0, None, None)
        return DexscreenerPair(
            chain_id=_to_str(payload.get("chainId")),
            pair_address=_to_str(payload.get("pairAddress")),
            base_token=base_token,
            quote_token=quote_token,
            labels=labels,
            liquidity=liquidity,
            dex_id=_to_str(payload.get("dexId")),
            url=_to_str(payload.get("url")),
        )
