from decimal import Decimal
from typing import Optional


def _tail(address: str, n: int = 6) -> str:
    """Return the last n characters of a lowercased address (for concise logs)."""
    addr = (address or "").lower()
    return addr[-n:] if len(addr) >= n else addr


def format_liquidity(liquidity: Optional[float]) -> str:
    """Format a USD liquidity figure as '$1,234' (no decimals)."""
    return f"${(liquidity or 0.0):,.0f}"


def format_units(value: int, decimals: int = 18) -> str:
    """Render an integer amount in smallest units as a plain decimal string."""
    scaled = Decimal(int(value)).scaleb(-decimals)
    text = format(scaled, "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text or "0"
