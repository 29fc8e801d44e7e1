from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union

from swapbot.core.utils.format_utils import _tail


class PoolVersion(str, Enum):
    """Pool calling convention: constant-product (v2) or concentrated-liquidity (v3)."""
    V2 = "v2"
    V3 = "v3"


@dataclass(frozen=True)
class SelectedPool:
    pair_address: str
    version: PoolVersion
    dex_id: str
    liquidity_usd: float

    def __str__(self) -> str:
        return (f"[dex={self.dex_id} "
                f"version={self.version.value} "
                f"pairAddress=…{_tail(self.pair_address)} "
                f"liquidityUsd={self.liquidity_usd:.0f}]")


class SelectionFailureReason(str, Enum):
    NO_VALID_POOLS = "no_valid_pools"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"


@dataclass(frozen=True)
class SelectionFailure:
    """Tagged result returned by pool selection when no pool qualifies."""
    reason: SelectionFailureReason
    min_liquidity_usd: Optional[float] = None


SelectionResult = Union[SelectedPool, SelectionFailure]


@dataclass(frozen=True)
class SwapQuote:
    """Expected and slippage-protected minimum output, in the output token's smallest unit."""
    expected_output: int
    min_output: int

    def __post_init__(self) -> None:
        if not 0 <= self.min_output <= self.expected_output:
            raise ValueError(
                f"min_output must satisfy 0 <= min_output <= expected_output "
                f"(got min_output={self.min_output}, expected_output={self.expected_output})"
            )


@dataclass(frozen=True)
class FeeData:
    """Raw EIP-1559 fee data as observed on the node; fields are None when unavailable."""
    max_fee_per_gas: Optional[int]
    max_priority_fee_per_gas: Optional[int]


@dataclass(frozen=True)
class GasEstimate:
    max_fee_per_gas: int
    max_priority_fee_per_gas: int


@dataclass(frozen=True)
class SwapOrder:
    """
    Fully resolved swap request. Built once per invocation and consumed by exactly one encoder.

    Attributes:
        token_in: Wrapped native asset address (the router wraps the attached native value).
        token_out: Token to receive.
        amount_in: Native amount in wei, also attached as transaction value.
        quote: Expected and minimum output.
        recipient: Address receiving the output tokens.
        pool: Selected pool (version drives the calling convention).
        deadline: Absolute unix timestamp in seconds.
        dex_id: Router selection hint derived from the pool's DEX identifier.
    """
    token_in: str
    token_out: str
    amount_in: int
    quote: SwapQuote
    recipient: str
    pool: SelectedPool
    deadline: int
    dex_id: str = ""

    @property
    def amount_out_min(self) -> int:
        return self.quote.min_output


@dataclass(frozen=True)
class EncodedCall:
    """
    Router call ready for submission.

    `data` is the complete calldata (selector included). `commands` and `inputs`
    are only populated for the universal router; `method` names the entry point.
    """
    target: str
    method: str
    data: bytes
    value: int
    gas: GasEstimate
    commands: Optional[bytes] = None
    inputs: Tuple[bytes, ...] = ()
