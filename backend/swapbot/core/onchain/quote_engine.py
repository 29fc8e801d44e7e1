from __future__ import annotations

from typing import Any, List, Protocol, Sequence

from web3 import Web3

from swapbot.core.onchain.router_abis import PANCAKESWAP_V2_ROUTER, PANCAKESWAP_V2_ROUTER_ABI
from swapbot.core.structures.errors import SwapValidationError
from swapbot.core.structures.structures import SwapQuote
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

BPS_DENOMINATOR: int = 10_000


class ContractReader(Protocol):
    async def call(self, to: str, abi: List[Any], method: str, args: Sequence[Any]) -> Any:
        ...


async def get_expected_output(
        reader: ContractReader,
        amount_in: int,
        token_in: str,
        token_out: str,
        router_address: str = PANCAKESWAP_V2_ROUTER,
) -> int:
    """
    Ask the reference v2 router how much `token_out` an exact `amount_in` of `token_in` buys.

    Reverts (e.g. insufficient liquidity) propagate unchanged.
    """
    path = [Web3.to_checksum_address(token_in), Web3.to_checksum_address(token_out)]
    amounts = await reader.call(router_address, PANCAKESWAP_V2_ROUTER_ABI, "getAmountsOut", [int(amount_in), path])
    # amounts[0] echoes amount_in; amounts[-1] is the output of the last hop.
    expected_output = int(amounts[-1])
    log.debug("[QUOTE] amountIn=%d → expectedOutput=%d", amount_in, expected_output)
    return expected_output


def calculate_amount_out_min(expected_output: int, slippage_bps: int) -> int:
    """
    Minimum acceptable output: floor(expected_output * (10000 - slippage_bps) / 10000).

    Integer arithmetic only.

    Raises:
        SwapValidationError if slippage_bps is outside [0, 10000].
    """
    if isinstance(slippage_bps, bool) or not isinstance(slippage_bps, int):
        raise SwapValidationError("slippage_bps", "an integer number of basis points")
    if slippage_bps < 0 or slippage_bps > BPS_DENOMINATOR:
        raise SwapValidationError(
            "slippage_bps",
            "between 0 and 10000",
            "Slippage must be between 0 and 10000 basis points",
        )
    if expected_output < 0:
        raise SwapValidationError("expected_output", "non-negative")
    return expected_output * (BPS_DENOMINATOR - slippage_bps) // BPS_DENOMINATOR


def build_quote(expected_output: int, slippage_bps: int) -> SwapQuote:
    return SwapQuote(
        expected_output=expected_output,
        min_output=calculate_amount_out_min(expected_output, slippage_bps),
    )
