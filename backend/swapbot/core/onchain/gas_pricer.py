from __future__ import annotations

from typing import Protocol

from web3 import Web3

from swapbot.core.structures.structures import FeeData, GasEstimate
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

DEFAULT_BASE_FEE_WEI: int = Web3.to_wei(5, "gwei")
# Fixed tip, independent of observed fee data.
PRIORITY_FEE_WEI: int = Web3.to_wei(3, "gwei")
GAS_FEE_BUFFER_PERCENT: int = 20


class FeeDataSource(Protocol):
    async def get_fee_data(self) -> FeeData:
        ...


async def get_gas_params(source: FeeDataSource) -> GasEstimate:
    """
    EIP-1559 fees: observed (or default 5 gwei) max fee plus a 20% buffer, fixed 3 gwei tip.

    A missing or zero observed fee counts as unavailable. The max fee is never below the tip,
    otherwise nodes reject the transaction.
    """
    fee_data = await source.get_fee_data()
    observed = fee_data.max_fee_per_gas
    if not observed:
        log.debug("[GAS] No fee data from node; using default base fee %d wei.", DEFAULT_BASE_FEE_WEI)
        observed = DEFAULT_BASE_FEE_WEI

    max_fee_per_gas = max(int(observed) * (100 + GAS_FEE_BUFFER_PERCENT) // 100, PRIORITY_FEE_WEI)
    estimate = GasEstimate(max_fee_per_gas=max_fee_per_gas, max_priority_fee_per_gas=PRIORITY_FEE_WEI)
    log.debug("[GAS] maxFeePerGas=%d maxPriorityFeePerGas=%d", estimate.max_fee_per_gas,
              estimate.max_priority_fee_per_gas)
    return estimate
