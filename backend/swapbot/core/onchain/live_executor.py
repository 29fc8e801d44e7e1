from __future__ import annotations

from typing import Optional, Protocol

from swapbot.core.onchain.gas_pricer import get_gas_params
from swapbot.core.onchain.transaction_encoder import TransactionEncoder, build_transaction_encoder
from swapbot.core.structures.structures import FeeData, GasEstimate, SwapOrder
from swapbot.logging.logger import get_logger

log = get_logger(__name__)


class ChainSubmitter(Protocol):
    async def get_fee_data(self) -> FeeData:
        ...

    async def send_transaction(self, to: str, data: bytes, value_wei: int, gas: GasEstimate,
                               gas_limit: Optional[int] = None) -> str:
        ...


class SwapExecutor:
    """
    Prices gas, encodes the order with the configured router convention and submits it.

    Failures from the encoder or the chain client propagate unmodified; there is no resubmission.
    """

    def __init__(self, chain_client: ChainSubmitter, use_universal_router: bool = False,
                 encoder: Optional[TransactionEncoder] = None) -> None:
        self._chain_client = chain_client
        self._encoder = encoder or build_transaction_encoder(use_universal_router)

    async def execute_swap(self, order: SwapOrder) -> str:
        """Submit `order` and return the transaction hash."""
        gas = await get_gas_params(self._chain_client)
        call = self._encoder.encode(order, gas)
        log.info("[EXECUTOR][EVM] Submitting %s to %s (value=%d wei)", call.method, call.target, call.value)
        tx_hash = await self._chain_client.send_transaction(
            to=call.target,
            data=call.data,
            value_wei=call.value,
            gas=call.gas,
        )
        log.info("[EXECUTOR][EVM] Broadcast success — tx=%s", tx_hash)
        return tx_hash
