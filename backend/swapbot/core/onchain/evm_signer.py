from __future__ import annotations

"""
EVM chain client built on web3's async API and a local eth-account key.

Design goals:
- Read-only contract calls, fee data and signed EIP-1559 submissions behind one object.
- Sign locally; never log secrets or raw calldata.

Environment:
- settings.RPC_URL
- settings.PRIVATE_KEY
"""

from typing import Any, List, Optional, Sequence

from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.exceptions import ContractLogicError
from web3.types import TxParams

from swapbot.core.structures.structures import FeeData, GasEstimate
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

FALLBACK_PRIORITY_FEE_WEI: int = Web3.to_wei(1, "gwei")
FALLBACK_GAS_LIMIT: int = 400000


def _is_revert(error: BaseException) -> bool:
    """True when a node error reports that the call itself would revert."""
    return isinstance(error, ContractLogicError) or "revert" in str(error).lower()


class EvmChainClient:
    """Read from and sign/broadcast to an EVM JSON-RPC endpoint."""

    def __init__(self, rpc_url: str, private_key: str, web3: Optional[AsyncWeb3] = None) -> None:
        if not rpc_url or not private_key:
            raise ValueError("EVM chain client requires RPC URL and private key (set via environment variables).")

        self.web3 = web3 or AsyncWeb3(AsyncWeb3.AsyncHTTPProvider(rpc_url))
        self.account: LocalAccount = Account.from_key(private_key)
        log.info("[EVM] Chain client initialized. Address=%s", self.account.address)

    @property
    def address(self) -> str:
        return self.account.address

    async def call(self, to: str, abi: List[Any], method: str, args: Sequence[Any]) -> Any:
        """Execute a read-only contract call and return the decoded result."""
        contract = self.web3.eth.contract(address=Web3.to_checksum_address(to), abi=abi)
        function = getattr(contract.functions, method)
        log.debug("[EVM][CALL] %s on %s", method, to)
        return await function(*args).call()

    async def get_fee_data(self) -> FeeData:
        """
        Current EIP-1559 fee data: maxFee = 2 * baseFee + priority.

        Both fields are None when the latest block carries no base fee or a zero one (BSC).
        """
        latest = await self.web3.eth.get_block("latest")
        base_fee = latest.get("baseFeePerGas")
        if not base_fee:
            log.debug("[EVM][FEE] Latest block has no usable baseFeePerGas (%s).", base_fee)
            return FeeData(max_fee_per_gas=None, max_priority_fee_per_gas=None)

        try:
            max_priority = int(await self.web3.eth.max_priority_fee)  # node suggestion
        except Exception as exc:
            log.debug("[EVM][FEE] Priority fee suggestion unavailable (%s). Using 1 gwei.", exc)
            max_priority = FALLBACK_PRIORITY_FEE_WEI

        max_fee = int(base_fee) * 2 + max_priority
        return FeeData(max_fee_per_gas=max_fee, max_priority_fee_per_gas=max_priority)

    async def _build_eip1559(self, to: str, data: bytes, value_wei: int, gas: GasEstimate,
                             gas_limit: Optional[int]) -> TxParams:
        """Construct a typed EIP-1559 transaction with the given fees and a filled nonce."""
        nonce = await self.web3.eth.get_transaction_count(self.address)
        tx: TxParams = {
            "chainId": await self.web3.eth.chain_id,
            "type": 2,
            "nonce": nonce,
            "to": Web3.to_checksum_address(to),
            "data": Web3.to_hex(data),
            "value": int(value_wei),
            "maxPriorityFeePerGas": int(gas.max_priority_fee_per_gas),
            "maxFeePerGas": int(gas.max_fee_per_gas),
        }
        if gas_limit is not None:
            tx["gas"] = int(gas_limit)
        else:
            try:
                estimated = await self.web3.eth.estimate_gas(
                    {"from": self.address, "to": tx["to"], "data": tx["data"], "value": tx["value"]})
                tx["gas"] = int(estimated)
            except Exception as exc:
                if _is_revert(exc):
                    log.error("[EVM] Gas estimation reverted; not broadcasting: %s", exc)
                    raise
                log.warning("[EVM] Gas estimation failed (%s). Falling back to static headroom.", exc)
                tx["gas"] = FALLBACK_GAS_LIMIT
        log.debug("[EVM] Tx skeleton built: nonce=%s gas=%s maxFeePerGas=%s", tx.get("nonce"), tx.get("gas"),
                  tx.get("maxFeePerGas"))
        return tx

    async def send_transaction(self, to: str, data: bytes, value_wei: int, gas: GasEstimate,
                               gas_limit: Optional[int] = None) -> str:
        """
        Sign and broadcast a transaction. Returns the 0x-prefixed transaction hash.
        """
        log.info("[EVM] Preparing transaction to %s", to)
        tx = await self._build_eip1559(to=to, data=data, value_wei=value_wei, gas=gas, gas_limit=gas_limit)
        signed = self.account.sign_transaction(tx)
        tx_hash = await self.web3.eth.send_raw_transaction(signed.raw_transaction)
        hex_hash = Web3.to_hex(tx_hash)
        log.info("[EVM] Broadcasted transaction %s", hex_hash)
        return hex_hash
