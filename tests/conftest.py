"""Pytest configuration and fixtures."""

from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from swapbot.core.structures.structures import FeeData, GasEstimate

TOKEN_ADDRESS = "0x" + "bb" * 20
RECIPIENT_ADDRESS = "0x1111111111111111111111111111111111111111"
TX_HASH = "0x" + "ab" * 32


class RecordingSleep:
    """Awaitable stand-in for asyncio.sleep that records requested delays."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeChainClient:
    """In-memory chain client recording reads and submissions."""

    def __init__(
            self,
            expected_output: int = 1_000_000,
            fee_data: Optional[FeeData] = None,
            tx_hash: str = TX_HASH,
            call_error: Optional[Exception] = None,
            send_error: Optional[Exception] = None,
    ) -> None:
        self.address = RECIPIENT_ADDRESS
        self.expected_output = expected_output
        self.fee_data = fee_data or FeeData(max_fee_per_gas=5 * 10**9, max_priority_fee_per_gas=10**9)
        self.tx_hash = tx_hash
        self.call_error = call_error
        self.send_error = send_error
        self.calls: List[Dict[str, Any]] = []
        self.sent: List[Dict[str, Any]] = []

    async def call(self, to, abi, method, args):
        self.calls.append({"to": to, "abi": abi, "method": method, "args": args})
        if self.call_error is not None:
            raise self.call_error
        return [args[0], self.expected_output]

    async def get_fee_data(self) -> FeeData:
        return self.fee_data

    async def send_transaction(self, to: str, data: bytes, value_wei: int, gas: GasEstimate,
                               gas_limit: Optional[int] = None) -> str:
        self.sent.append({"to": to, "data": data, "value": value_wei, "gas": gas})
        if self.send_error is not None:
            raise self.send_error
        return self.tx_hash


class FakeDiscoveryClient:
    def __init__(self, pairs) -> None:
        self.pairs = pairs
        self.requested: List[str] = []

    async def fetch_pools(self, token_address: str):
        self.requested.append(token_address)
        return list(self.pairs)


def make_pair_payload(
        liquidity_usd: Optional[float] = 100_000.0,
        labels: Optional[List[str]] = None,
        chain_id: str = "bsc",
        dex_id: str = "pancakeswap",
        pair_address: Optional[str] = None,
) -> Dict[str, Any]:
    """Build a raw Dexscreener pair document."""
    payload: Dict[str, Any] = {
        "chainId": chain_id,
        "dexId": dex_id,
        "url": f"https://dexscreener.com/{chain_id}/{pair_address or 'pair'}",
        "pairAddress": pair_address or "0x" + "cd" * 20,
        "baseToken": {"address": TOKEN_ADDRESS, "name": "Token", "symbol": "TKN"},
        "quoteToken": {"address": "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c", "name": "Wrapped BNB",
                       "symbol": "WBNB"},
        "labels": ["v2"] if labels is None else labels,
    }
    if liquidity_usd is not None:
        payload["liquidity"] = {"usd": liquidity_usd, "base": 1000.0, "quote": 10.0}
    return payload


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def fake_chain_client() -> FakeChainClient:
    return FakeChainClient()


@pytest.fixture
def swap_settings() -> SimpleNamespace:
    """Settings stand-in with every attribute resolve_swap_config reads."""
    return SimpleNamespace(
        PRIVATE_KEY="0x" + "11" * 32,
        RPC_URL="https://bsc-dataseed.binance.org/",
        CHAIN_ID_KEY="bsc",
        EXPLORER_TX_URL="https://bscscan.com/tx/",
        SLIPPAGE="1",
        DEADLINE_SECONDS=30,
        MIN_LIQUIDITY_USD=1000.0,
        USE_UNIVERSAL_ROUTER=False,
    )
