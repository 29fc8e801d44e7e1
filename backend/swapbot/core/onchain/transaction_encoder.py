from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Final, Mapping, Optional, Sequence

from eth_abi import encode
from eth_utils import function_signature_to_4byte_selector, to_checksum_address

from swapbot.core.onchain.router_abis import (
    DEFAULT_UNIVERSAL_ROUTER,
    DEFAULT_V3_POOL_FEE,
    PANCAKESWAP_V2_ROUTER,
    PANCAKESWAP_V3_ROUTER,
    UNIVERSAL_ROUTER_BY_DEX_PREFIX,
    V2_SWAP_EXACT_IN,
    V3_SWAP_EXACT_IN,
)
from swapbot.core.structures.structures import EncodedCall, GasEstimate, PoolVersion, SwapOrder
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

SWAP_EXACT_ETH_FOR_TOKENS_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    "swapExactETHForTokens(uint256,address[],address,uint256)"
)
MULTICALL_SELECTOR: Final[bytes] = function_signature_to_4byte_selector("multicall(uint256,bytes[])")
EXACT_INPUT_SINGLE_SELECTOR: Final[bytes] = function_signature_to_4byte_selector(
    "exactInputSingle((address,address,uint24,address,uint256,uint256,uint160))"
)
EXECUTE_SELECTOR: Final[bytes] = function_signature_to_4byte_selector("execute(bytes,bytes[],uint256)")

UNIVERSAL_COMMAND_BY_VERSION: Final[Mapping[PoolVersion, int]] = MappingProxyType({
    PoolVersion.V2: V2_SWAP_EXACT_IN,
    PoolVersion.V3: V3_SWAP_EXACT_IN,
})

MAX_UINT24: Final[int] = 2 ** 24 - 1


def _address_bytes(address: str) -> bytes:
    """20 raw bytes of an address; raises ValueError on anything else."""
    return bytes.fromhex(to_checksum_address(address)[2:])


def encode_v3_path(token_in: str, token_out: str, fee: int = DEFAULT_V3_POOL_FEE) -> bytes:
    """
    Packed single-hop path: tokenIn (20 bytes) ++ fee (3 bytes, big-endian) ++ tokenOut (20 bytes).

    `fee` is the raw uint24 pool fee (2500 for the 0.25% tier), not basis points.
    """
    if not 0 <= fee <= MAX_UINT24:
        raise ValueError(f"V3 fee must fit in 3 bytes (got {fee}).")
    return _address_bytes(token_in) + fee.to_bytes(3, "big") + _address_bytes(token_out)


def encode_v2_swap_input(recipient: str, amount_in: int, amount_out_min: int, path: Sequence[str]) -> bytes:
    """Universal router V2_SWAP_EXACT_IN input: (recipient, amountIn, amountOutMin, address[] path, payerIsUser)."""
    return encode(
        ["address", "uint256", "uint256", "address[]", "bool"],
        [to_checksum_address(recipient), amount_in, amount_out_min,
         [to_checksum_address(token) for token in path], True],
    )


def encode_v3_swap_input(
        recipient: str,
        amount_in: int,
        amount_out_min: int,
        token_in: str,
        token_out: str,
        fee: int = DEFAULT_V3_POOL_FEE,
) -> bytes:
    """Universal router V3_SWAP_EXACT_IN input: (recipient, amountIn, amountOutMin, bytes path, payerIsUser)."""
    return encode(
        ["address", "uint256", "uint256", "bytes", "bool"],
        [to_checksum_address(recipient), amount_in, amount_out_min, encode_v3_path(token_in, token_out, fee), True],
    )


def encode_exact_input_single(
        token_in: str,
        token_out: str,
        recipient: str,
        amount_in: int,
        amount_out_min: int,
        fee: int = DEFAULT_V3_POOL_FEE,
        sqrt_price_limit_x96: int = 0,
) -> bytes:
    """
    SwapRouter exactInputSingle calldata (selector included), for use inside multicall.

    A zero `sqrt_price_limit_x96` means no price limit.
    """
    encoded_params = encode(
        ["(address,address,uint24,address,uint256,uint256,uint160)"],
        [
            (
                to_checksum_address(token_in),
                to_checksum_address(token_out),
                fee,
                to_checksum_address(recipient),
                amount_in,
                amount_out_min,
                sqrt_price_limit_x96,
            )
        ],
    )
    return EXACT_INPUT_SINGLE_SELECTOR + encoded_params


def get_universal_router_address(dex_id: Optional[str]) -> str:
    """Universal router for a Dexscreener DEX id; unknown or missing ids use the default deployment."""
    normalized = (dex_id or "").strip().lower()
    for prefix, router in UNIVERSAL_ROUTER_BY_DEX_PREFIX.items():
        if normalized.startswith(prefix):
            return to_checksum_address(router)
    return to_checksum_address(DEFAULT_UNIVERSAL_ROUTER)


class TransactionEncoder(ABC):
    """Turns a SwapOrder into a single router call. One implementation per calling convention."""

    @abstractmethod
    def encode(self, order: SwapOrder, gas: GasEstimate) -> EncodedCall:
        ...


class LegacyRouterEncoder(TransactionEncoder):
    """
    Per-version routers.

    v2: swapExactETHForTokens(amountOutMin, [wrappedNative, tokenOut], to, deadline)
    v3: multicall(deadline, [exactInputSingle(...)])
    """

    def __init__(self, v2_router: str = PANCAKESWAP_V2_ROUTER, v3_router: str = PANCAKESWAP_V3_ROUTER,
                 v3_fee: int = DEFAULT_V3_POOL_FEE) -> None:
        self.v2_router = to_checksum_address(v2_router)
        self.v3_router = to_checksum_address(v3_router)
        self.v3_fee = v3_fee

    def encode(self, order: SwapOrder, gas: GasEstimate) -> EncodedCall:
        if order.pool.version is PoolVersion.V2:
            data = SWAP_EXACT_ETH_FOR_TOKENS_SELECTOR + encode(
                ["uint256", "address[]", "address", "uint256"],
                [
                    order.amount_out_min,
                    [to_checksum_address(order.token_in), to_checksum_address(order.token_out)],
                    to_checksum_address(order.recipient),
                    order.deadline,
                ],
            )
            log.debug("[ENCODER][LEGACY] V2 swapExactETHForTokens via %s", self.v2_router)
            return EncodedCall(target=self.v2_router, method="swapExactETHForTokens", data=data,
                               value=order.amount_in, gas=gas)

        swap_call = encode_exact_input_single(
            token_in=order.token_in,
            token_out=order.token_out,
            recipient=order.recipient,
            amount_in=order.amount_in,
            amount_out_min=order.amount_out_min,
            fee=self.v3_fee,
        )
        data = MULTICALL_SELECTOR + encode(["uint256", "bytes[]"], [order.deadline, [swap_call]])
        log.debug("[ENCODER][LEGACY] V3 multicall(exactInputSingle) via %s fee=%d", self.v3_router, self.v3_fee)
        return EncodedCall(target=self.v3_router, method="multicall", data=data, value=order.amount_in, gas=gas)


class UniversalRouterEncoder(TransactionEncoder):
    """Single execute(commands, inputs, deadline) call; one command byte per swap."""

    def __init__(self, v3_fee: int = DEFAULT_V3_POOL_FEE) -> None:
        self.v3_fee = v3_fee

    def encode(self, order: SwapOrder, gas: GasEstimate) -> EncodedCall:
        version = order.pool.version
        if version is PoolVersion.V2:
            swap_input = encode_v2_swap_input(
                order.recipient,
                order.amount_in,
                order.amount_out_min,
                [order.token_in, order.token_out],
            )
        else:
            swap_input = encode_v3_swap_input(
                order.recipient,
                order.amount_in,
                order.amount_out_min,
                order.token_in,
                order.token_out,
                self.v3_fee,
            )

        commands = bytes([UNIVERSAL_COMMAND_BY_VERSION[version]])
        inputs = (swap_input,)
        router = get_universal_router_address(order.dex_id)
        data = EXECUTE_SELECTOR + encode(["bytes", "bytes[]", "uint256"], [commands, list(inputs), order.deadline])
        log.debug("[ENCODER][UNIVERSAL] %s command=0x%s via %s", version.value.upper(), commands.hex(), router)
        return EncodedCall(target=router, method="execute", data=data, value=order.amount_in, gas=gas,
                           commands=commands, inputs=inputs)


def build_transaction_encoder(use_universal_router: bool) -> TransactionEncoder:
    """Pick the calling convention from configuration."""
    return UniversalRouterEncoder() if use_universal_router else LegacyRouterEncoder()
