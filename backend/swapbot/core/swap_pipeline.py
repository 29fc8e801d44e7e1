from __future__ import annotations

import time
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from web3 import Web3

from swapbot.configuration.config import Settings, settings, resolve_swap_config
from swapbot.core.onchain.evm_signer import EvmChainClient
from swapbot.core.onchain.live_executor import SwapExecutor
from swapbot.core.onchain.quote_engine import build_quote, get_expected_output
from swapbot.core.onchain.router_abis import WBNB_ADDRESS
from swapbot.core.pool_selector import filter_versioned_pairs, select_best_pool
from swapbot.core.structures.errors import SwapValidationError
from swapbot.core.structures.structures import SelectionFailure, SelectionFailureReason, SwapOrder
from swapbot.core.utils.date_utils import deadline_from_now
from swapbot.core.utils.format_utils import format_liquidity, format_units
from swapbot.integrations.dexscreener.dexscreener_client import DexscreenerClient
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

NATIVE_DECIMALS: int = 18


def parse_native_amount(amount: str) -> int:
    """
    Parse a decimal native-asset amount (e.g. '0.01') into wei.

    Raises:
        SwapValidationError for unparsable, over-precise or non-positive amounts.
    """
    invalid_format = f"Invalid amount format: '{amount}'. Use decimal notation like '0.01'"
    try:
        value = Decimal(str(amount).strip())
    except InvalidOperation:
        raise SwapValidationError("amount", "decimal notation", invalid_format) from None
    if not value.is_finite() or -value.as_tuple().exponent > NATIVE_DECIMALS:
        raise SwapValidationError("amount", "decimal notation", invalid_format)
    if value <= 0:
        raise SwapValidationError("amount", "greater than 0", "Amount must be greater than 0")
    return int(Web3.to_wei(value, "ether"))


def parse_token_address(token_address: str) -> str:
    candidate = (token_address or "").strip()
    if not Web3.is_address(candidate):
        raise SwapValidationError("token_address", "a 20-byte hex address",
                                  f"Invalid token address: '{token_address}'")
    return Web3.to_checksum_address(candidate)


def _selection_failure_message(failure: SelectionFailure) -> str:
    if failure.reason is SelectionFailureReason.INSUFFICIENT_LIQUIDITY:
        return f"No pools with sufficient liquidity (minimum {format_liquidity(failure.min_liquidity_usd)})"
    return "No suitable pools found"


async def run_swap(
        token_address: str,
        amount: str,
        slippage_override: Optional[str] = None,
        *,
        source: Settings = settings,
        discovery_client: Optional[DexscreenerClient] = None,
        chain_client: Optional[EvmChainClient] = None,
        clock: Callable[[], float] = time.time,
) -> str:
    """
    Swap `amount` of the native asset for `token_address` through the most liquid pool.

    Every user input is validated before the first network call.

    Returns:
        The submitted transaction hash.
    """
    config = resolve_swap_config(source, slippage_override)
    token_out = parse_token_address(token_address)
    amount_in = parse_native_amount(amount)

    log.info("[SWAP] === BSC Swap Bot ===")
    log.info("[SWAP] Token: %s", token_out)
    log.info("[SWAP] Amount: %s BNB", amount)
    log.info("[SWAP] Slippage: %s%%%s", config.slippage_percent, " (CLI override)" if config.slippage_overridden else "")
    log.info("[SWAP] Deadline: %ds", config.deadline_seconds)
    log.info("[SWAP] Min liquidity: %s", format_liquidity(config.min_liquidity_usd))

    discovery_client = discovery_client or DexscreenerClient()
    log.info("[SWAP] Fetching pools from Dexscreener...")
    pairs = await discovery_client.fetch_pools(token_out)

    chain_pairs = [pair for pair in pairs if pair.chain_id == config.chain_id_key]
    versioned = filter_versioned_pairs(pairs, config.chain_id_key)
    log.info("[SWAP] Found: %d total, %d %s, %d V2/V3", len(pairs), len(chain_pairs),
             config.chain_id_key.upper(), len(versioned))
    if versioned:
        log.info("[SWAP] Available pools (sorted by liquidity):")
        ranked = sorted(versioned, key=lambda item: item[0].liquidity_usd, reverse=True)
        for index, (pair, version) in enumerate(ranked):
            log.info("[SWAP] Pool %d: %s (%s), liquidity: %s", index + 1, pair.dex_id, version.value,
                     format_liquidity(pair.liquidity_usd))

    selection = select_best_pool(pairs, config.min_liquidity_usd, config.chain_id_key)
    if isinstance(selection, SelectionFailure):
        message = _selection_failure_message(selection)
        log.error("[SWAP] %s", message)
        raise RuntimeError(message)

    pool = selection
    log.info("[SWAP] Selected pool: %s %s", pool.dex_id.upper(), pool.version.value.upper())
    log.info("[SWAP]   Address: %s", pool.pair_address)
    log.info("[SWAP]   Liquidity: %s", format_liquidity(pool.liquidity_usd))

    chain_client = chain_client or EvmChainClient(config.rpc_url, config.private_key)
    log.info("[SWAP] Wallet: %s", chain_client.address)

    log.info("[SWAP] Querying PancakeSwap router for expected output...")
    expected_output = await get_expected_output(chain_client, amount_in, WBNB_ADDRESS, token_out)
    quote = build_quote(expected_output, config.slippage_bps)
    log.info("[SWAP] Expected output: %s tokens", format_units(quote.expected_output, NATIVE_DECIMALS))
    log.info("[SWAP] Min output (%s%% slippage): %s tokens", config.slippage_percent,
             format_units(quote.min_output, NATIVE_DECIMALS))

    order = SwapOrder(
        token_in=WBNB_ADDRESS,
        token_out=token_out,
        amount_in=amount_in,
        quote=quote,
        recipient=chain_client.address,
        pool=pool,
        deadline=deadline_from_now(config.deadline_seconds, clock),
        dex_id=pool.dex_id,
    )

    router_kind = "Universal" if config.use_universal_router else pool.version.value.upper()
    log.info("[SWAP] Executing swap via PancakeSwap %s Router...", router_kind)
    log.info("[SWAP]   %s BNB → TOKEN (deadline=%d)", amount, order.deadline)

    executor = SwapExecutor(chain_client, use_universal_router=config.use_universal_router)
    try:
        tx_hash = await executor.execute_swap(order)
    except Exception as exc:
        log.error("[SWAP] Swap failed: %s", exc)
        raise

    log.info("[SWAP] === Swap Submitted ===")
    log.info("[SWAP] TX Hash: %s", tx_hash)
    if config.explorer_tx_url:
        log.info("[SWAP] Explorer: %s%s", config.explorer_tx_url, tx_hash)
    return tx_hash
