from __future__ import annotations

from typing import Iterable, List, Optional, Sequence, Tuple

from swapbot.core.structures.structures import (
    PoolVersion,
    SelectedPool,
    SelectionFailure,
    SelectionFailureReason,
    SelectionResult,
)
from swapbot.integrations.dexscreener.dexscreener_structures import DexscreenerPair
from swapbot.logging.logger import get_logger

log = get_logger(__name__)

DEFAULT_CHAIN_ID: str = "bsc"


def resolve_pool_version(labels: Iterable[str]) -> Optional[PoolVersion]:
    """
    Return the first 'v2'/'v3' label in payload order, or None.

    A pair labelled with both resolves to whichever comes first.
    """
    for label in labels:
        if label == PoolVersion.V2.value:
            return PoolVersion.V2
        if label == PoolVersion.V3.value:
            return PoolVersion.V3
    return None


def filter_versioned_pairs(
        pairs: Sequence[DexscreenerPair],
        chain_id: str = DEFAULT_CHAIN_ID,
) -> List[Tuple[DexscreenerPair, PoolVersion]]:
    """Keep pairs on `chain_id` that carry a v2/v3 label, preserving input order."""
    versioned: List[Tuple[DexscreenerPair, PoolVersion]] = []
    for pair in pairs:
        if pair.chain_id != chain_id:
            continue
        version = resolve_pool_version(pair.labels)
        if version is None:
            continue
        versioned.append((pair, version))
    return versioned


def select_best_pool(
        pairs: Sequence[DexscreenerPair],
        min_liquidity_usd: float,
        chain_id: str = DEFAULT_CHAIN_ID,
) -> SelectionResult:
    """
    Pick the most liquid v2/v3 pool on the target chain.

    Returns:
        SelectedPool on success, otherwise a SelectionFailure tagged with
        NO_VALID_POOLS (nothing on chain with a version label) or
        INSUFFICIENT_LIQUIDITY (all candidates below `min_liquidity_usd`).
    """
    versioned = filter_versioned_pairs(pairs, chain_id)
    if not versioned:
        log.debug("[POOL][SELECT] No %s pair with a v2/v3 label among %d pair(s).", chain_id, len(pairs))
        return SelectionFailure(reason=SelectionFailureReason.NO_VALID_POOLS)

    liquid = [(pair, version) for pair, version in versioned if pair.liquidity_usd >= min_liquidity_usd]
    if not liquid:
        log.debug(
            "[POOL][SELECT] %d candidate(s) all below minimum liquidity %.2f USD.",
            len(versioned),
            min_liquidity_usd,
        )
        return SelectionFailure(
            reason=SelectionFailureReason.INSUFFICIENT_LIQUIDITY,
            min_liquidity_usd=min_liquidity_usd,
        )

    # sorted() is stable: equal liquidity keeps listing order.
    ranked = sorted(liquid, key=lambda item: item[0].liquidity_usd, reverse=True)
    best, version = ranked[0]
    selected = SelectedPool(
        pair_address=best.pair_address,
        version=version,
        dex_id=best.dex_id,
        liquidity_usd=best.liquidity_usd,
    )
    log.debug("[POOL][SELECT] Selected %s out of %d candidate(s).", selected, len(liquid))
    return selected
