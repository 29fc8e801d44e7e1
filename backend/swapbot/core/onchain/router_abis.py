"""
BSC router addresses, universal-router command codes and the quoting ABI
"""
from types import MappingProxyType
from typing import Any, Final, List, Mapping

WBNB_ADDRESS: Final[str] = "0xbb4CdB9CBd36B01bD1cBaEBF2De08d9173bc095c"

PANCAKESWAP_V2_ROUTER: Final[str] = "0x10ED43C718714eb63d5aA57B78B54704E256024E"
PANCAKESWAP_V3_ROUTER: Final[str] = "0x1b81D678ffb9C0263b24A97847620C99d213eB14"
PANCAKESWAP_UNIVERSAL_ROUTER: Final[str] = "0xd9C500DfF816a1Da21A48A732d3498Bf09dc9AEB"
UNISWAP_UNIVERSAL_ROUTER: Final[str] = "0x5dc88340e1c5c6366864ee415d6034cadd1a9897"

# 0.25%, the common PancakeSwap V3 tier; encoded as the raw uint24 fee.
DEFAULT_V3_POOL_FEE: Final[int] = 2500

V3_SWAP_EXACT_IN: Final[int] = 0x00
V2_SWAP_EXACT_IN: Final[int] = 0x08

# DEX identifier prefix -> universal router deployment; anything else uses the default.
UNIVERSAL_ROUTER_BY_DEX_PREFIX: Final[Mapping[str, str]] = MappingProxyType({
    "uniswap": UNISWAP_UNIVERSAL_ROUTER,
})
DEFAULT_UNIVERSAL_ROUTER: Final[str] = PANCAKESWAP_UNIVERSAL_ROUTER

PANCAKESWAP_V2_ROUTER_ABI: Final[List[Any]] = [
    {
        "name": "getAmountsOut",
        "type": "function",
        "inputs": [
            {"name": "amountIn", "type": "uint256"},
            {"name": "path", "type": "address[]"},
        ],
        "outputs": [{"name": "amounts", "type": "uint256[]"}],
        "stateMutability": "view",
    },
]
