"""
Illustrative USD conversion rates for preview text.

These are fixed, non-authoritative numbers used only to give previews a
rough dollar figure. Nothing that builds or signs a transaction reads them.
Swap `illustrative_usd_rate` for a price-feed backed callable to get live
numbers; preview formatting only depends on the `RateLookup` signature.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Callable, Mapping, Optional

RateLookup = Callable[[str], Optional[float]]

ILLUSTRATIVE_USD_RATES: Mapping[str, float] = MappingProxyType(
    {
        "MNT": 0.65,
        "WMNT": 0.65,
        "USDC": 1.0,
        "USDT": 1.0,
        "ETH": 2400.0,
        "WETH": 2400.0,
        "METH": 2500.0,
    }
)

# Mantle LSP reference APY, used for projected reward text only
ILLUSTRATIVE_STAKING_APY = 0.052


def illustrative_usd_rate(symbol: str) -> Optional[float]:
    return ILLUSTRATIVE_USD_RATES.get((symbol or "").upper())
