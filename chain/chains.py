from __future__ import annotations

from types import MappingProxyType
from typing import Mapping

MANTLE_MAINNET = 5000
MANTLE_TESTNET = 5001
MANTLE_SEPOLIA = 5003

SUPPORTED_CHAINS: Mapping[int, str] = MappingProxyType(
    {
        MANTLE_MAINNET: "Mantle",
        MANTLE_TESTNET: "Mantle Testnet",
        MANTLE_SEPOLIA: "Mantle Sepolia",
    }
)

class UnsupportedChainError(ValueError):
    pass

def chain_name(chain_id: int) -> str:
    """
    Return the display name for a supported chain_id.
    Raises UnsupportedChainError otherwise.
    """
    name = SUPPORTED_CHAINS.get(chain_id)
    if not name:
        raise UnsupportedChainError(f"Unsupported chain_id: {chain_id}")
    return name

def list_supported_chains() -> list[int]:
    return sorted(SUPPORTED_CHAINS.keys())
