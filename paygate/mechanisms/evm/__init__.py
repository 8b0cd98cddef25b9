"""EVM (eip155) payment mechanisms."""

from .constants import (
    AVALANCHE_FUJI,
    AVALANCHE_MAINNET,
    BASE_MAINNET,
    BASE_SEPOLIA,
    NETWORK_CONFIGS,
    SCHEME_EXACT,
)

__all__ = [
    "AVALANCHE_FUJI",
    "AVALANCHE_MAINNET",
    "BASE_MAINNET",
    "BASE_SEPOLIA",
    "NETWORK_CONFIGS",
    "SCHEME_EXACT",
]
