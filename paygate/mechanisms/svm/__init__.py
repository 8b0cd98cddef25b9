"""SVM (solana) payment mechanisms."""

from .constants import (
    NETWORK_ASSETS,
    SCHEME_EXACT,
    SOLANA_DEVNET_CAIP2,
    SOLANA_MAINNET_CAIP2,
    SOLANA_TESTNET_CAIP2,
)

__all__ = [
    "NETWORK_ASSETS",
    "SCHEME_EXACT",
    "SOLANA_DEVNET_CAIP2",
    "SOLANA_MAINNET_CAIP2",
    "SOLANA_TESTNET_CAIP2",
]
