"""SVM mechanism constants - network configs, USDC mints, payload fields."""

from typing import TypedDict

# Scheme identifier
SCHEME_EXACT = "exact"

# CAIP-2 namespace for Solana clusters
NETWORK_FAMILY = "solana"

# Default token decimals for USDC on Solana
DEFAULT_DECIMALS = 6

# USDC token mint addresses (default stablecoin)
USDC_MAINNET_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
USDC_DEVNET_ADDRESS = "4zMMC9srt5Ri5X14GAgXhaHii3GnPAEERYPJgZJDncDU"

# CAIP-2 network identifiers for Solana
SOLANA_MAINNET_CAIP2 = "solana:5eykt4UsFv8P8NJdTREpY1vzqKqZKvdp"
SOLANA_DEVNET_CAIP2 = "solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1"
SOLANA_TESTNET_CAIP2 = "solana:4uhcVJyU9pJkvQyS88uRDiswHXSCkY3z"

# Solana address validation regex (base58, 32-44 characters)
SVM_ADDRESS_REGEX = r"^[1-9A-HJ-NP-Za-km-z]{32,44}$"

# Base64 with optional padding
BASE64_REGEX = r"^[A-Za-z0-9+/]+={0,2}$"


class AssetInfo(TypedDict):
    """Default SPL token of a cluster."""

    address: str
    name: str
    decimals: int


NETWORK_ASSETS: dict[str, AssetInfo] = {
    SOLANA_MAINNET_CAIP2: {
        "address": USDC_MAINNET_ADDRESS,
        "name": "USDC",
        "decimals": DEFAULT_DECIMALS,
    },
    SOLANA_DEVNET_CAIP2: {
        "address": USDC_DEVNET_ADDRESS,
        "name": "USDC",
        "decimals": DEFAULT_DECIMALS,
    },
    SOLANA_TESTNET_CAIP2: {
        "address": USDC_DEVNET_ADDRESS,  # Same as devnet
        "name": "USDC",
        "decimals": DEFAULT_DECIMALS,
    },
}
