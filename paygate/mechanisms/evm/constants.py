"""EVM mechanism constants - network configs, default assets, payload fields."""

from typing import TypedDict

# Scheme identifier
SCHEME_EXACT = "exact"

# CAIP-2 namespace for EVM chains
NETWORK_FAMILY = "eip155"

# Default token decimals for USDC
DEFAULT_DECIMALS = 6

BASE_MAINNET = "eip155:8453"
BASE_SEPOLIA = "eip155:84532"
AVALANCHE_MAINNET = "eip155:43114"
AVALANCHE_FUJI = "eip155:43113"

# EIP-3009 transferWithAuthorization fields carried by the exact payload
AUTHORIZATION_ADDRESS_FIELDS = ("from", "to", "nonce")
AUTHORIZATION_INTEGER_FIELDS = ("value", "validAfter", "validBefore")

# 0x-prefixed hex
HEX_REGEX = r"^0x[0-9a-fA-F]+$"
EVM_ADDRESS_REGEX = r"^0x[0-9a-fA-F]{40}$"


class AssetInfo(TypedDict):
    """Default stablecoin of a network, with its EIP-712 domain."""

    address: str
    name: str
    version: str
    decimals: int


class NetworkConfig(TypedDict):
    """Configuration for an EVM network."""

    default_asset: AssetInfo


NETWORK_CONFIGS: dict[str, NetworkConfig] = {
    BASE_MAINNET: {
        "default_asset": {
            "address": "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913",
            "name": "USD Coin",  # needs to be exactly what is returned by name() on contract
            "version": "2",
            "decimals": DEFAULT_DECIMALS,
        },
    },
    BASE_SEPOLIA: {
        "default_asset": {
            "address": "0x036CbD53842c5426634e7929541eC2318f3dCF7e",
            "name": "USDC",
            "version": "2",
            "decimals": DEFAULT_DECIMALS,
        },
    },
    AVALANCHE_MAINNET: {
        "default_asset": {
            "address": "0xB97EF9Ef8734C71904D8002F8b6Bc66Dd9c48a6E",
            "name": "USDC",
            "version": "2",
            "decimals": DEFAULT_DECIMALS,
        },
    },
    AVALANCHE_FUJI: {
        "default_asset": {
            "address": "0x5425890298aed601595a70AB815c96711a31Bc65",
            "name": "USD Coin",
            "version": "2",
            "decimals": DEFAULT_DECIMALS,
        },
    },
}
