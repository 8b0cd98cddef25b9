"""Foundation types for paygate."""

from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Protocol version spoken on the wire
X402_VERSION: int = 2

# Type aliases
Network: TypeAlias = str
"""CAIP-2 format network identifier (e.g., "eip155:84532", "solana:EtWT...")."""

Money: TypeAlias = str | int | float
"""User-friendly price format (e.g., "$0.001", 0.01, "0.10")."""


class BaseGateModel(BaseModel):
    """Base class for all paygate models with camelCase JSON serialization.

    All Pydantic models in the package inherit from this class.
    Do NOT repeat model_config in individual models.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AssetAmount(BaseGateModel):
    """Amount in smallest unit with asset identifier.

    Attributes:
        amount: Amount in smallest unit (e.g., "1000" for 0.001 USDC).
        asset: Asset address/identifier.
        extra: Optional additional metadata.
    """

    amount: str
    asset: str
    extra: dict[str, Any] | None = None


# Price can be user-friendly Money or explicit AssetAmount
Price: TypeAlias = Money | AssetAmount
"""Price can be Money (user-friendly) or AssetAmount (explicit)."""


def network_family(network: Network) -> str:
    """Return the CAIP-2 namespace of a network ("eip155" for "eip155:8453")."""
    return network.split(":", 1)[0]
