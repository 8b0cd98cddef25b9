"""Registration helper for the EVM exact payment scheme."""

from typing import TYPE_CHECKING

from ..constants import NETWORK_CONFIGS

if TYPE_CHECKING:
    from ....server import ResourceServerBuilder


def register_exact_evm_server(
    builder: "ResourceServerBuilder",
    networks: str | list[str] | None = None,
) -> "ResourceServerBuilder":
    """Register the EVM exact scheme on a resource server builder.

    Args:
        builder: ResourceServerBuilder instance.
        networks: Optional specific network(s) (default: every EVM network
            with a configured default asset).

    Returns:
        Builder for chaining.
    """
    from .server import ExactEvmScheme

    scheme = ExactEvmScheme()

    if networks is None:
        networks = list(NETWORK_CONFIGS)
    elif isinstance(networks, str):
        networks = [networks]

    for network in networks:
        builder.register(network, scheme)

    return builder
