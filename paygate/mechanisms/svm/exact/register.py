"""Registration helper for the SVM exact payment scheme."""

from typing import TYPE_CHECKING

from ..constants import NETWORK_ASSETS

if TYPE_CHECKING:
    from ....server import ResourceServerBuilder


def register_exact_svm_server(
    builder: "ResourceServerBuilder",
    networks: str | list[str] | None = None,
    fee_payer: str | None = None,
) -> "ResourceServerBuilder":
    """Register the SVM exact scheme on a resource server builder.

    Args:
        builder: ResourceServerBuilder instance.
        networks: Optional specific network(s) (default: every Solana cluster
            with a configured USDC mint).
        fee_payer: Optional facilitator fee payer advertised in requirements.

    Returns:
        Builder for chaining.
    """
    from .server import ExactSvmScheme

    scheme = ExactSvmScheme(fee_payer=fee_payer)

    if networks is None:
        networks = list(NETWORK_ASSETS)
    elif isinstance(networks, str):
        networks = [networks]

    for network in networks:
        builder.register(network, scheme)

    return builder
