"""Exact payment scheme for EVM networks."""

from .register import register_exact_evm_server
from .server import ExactEvmScheme

__all__ = ["ExactEvmScheme", "register_exact_evm_server"]
