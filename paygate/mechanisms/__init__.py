"""Scheme adapters, one per (network family, scheme) pair."""

from .base import ExactSchemeAdapter, MoneyParser
from .evm.exact import ExactEvmScheme, register_exact_evm_server
from .svm.exact import ExactSvmScheme, register_exact_svm_server

__all__ = [
    "ExactSchemeAdapter",
    "MoneyParser",
    "ExactEvmScheme",
    "ExactSvmScheme",
    "register_exact_evm_server",
    "register_exact_svm_server",
]
