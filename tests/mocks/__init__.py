"""Mock implementations for testing."""

from .cash import (
    CASH_ASSET,
    CASH_NETWORK_A,
    CASH_NETWORK_B,
    CASH_NETWORK_C,
    CashSchemeAdapter,
    FakeFacilitatorClient,
    build_cash_payment,
)
from .payloads import (
    BASE_SEPOLIA_USDC,
    EVM_PAY_TO,
    EVM_PAYER,
    SOLANA_DEVNET_USDC,
    SVM_FEE_PAYER,
    SVM_PAY_TO,
    build_evm_payment,
    build_svm_payment,
)

__all__ = [
    "CASH_ASSET",
    "CASH_NETWORK_A",
    "CASH_NETWORK_B",
    "CASH_NETWORK_C",
    "CashSchemeAdapter",
    "FakeFacilitatorClient",
    "build_cash_payment",
    "BASE_SEPOLIA_USDC",
    "EVM_PAY_TO",
    "EVM_PAYER",
    "SOLANA_DEVNET_USDC",
    "SVM_FEE_PAYER",
    "SVM_PAY_TO",
    "build_evm_payment",
    "build_svm_payment",
]
