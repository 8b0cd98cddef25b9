"""Exact scheme adapter for Solana (SVM) networks."""

import re
from typing import Any

from ....schemas import MalformedPayloadError, Network
from ...base import ExactSchemeAdapter
from ..constants import (
    BASE64_REGEX,
    NETWORK_ASSETS,
    NETWORK_FAMILY,
    SCHEME_EXACT,
    SVM_ADDRESS_REGEX,
    AssetInfo,
)


class ExactSvmScheme(ExactSchemeAdapter):
    """Server adapter for exact payments on solana clusters.

    The client submits a partially signed transfer transaction; the
    facilitator co-signs as fee payer and broadcasts it on settle.

    Args:
        fee_payer: Facilitator fee payer address advertised in requirements.
    """

    scheme = SCHEME_EXACT
    network_family = NETWORK_FAMILY

    def __init__(self, fee_payer: str | None = None) -> None:
        super().__init__()
        if fee_payer is not None and not re.fullmatch(SVM_ADDRESS_REGEX, fee_payer):
            raise ValueError(f"Invalid fee payer address: {fee_payer}")
        self._fee_payer = fee_payer

    @property
    def fee_payer(self) -> str | None:
        return self._fee_payer

    def default_asset(self, network: str) -> AssetInfo:
        asset = NETWORK_ASSETS.get(network)
        if not asset:
            raise ValueError(f"No default asset configured for network {network}")
        return asset

    def requirements_extra(self, network: Network) -> dict[str, Any]:
        if self._fee_payer:
            return {"feePayer": self._fee_payer}
        return {}

    def validate_proof(self, proof: dict[str, Any]) -> None:
        transaction = proof.get("transaction")
        if not isinstance(transaction, str) or not transaction:
            raise MalformedPayloadError("payload.transaction must be a non-empty string")
        if not re.fullmatch(BASE64_REGEX, transaction):
            raise MalformedPayloadError("payload.transaction must be base64 encoded")
