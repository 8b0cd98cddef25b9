"""Exact scheme adapter for EVM networks (EIP-3009 transferWithAuthorization)."""

import re
from typing import Any

from ....schemas import MalformedPayloadError
from ...base import ExactSchemeAdapter, require_fields, require_integer_strings
from ..constants import (
    AUTHORIZATION_ADDRESS_FIELDS,
    AUTHORIZATION_INTEGER_FIELDS,
    EVM_ADDRESS_REGEX,
    HEX_REGEX,
    NETWORK_CONFIGS,
    NETWORK_FAMILY,
    SCHEME_EXACT,
    AssetInfo,
)


class ExactEvmScheme(ExactSchemeAdapter):
    """Server adapter for exact payments on eip155 chains."""

    scheme = SCHEME_EXACT
    network_family = NETWORK_FAMILY

    def default_asset(self, network: str) -> AssetInfo:
        config = NETWORK_CONFIGS.get(network)
        if not config:
            raise ValueError(f"No default asset configured for network {network}")
        return config["default_asset"]

    def asset_extra(self, asset: dict[str, Any]) -> dict[str, Any]:
        # EIP-712 domain the client signs against
        return {"name": asset["name"], "version": asset["version"]}

    def validate_proof(self, proof: dict[str, Any]) -> None:
        signature = proof.get("signature")
        if not isinstance(signature, str) or not re.fullmatch(HEX_REGEX, signature):
            raise MalformedPayloadError("payload.signature must be a 0x-prefixed hex string")

        authorization = proof.get("authorization")
        if not isinstance(authorization, dict):
            raise MalformedPayloadError("payload.authorization must be an object")

        require_fields(authorization, AUTHORIZATION_ADDRESS_FIELDS, "payload.authorization")
        require_integer_strings(
            authorization, AUTHORIZATION_INTEGER_FIELDS, "payload.authorization"
        )

        for name in ("from", "to"):
            if not re.fullmatch(EVM_ADDRESS_REGEX, authorization[name]):
                raise MalformedPayloadError(
                    f"payload.authorization.{name} must be an EVM address"
                )

        if not re.fullmatch(HEX_REGEX, authorization["nonce"]):
            raise MalformedPayloadError(
                "payload.authorization.nonce must be a 0x-prefixed hex string"
            )
