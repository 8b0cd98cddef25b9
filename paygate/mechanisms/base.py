"""Shared behaviour of the "exact" scheme adapters."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from collections.abc import Callable
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import ValidationError
from typing_extensions import Self

from ..schemas import (
    AssetAmount,
    FacilitatorRequest,
    MalformedPayloadError,
    Network,
    PaymentOption,
    PaymentPayload,
    PaymentRequirements,
    Price,
    network_family,
)
from ..schemas.helpers import detect_version, read_accepted_kind

# Type alias for money parser
MoneyParser = Callable[[Decimal, str], AssetAmount | None]

DEFAULT_MAX_TIMEOUT_SECONDS = 300


class ExactSchemeAdapter(ABC):
    """Abstract base for adapters of the "exact" scheme (pay exactly the quoted price).

    Subclasses provide the network family, the default asset per network, the
    requirement metadata and the structural check of the scheme payload.
    """

    scheme = "exact"
    network_family = ""

    def __init__(self) -> None:
        self._money_parsers: list[MoneyParser] = []

    def register_money_parser(self, parser: MoneyParser) -> Self:
        """Register custom money parser in the parser chain.

        Multiple parsers can be registered - tried in registration order.
        Each parser receives the decimal amount (e.g., Decimal("1.50") for
        "$1.50"). If a parser returns None, the next one is tried. The default
        conversion is always the final fallback.

        Args:
            parser: Custom function to convert amount to AssetAmount.

        Returns:
            Self for chaining.
        """
        self._money_parsers.append(parser)
        return self

    def supports_network(self, network: Network) -> bool:
        return network_family(network) == self.network_family

    # =========================================================================
    # Prices and requirements
    # =========================================================================

    def parse_price(self, price: Price, network: Network) -> AssetAmount:
        """Parse price into asset amount.

        Args:
            price: Money ("$0.001", 0.01) or AssetAmount (object or dict).
            network: Network identifier.

        Returns:
            AssetAmount with amount in smallest unit.

        Raises:
            ValueError: If the price is malformed or the network has no
                default asset.
        """
        if isinstance(price, dict) and "amount" in price:
            price = AssetAmount.model_validate(price)

        if isinstance(price, AssetAmount):
            if not price.asset:
                raise ValueError(f"Asset required for AssetAmount on {network}")
            if not price.amount.isdigit():
                raise ValueError(f"AssetAmount amount must be an integer string: {price.amount}")
            return price

        decimal_amount = self._parse_money_to_decimal(price)

        for parser in self._money_parsers:
            result = parser(decimal_amount, str(network))
            if result is not None:
                return result

        return self._default_money_conversion(decimal_amount, str(network))

    def _parse_money_to_decimal(self, money: str | int | float) -> Decimal:
        if isinstance(money, bool):
            raise ValueError(f"Invalid money format: {money}")

        text = str(money).strip().lstrip("$").replace(",", "").strip()
        if not re.fullmatch(r"\d+(\.\d+)?|\.\d+", text):
            raise ValueError(f"Invalid money format: {money}")

        try:
            amount = Decimal(text)
        except InvalidOperation as e:
            raise ValueError(f"Invalid money format: {money}") from e

        if amount <= 0:
            raise ValueError(f"Price must be positive: {money}")
        return amount

    def _default_money_conversion(self, amount: Decimal, network: str) -> AssetAmount:
        asset = self.default_asset(network)
        atomic = amount.scaleb(asset["decimals"])
        if atomic != atomic.to_integral_value():
            raise ValueError(
                f"Price {amount} has more precision than {asset['decimals']} decimals"
            )

        return AssetAmount(
            amount=str(int(atomic)),
            asset=asset["address"],
            extra=self.asset_extra(asset),
        )

    @abstractmethod
    def default_asset(self, network: str) -> dict[str, Any]:
        """Return the default stablecoin of a network.

        Raises:
            ValueError: If the network has no default asset configured.
        """

    def asset_extra(self, asset: dict[str, Any]) -> dict[str, Any]:
        return {}

    def build_requirements(self, option: PaymentOption) -> PaymentRequirements:
        """Build wire requirements for a route option.

        Raises:
            ValueError: If the option's network does not belong to this adapter
                or its price cannot be converted.
        """
        if not self.supports_network(option.network):
            raise ValueError(
                f"{type(self).__name__} cannot serve network {option.network}"
            )

        asset_amount = self.parse_price(option.price, option.network)

        extra = dict(asset_amount.extra or {})
        extra.update(self.requirements_extra(option.network))
        extra.update(option.extra or {})

        return PaymentRequirements(
            scheme=option.scheme,
            network=option.network,
            asset=asset_amount.asset,
            amount=asset_amount.amount,
            pay_to=option.pay_to,
            max_timeout_seconds=option.max_timeout_seconds or DEFAULT_MAX_TIMEOUT_SECONDS,
            extra=extra,
        )

    def requirements_extra(self, network: Network) -> dict[str, Any]:
        return {}

    # =========================================================================
    # Payloads
    # =========================================================================

    def parse_payload(self, raw: dict[str, Any]) -> PaymentPayload:
        """Validate the envelope and the scheme payload of a payment header.

        Raises:
            MalformedPayloadError: If the payload does not fit the scheme.
        """
        accepted = read_accepted_kind(raw)

        if accepted.scheme != self.scheme:
            raise MalformedPayloadError(
                f"Payload scheme '{accepted.scheme}' is not '{self.scheme}'"
            )
        if not self.supports_network(accepted.network):
            raise MalformedPayloadError(
                f"Payload network '{accepted.network}' is not a {self.network_family} network"
            )

        proof = raw.get("payload")
        if not isinstance(proof, dict):
            raise MalformedPayloadError("Payment payload is missing the scheme payload object")

        self.validate_proof(proof)

        resource = raw.get("resource")
        try:
            return PaymentPayload(
                x402_version=detect_version(raw),
                accepted=accepted,
                payload=proof,
                resource=resource if isinstance(resource, dict) else None,
            )
        except ValidationError as e:
            raise MalformedPayloadError(
                f"Invalid payment payload: {e.error_count()} error(s)"
            ) from e

    @abstractmethod
    def validate_proof(self, proof: dict[str, Any]) -> None:
        """Check the structural shape of the scheme payload.

        Raises:
            MalformedPayloadError: If a required field is missing or invalid.
        """

    def build_verify_request(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> FacilitatorRequest:
        return self._build_request(payload, requirements)

    def build_settle_request(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> FacilitatorRequest:
        return self._build_request(payload, requirements)

    def _build_request(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> FacilitatorRequest:
        # The accepted block always reflects the route's terms, not the client's claim
        payment_payload: dict[str, Any] = {
            "x402Version": payload.x402_version,
            "accepted": requirements.model_dump(by_alias=True, exclude_none=True),
            "payload": payload.payload,
        }
        if payload.x402_version == 1:
            payment_payload["scheme"] = requirements.scheme
            payment_payload["network"] = requirements.network
        if payload.resource is not None:
            payment_payload["resource"] = payload.resource.model_dump(
                by_alias=True, exclude_none=True
            )

        return FacilitatorRequest(
            x402_version=payload.x402_version,
            payment_payload=payment_payload,
            payment_requirements=requirements,
        )


def require_fields(container: dict[str, Any], fields: tuple[str, ...], where: str) -> None:
    """Raise MalformedPayloadError unless every field is a non-empty string."""
    for name in fields:
        value = container.get(name)
        if not isinstance(value, str) or not value:
            raise MalformedPayloadError(f"{where}.{name} must be a non-empty string")


def require_integer_strings(container: dict[str, Any], fields: tuple[str, ...], where: str) -> None:
    """Raise MalformedPayloadError unless every field is an integer string."""
    for name in fields:
        value = container.get(name)
        if isinstance(value, int) and not isinstance(value, bool):
            continue
        if not isinstance(value, str) or not value.isdigit():
            raise MalformedPayloadError(f"{where}.{name} must be an integer encoded as a string")
