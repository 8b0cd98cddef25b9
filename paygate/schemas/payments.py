"""Payment types: route options, wire requirements, payloads, challenges."""

from typing import Any

from pydantic import AliasChoices, ConfigDict, Field

from .base import X402_VERSION, BaseGateModel, Network, Price


class PaymentOption(BaseGateModel):
    """One acceptable way to pay for a route.

    Several options on one route are alternatives: any single satisfied
    option grants access.

    Attributes:
        scheme: Payment scheme identifier (e.g., "exact").
        price: Money ("$0.001") or explicit AssetAmount.
        network: CAIP-2 network identifier.
        pay_to: Recipient address on that network.
        description: Optional description, defaults to the route's.
        mime_type: Optional MIME type, defaults to the route's.
        max_timeout_seconds: Optional payment validity window.
        extra: Optional scheme-specific data merged into the requirements.
    """

    model_config = ConfigDict(frozen=True)

    scheme: str
    price: Price
    network: Network
    pay_to: str
    description: str | None = None
    mime_type: str | None = None
    max_timeout_seconds: int | None = None
    extra: dict[str, Any] | None = None


class ResourceInfo(BaseGateModel):
    """Describes the resource being accessed.

    Attributes:
        url: The URL of the resource.
        description: Optional human-readable description.
        mime_type: Optional MIME type of the resource.
    """

    url: str
    description: str | None = None
    mime_type: str | None = None


class PaymentRequirements(BaseGateModel):
    """Wire form of a payment option, with the price in atomic units.

    Attributes:
        scheme: Payment scheme identifier (e.g., "exact").
        network: CAIP-2 network identifier (e.g., "eip155:84532").
        asset: Asset address/identifier.
        amount: Amount in smallest unit.
        pay_to: Recipient address.
        max_timeout_seconds: Maximum time for payment validity.
        extra: Additional scheme-specific data.
    """

    scheme: str
    network: Network
    asset: str
    amount: str
    pay_to: str
    max_timeout_seconds: int
    extra: dict[str, Any] = Field(default_factory=dict)


class PaymentRequired(BaseGateModel):
    """402 challenge body.

    Attributes:
        x402_version: Protocol version.
        error: Error code explaining why payment is required.
        resource: Resource information.
        accepts: Accepted payment requirements, in registration order.
    """

    x402_version: int = X402_VERSION
    error: str | None = None
    resource: ResourceInfo | None = None
    accepts: list[PaymentRequirements]


class PaymentRejection(PaymentRequired):
    """402/5xx body for a request whose payment was refused.

    Attributes:
        reason: Verbatim reason (facilitator reason or local diagnosis).
        retryable: Whether retrying (another network, later) may succeed.
    """

    reason: str
    retryable: bool = False


class AcceptedKind(BaseGateModel):
    """The option a client claims to have paid for.

    Only scheme and network are required; the remaining fields are used to
    pick between several options sharing a (network, scheme) pair.
    """

    scheme: str
    network: Network
    asset: str | None = None
    amount: str | None = None
    pay_to: str | None = None


class PaymentPayload(BaseGateModel):
    """Client-submitted payment proof.

    Attributes:
        x402_version: Protocol version used by the client.
        accepted: The option the client paid for.
        payload: Scheme-specific proof, opaque to the core.
        resource: Optional resource information echoed by the client.
    """

    x402_version: int = X402_VERSION
    accepted: AcceptedKind
    payload: dict[str, Any]
    resource: ResourceInfo | None = None

    @property
    def scheme(self) -> str:
        return self.accepted.scheme

    @property
    def network(self) -> Network:
        return self.accepted.network


class FacilitatorRequest(BaseGateModel):
    """Body posted to the facilitator's /verify and /settle endpoints."""

    x402_version: int = X402_VERSION
    payment_payload: dict[str, Any]
    payment_requirements: PaymentRequirements

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class VerifyResponse(BaseGateModel):
    """Response from payment verification.

    Accepts the x402 field names (``isValid``, ``invalidReason``) as well as
    the short form (``valid``, ``reason``, ``settlementId``).

    Attributes:
        is_valid: Whether the payment is valid.
        invalid_reason: Reason for invalidity (if is_valid is False).
        invalid_message: Human-readable message for invalidity.
        payer: The payer's address.
        settlement_id: Identifier minted by facilitators that settle on verify.
    """

    is_valid: bool = Field(
        validation_alias=AliasChoices("isValid", "is_valid", "valid"),
        serialization_alias="isValid",
    )
    invalid_reason: str | None = Field(
        None,
        validation_alias=AliasChoices("invalidReason", "invalid_reason", "reason"),
        serialization_alias="invalidReason",
    )
    invalid_message: str | None = None
    payer: str | None = None
    settlement_id: str | None = None


class SettleResponse(BaseGateModel):
    """Response from payment settlement.

    Attributes:
        success: Whether settlement was successful.
        error_reason: Reason for failure (if success is False).
        error_message: Human-readable message for failure.
        payer: The payer's address.
        transaction: Transaction hash/identifier.
        network: Network where settlement occurred.
    """

    success: bool
    error_reason: str | None = Field(
        None,
        validation_alias=AliasChoices("errorReason", "error_reason", "reason"),
        serialization_alias="errorReason",
    )
    error_message: str | None = None
    payer: str | None = None
    transaction: str | None = Field(
        None,
        validation_alias=AliasChoices("transaction", "settlementId", "settlement_id"),
        serialization_alias="transaction",
    )
    network: Network | None = None

    @property
    def settlement_id(self) -> str | None:
        return self.transaction


class SupportedKind(BaseGateModel):
    """A (scheme, network) pair a facilitator can verify and settle."""

    x402_version: int = X402_VERSION
    scheme: str
    network: Network
    extra: dict[str, Any] | None = None


class SupportedResponse(BaseGateModel):
    """Response from the facilitator's /supported endpoint."""

    kinds: list[SupportedKind] = Field(default_factory=list)
    extensions: list[str] = Field(default_factory=list)

    def supports(self, network: Network, scheme: str) -> bool:
        """Check support, honouring family wildcards such as ``eip155:*``."""
        wildcard = f"{network.split(':', 1)[0]}:*"
        return any(
            kind.scheme == scheme and kind.network in (network, wildcard) for kind in self.kinds
        )
