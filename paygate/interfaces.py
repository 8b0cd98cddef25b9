"""Interfaces implemented by scheme adapters and facilitator clients."""

from __future__ import annotations

from typing import Any, Protocol

from .schemas import (
    AssetAmount,
    FacilitatorRequest,
    Network,
    PaymentOption,
    PaymentPayload,
    PaymentRequirements,
    Price,
    SettleResponse,
    SupportedResponse,
    VerifyResponse,
)


class SchemeAdapter(Protocol):
    """Server-side payment mechanism for one (network family, scheme) pair.

    Adapters convert route prices into wire requirements, validate the shape
    of client payloads, and project payloads into facilitator requests. They
    never verify signatures; that is the facilitator's job.

    The dispatch key is always (network, scheme): the same scheme name on two
    chain families is served by two different adapters.

    Example:
        ```python
        class ExactEvmScheme:
            scheme = "exact"
            network_family = "eip155"

            def parse_price(self, price: Price, network: Network) -> AssetAmount:
                # Convert "$0.001" to {"amount": "1000", "asset": "0x..."}
                ...
        ```
    """

    @property
    def scheme(self) -> str:
        """Payment scheme identifier."""
        ...

    @property
    def network_family(self) -> str:
        """CAIP-2 namespace this adapter serves (e.g., "eip155")."""
        ...

    def parse_price(self, price: Price, network: Network) -> AssetAmount:
        """Convert Money or AssetAmount to an atomic AssetAmount.

        Raises:
            ValueError: If the price cannot be converted on this network.
        """
        ...

    def build_requirements(self, option: PaymentOption) -> PaymentRequirements:
        """Build wire requirements for a route option.

        Raises:
            ValueError: If the option cannot be served on its network.
        """
        ...

    def parse_payload(self, raw: dict[str, Any]) -> PaymentPayload:
        """Validate the structural shape of a decoded payment header.

        Raises:
            MalformedPayloadError: If the payload does not fit the scheme.
        """
        ...

    def build_verify_request(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> FacilitatorRequest:
        """Project payload and the route's requirements into a verify body."""
        ...

    def build_settle_request(
        self,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> FacilitatorRequest:
        """Project payload and the route's requirements into a settle body."""
        ...


class FacilitatorClient(Protocol):
    """Protocol for facilitator clients (HTTP or in-process fakes).

    verify/settle return responses with is_valid/success=False for a
    definitive refusal and raise ``PaymentError`` subclasses for transport
    or protocol failures.
    """

    async def verify(self, request: FacilitatorRequest) -> VerifyResponse:
        """Verify a payment."""
        ...

    async def settle(self, request: FacilitatorRequest) -> SettleResponse:
        """Settle a payment."""
        ...

    async def get_supported(self) -> SupportedResponse:
        """Get supported payment kinds."""
        ...
