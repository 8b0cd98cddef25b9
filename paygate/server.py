"""ResourceServer - decides whether a request may reach a protected handler.

Looks up the route's payment requirement, dispatches the client's payment to
the scheme adapter registered for its (network, scheme) pair, and verifies
and settles it through a facilitator client.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from types import MappingProxyType
from typing import Any

from typing_extensions import Self

from .http.utils import decode_payment_header
from .interfaces import FacilitatorClient, SchemeAdapter
from .registry import RouteRegistry, parse_routes_config
from .schemas import (
    AcceptedKind,
    ChallengeRequired,
    ConfigurationError,
    Decision,
    DuplicateRegistrationError,
    FacilitatorRejectedError,
    Network,
    NoMatchingRequirementError,
    NoRequirement,
    PaymentError,
    PaymentOption,
    PaymentPayload,
    PaymentPolicy,
    PaymentRequirements,
    Rejected,
    RouteRequirement,
    RoutesConfig,
    RouteSpec,
    SettlementFailed,
    SupportedResponse,
    Verified,
    VerifyResponse,
)
from .schemas.helpers import read_accepted_kind

logger = logging.getLogger(__name__)


# ============================================================================
# ResourceServerBuilder
# ============================================================================


class ResourceServerBuilder:
    """Collects scheme adapters and routes, then builds an immutable server.

    Example:
        ```python
        from paygate import ResourceServerBuilder
        from paygate.http import HTTPFacilitatorClient
        from paygate.mechanisms import ExactEvmScheme

        facilitator = HTTPFacilitatorClient({"url": "https://x402.org/facilitator"})
        server = (
            ResourceServerBuilder(facilitator)
            .register("eip155:84532", ExactEvmScheme())
            .routes({
                "GET /weather": {
                    "accepts": [
                        {"scheme": "exact", "price": "$0.001",
                         "network": "eip155:84532", "payTo": "0x..."},
                    ],
                    "description": "Weather data",
                    "mimeType": "application/json",
                },
            })
            .build()
        )

        decision = await server.handle("GET", "/weather", payment_header)
        ```
    """

    def __init__(
        self,
        facilitator: FacilitatorClient,
        policy: PaymentPolicy | None = None,
    ) -> None:
        self._facilitator = facilitator
        self._policy = policy or PaymentPolicy()
        self._adapters: dict[tuple[Network, str], SchemeAdapter] = {}
        self._routes: list[RouteSpec] = []

    def register(self, network: Network, adapter: SchemeAdapter) -> Self:
        """Register a scheme adapter for a network.

        Args:
            network: Network to register for (e.g., "eip155:84532").
            adapter: Scheme adapter implementation.

        Returns:
            Self for chaining.

        Raises:
            DuplicateRegistrationError: If (network, adapter.scheme) is taken.
            ConfigurationError: If the adapter serves another network family.
        """
        key = (network, adapter.scheme)
        if key in self._adapters:
            raise DuplicateRegistrationError(network, adapter.scheme)

        supports_network = getattr(adapter, "supports_network", None)
        if supports_network is not None and not supports_network(network):
            raise ConfigurationError(
                f"{type(adapter).__name__} cannot serve network '{network}'"
            )

        self._adapters[key] = adapter
        logger.info("Registered scheme '%s' for network %s", adapter.scheme, network)
        return self

    def route(
        self,
        method: str,
        path: str,
        options: Sequence[PaymentOption | dict[str, Any]],
        description: str | None = None,
        mime_type: str | None = None,
        resource: str | None = None,
    ) -> Self:
        """Declare a payment-gated route. Validated by ``build()``."""
        self._routes.append(
            RouteSpec(
                method=method,
                path=path,
                options=tuple(options),
                description=description,
                mime_type=mime_type,
                resource=resource,
            )
        )
        return self

    def routes(self, config: RoutesConfig) -> Self:
        """Declare routes from the ``{"GET /path": {"accepts": [...]}}`` form."""
        self._routes.extend(parse_routes_config(config))
        return self

    def build(self) -> ResourceServer:
        """Validate routes against registered adapters and build the server.

        Raises:
            ConfigurationError: If any route is misconfigured.
        """
        adapters = MappingProxyType(dict(self._adapters))
        registry = RouteRegistry(adapters)
        for spec in self._routes:
            registry.register_spec(spec)

        return ResourceServer(self._facilitator, adapters, registry, self._policy)


# ============================================================================
# ResourceServer
# ============================================================================


class ResourceServer:
    """Stateless payment gate shared by all requests.

    Holds only read-only configuration; every request's payload and results
    live in the coroutine handling it. The only suspension points are the
    facilitator calls.
    """

    def __init__(
        self,
        facilitator: FacilitatorClient,
        adapters: Mapping[tuple[Network, str], SchemeAdapter],
        registry: RouteRegistry,
        policy: PaymentPolicy | None = None,
    ) -> None:
        self._facilitator = facilitator
        self._adapters = adapters
        self._registry = registry
        self._policy = policy or PaymentPolicy()

    @property
    def facilitator(self) -> FacilitatorClient:
        return self._facilitator

    @property
    def policy(self) -> PaymentPolicy:
        return self._policy

    @property
    def registry(self) -> RouteRegistry:
        return self._registry

    @property
    def adapters(self) -> Mapping[tuple[Network, str], SchemeAdapter]:
        return self._adapters

    def lookup(self, method: str, path: str) -> RouteRequirement | None:
        return self._registry.lookup(method, path)

    def requires_payment(self, method: str, path: str) -> bool:
        return self._registry.lookup(method, path) is not None

    def get_adapter(self, network: Network, scheme: str) -> SchemeAdapter | None:
        return self._adapters.get((network, scheme))

    # ========================================================================
    # Request handling
    # ========================================================================

    async def handle(
        self,
        method: str,
        path: str,
        payment: str | dict[str, Any] | None,
        url: str | None = None,
    ) -> Decision:
        """Run the full pipeline: lookup, verify, then settle.

        Args:
            method: HTTP method.
            path: Request path.
            payment: Raw payment header (base64 JSON), an already decoded
                payload dict, or None when the client sent no payment.
            url: Full request URL used in the challenge's resource info.

        Returns:
            NoRequirement, ChallengeRequired, Verified (settled), Rejected
            or SettlementFailed.
        """
        decision = await self.authorize(method, path, payment, url)
        if isinstance(decision, Verified):
            return await self.settle(decision)
        return decision

    async def authorize(
        self,
        method: str,
        path: str,
        payment: str | dict[str, Any] | None,
        url: str | None = None,
    ) -> Decision:
        """Run the pipeline up to verification; settlement is left pending.

        Returns:
            Verified with ``settlement=None`` when the facilitator accepted the
            payment, otherwise the terminal decision.
        """
        route = self._registry.lookup(method, path)
        if route is None:
            return NoRequirement()

        if not payment:
            logger.debug("No payment for %s %s, issuing challenge", route.method, route.path)
            return ChallengeRequired(
                route=route,
                payment_required=route.payment_required(url or route.path),
            )

        try:
            raw = decode_payment_header(payment) if isinstance(payment, str) else payment
            accepted = read_accepted_kind(raw)
            requirements = self._match_requirements(route, accepted)
            adapter = self._adapters[(requirements.network, requirements.scheme)]
            payload = adapter.parse_payload(raw)
            verify_response = await self._verify(adapter, payload, requirements)
        except PaymentError as e:
            logger.warning(
                "Payment rejected for %s %s: %s (%s)", route.method, route.path, e.code, e.reason
            )
            return Rejected.from_error(route, e)

        logger.debug(
            "Payment verified for %s %s on %s (payer %s)",
            route.method,
            route.path,
            requirements.network,
            verify_response.payer,
        )
        return Verified(
            route=route,
            requirements=requirements,
            payload=payload,
            verify_response=verify_response,
        )

    async def settle(self, verified: Verified) -> Verified | SettlementFailed:
        """Settle a verified payment.

        Returns:
            ``verified`` carrying the settlement response, or SettlementFailed
            when the facilitator refused or could not settle.
        """
        requirements = verified.requirements
        adapter = self._adapters[(requirements.network, requirements.scheme)]
        request = adapter.build_settle_request(verified.payload, requirements)

        try:
            settle_response = await self._facilitator.settle(request)
        except PaymentError as e:
            logger.warning(
                "Settlement failed for %s %s: %s (%s)",
                verified.route.method,
                verified.route.path,
                e.code,
                e.reason,
            )
            return SettlementFailed(verified=verified, reason=e.reason, cause=e.code)

        if not settle_response.success:
            reason = settle_response.error_reason or "Settlement failed"
            logger.warning(
                "Settlement refused for %s %s: %s",
                verified.route.method,
                verified.route.path,
                reason,
            )
            return SettlementFailed(verified=verified, reason=reason, settlement=settle_response)

        logger.info(
            "Settled payment for %s %s on %s: %s",
            verified.route.method,
            verified.route.path,
            settle_response.network or requirements.network,
            settle_response.transaction,
        )
        return verified.with_settlement(settle_response)

    async def check_facilitator_support(self) -> SupportedResponse:
        """Check that the facilitator supports every advertised (network, scheme).

        Raises:
            ConfigurationError: If any route kind is unsupported.
        """
        supported = await self._facilitator.get_supported()

        missing = sorted(
            {
                f'"{scheme}" on "{network}"'
                for route in self._registry
                for network, scheme in route.kinds()
                if not supported.supports(network, scheme)
            }
        )
        if missing:
            raise ConfigurationError(f"Facilitator doesn't support {', '.join(missing)}")

        return supported

    # ========================================================================
    # Internal Methods
    # ========================================================================

    def _match_requirements(
        self,
        route: RouteRequirement,
        accepted: AcceptedKind,
    ) -> PaymentRequirements:
        """Find the route option matching the payment's (network, scheme).

        When several options share the pair, prefer the one whose terms equal
        the client's claim.

        Raises:
            NoMatchingRequirementError: If the route does not advertise the pair.
        """
        candidates = route.candidates(accepted.network, accepted.scheme)
        if not candidates:
            raise NoMatchingRequirementError(accepted.network, accepted.scheme)

        for requirements in candidates:
            claims = (
                (accepted.pay_to, requirements.pay_to),
                (accepted.amount, requirements.amount),
                (accepted.asset, requirements.asset),
            )
            if all(claimed is None or claimed == actual for claimed, actual in claims):
                return requirements

        return candidates[0]

    async def _verify(
        self,
        adapter: SchemeAdapter,
        payload: PaymentPayload,
        requirements: PaymentRequirements,
    ) -> VerifyResponse:
        request = adapter.build_verify_request(payload, requirements)
        verify_response = await self._facilitator.verify(request)

        if not verify_response.is_valid:
            raise FacilitatorRejectedError(
                verify_response.invalid_reason or "Verification failed",
                payer=verify_response.payer,
            )
        return verify_response
