"""Route and policy configuration types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Literal, TypeAlias

from .base import Network
from .errors import ERR_PAYMENT_REQUIRED
from .payments import PaymentOption, PaymentRequired, PaymentRequirements, ResourceInfo

# {"GET /weather": {"accepts": [...], "description": ..., "mimeType": ...}}
RoutesConfig: TypeAlias = dict[str, dict[str, Any]]

SettlementFailurePolicy: TypeAlias = Literal["deny", "allow"]


@dataclass(frozen=True)
class RouteRequirement:
    """Payment requirement of one (method, path) route.

    ``options`` and ``requirements`` are parallel tuples: ``requirements[i]``
    is the wire form of ``options[i]``. Order is display preference only.
    """

    method: str
    path: str
    options: tuple[PaymentOption, ...]
    requirements: tuple[PaymentRequirements, ...]
    description: str = ""
    mime_type: str = ""
    resource: str | None = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.method, self.path)

    def kinds(self) -> list[tuple[Network, str]]:
        """(network, scheme) pairs advertised by this route, in order."""
        return [(option.network, option.scheme) for option in self.options]

    def candidates(self, network: Network, scheme: str) -> list[PaymentRequirements]:
        """Requirements whose (network, scheme) equals the given pair."""
        return [
            req for req in self.requirements if req.network == network and req.scheme == scheme
        ]

    def resource_info(self, url: str) -> ResourceInfo:
        return ResourceInfo(
            url=self.resource or url,
            description=self.description,
            mime_type=self.mime_type,
        )

    def payment_required(
        self, url: str, error: str | None = ERR_PAYMENT_REQUIRED
    ) -> PaymentRequired:
        """Build the 402 challenge listing every accepted option."""
        return PaymentRequired(
            error=error,
            resource=self.resource_info(url),
            accepts=list(self.requirements),
        )


@dataclass(frozen=True)
class PaymentPolicy:
    """Caller-facing policy for the edge cases of the payment flow.

    Attributes:
        settlement_failure: "deny" refuses access when settlement fails after
            a successful verify (fail-closed); "allow" serves the resource and
            reports the failed settlement in the response header.
        infrastructure_error_status: HTTP status used when the facilitator is
            unreachable, times out or errors (503, or 402 to make clients
            retry the payment flow).
        settle_after_response: Settle only after the protected handler
            answered with a 2xx status. When False, settlement happens before
            the handler runs.
    """

    settlement_failure: SettlementFailurePolicy = "deny"
    infrastructure_error_status: int = 503
    settle_after_response: bool = True

    def __post_init__(self) -> None:
        if self.settlement_failure not in ("deny", "allow"):
            raise ValueError(
                f"settlement_failure must be 'deny' or 'allow', got {self.settlement_failure!r}"
            )


@dataclass(frozen=True)
class RouteSpec:
    """Route declaration collected by the builder before validation."""

    method: str
    path: str
    options: tuple[PaymentOption | dict[str, Any], ...]
    description: str | None = None
    mime_type: str | None = None
    resource: str | None = None
