"""Outcomes of handling one request against the payment gate."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TypeAlias

from .config import RouteRequirement
from .errors import ERR_SETTLEMENT_FAILED, PaymentError
from .payments import (
    PaymentPayload,
    PaymentRequired,
    PaymentRequirements,
    SettleResponse,
    VerifyResponse,
)


@dataclass(frozen=True)
class NoRequirement:
    """Route is not payment-gated; pass the request through untouched."""


@dataclass(frozen=True)
class ChallengeRequired:
    """No payment was supplied; answer with the route's challenge."""

    route: RouteRequirement
    payment_required: PaymentRequired


@dataclass(frozen=True)
class Verified:
    """Payment verified. ``settlement`` is None until settlement ran."""

    route: RouteRequirement
    requirements: PaymentRequirements
    payload: PaymentPayload
    verify_response: VerifyResponse
    settlement: SettleResponse | None = None

    @property
    def settled(self) -> bool:
        return self.settlement is not None and self.settlement.success

    @property
    def settlement_id(self) -> str | None:
        if self.settlement is not None and self.settlement.settlement_id:
            return self.settlement.settlement_id
        return self.verify_response.settlement_id

    @property
    def payer(self) -> str | None:
        if self.settlement is not None and self.settlement.payer:
            return self.settlement.payer
        return self.verify_response.payer

    def with_settlement(self, settlement: SettleResponse) -> Verified:
        return replace(self, settlement=settlement)


@dataclass(frozen=True)
class Rejected:
    """Payment present but refused.

    Attributes:
        code: Machine-readable category (see ``schemas.errors``).
        reason: Verbatim reason from the facilitator or local check.
        retryable: Whether the client may succeed by retrying.
    """

    route: RouteRequirement
    code: str
    reason: str
    retryable: bool = False

    @classmethod
    def from_error(cls, route: RouteRequirement, error: PaymentError) -> Rejected:
        return cls(route=route, code=error.code, reason=error.reason, retryable=error.retryable)


@dataclass(frozen=True)
class SettlementFailed:
    """Payment verified but settlement did not complete.

    Kept distinct from ``Rejected``: the payment may be valid yet not final.

    Attributes:
        reason: Facilitator error reason or local diagnosis.
        settlement: The refusing settle response, when the facilitator answered.
        cause: Code of the underlying error when no response was received.
    """

    verified: Verified
    reason: str
    settlement: SettleResponse | None = None
    code: str = ERR_SETTLEMENT_FAILED
    cause: str | None = None
    retryable: bool = True

    @property
    def route(self) -> RouteRequirement:
        return self.verified.route


Decision: TypeAlias = NoRequirement | ChallengeRequired | Verified | Rejected | SettlementFailed
