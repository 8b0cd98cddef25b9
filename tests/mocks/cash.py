"""Cash scheme and in-memory facilitator for testing the payment flow.

The "cash" network family has no chain behind it: prices are counted in
millicents and a payload only needs a signature string. This keeps server
and middleware tests independent of EVM/SVM payload shapes.
"""

import asyncio
from decimal import Decimal
from typing import Any

from paygate.schemas import (
    AssetAmount,
    FacilitatorRequest,
    MalformedPayloadError,
    Network,
    PaymentOption,
    PaymentPayload,
    PaymentRequirements,
    Price,
    SettleResponse,
    SupportedKind,
    SupportedResponse,
    VerifyResponse,
)

CASH_NETWORK_A = "cash:chain-a"
CASH_NETWORK_B = "cash:chain-b"
CASH_NETWORK_C = "cash:chain-c"
CASH_ASSET = "USD"


class CashSchemeAdapter:
    """Minimal SchemeAdapter for the cash network family."""

    scheme = "exact"
    network_family = "cash"

    def parse_price(self, price: Price, network: Network) -> AssetAmount:
        if isinstance(price, AssetAmount):
            return price
        amount = Decimal(str(price).lstrip("$")) * 100_000
        return AssetAmount(amount=str(int(amount)), asset=CASH_ASSET)

    def build_requirements(self, option: PaymentOption) -> PaymentRequirements:
        asset_amount = self.parse_price(option.price, option.network)
        return PaymentRequirements(
            scheme=option.scheme,
            network=option.network,
            asset=asset_amount.asset,
            amount=asset_amount.amount,
            pay_to=option.pay_to,
            max_timeout_seconds=option.max_timeout_seconds or 60,
        )

    def parse_payload(self, raw: dict[str, Any]) -> PaymentPayload:
        proof = raw.get("payload")
        if not isinstance(proof, dict) or not proof.get("signature"):
            raise MalformedPayloadError("Cash payload requires a signature")
        return PaymentPayload.model_validate(raw)

    def build_verify_request(
        self, payload: PaymentPayload, requirements: PaymentRequirements
    ) -> FacilitatorRequest:
        return FacilitatorRequest(
            payment_payload=payload.model_dump(by_alias=True, exclude_none=True),
            payment_requirements=requirements,
        )

    def build_settle_request(
        self, payload: PaymentPayload, requirements: PaymentRequirements
    ) -> FacilitatorRequest:
        return self.build_verify_request(payload, requirements)


class FakeFacilitatorClient:
    """In-memory FacilitatorClient recording every call it receives."""

    def __init__(
        self,
        verify_response: VerifyResponse | None = None,
        settle_response: SettleResponse | None = None,
        verify_error: Exception | None = None,
        settle_error: Exception | None = None,
        delay: float = 0.0,
        supported: SupportedResponse | None = None,
    ) -> None:
        self.verify_response = verify_response or VerifyResponse(
            is_valid=True, payer="cash-payer"
        )
        self.settle_response = settle_response or SettleResponse(
            success=True, transaction="cash-tx-1", payer="cash-payer"
        )
        self.verify_error = verify_error
        self.settle_error = settle_error
        self.delay = delay
        self.supported = supported or SupportedResponse(
            kinds=[
                SupportedKind(scheme="exact", network=CASH_NETWORK_A),
                SupportedKind(scheme="exact", network=CASH_NETWORK_B),
            ]
        )
        self.verify_calls: list[FacilitatorRequest] = []
        self.settle_calls: list[FacilitatorRequest] = []
        self.supported_calls = 0

    @property
    def call_count(self) -> int:
        return len(self.verify_calls) + len(self.settle_calls)

    async def verify(self, request: FacilitatorRequest) -> VerifyResponse:
        self.verify_calls.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.verify_error is not None:
            raise self.verify_error
        return self.verify_response

    async def settle(self, request: FacilitatorRequest) -> SettleResponse:
        self.settle_calls.append(request)
        if self.settle_error is not None:
            raise self.settle_error
        return self.settle_response

    async def get_supported(self) -> SupportedResponse:
        self.supported_calls += 1
        return self.supported


def build_cash_payment(
    network: Network = CASH_NETWORK_A,
    pay_to: str | None = None,
    signature: str = "~John",
) -> dict[str, Any]:
    """Build a decoded cash payment header."""
    accepted: dict[str, Any] = {"scheme": "exact", "network": network}
    if pay_to is not None:
        accepted["payTo"] = pay_to
    return {
        "x402Version": 2,
        "accepted": accepted,
        "payload": {"signature": signature},
    }
