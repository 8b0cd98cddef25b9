"""Tests for payment header encoding and decoding."""

import base64
import json

import pytest

from paygate.http import (
    decode_payment_header,
    decode_payment_required_header,
    decode_payment_response_header,
    encode_payment_header,
    encode_payment_required_header,
    encode_payment_response_header,
)
from paygate.schemas import (
    MalformedPayloadError,
    PaymentRequired,
    PaymentRequirements,
    ResourceInfo,
    SettleResponse,
)

from ...mocks import build_evm_payment


class TestPaymentHeader:
    """Tests for PAYMENT-SIGNATURE / X-PAYMENT decoding."""

    def test_decodes_base64_json(self):
        payment = build_evm_payment()

        assert decode_payment_header(encode_payment_header(payment)) == payment

    def test_ignores_surrounding_whitespace(self):
        header = " " + encode_payment_header({"x402Version": 2}) + "\n"

        assert decode_payment_header(header) == {"x402Version": 2}

    @pytest.mark.parametrize(
        "header",
        [
            "not base64 at all!",
            base64.b64encode(b"{not json").decode(),
            base64.b64encode(b"\xff\xfe").decode(),
        ],
    )
    def test_rejects_malformed_header(self, header):
        with pytest.raises(MalformedPayloadError, match="Invalid payment header format"):
            decode_payment_header(header)

    def test_rejects_non_object_json(self):
        header = base64.b64encode(json.dumps(["exact"]).encode()).decode()

        with pytest.raises(MalformedPayloadError):
            decode_payment_header(header)


class TestResponseHeaders:
    """Tests for PAYMENT-REQUIRED and PAYMENT-RESPONSE headers."""

    def test_payment_required_header_is_camel_case_json(self):
        payment_required = PaymentRequired(
            error="payment_required",
            resource=ResourceInfo(url="http://localhost/weather"),
            accepts=[
                PaymentRequirements(
                    scheme="exact",
                    network="eip155:84532",
                    asset="0xasset",
                    amount="1000",
                    pay_to="0xabc",
                    max_timeout_seconds=300,
                )
            ],
        )

        header = encode_payment_required_header(payment_required)
        data = json.loads(base64.b64decode(header))

        assert data["x402Version"] == 2
        assert data["accepts"][0]["payTo"] == "0xabc"
        assert "description" not in data["resource"]
        assert decode_payment_required_header(header) == payment_required

    def test_payment_response_header(self):
        settle_response = SettleResponse(
            success=True, transaction="0xtx", network="eip155:84532", payer="0xpayer"
        )

        header = encode_payment_response_header(settle_response)

        assert decode_payment_response_header(header) == settle_response
