"""HTTP utility functions for encoding/decoding payment headers."""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any

from ..schemas import MalformedPayloadError, PaymentRequired, SettleResponse


def safe_base64_encode(data: str) -> str:
    """Base64 encode a string safely."""
    return base64.b64encode(data.encode("utf-8")).decode("utf-8")


def safe_base64_decode(data: str) -> str:
    """Base64 decode a string safely."""
    return base64.b64decode(data.encode("utf-8"), validate=True).decode("utf-8")


def decode_payment_header(header_value: str) -> dict[str, Any]:
    """Decode a base64 PAYMENT-SIGNATURE / X-PAYMENT header into a dict.

    Raises:
        MalformedPayloadError: If the header is not base64-encoded JSON object.
    """
    try:
        data = json.loads(safe_base64_decode(header_value.strip()))
    except (binascii.Error, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedPayloadError("Invalid payment header format") from e

    if not isinstance(data, dict):
        raise MalformedPayloadError("Invalid payment header format")
    return data


def encode_payment_header(payload: dict[str, Any]) -> str:
    """Encode a payment payload dict as a base64 header value."""
    return safe_base64_encode(json.dumps(payload))


def encode_payment_required_header(payment_required: PaymentRequired) -> str:
    """Encode a PaymentRequired object as a base64 header value."""
    return safe_base64_encode(payment_required.model_dump_json(by_alias=True, exclude_none=True))


def decode_payment_required_header(header_value: str) -> PaymentRequired:
    """Decode a base64 payment required header into a PaymentRequired object."""
    return PaymentRequired.model_validate_json(safe_base64_decode(header_value))


def encode_payment_response_header(settle_response: SettleResponse) -> str:
    """Encode a SettleResponse object as a base64 header value."""
    return safe_base64_encode(settle_response.model_dump_json(by_alias=True, exclude_none=True))


def decode_payment_response_header(header_value: str) -> SettleResponse:
    """Decode a base64 payment response header into a SettleResponse object."""
    return SettleResponse.model_validate_json(safe_base64_decode(header_value))
