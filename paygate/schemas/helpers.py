"""Helpers for reading client payment payloads and normalising routes."""

from __future__ import annotations

import re
from typing import Any
from urllib.parse import unquote

from pydantic import ValidationError

from .base import X402_VERSION
from .errors import MalformedPayloadError
from .payments import AcceptedKind


def detect_version(data: dict[str, Any]) -> int:
    """Return the protocol version declared by a decoded payment payload."""
    version = data.get("x402Version", data.get("x402_version", X402_VERSION))
    if not isinstance(version, int) or version not in (1, 2):
        raise MalformedPayloadError(f"Unsupported x402Version: {version!r}")
    return version


def read_accepted_kind(data: dict[str, Any]) -> AcceptedKind:
    """Read the (network, scheme) a client claims to have paid for.

    Version 2 payloads carry it in ``accepted``; version 1 payloads carry
    ``scheme`` and ``network`` at the top level.

    Raises:
        MalformedPayloadError: If the payload does not declare both.
    """
    if not isinstance(data, dict):
        raise MalformedPayloadError("Payment payload must be a JSON object")

    version = detect_version(data)
    source = data.get("accepted") if version == 2 else data
    if version == 2 and source is None and "scheme" in data:
        source = data

    if not isinstance(source, dict):
        raise MalformedPayloadError("Payment payload is missing the accepted payment option")

    try:
        return AcceptedKind.model_validate(source)
    except ValidationError as e:
        raise MalformedPayloadError(
            f"Payment payload must declare scheme and network: {e.error_count()} error(s)"
        ) from e


def normalize_method(method: str) -> str:
    return method.strip().upper()


def normalize_path(path: str) -> str:
    """Normalize path for exact matching."""
    # Remove query string and fragment
    path = path.split("?")[0].split("#")[0]

    path = unquote(path)

    # Normalize slashes
    path = re.sub(r"/+", "/", path)
    path = path.rstrip("/")

    if not path.startswith("/"):
        path = "/" + path

    return path
