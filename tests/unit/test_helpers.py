"""Tests for payload reading and route normalisation helpers."""

import pytest

from paygate.schemas import MalformedPayloadError
from paygate.schemas.helpers import (
    detect_version,
    normalize_method,
    normalize_path,
    read_accepted_kind,
)


class TestNormalizePath:
    """Tests for normalize_path."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            ("/weather", "/weather"),
            ("/weather/", "/weather"),
            ("weather", "/weather"),
            ("//api///weather", "/api/weather"),
            ("/weather?city=paris", "/weather"),
            ("/weather#today", "/weather"),
            ("/caf%C3%A9", "/café"),
            ("/", "/"),
            ("", "/"),
        ],
    )
    def test_normalizes(self, raw, expected):
        assert normalize_path(raw) == expected

    def test_method_is_upper_cased(self):
        assert normalize_method(" get ") == "GET"


class TestDetectVersion:
    """Tests for detect_version."""

    def test_defaults_to_v2(self):
        assert detect_version({}) == 2

    def test_reads_v1(self):
        assert detect_version({"x402Version": 1}) == 1

    @pytest.mark.parametrize("version", [0, 3, "2", None])
    def test_rejects_unsupported(self, version):
        with pytest.raises(MalformedPayloadError, match="x402Version"):
            detect_version({"x402Version": version})


class TestReadAcceptedKind:
    """Tests for read_accepted_kind."""

    def test_reads_v2_accepted_block(self):
        kind = read_accepted_kind(
            {
                "x402Version": 2,
                "accepted": {
                    "scheme": "exact",
                    "network": "eip155:84532",
                    "payTo": "0xabc",
                    "amount": "1000",
                    "maxTimeoutSeconds": 60,
                },
                "payload": {},
            }
        )

        assert (kind.network, kind.scheme) == ("eip155:84532", "exact")
        assert kind.pay_to == "0xabc"
        assert kind.amount == "1000"

    def test_reads_v1_top_level_fields(self):
        kind = read_accepted_kind({"x402Version": 1, "scheme": "exact", "network": "base-sepolia"})

        assert (kind.network, kind.scheme) == ("base-sepolia", "exact")

    def test_missing_accepted_block(self):
        with pytest.raises(MalformedPayloadError, match="accepted"):
            read_accepted_kind({"x402Version": 2, "payload": {}})

    def test_missing_network(self):
        with pytest.raises(MalformedPayloadError, match="scheme and network"):
            read_accepted_kind({"x402Version": 2, "accepted": {"scheme": "exact"}})

    def test_non_object_payload(self):
        with pytest.raises(MalformedPayloadError):
            read_accepted_kind(["exact"])
