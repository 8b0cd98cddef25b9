"""Tests for the EVM exact scheme adapter."""

from decimal import Decimal

import pytest

from paygate.mechanisms import ExactEvmScheme, ExactSchemeAdapter
from paygate.mechanisms.evm import BASE_MAINNET, BASE_SEPOLIA
from paygate.schemas import AssetAmount, MalformedPayloadError, PaymentOption

from ...mocks import BASE_SEPOLIA_USDC, EVM_PAY_TO, build_evm_payment


def make_option(price="$0.001", network: str = BASE_SEPOLIA, **kwargs) -> PaymentOption:
    return PaymentOption(scheme="exact", price=price, network=network, pay_to=EVM_PAY_TO, **kwargs)


class TestParsePrice:
    """Tests for ExactEvmScheme.parse_price."""

    @pytest.mark.parametrize(
        "price,amount",
        [
            ("$0.001", "1000"),
            ("$0.01", "10000"),
            ("0.10", "100000"),
            ("$1,000", "1000000000"),
            (0.01, "10000"),
            (2, "2000000"),
        ],
    )
    def test_money_to_usdc_units(self, price, amount):
        result = ExactEvmScheme().parse_price(price, BASE_SEPOLIA)

        assert result.amount == amount
        assert result.asset == BASE_SEPOLIA_USDC
        assert result.extra == {"name": "USDC", "version": "2"}

    def test_mainnet_uses_mainnet_usdc(self):
        result = ExactEvmScheme().parse_price("$1", BASE_MAINNET)

        assert result.asset == "0x833589fCD6eDb6E08f4c7C32D4f71b54bdA02913"
        assert result.extra["name"] == "USD Coin"

    def test_asset_amount_passes_through(self):
        price = AssetAmount(amount="12345", asset="0xToken")

        assert ExactEvmScheme().parse_price(price, BASE_SEPOLIA) is price

    def test_asset_amount_dict_is_validated(self):
        result = ExactEvmScheme().parse_price({"amount": "5", "asset": "0xToken"}, BASE_SEPOLIA)

        assert result == AssetAmount(amount="5", asset="0xToken")

    @pytest.mark.parametrize("price", ["free", "$-1", "$0", "1e3", "", True])
    def test_rejects_invalid_money(self, price):
        with pytest.raises(ValueError):
            ExactEvmScheme().parse_price(price, BASE_SEPOLIA)

    def test_rejects_excess_precision(self):
        with pytest.raises(ValueError, match="precision"):
            ExactEvmScheme().parse_price("$0.0000001", BASE_SEPOLIA)

    def test_unknown_network_has_no_default_asset(self):
        with pytest.raises(ValueError, match="No default asset"):
            ExactEvmScheme().parse_price("$1", "eip155:1")

    def test_custom_money_parser_runs_first(self):
        def dai_on_mainnet(amount: Decimal, network: str) -> AssetAmount | None:
            if network != BASE_MAINNET:
                return None
            return AssetAmount(amount=str(int(amount * 10**18)), asset="0xDAI")

        scheme = ExactEvmScheme().register_money_parser(dai_on_mainnet)

        assert scheme.parse_price("$1", BASE_MAINNET).asset == "0xDAI"
        assert scheme.parse_price("$1", BASE_SEPOLIA).asset == BASE_SEPOLIA_USDC


class TestBuildRequirements:
    """Tests for ExactEvmScheme.build_requirements."""

    def test_builds_wire_requirements(self):
        requirements = ExactEvmScheme().build_requirements(make_option())

        assert requirements.scheme == "exact"
        assert requirements.network == BASE_SEPOLIA
        assert requirements.amount == "1000"
        assert requirements.pay_to == EVM_PAY_TO
        assert requirements.max_timeout_seconds == 300
        assert requirements.extra == {"name": "USDC", "version": "2"}

    def test_option_extra_and_timeout_win(self):
        requirements = ExactEvmScheme().build_requirements(
            make_option(max_timeout_seconds=60, extra={"version": "3", "memo": "x"})
        )

        assert requirements.max_timeout_seconds == 60
        assert requirements.extra == {"name": "USDC", "version": "3", "memo": "x"}

    def test_rejects_foreign_network(self):
        option = make_option(network="solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1")

        with pytest.raises(ValueError, match="cannot serve"):
            ExactEvmScheme().build_requirements(option)


class TestParsePayload:
    """Tests for ExactEvmScheme.parse_payload."""

    def test_accepts_well_formed_payload(self):
        payload = ExactEvmScheme().parse_payload(build_evm_payment())

        assert payload.network == BASE_SEPOLIA
        assert payload.scheme == "exact"
        assert payload.payload["authorization"]["to"] == EVM_PAY_TO

    def test_accepts_v1_payload(self):
        payload = ExactEvmScheme().parse_payload(build_evm_payment(version=1))

        assert payload.x402_version == 1
        assert payload.network == BASE_SEPOLIA

    def test_rejects_missing_signature(self):
        raw = build_evm_payment()
        del raw["payload"]["signature"]

        with pytest.raises(MalformedPayloadError, match="signature"):
            ExactEvmScheme().parse_payload(raw)

    def test_rejects_missing_authorization(self):
        raw = build_evm_payment()
        raw["payload"]["authorization"] = "0xdead"

        with pytest.raises(MalformedPayloadError, match="authorization"):
            ExactEvmScheme().parse_payload(raw)

    @pytest.mark.parametrize(
        "field,value",
        [
            ("from", "not-an-address"),
            ("to", "0x1234"),
            ("to", EVM_PAY_TO + "\n"),
            ("nonce", "abc"),
            ("value", "1.5"),
            ("validBefore", "soon"),
        ],
    )
    def test_rejects_bad_authorization_fields(self, field, value):
        with pytest.raises(MalformedPayloadError, match=field):
            ExactEvmScheme().parse_payload(build_evm_payment(**{field: value}))

    def test_rejects_other_network_family(self):
        raw = build_evm_payment(network="solana:EtWTRABZaYq6iMfeYKouRu166VU2xqa1")

        with pytest.raises(MalformedPayloadError, match="eip155"):
            ExactEvmScheme().parse_payload(raw)

    def test_rejects_other_scheme(self):
        raw = build_evm_payment()
        raw["accepted"]["scheme"] = "upto"

        with pytest.raises(MalformedPayloadError, match="upto"):
            ExactEvmScheme().parse_payload(raw)


class TestFacilitatorRequests:
    """Tests for verify/settle request projection."""

    def test_accepted_block_uses_route_terms(self):
        scheme = ExactEvmScheme()
        requirements = scheme.build_requirements(make_option())
        raw = build_evm_payment()
        raw["accepted"]["amount"] = "1"
        payload = scheme.parse_payload(raw)

        request = scheme.build_verify_request(payload, requirements)
        wire = request.to_wire()

        assert wire["x402Version"] == 2
        assert wire["paymentRequirements"]["amount"] == "1000"
        assert wire["paymentPayload"]["accepted"]["amount"] == "1000"
        assert wire["paymentPayload"]["payload"] == raw["payload"]

    def test_v1_request_carries_top_level_scheme_and_network(self):
        scheme = ExactEvmScheme()
        requirements = scheme.build_requirements(make_option())
        payload = scheme.parse_payload(build_evm_payment(version=1))

        wire = scheme.build_settle_request(payload, requirements).to_wire()

        assert wire["x402Version"] == 1
        assert wire["paymentPayload"]["scheme"] == "exact"
        assert wire["paymentPayload"]["network"] == BASE_SEPOLIA


class TestExactSchemeAdapter:
    """Tests for the abstract exact adapter base."""

    def test_base_cannot_be_instantiated(self):
        with pytest.raises(TypeError):
            ExactSchemeAdapter()

    def test_subclass_must_validate_proof(self):
        class NoProofCheck(ExactSchemeAdapter):
            network_family = "eip155"

            def default_asset(self, network: str) -> dict:
                return {"address": BASE_SEPOLIA_USDC, "decimals": 6}

        with pytest.raises(TypeError, match="validate_proof"):
            NoProofCheck()
