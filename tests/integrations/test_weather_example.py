"""Tests for the weather/Allora example server."""

import importlib.util
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient

from paygate import GateSettings
from paygate.http import encode_payment_header
from paygate.mechanisms.evm import BASE_SEPOLIA
from paygate.mechanisms.svm import SOLANA_DEVNET_CAIP2
from paygate.schemas import ConfigurationError, SupportedKind, SupportedResponse

from ..mocks import (
    BASE_SEPOLIA_USDC,
    EVM_PAY_TO,
    SOLANA_DEVNET_USDC,
    SVM_PAY_TO,
    FakeFacilitatorClient,
    build_evm_payment,
    build_svm_payment,
)

pytest.importorskip("uvicorn")

EXAMPLE = Path(__file__).resolve().parents[2] / "examples" / "weather" / "main.py"


def load_example():
    spec = importlib.util.spec_from_file_location("weather_example", EXAMPLE)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def make_settings(**overrides) -> GateSettings:
    env = {
        "FACILITATOR_URL": "https://facilitator.test",
        "EVM_WALLET": EVM_PAY_TO,
        "SVM_ADDRESS": SVM_PAY_TO,
        **overrides,
    }
    return GateSettings.from_env({key: value for key, value in env.items() if value is not None})


def make_client(settings: GateSettings, upstream=None) -> tuple[TestClient, FakeFacilitatorClient]:
    facilitator = FakeFacilitatorClient(
        supported=SupportedResponse(
            kinds=[
                SupportedKind(scheme="exact", network=BASE_SEPOLIA),
                SupportedKind(scheme="exact", network="solana:*"),
            ]
        )
    )
    allora = httpx.AsyncClient(
        transport=httpx.MockTransport(upstream or (lambda request: httpx.Response(200, json={})))
    )
    app = load_example().create_app(settings, facilitator=facilitator, allora_client=allora)
    return TestClient(app), facilitator


def paid(payment: dict | None = None) -> dict[str, str]:
    return {"PAYMENT-SIGNATURE": encode_payment_header(payment or build_evm_payment())}


class TestWeatherExample:
    """Tests for the /weather route."""

    def test_weather_challenge_lists_base_and_solana(self):
        client, _ = make_client(make_settings())

        response = client.get("/weather")

        assert response.status_code == 402
        accepts = response.json()["accepts"]
        assert [(a["network"], a["asset"], a["amount"]) for a in accepts] == [
            (BASE_SEPOLIA, BASE_SEPOLIA_USDC, "1000"),
            (SOLANA_DEVNET_CAIP2, SOLANA_DEVNET_USDC, "1000"),
        ]
        assert response.json()["resource"]["description"] == "Weather data"

    def test_allora_costs_more(self):
        client, _ = make_client(make_settings())

        accepts = client.get("/allora").json()["accepts"]

        assert {a["amount"] for a in accepts} == {"10000"}

    @pytest.mark.parametrize("payment", [build_evm_payment(), build_svm_payment()])
    def test_paid_weather(self, payment):
        client, facilitator = make_client(make_settings())

        response = client.get("/weather", headers=paid(payment))

        assert response.status_code == 200
        assert response.json() == {"report": {"weather": "sunny", "temperature": 70}}
        assert len(facilitator.settle_calls) == 1

    def test_missing_wallet_fails_at_startup(self):
        settings = make_settings(SVM_ADDRESS=None)

        with pytest.raises(ConfigurationError):
            load_example().build_server(settings, FakeFacilitatorClient())

    def test_lifespan_checks_facilitator_support(self):
        client, facilitator = make_client(make_settings())

        with client:
            pass

        assert facilitator.supported_calls == 1


class TestAlloraProxy:
    """Tests for the /allora price-prediction proxy."""

    def test_missing_api_key(self):
        client, _ = make_client(make_settings())

        response = client.get("/allora?asset=BTC&timeframe=5m", headers=paid())

        assert response.status_code == 500
        assert response.json() == {"error": "ALLORA_API_KEY not configured"}

    def test_missing_query_params(self):
        client, _ = make_client(make_settings(ALLORA_API_KEY="key"))

        response = client.get("/allora?asset=BTC", headers=paid())

        assert response.status_code == 400
        assert response.json() == {"error": "asset and timeframe query params required"}

    def test_proxies_upstream_json(self):
        seen: list[httpx.Request] = []

        def upstream(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"price": "67000.12"})

        client, _ = make_client(make_settings(ALLORA_API_KEY="key"), upstream)

        response = client.get("/allora?asset=BTC&timeframe=5m", headers=paid())

        assert response.status_code == 200
        assert response.json() == {"price": "67000.12"}
        (request,) = seen
        assert request.url.path == "/v2/allora/consumer/price/ethereum-111551111/BTC/5m"
        assert request.headers["x-api-key"] == "key"

    def test_upstream_status_is_forwarded(self):
        client, facilitator = make_client(
            make_settings(ALLORA_API_KEY="key"), lambda request: httpx.Response(404)
        )

        response = client.get("/allora?asset=BTC&timeframe=5m", headers=paid())

        assert response.status_code == 404
        assert response.json() == {"error": "Allora API request failed"}
        assert facilitator.settle_calls == []

    def test_upstream_failure(self):
        def upstream(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("unreachable", request=request)

        client, _ = make_client(make_settings(ALLORA_API_KEY="key"), upstream)

        response = client.get("/allora?asset=BTC&timeframe=5m", headers=paid())

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to fetch Allora data"}
