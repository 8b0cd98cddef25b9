"""Weather and Allora price-prediction API behind x402 payments.

Run with:
    export FACILITATOR_URL=https://x402.org/facilitator
    export EVM_WALLET=0x... SVM_ADDRESS=...
    uv run python main.py
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

import httpx
import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse

from paygate import GateSettings, ResourceServer, ResourceServerBuilder
from paygate.http import HTTPFacilitatorClient
from paygate.http.middleware import payment_middleware
from paygate.interfaces import FacilitatorClient
from paygate.logging import configure_logging
from paygate.mechanisms import ExactEvmScheme, ExactSvmScheme
from paygate.mechanisms.evm import BASE_SEPOLIA
from paygate.mechanisms.svm import SOLANA_DEVNET_CAIP2

logger = logging.getLogger(__name__)

ALLORA_URL = (
    "https://api.allora.network/v2/allora/consumer/price/ethereum-111551111/{asset}/{timeframe}"
)


def build_server(settings: GateSettings, facilitator: FacilitatorClient) -> ResourceServer:
    """Gate /weather and /allora on Base Sepolia and Solana devnet."""

    def accepts(price: str) -> list:
        return [
            {
                "scheme": "exact",
                "price": price,
                "network": BASE_SEPOLIA,
                "payTo": settings.evm_wallet,
            },
            {
                "scheme": "exact",
                "price": price,
                "network": SOLANA_DEVNET_CAIP2,
                "payTo": settings.svm_address,
            },
        ]

    return (
        ResourceServerBuilder(facilitator, settings.payment_policy())
        .register(BASE_SEPOLIA, ExactEvmScheme())
        .register(SOLANA_DEVNET_CAIP2, ExactSvmScheme(fee_payer=settings.svm_fee_payer))
        .routes(
            {
                "GET /weather": {
                    "accepts": accepts("$0.001"),
                    "description": "Weather data",
                    "mimeType": "application/json",
                },
                "GET /allora": {
                    "accepts": accepts("$0.01"),
                    "description": "Allora price predictions",
                    "mimeType": "application/json",
                },
            }
        )
        .build()
    )


def create_app(
    settings: GateSettings,
    facilitator: Optional[FacilitatorClient] = None,
    allora_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create the FastAPI app.

    Args:
        settings: Loaded settings (EVM_WALLET and SVM_ADDRESS must be set).
        facilitator: Facilitator client (defaults to HTTP against FACILITATOR_URL).
        allora_client: HTTP client used for the Allora upstream.
    """
    http_facilitator = None
    if facilitator is None:
        http_facilitator = HTTPFacilitatorClient(settings.facilitator_config())
        facilitator = http_facilitator
    allora = allora_client or httpx.AsyncClient(timeout=settings.facilitator_timeout)

    server = build_server(settings, facilitator)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await server.check_facilitator_support()
        logger.info("Facilitator supports every advertised payment option")
        yield
        await allora.aclose()
        if http_facilitator is not None:
            await http_facilitator.aclose()

    app = FastAPI(lifespan=lifespan)
    app.middleware("http")(payment_middleware(server))

    @app.get("/weather")
    async def get_weather() -> Dict[str, Any]:
        return {"report": {"weather": "sunny", "temperature": 70}}

    @app.get("/allora")
    async def get_allora(
        asset: Optional[str] = None,
        timeframe: Optional[str] = None,
    ):
        if not settings.allora_api_key:
            return JSONResponse({"error": "ALLORA_API_KEY not configured"}, status_code=500)

        if not asset or not timeframe:
            return JSONResponse(
                {"error": "asset and timeframe query params required"}, status_code=400
            )

        try:
            response = await allora.get(
                ALLORA_URL.format(asset=asset, timeframe=timeframe),
                headers={"x-api-key": settings.allora_api_key},
            )
            if not response.is_success:
                return JSONResponse(
                    {"error": "Allora API request failed"}, status_code=response.status_code
                )
            return response.json()
        except (httpx.HTTPError, ValueError):
            logger.exception("Allora endpoint error")
            return JSONResponse({"error": "Failed to fetch Allora data"}, status_code=500)

    return app


if __name__ == "__main__":
    configure_logging()

    settings = GateSettings.from_env(required=("EVM_WALLET", "SVM_ADDRESS"))
    logger.info("Facilitator URL: %s", settings.facilitator_url)
    logger.info("EVM Wallet: %s", settings.evm_wallet)
    logger.info("SVM Wallet: %s", settings.svm_address)

    uvicorn.run(create_app(settings), host="0.0.0.0", port=settings.port)
