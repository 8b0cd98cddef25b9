"""paygate - payment-gated HTTP resources over the x402 protocol.

Routes are bound to one or more payment options. Requests without payment
get a 402 challenge; paid requests are verified and settled through a
facilitator before the protected handler's response is released.

Quick Start:
    ```python
    from fastapi import FastAPI
    from paygate import ResourceServerBuilder
    from paygate.http import HTTPFacilitatorClient
    from paygate.http.middleware import payment_middleware
    from paygate.mechanisms import register_exact_evm_server

    facilitator = HTTPFacilitatorClient({"url": "https://x402.org/facilitator"})
    builder = ResourceServerBuilder(facilitator)
    register_exact_evm_server(builder, "eip155:84532")
    server = builder.routes({
        "GET /weather": {
            "accepts": {"scheme": "exact", "price": "$0.001",
                        "network": "eip155:84532", "payTo": "0x..."},
        },
    }).build()

    app = FastAPI()
    app.middleware("http")(payment_middleware(server))
    ```
"""

from .config import GateSettings
from .interfaces import FacilitatorClient, SchemeAdapter
from .registry import RouteRegistry, parse_routes_config
from .schemas import (
    X402_VERSION,
    AssetAmount,
    ChallengeRequired,
    ConfigurationError,
    Decision,
    DuplicateRegistrationError,
    FacilitatorRejectedError,
    FacilitatorResponseError,
    FacilitatorTimeoutError,
    FacilitatorUnreachableError,
    MalformedPayloadError,
    Money,
    Network,
    NoMatchingRequirementError,
    NoRequirement,
    PaymentError,
    PaymentOption,
    PaymentPayload,
    PaymentPolicy,
    PaymentRequired,
    PaymentRequirements,
    Price,
    Rejected,
    ResourceInfo,
    RouteRequirement,
    RoutesConfig,
    SettlementFailed,
    SettleResponse,
    SupportedResponse,
    Verified,
    VerifyResponse,
)
from .server import ResourceServer, ResourceServerBuilder

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "ResourceServer",
    "ResourceServerBuilder",
    "RouteRegistry",
    "parse_routes_config",
    "GateSettings",
    # Interfaces
    "FacilitatorClient",
    "SchemeAdapter",
    # Types
    "X402_VERSION",
    "AssetAmount",
    "Money",
    "Network",
    "Price",
    "PaymentOption",
    "PaymentPayload",
    "PaymentPolicy",
    "PaymentRequired",
    "PaymentRequirements",
    "ResourceInfo",
    "RouteRequirement",
    "RoutesConfig",
    "SettleResponse",
    "SupportedResponse",
    "VerifyResponse",
    # Decisions
    "ChallengeRequired",
    "Decision",
    "NoRequirement",
    "Rejected",
    "SettlementFailed",
    "Verified",
    # Errors
    "ConfigurationError",
    "DuplicateRegistrationError",
    "FacilitatorRejectedError",
    "FacilitatorResponseError",
    "FacilitatorTimeoutError",
    "FacilitatorUnreachableError",
    "MalformedPayloadError",
    "NoMatchingRequirementError",
    "PaymentError",
]
