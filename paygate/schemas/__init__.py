"""Types for paygate."""

from .base import (
    X402_VERSION,
    AssetAmount,
    BaseGateModel,
    Money,
    Network,
    Price,
    network_family,
)
from .config import PaymentPolicy, RouteRequirement, RoutesConfig, RouteSpec
from .decisions import (
    ChallengeRequired,
    Decision,
    NoRequirement,
    Rejected,
    SettlementFailed,
    Verified,
)
from .errors import (
    ERR_CONFIGURATION,
    ERR_FACILITATOR_ERROR,
    ERR_FACILITATOR_REJECTED,
    ERR_FACILITATOR_TIMEOUT,
    ERR_FACILITATOR_UNREACHABLE,
    ERR_MALFORMED_PAYLOAD,
    ERR_NO_MATCHING_REQUIREMENT,
    ERR_PAYMENT_REQUIRED,
    ERR_SETTLEMENT_FAILED,
    INFRASTRUCTURE_CODES,
    ConfigurationError,
    DuplicateRegistrationError,
    FacilitatorRejectedError,
    FacilitatorResponseError,
    FacilitatorTimeoutError,
    FacilitatorUnreachableError,
    MalformedPayloadError,
    NoMatchingRequirementError,
    PaymentError,
)
from .helpers import detect_version, normalize_method, normalize_path, read_accepted_kind
from .payments import (
    AcceptedKind,
    FacilitatorRequest,
    PaymentOption,
    PaymentPayload,
    PaymentRejection,
    PaymentRequired,
    PaymentRequirements,
    ResourceInfo,
    SettleResponse,
    SupportedKind,
    SupportedResponse,
    VerifyResponse,
)

__all__ = [
    # Base
    "X402_VERSION",
    "AssetAmount",
    "BaseGateModel",
    "Money",
    "Network",
    "Price",
    "network_family",
    # Payments
    "AcceptedKind",
    "FacilitatorRequest",
    "PaymentOption",
    "PaymentPayload",
    "PaymentRejection",
    "PaymentRequired",
    "PaymentRequirements",
    "ResourceInfo",
    "SettleResponse",
    "SupportedKind",
    "SupportedResponse",
    "VerifyResponse",
    # Config
    "PaymentPolicy",
    "RouteRequirement",
    "RouteSpec",
    "RoutesConfig",
    # Decisions
    "ChallengeRequired",
    "Decision",
    "NoRequirement",
    "Rejected",
    "SettlementFailed",
    "Verified",
    # Helpers
    "detect_version",
    "normalize_method",
    "normalize_path",
    "read_accepted_kind",
    # Errors
    "ERR_CONFIGURATION",
    "ERR_FACILITATOR_ERROR",
    "ERR_FACILITATOR_REJECTED",
    "ERR_FACILITATOR_TIMEOUT",
    "ERR_FACILITATOR_UNREACHABLE",
    "ERR_MALFORMED_PAYLOAD",
    "ERR_NO_MATCHING_REQUIREMENT",
    "ERR_PAYMENT_REQUIRED",
    "ERR_SETTLEMENT_FAILED",
    "INFRASTRUCTURE_CODES",
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
