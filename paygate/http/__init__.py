"""HTTP layer: facilitator client, header codecs and framework middleware."""

from .constants import (
    DEFAULT_FACILITATOR_TIMEOUT,
    DEFAULT_FACILITATOR_URL,
    HTTP_STATUS_PAYMENT_REQUIRED,
    HTTP_STATUS_SERVICE_UNAVAILABLE,
    PAYMENT_REQUIRED_HEADER,
    PAYMENT_RESPONSE_HEADER,
    PAYMENT_SIGNATURE_HEADER,
    X_PAYMENT_HEADER,
)
from .facilitator_client import (
    NO_RETRY,
    AuthHeaders,
    AuthProvider,
    CreateHeadersAuthProvider,
    FacilitatorConfig,
    HTTPFacilitatorClient,
    RetryPolicy,
)
from .utils import (
    decode_payment_header,
    decode_payment_required_header,
    decode_payment_response_header,
    encode_payment_header,
    encode_payment_required_header,
    encode_payment_response_header,
    safe_base64_decode,
    safe_base64_encode,
)

__all__ = [
    # Constants
    "DEFAULT_FACILITATOR_TIMEOUT",
    "DEFAULT_FACILITATOR_URL",
    "HTTP_STATUS_PAYMENT_REQUIRED",
    "HTTP_STATUS_SERVICE_UNAVAILABLE",
    "PAYMENT_REQUIRED_HEADER",
    "PAYMENT_RESPONSE_HEADER",
    "PAYMENT_SIGNATURE_HEADER",
    "X_PAYMENT_HEADER",
    # Facilitator client
    "NO_RETRY",
    "AuthHeaders",
    "AuthProvider",
    "CreateHeadersAuthProvider",
    "FacilitatorConfig",
    "HTTPFacilitatorClient",
    "RetryPolicy",
    # Header codecs
    "decode_payment_header",
    "decode_payment_required_header",
    "decode_payment_response_header",
    "encode_payment_header",
    "encode_payment_required_header",
    "encode_payment_response_header",
    "safe_base64_decode",
    "safe_base64_encode",
]
