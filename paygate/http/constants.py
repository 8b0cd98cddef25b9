"""HTTP constants for the payment gate."""

# Default facilitator URL
DEFAULT_FACILITATOR_URL = "https://x402.org/facilitator"

# Default deadline for a facilitator call, in seconds
DEFAULT_FACILITATOR_TIMEOUT = 10.0

# Request headers carrying the client's payment
PAYMENT_SIGNATURE_HEADER = "PAYMENT-SIGNATURE"
X_PAYMENT_HEADER = "X-PAYMENT"

# Response headers
PAYMENT_REQUIRED_HEADER = "PAYMENT-REQUIRED"
PAYMENT_RESPONSE_HEADER = "PAYMENT-RESPONSE"

# Status codes
HTTP_STATUS_PAYMENT_REQUIRED = 402
HTTP_STATUS_SERVICE_UNAVAILABLE = 503
