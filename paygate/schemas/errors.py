"""Error types for paygate.

Every error carries a machine-readable ``code`` and a ``retryable`` hint so
that rejections can drive client retry logic.
"""

ERR_CONFIGURATION = "configuration_error"
ERR_MALFORMED_PAYLOAD = "malformed_payload"
ERR_NO_MATCHING_REQUIREMENT = "no_matching_requirement"
ERR_FACILITATOR_UNREACHABLE = "facilitator_unreachable"
ERR_FACILITATOR_TIMEOUT = "facilitator_timeout"
ERR_FACILITATOR_ERROR = "facilitator_error"
ERR_FACILITATOR_REJECTED = "facilitator_rejected"
ERR_SETTLEMENT_FAILED = "settlement_failed"
ERR_PAYMENT_REQUIRED = "payment_required"


class PaymentError(Exception):
    """Base class for paygate payment errors."""

    code = "payment_error"
    retryable = False

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class ConfigurationError(PaymentError):
    """Misconfigured route, network or environment. Fatal at startup."""

    code = ERR_CONFIGURATION


class DuplicateRegistrationError(ConfigurationError):
    """A scheme adapter is already registered for this network and scheme.

    Attributes:
        scheme: The scheme registered twice.
        network: The network registered twice.
    """

    def __init__(self, network: str, scheme: str):
        self.network = network
        self.scheme = scheme
        super().__init__(f"Scheme '{scheme}' is already registered for network '{network}'")


class MalformedPayloadError(PaymentError):
    """Payment header or payload does not have the expected shape."""

    code = ERR_MALFORMED_PAYLOAD


class NoMatchingRequirementError(PaymentError):
    """Payment targets a (network, scheme) the route does not advertise.

    Attributes:
        scheme: The scheme declared by the payload.
        network: The network declared by the payload.
    """

    code = ERR_NO_MATCHING_REQUIREMENT
    retryable = True

    def __init__(self, network: str, scheme: str):
        self.network = network
        self.scheme = scheme
        super().__init__(f"Route does not accept scheme '{scheme}' on network '{network}'")


class FacilitatorUnreachableError(PaymentError):
    """The facilitator could not be reached (transport failure)."""

    code = ERR_FACILITATOR_UNREACHABLE
    retryable = True


class FacilitatorTimeoutError(PaymentError):
    """The facilitator did not answer within the configured deadline.

    Attributes:
        timeout: The deadline in seconds.
    """

    code = ERR_FACILITATOR_TIMEOUT
    retryable = True

    def __init__(self, operation: str, timeout: float):
        self.operation = operation
        self.timeout = timeout
        super().__init__(f"Facilitator {operation} timed out after {timeout:g}s")


class FacilitatorResponseError(PaymentError):
    """The facilitator answered with an error status or an unreadable body.

    Attributes:
        status_code: HTTP status returned by the facilitator, if any.
    """

    code = ERR_FACILITATOR_ERROR
    retryable = True

    def __init__(self, reason: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(reason)


class FacilitatorRejectedError(PaymentError):
    """The facilitator definitively declared the payment invalid.

    Attributes:
        payer: The payer's address (if known).
    """

    code = ERR_FACILITATOR_REJECTED

    def __init__(self, reason: str, payer: str | None = None):
        self.payer = payer
        super().__init__(reason)


INFRASTRUCTURE_ERRORS = (
    FacilitatorUnreachableError,
    FacilitatorTimeoutError,
    FacilitatorResponseError,
)
INFRASTRUCTURE_CODES = frozenset(error.code for error in INFRASTRUCTURE_ERRORS)
