"""FastAPI/Starlette middleware that gates routes behind a ResourceServer."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.responses import Response

from ...schemas import (
    INFRASTRUCTURE_CODES,
    ChallengeRequired,
    PaymentPolicy,
    PaymentRejection,
    PaymentRequired,
    Rejected,
    SettlementFailed,
    Verified,
)
from ...server import ResourceServer
from ..constants import (
    HTTP_STATUS_PAYMENT_REQUIRED,
    PAYMENT_REQUIRED_HEADER,
    PAYMENT_RESPONSE_HEADER,
    PAYMENT_SIGNATURE_HEADER,
    X_PAYMENT_HEADER,
)
from ..utils import encode_payment_required_header, encode_payment_response_header

logger = logging.getLogger(__name__)

CallNext = Callable[[Request], Awaitable[Response]]


def payment_middleware(
    server: ResourceServer,
    policy: PaymentPolicy | None = None,
) -> Callable[[Request, CallNext], Awaitable[Response]]:
    """Generate a FastAPI middleware that gates payments for registered routes.

    Requests to unregistered routes pass through untouched. For registered
    routes the middleware answers with a 402 challenge, a rejection, or runs
    the handler and settles the payment.

    Args:
        server: Configured ResourceServer.
        policy: Overrides ``server.policy`` for this middleware.

    Returns:
        Middleware function for ``app.middleware("http")``.

    Example:
        ```python
        app = FastAPI()
        app.middleware("http")(payment_middleware(server))
        ```
    """
    policy = policy or server.policy

    async def middleware(request: Request, call_next: CallNext) -> Response:
        payment_header = request.headers.get(PAYMENT_SIGNATURE_HEADER) or request.headers.get(
            X_PAYMENT_HEADER
        )

        decision = await server.authorize(
            request.method,
            request.url.path,
            payment_header,
            url=str(request.url),
        )

        if isinstance(decision, ChallengeRequired):
            return _payment_required_response(decision.payment_required)

        if isinstance(decision, Rejected):
            return _rejection_response(request, decision, policy)

        if not isinstance(decision, Verified):
            return await call_next(request)

        request.state.payment = decision
        request.state.payment_details = decision.requirements
        request.state.verify_response = decision.verify_response

        if not policy.settle_after_response:
            settled = await server.settle(decision)
            if isinstance(settled, SettlementFailed) and policy.settlement_failure == "deny":
                return _settlement_failed_response(request, settled)
            request.state.payment = settled
            response = await call_next(request)
            return _with_payment_response(response, settled)

        response = await call_next(request)

        # Early return without settling if the response is not a 2xx
        if response.status_code < 200 or response.status_code >= 300:
            return response

        settled = await server.settle(decision)
        if isinstance(settled, SettlementFailed) and policy.settlement_failure == "deny":
            return _settlement_failed_response(request, settled)

        return _with_payment_response(response, settled)

    return middleware


def _payment_required_response(
    body: PaymentRequired,
    status_code: int = HTTP_STATUS_PAYMENT_REQUIRED,
) -> JSONResponse:
    return JSONResponse(
        content=body.model_dump(mode="json", by_alias=True, exclude_none=True),
        status_code=status_code,
        headers={PAYMENT_REQUIRED_HEADER: encode_payment_required_header(body)},
    )


def _rejection_response(
    request: Request,
    decision: Rejected,
    policy: PaymentPolicy,
) -> JSONResponse:
    status_code = (
        policy.infrastructure_error_status
        if decision.code in INFRASTRUCTURE_CODES
        else HTTP_STATUS_PAYMENT_REQUIRED
    )
    body = PaymentRejection(
        error=decision.code,
        reason=decision.reason,
        retryable=decision.retryable,
        resource=decision.route.resource_info(str(request.url)),
        accepts=list(decision.route.requirements),
    )
    return _payment_required_response(body, status_code)


def _settlement_failed_response(request: Request, failed: SettlementFailed) -> JSONResponse:
    logger.warning(
        "Refusing %s %s after failed settlement: %s",
        request.method,
        request.url.path,
        failed.reason,
    )
    body = PaymentRejection(
        error=failed.code,
        reason=failed.reason,
        retryable=failed.retryable,
        resource=failed.route.resource_info(str(request.url)),
        accepts=list(failed.route.requirements),
    )
    response = _payment_required_response(body)
    if failed.settlement is not None:
        response.headers[PAYMENT_RESPONSE_HEADER] = encode_payment_response_header(
            failed.settlement
        )
    return response


def _with_payment_response(response: Response, outcome: Verified | SettlementFailed) -> Response:
    if outcome.settlement is not None:
        response.headers[PAYMENT_RESPONSE_HEADER] = encode_payment_response_header(
            outcome.settlement
        )
    return response


__all__ = ["payment_middleware"]
