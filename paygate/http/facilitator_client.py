"""HTTP-based facilitator client."""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeVar

import httpx
from pydantic import ValidationError

from ..schemas import (
    FacilitatorRequest,
    FacilitatorResponseError,
    FacilitatorTimeoutError,
    FacilitatorUnreachableError,
    SettleResponse,
    SupportedResponse,
    VerifyResponse,
)
from ..schemas.base import BaseGateModel
from .constants import DEFAULT_FACILITATOR_TIMEOUT, DEFAULT_FACILITATOR_URL

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseGateModel)


# ============================================================================
# Auth Provider Protocol
# ============================================================================


@dataclass
class AuthHeaders:
    """Authentication headers for facilitator endpoints."""

    verify: dict[str, str] = field(default_factory=dict)
    settle: dict[str, str] = field(default_factory=dict)
    supported: dict[str, str] = field(default_factory=dict)


class AuthProvider(Protocol):
    """Generates authentication headers for facilitator requests."""

    def get_auth_headers(self) -> AuthHeaders:
        """Get authentication headers for each endpoint."""
        ...


class CreateHeadersAuthProvider:
    """AuthProvider that wraps a create_headers callable.

    Adapts the dict-style create_headers function (as used by CDP SDK)
    to the AuthProvider protocol.
    """

    def __init__(self, create_headers: Callable[[], dict[str, dict[str, str]]]) -> None:
        self._create_headers = create_headers

    def get_auth_headers(self) -> AuthHeaders:
        """Get authentication headers by calling the create_headers function."""
        result = self._create_headers()
        return AuthHeaders(
            verify=result.get("verify", {}),
            settle=result.get("settle", {}),
            supported=result.get("supported", result.get("list", {})),
        )


# ============================================================================
# Configuration
# ============================================================================


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry of transient transport failures.

    Verify and /supported retry any transport error except a timeout.
    Settle retries only connection failures, where the request provably never
    reached the facilitator, so a settlement is never submitted twice.
    Definitive refusals (isValid/success false) are never retried.

    Attributes:
        max_retries: Extra attempts after the first (0 disables retries).
        backoff_seconds: Delay before each retry, multiplied by the attempt.
    """

    max_retries: int = 1
    backoff_seconds: float = 0.05

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if self.backoff_seconds < 0:
            raise ValueError("backoff_seconds must be >= 0")


NO_RETRY = RetryPolicy(max_retries=0)


@dataclass
class FacilitatorConfig:
    """Configuration for HTTP facilitator client.

    Attributes:
        url: Facilitator base URL.
        timeout: Deadline in seconds for one verify/settle call, retries
            included.
        http_client: Optional httpx.AsyncClient (caller keeps ownership).
        auth_provider: Optional per-endpoint auth headers.
        identifier: Label used in logs (defaults to the URL).
        retry: Retry policy for transient transport failures.
    """

    url: str = DEFAULT_FACILITATOR_URL
    timeout: float = DEFAULT_FACILITATOR_TIMEOUT
    http_client: httpx.AsyncClient | None = None
    auth_provider: AuthProvider | None = None
    identifier: str | None = None
    retry: RetryPolicy = field(default_factory=RetryPolicy)


# ============================================================================
# HTTP Facilitator Client
# ============================================================================


class HTTPFacilitatorClient:
    """HTTP-based facilitator client.

    Communicates with a remote facilitator over HTTP. Each call is bounded by
    ``FacilitatorConfig.timeout``; cancelling the awaiting task aborts the
    in-flight HTTP request.
    """

    def __init__(self, config: FacilitatorConfig | dict[str, Any] | None = None) -> None:
        """Create HTTP facilitator client.

        Args:
            config: Optional configuration. Accepts either:
                - FacilitatorConfig dataclass (recommended)
                - Dict with 'url' and optional 'create_headers', 'timeout'
                - None (uses defaults)
        """
        # Handle dict-style config
        if isinstance(config, dict):
            create_headers = config.get("create_headers")
            config = FacilitatorConfig(
                url=config.get("url", DEFAULT_FACILITATOR_URL),
                timeout=float(config.get("timeout", DEFAULT_FACILITATOR_TIMEOUT)),
                auth_provider=CreateHeadersAuthProvider(create_headers) if create_headers else None,
            )
        else:
            config = config or FacilitatorConfig()

        if config.timeout <= 0:
            raise ValueError("Facilitator timeout must be positive")

        self._url = config.url.rstrip("/")
        self._timeout = config.timeout
        self._auth_provider = config.auth_provider
        self._identifier = config.identifier or self._url
        self._retry = config.retry
        self._http_client = config.http_client
        self._owns_client = config.http_client is None

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._http_client is None:
            self._http_client = httpx.AsyncClient(timeout=self._timeout, follow_redirects=True)
        return self._http_client

    async def aclose(self) -> None:
        """Close HTTP client if we own it."""
        if self._owns_client and self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> HTTPFacilitatorClient:
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.aclose()

    @property
    def url(self) -> str:
        """Get facilitator URL."""
        return self._url

    @property
    def identifier(self) -> str:
        """Get facilitator identifier."""
        return self._identifier

    @property
    def timeout(self) -> float:
        return self._timeout

    # =========================================================================
    # FacilitatorClient Implementation
    # =========================================================================

    async def verify(self, request: FacilitatorRequest) -> VerifyResponse:
        """Verify a payment with the facilitator.

        Args:
            request: Scheme-specific verify body built by the adapter.

        Returns:
            VerifyResponse (is_valid=False for a definitive refusal).

        Raises:
            FacilitatorTimeoutError: If the deadline elapsed.
            FacilitatorUnreachableError: If the facilitator cannot be reached.
            FacilitatorResponseError: If the facilitator answered with an error.
        """
        headers = self._auth_headers().verify
        return await self._call(
            "verify",
            VerifyResponse,
            lambda client: client.post(
                f"{self._url}/verify",
                headers=headers,
                json=request.to_wire(),
            ),
            retry_on=(httpx.TransportError,),
        )

    async def settle(self, request: FacilitatorRequest) -> SettleResponse:
        """Settle a payment with the facilitator.

        Args:
            request: Scheme-specific settle body built by the adapter.

        Returns:
            SettleResponse (success=False when settlement failed on-chain).

        Raises:
            FacilitatorTimeoutError: If the deadline elapsed.
            FacilitatorUnreachableError: If the facilitator cannot be reached.
            FacilitatorResponseError: If the facilitator answered with an error.
        """
        headers = self._auth_headers().settle
        return await self._call(
            "settle",
            SettleResponse,
            lambda client: client.post(
                f"{self._url}/settle",
                headers=headers,
                json=request.to_wire(),
            ),
            retry_on=(httpx.ConnectError,),
        )

    async def get_supported(self) -> SupportedResponse:
        """Get supported payment kinds and extensions.

        Returns:
            SupportedResponse.
        """
        headers = self._auth_headers().supported
        return await self._call(
            "supported",
            SupportedResponse,
            lambda client: client.get(f"{self._url}/supported", headers=headers),
            retry_on=(httpx.TransportError,),
        )

    # =========================================================================
    # Internal HTTP Methods
    # =========================================================================

    def _auth_headers(self) -> AuthHeaders:
        if self._auth_provider is None:
            return AuthHeaders()
        return self._auth_provider.get_auth_headers()

    async def _call(
        self,
        operation: str,
        model: type[ResponseT],
        send: Callable[[httpx.AsyncClient], Awaitable[httpx.Response]],
        retry_on: tuple[type[httpx.TransportError], ...],
    ) -> ResponseT:
        """Run one facilitator call under the configured deadline."""
        try:
            response = await asyncio.wait_for(
                self._send_with_retry(operation, send, retry_on),
                timeout=self._timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Facilitator %s %s timed out after %gs", self._identifier, operation, self._timeout
            )
            raise FacilitatorTimeoutError(operation, self._timeout) from None

        return self._read_response(operation, model, response)

    async def _send_with_retry(
        self,
        operation: str,
        send: Callable[[httpx.AsyncClient], Awaitable[httpx.Response]],
        retry_on: tuple[type[httpx.TransportError], ...],
    ) -> httpx.Response:
        client = self._get_client()
        attempt = 0

        while True:
            try:
                return await send(client)
            except httpx.TimeoutException as e:
                raise FacilitatorTimeoutError(operation, self._timeout) from e
            except httpx.TransportError as e:
                if attempt < self._retry.max_retries and isinstance(e, retry_on):
                    attempt += 1
                    logger.warning(
                        "Facilitator %s %s transport error (%s), retry %d/%d",
                        self._identifier,
                        operation,
                        type(e).__name__,
                        attempt,
                        self._retry.max_retries,
                    )
                    await asyncio.sleep(self._retry.backoff_seconds * attempt)
                    continue

                logger.warning(
                    "Facilitator %s %s unreachable: %s", self._identifier, operation, e
                )
                raise FacilitatorUnreachableError(
                    f"Facilitator {operation} unreachable: {type(e).__name__}: {e}"
                ) from e
            except httpx.RequestError as e:
                # Undecodable body, redirect loop: the facilitator answered badly.
                logger.warning(
                    "Facilitator %s %s bad response: %s", self._identifier, operation, e
                )
                raise FacilitatorResponseError(
                    f"Facilitator {operation} failed: {type(e).__name__}: {e}"
                ) from e

    def _read_response(
        self,
        operation: str,
        model: type[ResponseT],
        response: httpx.Response,
    ) -> ResponseT:
        """Parse a facilitator response.

        Some facilitators answer a definitive refusal with a 4xx status and a
        regular verify/settle body; such refusals are returned as responses.
        """
        try:
            data = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            data = None

        if response.is_success:
            if not isinstance(data, dict):
                raise FacilitatorResponseError(
                    f"Facilitator {operation} returned a non-object body",
                    status_code=response.status_code,
                )
            try:
                return model.model_validate(data)
            except ValidationError as e:
                raise FacilitatorResponseError(
                    f"Facilitator {operation} returned an invalid body: {e.error_count()} error(s)",
                    status_code=response.status_code,
                ) from e

        if isinstance(data, dict) and response.status_code < 500:
            try:
                parsed = model.model_validate(data)
            except ValidationError:
                parsed = None
            if parsed is not None and _is_refusal(parsed):
                return parsed

        raise FacilitatorResponseError(
            f"Facilitator {operation} failed ({response.status_code}): "
            f"{self._error_detail(data, response)}",
            status_code=response.status_code,
        )

    @staticmethod
    def _error_detail(data: Any, response: httpx.Response) -> str:
        if isinstance(data, dict):
            for key in ("error", "message", "errorMessage", "invalidReason", "errorReason"):
                if data.get(key):
                    return str(data[key])
        return response.text


def _is_refusal(response: BaseGateModel) -> bool:
    if isinstance(response, VerifyResponse):
        return not response.is_valid
    if isinstance(response, SettleResponse):
        return not response.success
    return False
