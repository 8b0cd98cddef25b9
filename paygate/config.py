"""Environment-driven settings for a payment-gated server."""

from __future__ import annotations

import os
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, cast

from dotenv import load_dotenv

from .http.constants import DEFAULT_FACILITATOR_TIMEOUT, HTTP_STATUS_SERVICE_UNAVAILABLE
from .http.facilitator_client import FacilitatorConfig, RetryPolicy
from .schemas import ConfigurationError, PaymentPolicy
from .schemas.config import SettlementFailurePolicy

DEFAULT_PORT = 4022


@dataclass(frozen=True)
class GateSettings:
    """Settings read from the process environment (and a ``.env`` file).

    Attributes:
        facilitator_url: FACILITATOR_URL, required.
        evm_wallet: EVM_WALLET, payTo address for EVM networks.
        svm_address: SVM_ADDRESS, payTo address for Solana networks.
        facilitator_timeout: FACILITATOR_TIMEOUT in seconds.
        facilitator_max_retries: FACILITATOR_MAX_RETRIES for transient errors.
        svm_fee_payer: SVM_FEE_PAYER advertised in Solana requirements.
        settlement_failure: SETTLEMENT_FAILURE_POLICY, "deny" or "allow".
        infrastructure_error_status: INFRASTRUCTURE_ERROR_STATUS.
        allora_api_key: ALLORA_API_KEY for the Allora proxy route.
        port: PORT the example server listens on.
    """

    facilitator_url: str
    evm_wallet: str | None = None
    svm_address: str | None = None
    facilitator_timeout: float = DEFAULT_FACILITATOR_TIMEOUT
    facilitator_max_retries: int = 1
    svm_fee_payer: str | None = None
    settlement_failure: SettlementFailurePolicy = "deny"
    infrastructure_error_status: int = HTTP_STATUS_SERVICE_UNAVAILABLE
    allora_api_key: str | None = None
    port: int = DEFAULT_PORT

    @classmethod
    def from_env(
        cls,
        env: Mapping[str, str] | None = None,
        required: Iterable[str] = (),
        dotenv: bool = True,
    ) -> GateSettings:
        """Load settings from ``env`` (defaults to ``os.environ``).

        Args:
            env: Variables to read instead of the process environment.
            required: Extra variable names that must be set, on top of
                FACILITATOR_URL.
            dotenv: Load a ``.env`` file first (only with ``env=None``).

        Raises:
            ConfigurationError: If a required variable is missing or a value
                does not parse.
        """
        if env is None:
            if dotenv:
                load_dotenv()
            env = os.environ

        missing = [
            name
            for name in ("FACILITATOR_URL", *required)
            if not env.get(name, "").strip()
        ]
        if missing:
            raise ConfigurationError(
                f"Missing required environment variables: {', '.join(missing)}"
            )

        settlement_failure = env.get("SETTLEMENT_FAILURE_POLICY", "deny").strip().lower()
        if settlement_failure not in ("deny", "allow"):
            raise ConfigurationError(
                f"SETTLEMENT_FAILURE_POLICY must be 'deny' or 'allow', got {settlement_failure!r}"
            )

        timeout = _parse(env, "FACILITATOR_TIMEOUT", float, DEFAULT_FACILITATOR_TIMEOUT)
        if timeout <= 0:
            raise ConfigurationError("FACILITATOR_TIMEOUT must be positive")
        max_retries = _parse(env, "FACILITATOR_MAX_RETRIES", int, 1)
        if max_retries < 0:
            raise ConfigurationError("FACILITATOR_MAX_RETRIES must be >= 0")

        return cls(
            facilitator_url=env["FACILITATOR_URL"].strip(),
            evm_wallet=_optional(env, "EVM_WALLET"),
            svm_address=_optional(env, "SVM_ADDRESS"),
            facilitator_timeout=timeout,
            facilitator_max_retries=max_retries,
            svm_fee_payer=_optional(env, "SVM_FEE_PAYER"),
            settlement_failure=cast(SettlementFailurePolicy, settlement_failure),
            infrastructure_error_status=_parse(
                env, "INFRASTRUCTURE_ERROR_STATUS", int, HTTP_STATUS_SERVICE_UNAVAILABLE
            ),
            allora_api_key=_optional(env, "ALLORA_API_KEY"),
            port=_parse(env, "PORT", int, DEFAULT_PORT),
        )

    def facilitator_config(self) -> FacilitatorConfig:
        return FacilitatorConfig(
            url=self.facilitator_url,
            timeout=self.facilitator_timeout,
            retry=RetryPolicy(max_retries=self.facilitator_max_retries),
        )

    def payment_policy(self) -> PaymentPolicy:
        return PaymentPolicy(
            settlement_failure=self.settlement_failure,
            infrastructure_error_status=self.infrastructure_error_status,
        )


def _optional(env: Mapping[str, str], name: str) -> str | None:
    value = env.get(name, "").strip()
    return value or None


def _parse(env: Mapping[str, str], name: str, kind: type, default: float) -> Any:
    raw = env.get(name, "").strip()
    if not raw:
        return default
    try:
        return kind(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be numeric, got {raw!r}") from e
