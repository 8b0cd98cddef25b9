"""Route-to-payment-requirement registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from pydantic import ValidationError

from .interfaces import SchemeAdapter
from .schemas import (
    ConfigurationError,
    Network,
    PaymentOption,
    PaymentRequirements,
    RouteRequirement,
    RoutesConfig,
    RouteSpec,
)
from .schemas.helpers import normalize_method, normalize_path

logger = logging.getLogger(__name__)

AdapterTable = Mapping[tuple[Network, str], SchemeAdapter]


class RouteRegistry:
    """Exact-match mapping from (method, path) to a RouteRequirement.

    Registration validates every option against the adapter table and
    converts prices into wire requirements, so misconfiguration fails at
    startup instead of per request. Path patterns are left to the host
    framework.
    """

    def __init__(self, adapters: AdapterTable) -> None:
        self._adapters = adapters
        self._routes: dict[tuple[str, str], RouteRequirement] = {}

    def register(
        self,
        method: str,
        path: str,
        options: Sequence[PaymentOption | dict[str, Any]],
        description: str | None = None,
        mime_type: str | None = None,
        resource: str | None = None,
    ) -> RouteRequirement:
        """Register the payment options of a route.

        Args:
            method: HTTP method (case-insensitive).
            path: Request path (normalized before storing).
            options: Accepted payment options, in display order.
            description: Route description used in challenges.
            mime_type: MIME type of the protected resource.
            resource: Fixed resource URL (defaults to the request URL).

        Returns:
            The stored RouteRequirement.

        Raises:
            ConfigurationError: If options are empty or invalid, reference an
                unregistered (network, scheme), or the route already exists.
        """
        key = (normalize_method(method), normalize_path(path))
        label = f"{key[0]} {key[1]}"

        if key in self._routes:
            raise ConfigurationError(f'Route "{label}" is already registered')
        if not options:
            raise ConfigurationError(f'Route "{label}" has no payment options')

        parsed = tuple(self._parse_option(label, option) for option in options)
        requirements = tuple(self._build_requirements(label, option) for option in parsed)

        route = RouteRequirement(
            method=key[0],
            path=key[1],
            options=parsed,
            requirements=requirements,
            description=description or parsed[0].description or "",
            mime_type=mime_type or parsed[0].mime_type or "",
            resource=resource,
        )
        self._routes[key] = route

        logger.info(
            "Registered payment route %s (%s)",
            label,
            ", ".join(f"{option.scheme}@{option.network}" for option in parsed),
        )
        return route

    def register_spec(self, spec: RouteSpec) -> RouteRequirement:
        return self.register(
            spec.method,
            spec.path,
            spec.options,
            description=spec.description,
            mime_type=spec.mime_type,
            resource=spec.resource,
        )

    def lookup(self, method: str, path: str) -> RouteRequirement | None:
        """Find the requirement registered for (method, path), if any."""
        return self._routes.get((normalize_method(method), normalize_path(path)))

    def routes(self) -> list[RouteRequirement]:
        return list(self._routes.values())

    def __iter__(self) -> Iterator[RouteRequirement]:
        return iter(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        method, path = key
        return self.lookup(method, path) is not None

    # =========================================================================
    # Internal Methods
    # =========================================================================

    def _parse_option(self, label: str, option: PaymentOption | dict[str, Any]) -> PaymentOption:
        if isinstance(option, PaymentOption):
            return option
        try:
            return PaymentOption.model_validate(option)
        except ValidationError as e:
            raise ConfigurationError(f'Route "{label}": invalid payment option: {e}') from e

    def _build_requirements(self, label: str, option: PaymentOption) -> PaymentRequirements:
        adapter = self._adapters.get((option.network, option.scheme))
        if adapter is None:
            raise ConfigurationError(
                f'Route "{label}": No scheme for "{option.scheme}" on "{option.network}"'
            )
        try:
            return adapter.build_requirements(option)
        except ValueError as e:
            raise ConfigurationError(
                f'Route "{label}": cannot price "{option.scheme}" on "{option.network}": {e}'
            ) from e


def parse_routes_config(routes: RoutesConfig) -> list[RouteSpec]:
    """Parse the dictionary route form into route specs.

    Accepts ``{"GET /weather": {"accepts": [...], "description": ...,
    "mimeType": ...}}``; ``accepts`` may be a single option or a list and keys
    may be camelCase or snake_case. A pattern without a verb applies to GET.

    Raises:
        ConfigurationError: If a route entry is not a mapping.
    """
    specs: list[RouteSpec] = []

    for pattern, config in routes.items():
        if not isinstance(config, Mapping):
            raise ConfigurationError(f"Invalid route config for pattern {pattern}")

        parts = pattern.split(None, 1)  # Split on whitespace
        if len(parts) == 2:
            method, path = parts
        else:
            method, path = "GET", pattern

        accepts = config.get("accepts", [])
        if isinstance(accepts, (Mapping, PaymentOption)):
            accepts = [accepts]

        specs.append(
            RouteSpec(
                method=method,
                path=path,
                options=tuple(accepts),
                description=config.get("description"),
                mime_type=config.get("mimeType", config.get("mime_type")),
                resource=config.get("resource"),
            )
        )

    return specs
