"""A registry of providers that supply SASL factories, plus security properties."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Service:
    """One service offered by a provider: a type, an algorithm and a factory."""

    provider: str
    type: str
    algorithm: str
    factory: Callable[[], Any]

    def new_instance(self) -> Any:
        """Create a new instance of this service.

        Raises LookupError, chained to the original error, when the
        factory cannot be instantiated.
        """
        try:
            return self.factory()
        except Exception as error:
            raise LookupError(f"Cannot instantiate service {self}") from error

    def __str__(self) -> str:
        name = getattr(self.factory, "__qualname__", repr(self.factory))
        return f"{self.provider}: {self.type}.{self.algorithm} -> {name}"


class Provider:
    """A named collection of services."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._services: dict[tuple[str, str], Service] = {}

    def add_service(self, service_type: str, algorithm: str, factory: Callable[[], Any]) -> Service:
        """Register (or replace) the service for ``service_type`` and ``algorithm``."""
        service = Service(self.name, service_type, algorithm, factory)
        self._services[(service_type, algorithm.upper())] = service
        return service

    def get_service(self, service_type: str, algorithm: str) -> Service | None:
        """The service for the type and algorithm (case-insensitive), or None."""
        return self._services.get((service_type, algorithm.upper()))

    def services(self) -> list[Service]:
        """All services of this provider in registration order."""
        return list(self._services.values())

    def __repr__(self) -> str:
        return f"Provider({self.name!r})"


_lock = threading.RLock()
_providers: list[Provider] = []
_properties: dict[str, str] = {}


def add_provider(provider: Provider) -> int:
    """Install a provider at the end of the list.

    Returns its 1-based position, or -1 if a provider of that name is
    already installed.
    """
    with _lock:
        if any(p.name == provider.name for p in _providers):
            return -1
        _providers.append(provider)
        return len(_providers)


def remove_provider(name: str) -> None:
    """Remove the provider with the given name; nothing happens if none is installed."""
    with _lock:
        _providers[:] = [p for p in _providers if p.name != name]


def _parse_filter(service_filter: str) -> tuple[str, str]:
    service_type, sep, algorithm = service_filter.partition(".")
    if not sep or not service_type or not algorithm or any(c.isspace() for c in algorithm):
        raise ValueError(f"Invalid filter: {service_filter!r}")
    return service_type, algorithm


def get_providers(service_filter: str | None = None) -> tuple[Provider, ...]:
    """Installed providers in preference order.

    With a filter of the form ``"<type>.<algorithm>"`` only providers
    offering that service are returned. Raises ValueError for a malformed
    filter.
    """
    with _lock:
        snapshot = tuple(_providers)
    if service_filter is None:
        return snapshot
    service_type, algorithm = _parse_filter(service_filter)
    return tuple(p for p in snapshot if p.get_service(service_type, algorithm) is not None)


def set_property(key: str, value: str | None) -> None:
    """Set a security property; a value of None removes it."""
    with _lock:
        if value is None:
            _properties.pop(key, None)
        else:
            _properties[key] = value


def get_property(key: str) -> str | None:
    """The value of a security property, or None when it is not set."""
    with _lock:
        return _properties.get(key)