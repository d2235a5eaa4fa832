"""Creating SASL clients and servers from the installed providers."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from saslkit.exceptions import SaslException
from saslkit.mechanisms import (
    CallbackHandler,
    SaslClient,
    SaslClientFactory,
    SaslServer,
    SaslServerFactory,
)
from saslkit.providers import Service, get_property, get_providers

SASL_LOGGER_NAME = "javax.security.sasl"

QOP = "javax.security.sasl.qop"
STRENGTH = "javax.security.sasl.strength"
SERVER_AUTH = "javax.security.sasl.server.authentication"
BOUND_SERVER_NAME = "javax.security.sasl.bound.server.name"
MAX_BUFFER = "javax.security.sasl.maxbuffer"
RAW_SEND_SIZE = "javax.security.sasl.rawsendsize"
REUSE = "javax.security.sasl.reuse"
POLICY_NOPLAINTEXT = "javax.security.sasl.policy.noplaintext"
POLICY_NOACTIVE = "javax.security.sasl.policy.noactive"
POLICY_NODICTIONARY = "javax.security.sasl.policy.nodictionary"
POLICY_NOANONYMOUS = "javax.security.sasl.policy.noanonymous"
POLICY_FORWARD_SECRECY = "javax.security.sasl.policy.forward"
POLICY_PASS_CREDENTIALS = "javax.security.sasl.policy.credentials"
CREDENTIALS = "javax.security.sasl.credentials"

DISABLED_MECHANISMS_PROPERTY = "jdk.sasl.disabledMechanisms"

CLIENT_FACTORY_TYPE = "SaslClientFactory"
SERVER_FACTORY_TYPE = "SaslServerFactory"

_SEPARATOR = re.compile(r"\s*,\s*")

logger = logging.getLogger(SASL_LOGGER_NAME)


def disabled_mechanisms() -> list[str]:
    """Mechanism names listed in the ``jdk.sasl.disabledMechanisms`` property."""
    prop = get_property(DISABLED_MECHANISMS_PROPERTY)
    if prop is None:
        return []
    return [name for name in _SEPARATOR.split(prop) if name]


def is_disabled(name: str) -> bool:
    """Whether the mechanism has been disabled by the security property."""
    return name in disabled_mechanisms()


def _load_factory(service: Service) -> Any:
    try:
        return service.new_instance()
    except LookupError as error:
        raise SaslException(f"Cannot instantiate service {service}", error) from error


def _ignored(mechanism: str) -> bool:
    if is_disabled(mechanism):
        logger.debug("Disabled %s mechanism ignored", mechanism)
        return True
    return False


def create_sasl_client(
    mechanisms: Sequence[str | None],
    authorization_id: str | None,
    protocol: str,
    server_name: str,
    props: Mapping[str, Any] | None,
    callback_handler: CallbackHandler | None,
) -> SaslClient | None:
    """Create a client for the first listed mechanism some provider can serve.

    Empty and disabled mechanism names are skipped. Returns None when no
    provider produces a client. Raises TypeError for a missing mechanism
    name and SaslException when a factory cannot be instantiated.
    """
    for mechanism in mechanisms:
        if mechanism is None:
            raise TypeError("Mechanism name cannot be null")
        if not mechanism or _ignored(mechanism):
            continue
        for provider in get_providers(f"{CLIENT_FACTORY_TYPE}.{mechanism}"):
            service = provider.get_service(CLIENT_FACTORY_TYPE, mechanism)
            if service is None:
                continue
            factory: SaslClientFactory | None = _load_factory(service)
            if factory is None:
                continue
            client = factory.create_sasl_client(
                [mechanism], authorization_id, protocol, server_name, props, callback_handler
            )
            if client is not None:
                return client
    return None


def create_sasl_server(
    mechanism: str | None,
    protocol: str,
    server_name: str,
    props: Mapping[str, Any] | None,
    callback_handler: CallbackHandler | None,
) -> SaslServer | None:
    """Create a server for the mechanism from the first provider that can.

    Returns None for an empty or disabled mechanism name, or when no
    provider produces a server. Raises TypeError for a missing name and
    SaslException when a provider lacks the service or its factory cannot
    be instantiated.
    """
    if mechanism is None:
        raise TypeError("Mechanism name cannot be null")
    if not mechanism or _ignored(mechanism):
        return None
    for provider in get_providers(f"{SERVER_FACTORY_TYPE}.{mechanism}"):
        service = provider.get_service(SERVER_FACTORY_TYPE, mechanism)
        if service is None:
            raise SaslException(f"Provider does not support {mechanism} {SERVER_FACTORY_TYPE}")
        factory: SaslServerFactory | None = _load_factory(service)
        if factory is None:
            continue
        server = factory.create_sasl_server(
            mechanism, protocol, server_name, props, callback_handler
        )
        if server is not None:
            return server
    return None


def _factories(service_name: str | None) -> tuple[Any, ...]:
    if not service_name or service_name.endswith("."):
        return ()
    result: list[Any] = []
    for provider in get_providers():
        for service in provider.services():
            if service.type != service_name:
                continue
            try:
                factory = _load_factory(service)
            except Exception:
                continue
            if factory is not None and factory not in result:
                result.append(factory)
    return tuple(result)


def sasl_client_factories() -> Iterator[SaslClientFactory]:
    """Iterate over one instance of every installed SaslClientFactory."""
    return iter(_factories(CLIENT_FACTORY_TYPE))


def sasl_server_factories() -> Iterator[SaslServerFactory]:
    """Iterate over one instance of every installed SaslServerFactory."""
    return iter(_factories(SERVER_FACTORY_TYPE))