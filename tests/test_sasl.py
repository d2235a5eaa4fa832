import pytest

from saslkit import sasl
from saslkit.exceptions import SaslException
from saslkit.mechanisms import SaslClient, SaslClientFactory, SaslServer, SaslServerFactory
from saslkit.providers import Provider, add_provider, remove_provider, set_property


class _StubClient(SaslClient):
    def __init__(self, name):
        self.name = name

    def mechanism_name(self):
        return self.name

    def has_initial_response(self):
        return False

    def evaluate_challenge(self, challenge):
        return b""

    def is_complete(self):
        return True

    def unwrap(self, incoming, offset, length):
        return incoming[offset:offset + length]

    def wrap(self, outgoing, offset, length):
        return outgoing[offset:offset + length]

    def negotiated_property(self, prop_name):
        return None

    def dispose(self):
        pass


class _StubServer(SaslServer):
    def __init__(self, name):
        self.name = name

    def mechanism_name(self):
        return self.name

    def evaluate_response(self, response):
        return None

    def is_complete(self):
        return True

    def authorization_id(self):
        return None

    def unwrap(self, incoming, offset, length):
        return incoming[offset:offset + length]

    def wrap(self, outgoing, offset, length):
        return outgoing[offset:offset + length]

    def negotiated_property(self, prop_name):
        return None

    def dispose(self):
        pass


class _ClientFactory(SaslClientFactory):
    calls = []

    def create_sasl_client(self, mechanisms, authorization_id, protocol, server_name, props, callback_handler):
        _ClientFactory.calls.append(list(mechanisms))
        return _StubClient(mechanisms[0])

    def mechanism_names(self, props):
        return ["X-TEST"]


class _NullClientFactory(SaslClientFactory):
    def create_sasl_client(self, mechanisms, authorization_id, protocol, server_name, props, callback_handler):
        return None

    def mechanism_names(self, props):
        return []


class _ServerFactory(SaslServerFactory):
    def create_sasl_server(self, mechanism, protocol, server_name, props, callback_handler):
        return _StubServer(mechanism)

    def mechanism_names(self, props):
        return ["X-TEST"]


def _broken():
    raise RuntimeError("boom")


@pytest.fixture
def install():
    names = []

    def _install(provider):
        add_provider(provider)
        names.append(provider.name)
        return provider

    _ClientFactory.calls = []
    yield _install
    for name in names:
        remove_provider(name)
    set_property(sasl.DISABLED_MECHANISMS_PROPERTY, None)


def test_disabled_mechanisms_read_from_documented_property(install):
    set_property("jdk.sasl.disabledMechanisms", "X-PINNED")
    assert sasl.is_disabled("X-PINNED")
    assert sasl.disabled_mechanisms() == ["X-PINNED"]


def test_disabled_mechanisms_parsed_from_property(install):
    set_property(sasl.DISABLED_MECHANISMS_PROPERTY, "PLAIN , CRAM-MD5,,")
    assert sasl.disabled_mechanisms() == ["PLAIN", "CRAM-MD5"]
    assert sasl.is_disabled("CRAM-MD5")
    assert not sasl.is_disabled("DIGEST-MD5")


def test_no_disabled_mechanisms_without_property(install):
    assert sasl.disabled_mechanisms() == []


def test_create_client_uses_provider_factory(install):
    provider = Provider("test-client")
    provider.add_service("SaslClientFactory", "X-TEST", _ClientFactory)
    install(provider)
    client = sasl.create_sasl_client(["", "X-TEST"], None, "ldap", "host.example.com", None, None)
    assert client.mechanism_name() == "X-TEST"
    assert _ClientFactory.calls == [["X-TEST"]]


def test_create_client_falls_through_to_next_mechanism(install):
    provider = Provider("test-fallthrough")
    provider.add_service("SaslClientFactory", "X-NULL", _NullClientFactory)
    provider.add_service("SaslClientFactory", "X-TEST", _ClientFactory)
    install(provider)
    client = sasl.create_sasl_client(["X-NULL", "X-TEST"], None, "imap", "host", {}, None)
    assert client.mechanism_name() == "X-TEST"


def test_create_client_skips_disabled(install):
    provider = Provider("test-disabled")
    provider.add_service("SaslClientFactory", "X-TEST", _ClientFactory)
    install(provider)
    set_property(sasl.DISABLED_MECHANISMS_PROPERTY, "X-TEST")
    assert sasl.create_sasl_client(["X-TEST"], None, "imap", "host", None, None) is None
    assert _ClientFactory.calls == []


def test_create_client_none_when_no_provider(install):
    assert sasl.create_sasl_client(["X-UNKNOWN"], None, "imap", "host", None, None) is None


def test_create_client_rejects_missing_name(install):
    with pytest.raises(TypeError, match="Mechanism name cannot be null"):
        sasl.create_sasl_client([None], None, "imap", "host", None, None)


def test_create_client_wraps_factory_failure(install):
    provider = Provider("test-broken")
    provider.add_service("SaslClientFactory", "X-BROKEN", _broken)
    install(provider)
    with pytest.raises(SaslException) as info:
        sasl.create_sasl_client(["X-BROKEN"], None, "imap", "host", None, None)
    assert str(info.value).startswith("Cannot instantiate service")
    assert isinstance(info.value.cause, LookupError)


def test_create_server(install):
    provider = Provider("test-server")
    provider.add_service("SaslServerFactory", "X-TEST", _ServerFactory)
    install(provider)
    server = sasl.create_sasl_server("X-TEST", "ldap", "host", None, None)
    assert server.mechanism_name() == "X-TEST"


def test_create_server_empty_and_disabled(install):
    provider = Provider("test-server-disabled")
    provider.add_service("SaslServerFactory", "X-TEST", _ServerFactory)
    install(provider)
    assert sasl.create_sasl_server("", "ldap", "host", None, None) is None
    set_property(sasl.DISABLED_MECHANISMS_PROPERTY, "X-TEST")
    assert sasl.create_sasl_server("X-TEST", "ldap", "host", None, None) is None


def test_create_server_rejects_missing_name(install):
    with pytest.raises(TypeError):
        sasl.create_sasl_server(None, "ldap", "host", None, None)


def test_factory_enumeration(install):
    provider = Provider("test-enum")
    provider.add_service("SaslClientFactory", "X-TEST", _ClientFactory)
    provider.add_service("SaslClientFactory", "X-BROKEN", _broken)
    provider.add_service("SaslServerFactory", "X-TEST", _ServerFactory)
    install(provider)
    clients = list(sasl.sasl_client_factories())
    servers = list(sasl.sasl_server_factories())
    assert sum(isinstance(f, _ClientFactory) for f in clients) == 1
    assert sum(isinstance(f, _ServerFactory) for f in servers) == 1
    assert not any(isinstance(f, _ServerFactory) for f in clients)