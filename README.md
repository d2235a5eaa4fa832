# saslkit

A small SASL (Simple Authentication and Security Layer) framework for
writing and selecting authentication mechanisms.

## What is in it

- `saslkit.mechanisms`: the abstract base classes `SaslClient`, `SaslServer`,
  `SaslClientFactory` and `SaslServerFactory`. Clients and servers can be used
  as context managers; leaving the `with` block calls `dispose()`.
- `saslkit.providers`: a process-wide registry. A `Provider` holds `Service`
  entries, each a type (such as `"SaslClientFactory"`), an algorithm (the
  mechanism name, matched without regard to case) and a zero-argument
  callable that builds the factory. `add_provider`, `remove_provider` and
  `get_providers` manage the installed providers; `set_property` and
  `get_property` hold string security properties.
- `saslkit.sasl`: `create_sasl_client`, `create_sasl_server`,
  `sasl_client_factories` and `sasl_server_factories` pick factories from the
  installed providers. Mechanisms named in the `jdk.sasl.disabledMechanisms`
  property (a comma-separated list) are skipped; see `disabled_mechanisms()`
  and `is_disabled()`. The module also defines the standard property names
  (`QOP`, `STRENGTH`, `MAX_BUFFER`, `POLICY_NOPLAINTEXT`, ...).
- `saslkit.policy`: the `Policy` flags and `check_policy` / `filter_mechs`,
  which keep only mechanisms whose flags satisfy the `policy.*` properties
  set to `"true"`.
- `saslkit.abstract_impl`: helpers for mechanism authors. `AbstractSaslImpl`
  reads the QOP, strength and buffer-size properties and answers
  `get_negotiated_property` once `completed` is set (before that it raises
  `RuntimeError`). The module also has `parse_qop`, `parse_qop_tokens`,
  `parse_strength`, `parse_prop`, `combine_masks`, `find_preferred_mask`,
  `network_byte_order_to_int`, `int_to_network_byte_order` and
  `trace_output`, which logs a hex dump of a buffer.
- `saslkit.exceptions`: `SaslException` (an `OSError`) and its subclass
  `AuthenticationException`. A cause given to `SaslException` is shown in its
  text as `[Caused by ...]`.
- `saslkit.callbacks`: `AuthorizeCallback`, `RealmCallback` and
  `RealmChoiceCallback`, which a mechanism hands to the application's
  callback handler (any callable taking a sequence of callbacks).

Log messages go to the `javax.security.sasl` logger from the standard
`logging` module.

## Installing

```
pip install saslkit
```

## Using it

Register a factory with a provider, then ask for a client:

```python
from saslkit.mechanisms import SaslClientFactory
from saslkit.providers import Provider, add_provider
from saslkit.sasl import create_sasl_client

class MyFactory(SaslClientFactory):
    def create_sasl_client(self, mechanisms, authorization_id, protocol,
                           server_name, props, callback_handler):
        ...  # return a SaslClient for "X-MINE", or None

    def mechanism_names(self, props):
        return ["X-MINE"]

provider = Provider("Mine")
provider.add_service("SaslClientFactory", "X-MINE", MyFactory)
add_provider(provider)

client = create_sasl_client(["X-MINE"], None, "ldap", "host.example.com", {}, None)
```

`create_sasl_client` tries the listed mechanisms in order and returns the
first client a provider produces, or `None`.

Mechanisms can be switched off through a property; it is read on every
lookup:

```python
from saslkit.providers import set_property

set_property("jdk.sasl.disabledMechanisms", "PLAIN, CRAM-MD5")
```

Policy filtering:

```python
from saslkit.policy import Policy, filter_mechs

filter_mechs(["PLAIN", "DIGEST-MD5"],
             [Policy.NOANONYMOUS, Policy.NOPLAINTEXT | Policy.NOANONYMOUS],
             {"javax.security.sasl.policy.noplaintext": "true"})
# ["DIGEST-MD5"]
```

## What it does not do

saslkit ships no mechanisms of its own: there is no PLAIN, EXTERNAL,
CRAM-MD5, DIGEST-MD5 or NTLM client or server, and no provider is installed
by default. Until you register factories, `create_sasl_client` and
`create_sasl_server` return `None`. It also does no network I/O; moving
challenges and responses between peers is up to the application.

## Running the tests

```
pip install -e .[test]
pytest
```