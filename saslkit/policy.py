"""Checking mechanisms against the security policy given in SASL properties."""

from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from typing import Any

from saslkit.sasl import (
    POLICY_FORWARD_SECRECY,
    POLICY_NOACTIVE,
    POLICY_NOANONYMOUS,
    POLICY_NODICTIONARY,
    POLICY_NOPLAINTEXT,
    POLICY_PASS_CREDENTIALS,
)


class Policy(enum.IntFlag):
    """Security properties a mechanism may have."""

    NONE = 0
    NOPLAINTEXT = 1
    NOACTIVE = 2
    NODICTIONARY = 4
    FORWARD_SECRECY = 8
    NOANONYMOUS = 16
    PASS_CREDENTIALS = 512


_REQUIREMENTS = (
    (POLICY_NOPLAINTEXT, Policy.NOPLAINTEXT),
    (POLICY_NOACTIVE, Policy.NOACTIVE),
    (POLICY_NODICTIONARY, Policy.NODICTIONARY),
    (POLICY_NOANONYMOUS, Policy.NOANONYMOUS),
    (POLICY_FORWARD_SECRECY, Policy.FORWARD_SECRECY),
    (POLICY_PASS_CREDENTIALS, Policy.PASS_CREDENTIALS),
)


def _required(props: Mapping[str, Any], key: str) -> bool:
    value = props.get(key)
    if value is None:
        return False
    if not isinstance(value, str):
        raise TypeError(f"Property {key} must be a string, not {type(value).__name__}")
    return value.lower() == "true"


def check_policy(flags: int, props: Mapping[str, Any] | None) -> bool:
    """Whether a mechanism with ``flags`` satisfies every policy required by ``props``."""
    if props is None:
        return True
    return all(
        not _required(props, key) or flags & flag
        for key, flag in _REQUIREMENTS
    )


def filter_mechs(
    mechs: Sequence[str],
    policies: Sequence[int],
    props: Mapping[str, Any] | None,
) -> list[str]:
    """The mechanisms whose policy flags satisfy ``props``, in their original order.

    ``policies[i]`` holds the flags of ``mechs[i]``.
    """
    if props is None:
        return list(mechs)
    if len(policies) < len(mechs):
        raise ValueError("Every mechanism needs a policy entry")
    return [mech for mech, flags in zip(mechs, policies) if check_policy(flags, props)]