"""Callbacks a SASL mechanism hands to an application's callback handler."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass
class AuthorizeCallback:
    """Asks whether an authenticated identity may act as another identity.

    The handler sets ``authorized`` and may set ``canonical_id`` to a
    canonicalised form of the authorization identity.
    """

    authentication_id: str | None
    authorization_id: str | None
    authorized: bool = False
    canonical_id: str | None = None

    def authorized_id(self) -> str | None:
        """The identity that was authorized, or None when authorization failed."""
        if not self.authorized:
            return None
        return self.authorization_id if self.canonical_id is None else self.canonical_id


@dataclass
class RealmCallback:
    """Asks for the realm to use during authentication.

    The handler stores its answer in ``text``.
    """

    prompt: str
    default_text: str | None = None
    text: str | None = None


@dataclass
class RealmChoiceCallback:
    """Asks the handler to choose one or more realms from a list.

    The handler stores the chosen positions in ``selected_indexes``.
    """

    prompt: str
    choices: Sequence[str]
    default_choice: int
    multiple: bool
    selected_indexes: tuple[int, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        self.choices = tuple(self.choices)