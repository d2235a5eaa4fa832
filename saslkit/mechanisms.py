"""Interfaces implemented by SASL mechanisms and the factories that create them."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping, Sequence
from types import TracebackType
from typing import Any

CallbackHandler = Callable[[Sequence[Any]], None]


class _Disposable(ABC):
    """Releases the mechanism's resources when leaving a ``with`` block."""

    @abstractmethod
    def dispose(self) -> None:
        """Release any system resources or security-sensitive state."""

    def __enter__(self):
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.dispose()


class SaslClient(_Disposable):
    """The client side of a SASL mechanism."""

    @abstractmethod
    def mechanism_name(self) -> str:
        """The IANA-registered name of this mechanism."""

    @abstractmethod
    def has_initial_response(self) -> bool:
        """Whether the mechanism sends a response before any challenge."""

    @abstractmethod
    def evaluate_challenge(self, challenge: bytes) -> bytes | None:
        """Process a server challenge and return the response to send, if any.

        Raises SaslException when the challenge cannot be processed.
        """

    @abstractmethod
    def is_complete(self) -> bool:
        """Whether the authentication exchange has finished."""

    @abstractmethod
    def unwrap(self, incoming: bytes, offset: int, length: int) -> bytes:
        """Unwrap ``length`` bytes of ``incoming`` starting at ``offset``."""

    @abstractmethod
    def wrap(self, outgoing: bytes, offset: int, length: int) -> bytes:
        """Wrap ``length`` bytes of ``outgoing`` starting at ``offset``."""

    @abstractmethod
    def negotiated_property(self, prop_name: str) -> Any:
        """The value of a negotiated property, or None when it is unknown."""

    @abstractmethod
    def dispose(self) -> None:
        """Release any system resources or security-sensitive state."""


class SaslServer(_Disposable):
    """The server side of a SASL mechanism."""

    @abstractmethod
    def mechanism_name(self) -> str:
        """The IANA-registered name of this mechanism."""

    @abstractmethod
    def evaluate_response(self, response: bytes) -> bytes | None:
        """Process a client response and return the next challenge, if any.

        Raises SaslException when the response cannot be processed.
        """

    @abstractmethod
    def is_complete(self) -> bool:
        """Whether the authentication exchange has finished."""

    @abstractmethod
    def authorization_id(self) -> str | None:
        """The authorization identity of the client once authenticated."""

    @abstractmethod
    def unwrap(self, incoming: bytes, offset: int, length: int) -> bytes:
        """Unwrap ``length`` bytes of ``incoming`` starting at ``offset``."""

    @abstractmethod
    def wrap(self, outgoing: bytes, offset: int, length: int) -> bytes:
        """Wrap ``length`` bytes of ``outgoing`` starting at ``offset``."""

    @abstractmethod
    def negotiated_property(self, prop_name: str) -> Any:
        """The value of a negotiated property, or None when it is unknown."""

    @abstractmethod
    def dispose(self) -> None:
        """Release any system resources or security-sensitive state."""


class SaslClientFactory(ABC):
    """Creates SaslClient instances for one or more mechanisms."""

    @abstractmethod
    def create_sasl_client(
        self,
        mechanisms: Sequence[str],
        authorization_id: str | None,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        callback_handler: CallbackHandler | None,
    ) -> SaslClient | None:
        """Create a client for the first usable mechanism, or return None."""

    @abstractmethod
    def mechanism_names(self, props: Mapping[str, Any] | None) -> list[str]:
        """The mechanisms this factory can produce under the given policy."""


class SaslServerFactory(ABC):
    """Creates SaslServer instances for one or more mechanisms."""

    @abstractmethod
    def create_sasl_server(
        self,
        mechanism: str,
        protocol: str,
        server_name: str,
        props: Mapping[str, Any] | None,
        callback_handler: CallbackHandler | None,
    ) -> SaslServer | None:
        """Create a server for ``mechanism``, or return None."""

    @abstractmethod
    def mechanism_names(self, props: Mapping[str, Any] | None) -> list[str]:
        """The mechanisms this factory can produce under the given policy."""