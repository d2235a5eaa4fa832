"""Exceptions raised during SASL authentication."""

from __future__ import annotations


def _describe(error: BaseException) -> str:
    """Render an exception as its class name followed by its message, if any."""
    message = str(error)
    name = type(error).__name__
    return f"{name}: {message}" if message else name


class SaslException(OSError):
    """An error that occurred while using SASL.

    The optional ``cause`` is the underlying error. It is kept both as
    ``cause`` and as the standard ``__cause__`` so tracebacks show it.
    """

    def __init__(self, detail: str | None = None, cause: BaseException | None = None) -> None:
        if detail is None:
            super().__init__()
        else:
            super().__init__(detail)
        self.detail = detail
        self._cause: BaseException | None = None
        if cause is not None:
            self.cause = cause

    @property
    def cause(self) -> BaseException | None:
        """The underlying error, or None."""
        return self._cause

    @cause.setter
    def cause(self, value: BaseException | None) -> None:
        self._cause = value
        self.__cause__ = value

    def __str__(self) -> str:
        answer = self.detail if self.detail is not None else ""
        if self._cause is not None and self._cause is not self:
            answer += f" [Caused by {_describe(self._cause)}]"
        return answer


class AuthenticationException(SaslException):
    """Authentication failed, for example because of invalid credentials."""