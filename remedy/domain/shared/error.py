"""Error hierarchy for remedy.

Error layers:
- RemedyError: Base class for errors raised by remedy itself
- ApiError: The normalized error raised once a failure has been handled
- ConfigurationError: Declarative handler configuration is invalid

UnrecoverableError is not a RemedyError: it means dispatch was called with
None, not that a request failed.
"""


class RemedyError(Exception):
    """Base class for all remedy errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(message)


class ApiError(RemedyError):
    """A request failure that was resolved by a handler.

    Raised from the original failure, so ``__cause__`` holds the raw error.
    """


class ConfigurationError(RemedyError):
    """Handler configuration could not be turned into a handler."""


class UnrecoverableError(RuntimeError):
    """The failure handed to dispatch was None."""
