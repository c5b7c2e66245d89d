"""Resolution engine - routes one failure to a handler and raises ApiError.

Outcomes of ``dispatch``:
- the failure resolves to a descriptor: hooks run, the notifier is called
  unless silent, and ApiError is raised from the failure
- nothing resolves: the original failure is re-raised unchanged
- the failure is None: UnrecoverableError
"""

import logging
from collections.abc import Callable, Iterator, Mapping
from contextlib import contextmanager
from typing import Any, NoReturn

from remedy.domain.handler.model.descriptor import Descriptor, Handler, as_descriptor
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.handler.port.transport import TransportInspector
from remedy.domain.shared.error import ApiError, UnrecoverableError
from remedy.infrastructure.http.transport import HttpxTransportInspector

logger = logging.getLogger(__name__)


def _first_message(*candidates: Any) -> str | None:
    for candidate in candidates:
        if isinstance(candidate, str) and candidate:
            return candidate
    return None


class ResolutionEngine:
    """Resolves failures against a HandlerStore chain."""

    def __init__(
        self,
        store: HandlerStore,
        inspector: TransportInspector | None = None,
    ) -> None:
        self._store = store
        self._inspector = inspector if inspector is not None else HttpxTransportInspector()

    @property
    def store(self) -> HandlerStore:
        return self._store

    # -------------------------------------------------------------------------
    # Key resolution
    # -------------------------------------------------------------------------

    def handle_error(self, seek: Any, failure: Any) -> bool:
        """Resolve failure by key, or by the first matching key of a list or tuple.

        Keys other than strings are looked up by their ``str()`` form.

        Returns False when no handler resolves. When one does, its descriptor
        is executed and ApiError is raised, so True is never returned.
        """
        if isinstance(seek, (list, tuple)):
            return any(key is not None and self.handle_error(key, failure) for key in seek)

        seek = str(seek)
        handler = self._store.find(seek)
        if handler is None:
            return False

        descriptor = self._resolve(handler, failure)
        if descriptor is None:
            logger.debug("Handler for key %r declined %s", seek, type(failure).__name__)
            return False

        logger.debug("Handler for key %r resolved %s", seek, type(failure).__name__)
        self.execute_descriptor(failure, descriptor)

    def _resolve(self, handler: Handler, failure: Any) -> Descriptor | None:
        match handler:
            case str() if handler:
                return Descriptor(message=handler)
            case Descriptor():
                return handler
            case Mapping():
                return as_descriptor(handler)
            case Callable():
                return as_descriptor(handler(failure))
            case _:
                return None

    def execute_descriptor(self, failure: Any, descriptor: Descriptor) -> NoReturn:
        """Run before, notify (unless silent), run after, then raise ApiError.

        A hook that raises stops the sequence; its exception propagates.
        """
        if descriptor.before is not None:
            descriptor.before(failure, descriptor)

        if not descriptor.silent:
            self._store.notifier(descriptor.notification())

        if descriptor.after is not None:
            descriptor.after(failure, descriptor)

        error = ApiError(descriptor.message)
        if isinstance(failure, BaseException):
            raise error from failure
        raise error

    # -------------------------------------------------------------------------
    # Dispatch
    # -------------------------------------------------------------------------

    def dispatch(self, failure: Any, direct: bool = False) -> NoReturn:
        """Route a raw request failure.

        Args:
            failure: The exception caught around the request.
            direct: Set by scoped dispatch; ignores the ``raw`` request option.

        Raises:
            ApiError: A handler resolved the failure.
            UnrecoverableError: failure is None.
            TypeError: failure is not an exception and nothing resolved it.
            Exception: The original failure when nothing resolved it.
        """
        if failure is None:
            raise UnrecoverableError("Unrecoverable error: error is None")

        if self._inspector.matches(failure):
            self.handle_transport_error(failure, direct)
        elif isinstance(failure, Exception):
            self.handle_error(type(failure).__name__, failure)

        if isinstance(failure, BaseException):
            raise failure
        raise TypeError(f"Cannot re-raise non-exception failure: {failure!r}")

    def handle_transport_error(self, failure: Any, direct: bool = False) -> None:
        """Resolve an HTTP client failure.

        Order: raw passthrough, response body message, candidate keys, then
        the first message found in the body or on the failure. Returns only
        when nothing applies.
        """
        info = self._inspector.describe(failure)
        data = info.data or {}

        if not direct and info.raw:
            logger.debug("Raw passthrough for %s", info.name)
            raise failure

        body_message = data.get("message")
        if isinstance(body_message, str) and body_message:
            self.execute_descriptor(failure, Descriptor(message=body_message, silent=info.silent))

        seekers = [
            data.get("code"),
            info.code,
            info.name,
            str(data["status"]) if data.get("status") else None,
            str(info.status) if info.status else None,
        ]
        if self.handle_error(seekers, failure):
            return

        message = _first_message(data.get("message"), data.get("description"), info.message)
        if message is not None:
            logger.debug("No handler for %s, falling back to its message", info.name)
            self.execute_descriptor(failure, Descriptor(message=message, silent=info.silent))

    @contextmanager
    def intercept(self, direct: bool = False) -> Iterator[None]:
        """Dispatch any exception raised inside the block.

        Usage:
            with engine.intercept():
                client.get(url).raise_for_status()
        """
        try:
            yield
        except Exception as e:
            self.dispatch(e, direct)
