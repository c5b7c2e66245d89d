"""Handler store - keyed handlers with parent delegation."""

import threading
from collections.abc import Iterator, Mapping
from typing import Any, Self

from remedy.domain.handler.model.descriptor import Handler, Notifier
from remedy.infrastructure.notify.console import console_notifier


class HandlerStore:
    """Ordered mapping of key to handler.

    Lookups that miss locally are delegated to the parent store, so a key
    registered here shadows the same key further up the chain. The parent is
    fixed at construction.
    """

    def __init__(
        self,
        parent: "HandlerStore | None" = None,
        handlers: Mapping[str, Handler] | None = None,
        notifier: Notifier | None = None,
    ) -> None:
        self._handlers: dict[str, Handler] = {}
        self._parent = parent
        self._notifier: Notifier = notifier if callable(notifier) else console_notifier
        self._lock = threading.RLock()

        if handlers:
            self.register_many(handlers)

    @property
    def parent(self) -> "HandlerStore | None":
        return self._parent

    @property
    def notifier(self) -> Notifier:
        return self._notifier

    def set_notifier(self, fn: Any) -> Self:
        """Replace the notifier. Non-callables are ignored."""
        if callable(fn):
            with self._lock:
                self._notifier = fn
        return self

    def register(self, key: str, handler: Handler) -> Self:
        """Register a handler under key, replacing any previous one."""
        with self._lock:
            self._handlers[key] = handler
        return self

    def unregister(self, key: str) -> Self:
        """Remove the handler for key, if any."""
        with self._lock:
            self._handlers.pop(key, None)
        return self

    def register_many(self, handlers: Mapping[str, Handler]) -> Self:
        """Register every entry in order; later entries win."""
        with self._lock:
            for key, handler in handlers.items():
                self.register(key, handler)
        return self

    def find(self, key: str) -> Handler | None:
        """Find a handler by key, falling back to the parent chain."""
        with self._lock:
            handler = self._handlers.get(key)
        if handler is not None:
            return handler
        if self._parent is not None:
            return self._parent.find(key)
        return None

    def keys(self) -> list[str]:
        """Keys registered on this store (parents excluded)."""
        with self._lock:
            return list(self._handlers)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._handlers

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __len__(self) -> int:
        with self._lock:
            return len(self._handlers)
