"""Dependency injection wiring.

The global HandlerStore and its ResolutionEngine are APP-scoped singletons,
built once from Config and injected where needed instead of living in
module globals.
"""

import logging

from dishka import Container, Provider, Scope, from_context, make_container, provide

from remedy.config import Config, HandlerConfig
from remedy.domain.handler.model.descriptor import Descriptor, Handler
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.handler.port.transport import TransportInspector
from remedy.domain.handler.service.resolution import ResolutionEngine
from remedy.domain.handler.service.scope import DealWith, create_deal_with
from remedy.domain.shared.error import ConfigurationError
from remedy.infrastructure.http.transport import HttpxTransportInspector

logger = logging.getLogger(__name__)


def handlers_from_config(config: Config) -> dict[str, Handler]:
    """Convert configured handlers into store entries.

    Raises:
        ConfigurationError: A handler has no message and is not silent.
    """
    handlers: dict[str, Handler] = {}
    for key, entry in config.handlers.items():
        if isinstance(entry, HandlerConfig):
            if not entry.message and not entry.silent:
                raise ConfigurationError(f"Handler '{key}' needs a message unless it is silent")
            handlers[key] = Descriptor(
                message=entry.message,
                silent=entry.silent,
                notify=entry.notify,
            )
        elif entry:
            handlers[key] = entry
        else:
            raise ConfigurationError(f"Handler '{key}' has an empty message")
    return handlers


class RemedyProvider(Provider):
    """Provides the global handler store, its engine and deal_with."""

    config = from_context(provides=Config, scope=Scope.APP)

    @provide(scope=Scope.APP)
    def get_transport_inspector(self) -> TransportInspector:
        return HttpxTransportInspector()

    @provide(scope=Scope.APP)
    def get_handler_store(self, config: Config) -> HandlerStore:
        handlers = handlers_from_config(config)
        logger.debug("Global handler store seeded with %d handlers", len(handlers))
        return HandlerStore(handlers=handlers)

    @provide(scope=Scope.APP)
    def get_resolution_engine(
        self, store: HandlerStore, inspector: TransportInspector
    ) -> ResolutionEngine:
        return ResolutionEngine(store, inspector)

    @provide(scope=Scope.APP)
    def get_deal_with(self, store: HandlerStore, inspector: TransportInspector) -> DealWith:
        return create_deal_with(store, inspector=inspector)


def create_container(config: Config | None = None) -> Container:
    return make_container(
        RemedyProvider(),
        context={Config: config if config is not None else Config()},
    )
