"""remedy - centralized recovery for HTTP request failures."""

from remedy.domain.handler.model.descriptor import Descriptor, Handler, Notifier, as_descriptor
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.handler.service.resolution import ResolutionEngine
from remedy.domain.handler.service.scope import DealWith, create_deal_with
from remedy.domain.shared.error import (
    ApiError,
    ConfigurationError,
    RemedyError,
    UnrecoverableError,
)
from remedy.infrastructure.http.transport import HttpxTransportInspector
from remedy.infrastructure.notify.console import console_notifier

__all__ = [
    "ApiError",
    "ConfigurationError",
    "DealWith",
    "Descriptor",
    "Handler",
    "HandlerStore",
    "HttpxTransportInspector",
    "Notifier",
    "RemedyError",
    "ResolutionEngine",
    "UnrecoverableError",
    "as_descriptor",
    "console_notifier",
    "create_deal_with",
]
