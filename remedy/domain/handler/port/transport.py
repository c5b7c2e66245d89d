from abc import abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Protocol


@dataclass(frozen=True)
class TransportFailure:
    """What the engine needs to know about an HTTP client failure."""

    name: str
    message: str
    code: str | None = None
    status: int | None = None
    data: Mapping[str, Any] | None = None  # decoded response body, objects only
    raw: bool = False
    silent: bool = False


class TransportInspector(Protocol):
    """Recognizes HTTP client failures and exposes their request/response details."""

    @abstractmethod
    def matches(self, failure: object) -> bool:
        ...

    @abstractmethod
    def describe(self, failure: Any) -> TransportFailure:
        ...
