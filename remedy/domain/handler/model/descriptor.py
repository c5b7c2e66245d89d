"""Handler shapes and the descriptor value object.

A handler registered under a key takes one of three forms:

- a message string, shown as is;
- a descriptor (``Descriptor`` or a mapping with descriptor fields);
- a resolver callable that inspects the failure and returns a descriptor,
  or anything else to decline.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import Field, ValidationError, field_validator

from remedy.domain.shared.model.value import ValueObject

logger = logging.getLogger(__name__)

NEGATIVE = "negative"

DESCRIPTOR_FIELDS = frozenset({"message", "before", "after", "silent", "notify"})

Hook = Callable[..., Any]
"""Called as ``hook(failure, descriptor)``; the return value is ignored."""

Resolver = Callable[[Any], Any]

Notifier = Callable[[dict[str, Any]], None]


class Descriptor(ValueObject):
    """How to surface one failure: message, hooks, notification options."""

    message: str = ""
    before: Hook | None = None
    after: Hook | None = None
    silent: bool = False
    notify: dict[str, Any] = Field(default_factory=dict)

    @field_validator("message", mode="before")
    @classmethod
    def none_message_is_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("notify", mode="before")
    @classmethod
    def none_notify_is_empty(cls, value: Any) -> Any:
        return {} if value is None else value

    def notification(self) -> dict[str, Any]:
        """Options handed to the notifier; notify entries override the defaults."""
        return {"severity": NEGATIVE, "message": self.message, **self.notify}


Handler = str | Descriptor | Mapping[str, Any] | Resolver


def as_descriptor(value: Any) -> Descriptor | None:
    """Return ``value`` as a Descriptor, or None if it is not one.

    Mappings qualify when they carry at least one descriptor field. Fields
    set to None count as absent, so a missing message becomes an empty
    string; fields of the wrong type disqualify the whole mapping.
    """
    if isinstance(value, Descriptor):
        return value
    if not isinstance(value, Mapping) or not DESCRIPTOR_FIELDS.intersection(value.keys()):
        return None

    try:
        return Descriptor.model_validate(
            {key: value[key] for key in DESCRIPTOR_FIELDS if value.get(key) is not None}
        )
    except ValidationError as e:
        logger.debug("Rejected malformed descriptor: %s", e)
        return None
