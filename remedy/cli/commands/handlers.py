"""Handler inspection commands."""

import sys

import cyclopts

from remedy.application.di import create_container
from remedy.config import Config
from remedy.domain.handler.model.descriptor import as_descriptor
from remedy.domain.handler.model.store import HandlerStore
from remedy.domain.shared.error import ConfigurationError
from remedy.infrastructure.notify.console import get_console

app = cyclopts.App(name="handlers", help="Inspect configured handlers")


def describe_store(store: HandlerStore) -> list[dict[str, str]]:
    """One row per key registered on store."""
    rows = []
    for key in store:
        handler = store.find(key)
        if isinstance(handler, str):
            message, silent = handler, False
        elif (descriptor := as_descriptor(handler)) is not None:
            message, silent = descriptor.message, descriptor.silent
        else:
            message, silent = "<resolver>", False
        rows.append({"key": key, "message": message, "silent": "yes" if silent else ""})
    return rows


@app.command(name="list")
def list_handlers() -> None:
    """List the handlers loaded from configuration."""
    console = get_console()
    container = create_container(Config())
    try:
        store = container.get(HandlerStore)
    except ConfigurationError as e:
        console.error(e.message, hint="Check the handlers section of REMEDY_CONFIG_FILE")
        sys.exit(1)

    if not len(store):
        console.warning("No handlers configured (set REMEDY_CONFIG_FILE)")
        return

    console.table(
        describe_store(store),
        [("key", "Key"), ("message", "Message"), ("silent", "Silent")],
        title="Handlers",
    )
