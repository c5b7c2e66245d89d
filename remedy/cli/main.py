"""Main CLI application using Cyclopts."""

import cyclopts

from remedy.cli.commands import handlers, request

app = cyclopts.App(
    name="remedy",
    help="remedy - HTTP failure handling",
)

app.command(request.app, name="request")
app.command(handlers.app, name="handlers")


def main() -> None:
    app()
