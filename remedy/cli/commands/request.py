"""Request command - send one request and route its failure through the handlers."""

import sys

import cyclopts
import httpx

from remedy.application.di import create_container
from remedy.config import Config, configure_logging
from remedy.domain.handler.service.resolution import ResolutionEngine
from remedy.domain.shared.error import ApiError
from remedy.infrastructure.notify.console import get_console

app = cyclopts.App(name="request", help="Send a request and handle its failure")


def send(
    client: httpx.Client,
    engine: ResolutionEngine,
    method: str,
    url: str,
    *,
    raw: bool = False,
    silent: bool = False,
) -> httpx.Response:
    """Send a request; any failure goes through engine.dispatch.

    Raises:
        ApiError: A handler resolved the failure.
        httpx.HTTPError: The failure passed through unresolved.
    """
    with engine.intercept():
        response = client.request(method, url, extensions={"raw": raw, "silent": silent})
        response.raise_for_status()
    return response


@app.default
def request(
    url: str,
    /,
    method: str = "GET",
    raw: bool = False,
    silent: bool = False,
    timeout: float | None = None,
) -> None:
    """Send a request using the configured handlers.

    Args:
        url: URL to request.
        method: HTTP method.
        raw: Let failures propagate without handling.
        silent: Handle failures without notifying.
        timeout: Timeout in seconds (defaults to http.timeout from config).
    """
    config = Config()
    configure_logging(config.logging)
    container = create_container(config)
    engine = container.get(ResolutionEngine)
    console = get_console()

    with httpx.Client(timeout=timeout or config.http.timeout) as client:
        try:
            response = send(client, engine, method.upper(), url, raw=raw, silent=silent)
        except ApiError:
            # Already shown by the notifier unless silent
            sys.exit(1)
        except httpx.HTTPError as e:
            console.error(f"{type(e).__name__}: {e}")
            sys.exit(1)

    console.success(f"{response.status_code} {response.reason_phrase}")
