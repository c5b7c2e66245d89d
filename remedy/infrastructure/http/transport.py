"""httpx adapter for the TransportInspector port.

Per-request options travel in the request ``extensions`` mapping::

    client.get(url, extensions={"raw": True, "silent": True})

- ``raw``: let the failure propagate untouched (global dispatch only)
- ``silent``: resolve the failure but skip the notification
"""

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from remedy.domain.handler.port.transport import TransportFailure, TransportInspector

logger = logging.getLogger(__name__)

# Most specific first: TimeoutException and NetworkError are both TransportErrors.
_CODES_BY_TYPE: tuple[tuple[type[httpx.HTTPError], str], ...] = (
    (httpx.TimeoutException, "ETIMEDOUT"),
    (httpx.NetworkError, "ERR_NETWORK"),
    (httpx.TooManyRedirects, "ERR_FR_TOO_MANY_REDIRECTS"),
    (httpx.UnsupportedProtocol, "ERR_BAD_OPTION"),
    (httpx.DecodingError, "ERR_DECODING"),
)


def transport_error_code(error: httpx.HTTPError) -> str | None:
    """Derive a stable error code for an httpx failure.

    An explicit string ``code`` attribute wins; otherwise status errors map to
    ERR_BAD_RESPONSE (5xx) or ERR_BAD_REQUEST, and transport errors map by type.
    """
    explicit = getattr(error, "code", None)
    if isinstance(explicit, str) and explicit:
        return explicit

    if isinstance(error, httpx.HTTPStatusError):
        return "ERR_BAD_RESPONSE" if error.response.status_code >= 500 else "ERR_BAD_REQUEST"

    for error_type, code in _CODES_BY_TYPE:
        if isinstance(error, error_type):
            return code
    return None


def _request_of(error: httpx.HTTPError) -> httpx.Request | None:
    try:
        return error.request
    except RuntimeError:
        # httpx raises when no request was attached to the exception
        return None


def _json_body(response: httpx.Response) -> Mapping[str, Any] | None:
    try:
        body = response.json()
    except (ValueError, httpx.ResponseNotRead):
        return None
    return body if isinstance(body, Mapping) else None


class HttpxTransportInspector(TransportInspector):
    """Recognizes httpx.HTTPError and reads its request extensions and response body."""

    def matches(self, failure: object) -> bool:
        return isinstance(failure, httpx.HTTPError)

    def describe(self, failure: httpx.HTTPError) -> TransportFailure:
        request = _request_of(failure)
        extensions = request.extensions if request is not None else {}
        response = failure.response if isinstance(failure, httpx.HTTPStatusError) else None

        data = _json_body(response) if response is not None else None
        if response is not None and data is None:
            logger.debug("Response body (status=%d) is not a JSON object", response.status_code)

        return TransportFailure(
            name=type(failure).__name__,
            message=str(failure),
            code=transport_error_code(failure),
            status=response.status_code if response is not None else None,
            data=data,
            raw=bool(extensions.get("raw")),
            silent=bool(extensions.get("silent")),
        )
