"""Error responses for muxr requests.

Builds the default not-found / method-not-allowed responses the router
falls back to, and maps exceptions escaping ``Router.serve`` to responses
at the ASGI boundary.
"""

import logging
import traceback

from muxr.errors import HTTPError
from muxr.http.request import Request
from muxr.http.response import Response

logger = logging.getLogger("muxr.server")


def http_error_response(exc: HTTPError, *, content_type: str) -> Response:
    """Plain response carrying the status, detail, and headers of *exc*."""
    resp = Response(body=exc.detail or f"Error {exc.status}", content_type=content_type)
    resp = resp.with_status(exc.status)
    for name, value in exc.headers:
        resp = resp.with_header(name, value)
    return resp


def handle_http_error(exc: HTTPError, request: Request, *, content_type: str) -> Response:
    """Map an HTTPError raised by a handler or middleware to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)
    return http_error_response(exc, content_type=content_type)


def handle_internal_error(
    exc: Exception,
    request: Request,
    *,
    content_type: str,
    debug: bool,
) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if debug:
        body = "".join(traceback.format_exception(exc))
        return Response(body=body, status=500, content_type=content_type)

    return Response(body="Internal Server Error", status=500, content_type=content_type)
