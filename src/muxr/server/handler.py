"""ASGI handler — the boundary between raw ASGI and muxr types.

``dispatch`` is the supervisor for whatever ``Router.serve`` lets escape:
an HTTPError becomes its status, any other exception a logged 500.
``handle_request`` wraps it with scope parsing and response sending.
"""

from typing import TYPE_CHECKING

from muxr._internal.asgi import Receive, Scope, Send
from muxr.config import RouterConfig
from muxr.errors import HTTPError
from muxr.http.request import Request
from muxr.http.response import Response
from muxr.server.errors import handle_http_error, handle_internal_error
from muxr.server.sender import send_response

if TYPE_CHECKING:
    from muxr.routing.router import Router


async def dispatch(request: Request, *, router: "Router", config: RouterConfig) -> Response:
    """Serve *request*, turning escaped exceptions into error responses."""
    try:
        return await router.serve(request)
    except HTTPError as exc:
        return handle_http_error(exc, request, content_type=config.default_content_type)
    except Exception as exc:
        return handle_internal_error(
            exc,
            request,
            content_type=config.default_content_type,
            debug=config.debug,
        )


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: "Router",
    config: RouterConfig,
) -> None:
    """Process a single ASGI connection scope."""
    if scope["type"] == "lifespan":
        await _handle_lifespan(receive, send)
        return
    if scope["type"] != "http":
        return

    response = await dispatch(Request.from_asgi(scope, receive), router=router, config=config)
    await send_response(response, send)


async def _handle_lifespan(receive: Receive, send: Send) -> None:
    """Acknowledge lifespan startup and shutdown; the router has no hooks."""
    while True:
        message = await receive()
        if message["type"] == "lifespan.startup":
            await send({"type": "lifespan.startup.complete"})
        elif message["type"] == "lifespan.shutdown":
            await send({"type": "lifespan.shutdown.complete"})
            return
