"""muxr — a pattern-matching HTTP request router for ASGI.

Routes requests to the single most specific registered pattern, wraps the
winner in an ordered middleware chain, and lets routers mount routers.

Basic usage::

    from muxr import Router

    router = Router()

    @router.get("/users/{id}")
    async def user(request):
        return f"user {request.path_params['id']}"

    api = Router()
    api.get("/api/v1/{rest...}", proxy)
    router.mount("/api", api)

The router is an ASGI 3.0 application; hand it to any ASGI server.
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "HTTPError",
    "Handler",
    "Method",
    "MethodNotAllowed",
    "Middleware",
    "MuxrError",
    "NotFound",
    "PatternError",
    "Request",
    "Response",
    "Router",
    "RouterConfig",
    "middleware",
    "parse_pattern",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import muxr`` fast while providing a clean top-level API.
    """
    if name == "Router":
        from muxr.routing.router import Router

        return Router

    if name == "RouterConfig":
        from muxr.config import RouterConfig

        return RouterConfig

    if name == "Request":
        from muxr.http.request import Request

        return Request

    if name == "Response":
        from muxr.http.response import Response

        return Response

    if name == "Method":
        from muxr.routing.methods import Method

        return Method

    if name == "parse_pattern":
        from muxr.routing.pattern import parse_pattern

        return parse_pattern

    if name in ("Handler", "Middleware", "middleware"):
        from muxr.middleware import protocol as _mw

        return getattr(_mw, name)

    if name in (
        "ConfigurationError",
        "HTTPError",
        "MethodNotAllowed",
        "MuxrError",
        "NotFound",
        "PatternError",
    ):
        from muxr import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
