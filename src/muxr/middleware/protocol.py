"""Middleware protocol, Handler type alias, and the ``middleware`` adapter.

A handler is an async callable from Request to Response. A middleware
wraps one handler and returns another::

    def timing(next: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            start = time.monotonic()
            response = await next(request)
            return response.with_header("X-Time", f"{time.monotonic() - start:.3f}")

        return handler

The returned handler may run code before and after ``next``, or never
call it at all. No base class required.
"""

from collections.abc import Awaitable, Callable
from functools import wraps
from typing import Protocol, TypeAlias

from muxr.http.request import Request
from muxr.http.response import Response

# A composed, ready-to-run handler
Handler: TypeAlias = Callable[[Request], Awaitable[Response]]

# The next handler as seen by (request, next) style middleware
Next: TypeAlias = Handler


class Middleware(Protocol):
    """Protocol for muxr middleware: ``wrap(next) -> handler``.

    Accepts both functions and callable objects::

        # Function middleware
        def require_json(next: Handler) -> Handler: ...

        # Class middleware
        class RateLimiter:
            def __call__(self, next: Handler) -> Handler: ...
    """

    def __call__(self, next: Handler) -> Handler: ...


def middleware(
    func: Callable[[Request, Next], Awaitable[Response]],
) -> Middleware:
    """Adapt an ``async def mw(request, next)`` function into a Middleware.

    Usage::

        @middleware
        async def powered_by(request: Request, next: Next) -> Response:
            response = await next(request)
            return response.with_header("X-Powered-By", "muxr")

        router.use(powered_by)
    """

    @wraps(func)
    def wrap(next: Handler) -> Handler:
        async def handler(request: Request) -> Response:
            return await func(request, next)

        return handler

    return wrap
