"""Middleware — wrap(next) -> handler, no inheritance required.

A middleware is any callable matching:
    def mw(next: Handler) -> Handler

``middleware()`` adapts the ``async def mw(request, next)`` style.
"""

from muxr.middleware.chain import MiddlewareChain
from muxr.middleware.protocol import Handler, Middleware, Next, middleware

__all__ = [
    "Handler",
    "Middleware",
    "MiddlewareChain",
    "Next",
    "middleware",
]
