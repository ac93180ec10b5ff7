"""Ordered middleware chain.

Middleware runs in the order it was added, no matter how many ``use()``
calls contributed it: ``use(a, b)`` then ``use(c)`` around handler ``d``
executes ``a -> b -> c -> d``, and ``a``'s after-code runs last.
"""

from collections.abc import Iterator

from muxr.errors import ConfigurationError
from muxr.middleware.protocol import Handler, Middleware


class MiddlewareChain:
    """An append-only list of middleware, folded around a terminal handler."""

    __slots__ = ("_middleware",)

    def __init__(self) -> None:
        self._middleware: list[Middleware] = []

    def __len__(self) -> int:
        return len(self._middleware)

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self._middleware)

    def use(self, *middleware: Middleware) -> None:
        """Append one or more middleware, keeping their order."""
        for mw in middleware:
            if not callable(mw):
                msg = f"Middleware must be callable, got {type(mw).__name__}"
                raise ConfigurationError(msg)
        self._middleware.extend(middleware)

    def compose(self, terminal: Handler) -> Handler:
        """Wrap *terminal* so the first-added middleware runs outermost."""
        handler = terminal
        for mw in reversed(self._middleware):
            handler = mw(handler)
        return handler
