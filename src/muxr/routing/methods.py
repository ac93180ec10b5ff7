"""HTTP methods and the per-pattern method table.

A route holds one handler per method plus an optional method-agnostic
handler (stored under ``None``). Lookup order for a request method:

1. a handler registered for exactly that method
2. for HEAD, the GET handler
3. the method-agnostic handler
"""

from dataclasses import replace
from enum import StrEnum

from muxr._internal.types import RouteHandler
from muxr.routing.pattern import Pattern
from muxr.routing.route import Route


class Method(StrEnum):
    """The standard HTTP request methods a route can be registered for."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"

    @classmethod
    def parse(cls, name: str) -> "Method | None":
        """Return the member for *name* (any case), or ``None`` if unknown."""
        try:
            return cls(name.upper())
        except ValueError:
            return None


def select_handler(
    handlers: dict[Method | None, RouteHandler],
    method: Method | None,
) -> RouteHandler | None:
    """Pick the handler serving *method*, applying the GET-implies-HEAD rule.

    ``method=None`` stands for a verb outside ``Method``; only a
    method-agnostic handler can serve it.
    """
    if method is not None:
        handler = handlers.get(method)
        if handler is not None:
            return handler
        if method is Method.HEAD and Method.GET in handlers:
            return handlers[Method.GET]
    return handlers.get(None)


def allowed_methods(handlers: dict[Method | None, RouteHandler]) -> frozenset[str]:
    """Method names a route answers, for the ``Allow`` header."""
    if None in handlers:
        return frozenset(str(method) for method in Method)
    allowed = {str(method) for method in handlers if method is not None}
    if Method.GET in handlers:
        allowed.add(str(Method.HEAD))
    return frozenset(allowed)


class MethodTable:
    """Routes of one router, keyed by pattern, in registration order.

    Usage::

        table = MethodTable()
        table.register(Method.GET, parse_pattern("/users"), list_users)
        table.register(Method.POST, parse_pattern("/users"), create_user)
        table.lookup(Method.HEAD, "/users")  # -> list_users
    """

    __slots__ = ("_routes",)

    def __init__(self) -> None:
        self._routes: dict[str, Route] = {}

    def __len__(self) -> int:
        return len(self._routes)

    def register(self, method: Method | None, pattern: Pattern, handler: RouteHandler) -> Route:
        """Bind *handler* to *method* on *pattern*; ``None`` binds every method.

        Registering the same pair again replaces only that handler.
        """
        existing = self._routes.get(pattern.raw)
        if existing is None:
            route = Route(pattern=pattern, handlers={method: handler}, index=len(self._routes))
        else:
            route = replace(existing, handlers={**existing.handlers, method: handler})
        self._routes[pattern.raw] = route
        return route

    def lookup(self, method: Method | None, pattern: Pattern | str) -> RouteHandler | None:
        """Handler serving *method* on *pattern*, or ``None``."""
        route = self._routes.get(str(pattern))
        if route is None:
            return None
        return select_handler(route.handlers, method)

    def allowed(self, pattern: Pattern | str) -> frozenset[str]:
        """Methods accepted on *pattern* (empty if it is not registered)."""
        route = self._routes.get(str(pattern))
        if route is None:
            return frozenset()
        return allowed_methods(route.handlers)

    @property
    def routes(self) -> tuple[Route, ...]:
        """All routes in registration order."""
        return tuple(self._routes.values())
