"""Router — route registration, mounting, and dispatch.

Routes, middleware, and mounts are registered during setup. The first
dispatch freezes the router (and every router mounted under it) into
tuples, after which any number of requests may be resolved concurrently.

Resolution evaluates every pattern of every router the request could
reach and keeps the single most specific one; mounted routers see the
original, unmodified path.
"""

import logging
import threading
from dataclasses import dataclass, replace
from typing import Any, Protocol, runtime_checkable

from muxr._internal.asgi import Receive, Scope, Send
from muxr._internal.invoke import invoke
from muxr._internal.types import RouteHandler
from muxr.config import RouterConfig
from muxr.errors import ConfigurationError, MethodNotAllowed, NotFound
from muxr.http.request import Request
from muxr.http.response import Response
from muxr.middleware.chain import MiddlewareChain
from muxr.middleware.protocol import Handler, Middleware
from muxr.routing.methods import Method, MethodTable, allowed_methods, select_handler
from muxr.routing.pattern import Pattern, SlashMode, parse_pattern, split_path
from muxr.routing.route import Route, RouteMatch
from muxr.server.errors import http_error_response
from muxr.server.handler import handle_request
from muxr.server.negotiation import negotiate

logger = logging.getLogger("muxr.routing")


@runtime_checkable
class Servable(Protocol):
    """Anything a router can mount: it serves a request, returning a response."""

    async def serve(self, request: Request) -> Response: ...


@dataclass(frozen=True, slots=True)
class _Mount:
    """A child attached under a prefix pattern."""

    prefix: Pattern
    child: Any  # Router or Servable
    index: int

    def as_route(self) -> Route:
        """Opaque children behave like a method-agnostic directory route."""
        pattern = replace(self.prefix, mode=SlashMode.TRAILING)
        return Route(pattern=pattern, handlers={None: self.child.serve}, index=self.index)


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of resolving one request.

    ``match`` is the winner for the request's method. ``path_match`` is the
    most specific pattern for the path regardless of method; together with
    ``allowed`` it drives 405 responses when ``match`` is ``None``.
    """

    match: RouteMatch | None
    path_match: RouteMatch | None
    allowed: frozenset[str]


class _Selection:
    """Per-request accumulator that keeps the best candidates seen so far."""

    __slots__ = ("allowed", "best", "best_key", "path_best", "path_key")

    def __init__(self) -> None:
        self.best: RouteMatch | None = None
        self.best_key: tuple[Any, ...] | None = None
        self.path_best: RouteMatch | None = None
        self.path_key: tuple[Any, ...] | None = None
        self.allowed: set[str] = set()

    def offer(
        self,
        route: Route,
        handler: RouteHandler | None,
        params: dict[str, str],
        rank: tuple[int, ...],
        routers: tuple["Router", ...],
        hops: int,
        order: tuple[int, ...],
    ) -> None:
        # Highest rank wins; then a closed end over a directory; then fewer
        # mount hops; then earlier registration.
        key = (rank, not route.pattern.is_directory, -hops, tuple(-i for i in order))
        self.allowed |= allowed_methods(route.handlers)

        if self.path_key is None or key > self.path_key:
            self.path_key = key
            self.path_best = RouteMatch(
                route=route, handler=handler, path_params=params, routers=routers
            )

        if handler is not None and (self.best_key is None or key > self.best_key):
            self.best_key = key
            self.best = RouteMatch(route=route, handler=handler, path_params=params, routers=routers)


def _endpoint(handler: RouteHandler) -> Handler:
    """Turn a user handler (sync or async, any return value) into a Handler."""

    async def endpoint(request: Request) -> Response:
        return negotiate(await invoke(handler, request))

    return endpoint


def _compose(routers: tuple["Router", ...], terminal: Handler) -> Handler:
    """Wrap *terminal* in each router's middleware, outermost router first."""
    handler = terminal
    for router in reversed(routers):
        handler = router._chain.compose(handler)
    return handler


class Router:
    """Pattern-matching request router.

    Usage::

        router = Router()
        router.use(auth)
        router.get("/users/{id}", show_user)
        router.post("/users", create_user)

        admin = Router()
        admin.get("/admin/{page...}", admin_page)
        router.mount("/admin", admin)

        response = await router.serve(request)
    """

    __slots__ = (
        "_chain",
        "_freeze_lock",
        "_frozen",
        "_method_not_allowed",
        "_mount_table",
        "_mounts",
        "_not_found",
        "_parent",
        "_routes",
        "_table",
        "config",
    )

    def __init__(self, config: RouterConfig | None = None) -> None:
        self.config: RouterConfig = config or RouterConfig()
        self._table = MethodTable()
        self._chain = MiddlewareChain()
        self._mounts: list[_Mount] = []
        self._not_found: RouteHandler | None = None
        self._method_not_allowed: RouteHandler | None = None
        self._parent: Router | None = None
        self._frozen = False
        self._freeze_lock = threading.Lock()

        # Compiled state, set during _freeze()
        self._routes: tuple[Route, ...] = ()
        self._mount_table: tuple[_Mount, ...] = ()

    # -- Route registration --

    def on(self, method: str, pattern: str, handler: RouteHandler | None = None) -> Any:
        """Register *handler* for one HTTP method.

        Without *handler*, returns a decorator::

            @router.on("PATCH", "/users/{id}")
            async def update_user(request): ...
        """
        verb = Method.parse(method)
        if verb is None:
            msg = f"Unsupported HTTP method {method!r}. Use one of: {', '.join(Method)}"
            raise ConfigurationError(msg)
        return self._register(verb, pattern, handler)

    def handle(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        """Register *handler* for every HTTP method, including unknown verbs."""
        return self._register(None, pattern, handler)

    def get(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        """Register a GET handler (also serves HEAD unless one is registered)."""
        return self._register(Method.GET, pattern, handler)

    def head(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.HEAD, pattern, handler)

    def post(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.POST, pattern, handler)

    def put(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.PUT, pattern, handler)

    def patch(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.PATCH, pattern, handler)

    def delete(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.DELETE, pattern, handler)

    def connect(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.CONNECT, pattern, handler)

    def options(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.OPTIONS, pattern, handler)

    def trace(self, pattern: str, handler: RouteHandler | None = None) -> Any:
        return self._register(Method.TRACE, pattern, handler)

    def _register(
        self,
        method: Method | None,
        pattern: str,
        handler: RouteHandler | None,
    ) -> Any:
        if handler is None:

            def decorator(func: RouteHandler) -> RouteHandler:
                self._add(method, pattern, func)
                return func

            return decorator

        self._add(method, pattern, handler)
        return handler

    def _add(self, method: Method | None, pattern: str, handler: RouteHandler) -> None:
        self._check_not_frozen()
        if not callable(handler):
            msg = f"Handler for {pattern!r} must be callable, got {type(handler).__name__}"
            raise ConfigurationError(msg)
        parsed = parse_pattern(pattern)
        self._table.register(method, parsed, handler)
        logger.debug("Registered %s %s", method or "*", pattern)

    # -- Middleware --

    def use(self, *middleware: Middleware) -> None:
        """Append middleware; it wraps every route of this router and its mounts."""
        self._check_not_frozen()
        self._chain.use(*middleware)

    # -- Mounting --

    def mount(self, prefix: str, child: "Router | Servable") -> None:
        """Attach *child* so its routes take part in this router's dispatch.

        The path is not rewritten: *child* matches against the full
        request path, and *prefix* only decides whether it is consulted.
        A mounted Router belongs to this router and cannot be mounted again.
        """
        self._check_not_frozen()
        parsed = parse_pattern(prefix)

        if isinstance(child, Router):
            if child is self or any(child is ancestor for ancestor in self._ancestors()):
                msg = f"Mounting at {prefix!r} would create a cycle"
                raise ConfigurationError(msg)
            if child._parent is not None:
                msg = f"Router mounted at {prefix!r} is already mounted elsewhere"
                raise ConfigurationError(msg)
            child._parent = self
        elif not isinstance(child, Servable):
            msg = (
                f"Cannot mount {type(child).__name__} at {prefix!r}: "
                f"expected a Router or an object with an async serve(request) method"
            )
            raise ConfigurationError(msg)

        self._mounts.append(_Mount(prefix=parsed, child=child, index=len(self._mounts)))
        logger.debug("Mounted %s at %s", type(child).__name__, prefix)

    # -- Fallbacks --

    def not_found(self, handler: RouteHandler) -> RouteHandler:
        """Set the handler used when nothing matches the path.

        Only the serving router's handler is used. Usable as a decorator.
        """
        self._check_not_frozen()
        self._not_found = handler
        return handler

    def method_not_allowed(self, handler: RouteHandler) -> RouteHandler:
        """Set the handler used when a pattern matches but no method does.

        The router owning the most specific path match (or its nearest
        ancestor with a handler) answers. Usable as a decorator.
        """
        self._check_not_frozen()
        self._method_not_allowed = handler
        return handler

    # -- Introspection --

    @property
    def routes(self) -> list[Route]:
        """Every route reachable from this router, own routes first.

        Opaque mounts appear as method-agnostic directory routes.
        """
        result: list[Route] = list(self._table.routes)
        for mount in self._mounts:
            if isinstance(mount.child, Router):
                result.extend(mount.child.routes)
            else:
                result.append(mount.as_route())
        return result

    # -- Dispatch --

    def resolve(self, method: str, path: str) -> Resolution:
        """Pick the most specific route for *method* and *path*.

        Pure: nothing about the router changes, and the same input always
        resolves to the same route.
        """
        self._ensure_frozen()
        selection = _Selection()
        self._collect(Method.parse(method), split_path(path), selection, (), ())
        return Resolution(
            match=selection.best,
            path_match=selection.path_best,
            allowed=frozenset(selection.allowed),
        )

    def _collect(
        self,
        method: Method | None,
        parts: list[str],
        selection: _Selection,
        routers: tuple["Router", ...],
        order: tuple[int, ...],
    ) -> None:
        hops = len(routers)
        routers = (*routers, self)

        for route in self._routes:
            found = route.pattern.match_segments(parts)
            if found is None:
                continue
            handler = select_handler(route.handlers, method)
            selection.offer(
                route, handler, found.params, found.rank, routers, hops, (*order, route.index)
            )

        for mount in self._mount_table:
            if not mount.prefix.covers(parts):
                continue
            if isinstance(mount.child, Router):
                mount.child._collect(method, parts, selection, routers, (*order, mount.index))
                continue
            route = mount.as_route()
            found = route.pattern.match_segments(parts)
            if found is not None:
                selection.offer(
                    route,
                    mount.child.serve,
                    found.params,
                    found.rank,
                    routers,
                    hops + 1,
                    (*order, mount.index),
                )

    def match(self, method: str, path: str) -> RouteMatch:
        """Resolve and return the winning match.

        Raises ``NotFound`` if no pattern matches the path.
        Raises ``MethodNotAllowed`` if patterns match but none for *method*.
        """
        resolution = self.resolve(method, path)
        if resolution.match is not None:
            return resolution.match
        if resolution.path_match is not None and self.config.handle_method_not_allowed:
            raise MethodNotAllowed(resolution.allowed)
        raise NotFound(f"No route matches {method} {path!r}")

    async def serve(self, request: Request) -> Response:
        """Dispatch *request* through middleware to the winning handler.

        Handler and middleware exceptions propagate to the caller.
        """
        resolution = self.resolve(request.method, request.path)

        if resolution.match is not None:
            found = resolution.match
            handler = _compose(found.routers, _endpoint(found.handler))
            return await handler(request.with_path_params(found.path_params))

        if resolution.path_match is not None and self.config.handle_method_not_allowed:
            return await self._serve_method_not_allowed(
                request, resolution.path_match, resolution.allowed
            )

        handler = _compose((self,), self._not_found_handler())
        return await handler(request)

    def _not_found_handler(self) -> Handler:
        if self._not_found is not None:
            return _endpoint(self._not_found)

        content_type = self.config.default_content_type

        async def not_found(request: Request) -> Response:
            return http_error_response(NotFound(), content_type=content_type)

        return not_found

    async def _serve_method_not_allowed(
        self, request: Request, path_match: RouteMatch, allowed: frozenset[str]
    ) -> Response:
        routers = path_match.routers
        allow_value = ", ".join(sorted(allowed))

        custom = next(
            (r._method_not_allowed for r in reversed(routers) if r._method_not_allowed is not None),
            None,
        )
        if custom is not None:
            handler = _compose(routers, _endpoint(custom))
            response = await handler(request)
            if response.header("Allow") is None:
                response = response.with_header("Allow", allow_value)
            return response

        content_type = self.config.default_content_type

        async def method_not_allowed(request: Request) -> Response:
            return http_error_response(MethodNotAllowed(allowed), content_type=content_type)

        return await _compose(routers, method_not_allowed)(request)

    # -- ASGI interface --

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        await handle_request(scope, receive, send, router=self, config=self.config)

    # -- Internal --

    def _ancestors(self) -> list["Router"]:
        chain: list[Router] = []
        node = self._parent
        while node is not None:
            chain.append(node)
            node = node._parent
        return chain

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Router is frozen: routes, middleware, and mounts must be added before serving."
            raise ConfigurationError(msg)

    def _ensure_frozen(self) -> None:
        """Thread-safe freeze with double-check locking.

        Concurrent first requests may race here; exactly one thread compiles.
        """
        if self._frozen:
            return
        with self._freeze_lock:
            if self._frozen:
                return
            self._freeze()

    def _freeze(self) -> None:
        """Compile registrations into tuples. MUST hold _freeze_lock."""
        self._routes = self._table.routes
        self._mount_table = tuple(self._mounts)
        for mount in self._mount_table:
            if isinstance(mount.child, Router):
                mount.child._ensure_frozen()
        self._frozen = True
        logger.debug(
            "Router frozen: %d routes, %d middleware, %d mounts",
            len(self._routes),
            len(self._chain),
            len(self._mount_table),
        )
