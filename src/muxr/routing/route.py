"""Route and RouteMatch frozen dataclasses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from muxr._internal.types import RouteHandler
from muxr.routing.pattern import Pattern

if TYPE_CHECKING:
    from muxr.routing.methods import Method
    from muxr.routing.router import Router


@dataclass(frozen=True, slots=True)
class Route:
    """A pattern and the handlers registered on it.

    ``handlers`` is keyed by method; the ``None`` key holds the
    method-agnostic handler. Re-registration produces a new Route
    with the same ``index``.
    """

    pattern: Pattern
    handlers: dict[Method | None, RouteHandler]
    index: int

    @property
    def path(self) -> str:
        """The pattern string as registered."""
        return self.pattern.raw


@dataclass(frozen=True, slots=True)
class RouteMatch:
    """Result of a successful dispatch decision.

    ``routers`` runs from the router that resolved the request down to
    the one owning ``route``; their middleware wraps ``handler`` in that order.
    ``handler`` is ``None`` only for path matches that lack the request's method.
    """

    route: Route
    handler: RouteHandler | None
    path_params: dict[str, str]
    routers: tuple[Router, ...]
