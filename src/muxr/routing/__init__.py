"""Routing — pattern parsing, per-method tables, and the Router.

Routes are registered during setup and frozen on first dispatch.
"""

from muxr.routing.methods import Method, MethodTable
from muxr.routing.pattern import Pattern, PatternMatch, parse_pattern, split_path
from muxr.routing.route import Route, RouteMatch
from muxr.routing.router import Resolution, Router, Servable

__all__ = [
    "Method",
    "MethodTable",
    "Pattern",
    "PatternMatch",
    "Resolution",
    "Route",
    "RouteMatch",
    "Router",
    "Servable",
    "parse_pattern",
    "split_path",
]
