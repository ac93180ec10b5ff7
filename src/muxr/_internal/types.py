"""Shared type aliases used across muxr modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: a user function taking a Request, sync or async,
# returning anything negotiate() understands
RouteHandler: TypeAlias = Callable[..., Any]
