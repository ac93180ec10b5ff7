"""Router configuration.

RouterConfig is a frozen dataclass: set once when the router is built,
read on every request.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RouterConfig:
    """Router configuration. Immutable after creation.

    Only the serving (root) router's config is consulted; mounted children
    inherit its behavior::

        router = Router(config=RouterConfig(debug=True))
    """

    # Include tracebacks in 500 responses produced by the ASGI handler
    debug: bool = False

    # False turns "method not allowed" outcomes into plain 404s
    handle_method_not_allowed: bool = True

    # Content type of the built-in 404/405/500 bodies
    default_content_type: str = "text/plain; charset=utf-8"
