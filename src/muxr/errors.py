"""muxr exception hierarchy.

Shared across the pattern parser, Router, and ASGI handler so every module
raises and catches the same types.
"""

from dataclasses import dataclass


class MuxrError(Exception):
    """Base for all muxr-specific errors."""


class ConfigurationError(MuxrError):
    """Raised when a router is set up incorrectly.

    Registration-time problems surface immediately: a route added after
    serving began, a router mounted twice, a middleware that is not callable.
    """


class PatternError(ConfigurationError):
    """A route pattern string is malformed.

    Carries the offending pattern so the message can point at it.
    """

    def __init__(self, pattern: str, reason: str) -> None:
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid route pattern {pattern!r}: {reason}")


@dataclass(frozen=True, slots=True)
class HTTPError(MuxrError):
    """An error that maps directly to an HTTP status code.

    Handlers and middleware may raise these; the ASGI handler turns them
    into a response with the same status.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class NotFound(HTTPError):  # noqa: N818
    """404: no pattern matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: a pattern matched the path but not the HTTP method.

    Includes an ``Allow`` header listing the valid methods and embeds
    them in the detail string.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        default_detail = f"Method not allowed. Allowed methods: {allow_value}"
        super().__init__(
            status=405,
            detail=detail or default_detail,
            headers=(("Allow", allow_value),),
        )
