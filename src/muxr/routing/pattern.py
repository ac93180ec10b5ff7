"""Route patterns — parsing, matching, and specificity.

Pattern grammar::

    /users              literal segments
    /users/{id}         wildcard: exactly one non-empty segment, captured
    /files/{path...}    remainder: one or more trailing segments, captured
    /static/            trailing slash: directory, also matches anything below
    /hello/{$}          strict end: nothing may follow

A single trailing slash on the *request* is never significant: ``/hello``
and ``/hello/`` match the same patterns. Directory patterns are the only
ones that reach deeper paths, and they do so as the least specific match.

Specificity is a rank tuple with one weight per request segment recording
what consumed it (see ``SegmentKind``). Ranks for the same path always
have the same length, so plain tuple comparison orders competing patterns:
literals beat wildcards at the same position, a longer literal prefix
beats a shorter one, and remainder/directory matches only win when
nothing more specific matched. At equal rank a directory pattern loses to
one with a closed end, since it matches a superset of paths.
"""

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum, IntEnum

from muxr.errors import PatternError

STRICT_END = "{$}"

_NAME = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")


class SegmentKind(IntEnum):
    """What consumed a request segment. The value is its specificity weight."""

    PREFIX = 0  # open end of a directory pattern
    REMAINDER = 1
    WILDCARD = 2
    LITERAL = 3


class SlashMode(Enum):
    """How a pattern ends."""

    NONE = "none"
    TRAILING = "trailing"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class Segment:
    """One parsed pattern segment.

    Literal:   ``users``      (kind=LITERAL, value="users")
    Wildcard:  ``{id}``       (kind=WILDCARD, value="id")
    Remainder: ``{path...}``  (kind=REMAINDER, value="path")
    """

    kind: SegmentKind
    value: str


@dataclass(frozen=True, slots=True)
class PatternMatch:
    """Result of matching a pattern against a request path."""

    params: dict[str, str]
    rank: tuple[int, ...]


@dataclass(frozen=True, slots=True)
class Pattern:
    """A parsed route pattern. Build with ``parse_pattern()``."""

    raw: str
    segments: tuple[Segment, ...]
    mode: SlashMode

    def __str__(self) -> str:
        return self.raw

    @property
    def is_directory(self) -> bool:
        """True when the pattern ends in ``/`` and so also reaches deeper paths."""
        return self.mode is SlashMode.TRAILING

    @property
    def is_catch_all(self) -> bool:
        """True for ``/``, which matches every path."""
        return not self.segments and self.mode is SlashMode.TRAILING

    def match(self, path: str) -> PatternMatch | None:
        """Match a raw request path. ``None`` means no match."""
        return self.match_segments(split_path(path))

    def match_segments(self, parts: Sequence[str]) -> PatternMatch | None:
        """Match already-split request segments (see ``split_path``)."""
        params: dict[str, str] = {}
        rank: list[int] = []
        index = 0

        for segment in self.segments:
            if segment.kind is SegmentKind.REMAINDER:
                rest = parts[index:]
                if not rest:
                    return None
                params[segment.value] = "/".join(rest)
                rank.extend([SegmentKind.REMAINDER.value] * len(rest))
                index = len(parts)
                break

            if index >= len(parts):
                return None
            part = parts[index]
            if segment.kind is SegmentKind.LITERAL:
                if part != segment.value:
                    return None
            elif not part:
                return None
            else:
                params[segment.value] = part
            rank.append(segment.kind.value)
            index += 1

        leftover = len(parts) - index
        if leftover:
            if self.mode is not SlashMode.TRAILING:
                return None
            rank.extend([SegmentKind.PREFIX.value] * leftover)

        return PatternMatch(params=params, rank=tuple(rank))

    def covers(self, parts: Sequence[str]) -> bool:
        """Whether *parts* could fall under this pattern used as a prefix.

        Only the pattern's segments are checked; how it ends is ignored.
        Mounts use this to skip children that cannot match.
        """
        for index, segment in enumerate(self.segments):
            if segment.kind is SegmentKind.REMAINDER:
                return index < len(parts)
            if index >= len(parts):
                return False
            if segment.kind is SegmentKind.LITERAL and parts[index] != segment.value:
                return False
            if segment.kind is SegmentKind.WILDCARD and not parts[index]:
                return False
        return True


def split_path(path: str) -> list[str]:
    """Split a request path into segments the way patterns are split.

    A single trailing slash is dropped; empty interior segments are kept
    (a wildcard never matches them)::

        "/"             -> []
        "/hello/"       -> ["hello"]
        "/a//b"         -> ["a", "", "b"]
    """
    body = path[1:] if path.startswith("/") else path
    if body.endswith("/"):
        body = body[:-1]
    if not body:
        return []
    return body.split("/")


def parse_pattern(raw: str) -> Pattern:
    """Parse a route pattern string.

    Raises ``PatternError`` for anything that could never match
    sensibly, so bad patterns fail at registration rather than per request.

    Examples::

        "/"                 -> (), TRAILING
        "/users/{id}"       -> (LITERAL users, WILDCARD id), NONE
        "/files/{path...}"  -> (LITERAL files, REMAINDER path), NONE
        "/hello/{$}"        -> (LITERAL hello,), STRICT
    """
    if not raw.startswith("/"):
        raise PatternError(raw, "must start with '/'")

    pieces = raw[1:].split("/")
    mode = SlashMode.NONE
    if pieces[-1] == "":
        mode = SlashMode.TRAILING
        pieces.pop()
    elif pieces[-1] == STRICT_END:
        mode = SlashMode.STRICT
        pieces.pop()

    segments: list[Segment] = []
    seen: set[str] = set()
    last = len(pieces) - 1

    for index, piece in enumerate(pieces):
        if not piece:
            raise PatternError(raw, "empty path segment")
        if piece == STRICT_END:
            raise PatternError(raw, f"{STRICT_END} is only allowed as the final segment")

        if piece.startswith("{") and piece.endswith("}"):
            inner = piece[1:-1]
            kind = SegmentKind.WILDCARD
            if inner.endswith("..."):
                kind = SegmentKind.REMAINDER
                inner = inner[:-3]
            if not _NAME.fullmatch(inner):
                raise PatternError(raw, f"bad wildcard name {inner!r}")
            if inner in seen:
                raise PatternError(raw, f"duplicate wildcard name {inner!r}")
            if kind is SegmentKind.REMAINDER and index != last:
                raise PatternError(raw, f"{{{inner}...}} must be the final segment")
            seen.add(inner)
            segments.append(Segment(kind=kind, value=inner))
        elif "{" in piece or "}" in piece:
            raise PatternError(raw, f"wildcard {piece!r} must span a whole segment")
        else:
            segments.append(Segment(kind=SegmentKind.LITERAL, value=piece))

    if segments and segments[-1].kind is SegmentKind.REMAINDER and mode is not SlashMode.NONE:
        raise PatternError(raw, "nothing may follow a remainder wildcard")

    return Pattern(raw=raw, segments=tuple(segments), mode=mode)
