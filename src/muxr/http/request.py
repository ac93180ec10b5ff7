"""The request a handler receives.

The router reads ``method`` and ``path`` and fills ``path_params``; the
rest is carried through untouched. The body is pulled from the ASGI
``receive`` channel only if a handler or middleware asks for it.
"""

from __future__ import annotations

import json as json_module
from dataclasses import dataclass, field, replace
from typing import Any

from muxr._internal.asgi import Message, Receive, Scope
from muxr.http.headers import Headers


async def _no_body() -> Message:
    return {"type": "http.request", "body": b"", "more_body": False}


@dataclass(frozen=True, slots=True)
class Request:
    """An incoming HTTP request. Frozen; ``with_path_params`` makes bound copies."""

    method: str
    path: str
    headers: Headers = field(default_factory=Headers)
    path_params: dict[str, str] = field(default_factory=dict)
    query_string: bytes = b""

    _receive: Receive = _no_body

    # Body read so far, shared between a request and its bound copies
    _cache: dict[str, bytes] = field(default_factory=dict, repr=False, compare=False)

    def with_path_params(self, path_params: dict[str, str]) -> Request:
        """Copy carrying the parameters a matched pattern captured."""
        return replace(self, path_params=path_params, _cache=self._cache)

    async def body(self) -> bytes:
        """The whole body. The receive channel is drained once."""
        if "body" not in self._cache:
            chunks: list[bytes] = []
            more = True
            while more:
                message = await self._receive()
                chunks.append(message.get("body", b""))
                more = message.get("more_body", False)
            self._cache["body"] = b"".join(chunks)
        return self._cache["body"]

    async def text(self) -> str:
        return (await self.body()).decode("utf-8")

    async def json(self) -> Any:
        return json_module.loads(await self.body())

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Build a request from an ASGI ``http`` scope."""
        return cls(
            method=scope["method"],
            path=scope["path"],
            headers=Headers(tuple(scope.get("headers", ()))),
            query_string=scope.get("query_string", b""),
            _receive=receive,
        )
