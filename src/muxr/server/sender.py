"""Writes a Response to an ASGI ``send`` channel as start + body messages."""

from muxr._internal.asgi import Send
from muxr.http.response import Response

# Statuses that never carry a body (informational, No Content, Not Modified)
_BODYLESS = frozenset({204, 304})


def _latin1(*pair: str) -> tuple[bytes, ...]:
    return tuple(part.encode("latin-1") for part in pair)


async def send_response(response: Response, send: Send) -> None:
    """Emit *response*; header names go out lower-cased, content-type first."""
    status = response.status
    payload = b"" if status < 200 or status in _BODYLESS else response.body_bytes

    headers = [
        _latin1("content-type", response.content_type),
        *(_latin1(name.lower(), value) for name, value in response.headers),
        _latin1("content-length", str(len(payload))),
    ]
    await send({"type": "http.response.start", "status": status, "headers": headers})
    await send({"type": "http.response.body", "body": payload})
