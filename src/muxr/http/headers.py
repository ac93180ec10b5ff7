"""Request headers keyed by lower-cased name.

The ASGI scope delivers headers as ``(bytes, bytes)`` pairs; they are
decoded once, when the request is built, and never change afterwards.
"""

from collections.abc import Iterator, Mapping


class Headers(Mapping[str, str]):
    """Read-only view of request headers. Lookups ignore case.

    ``headers["accept"]`` is the first value sent; ``get_list`` has them all.
    """

    __slots__ = ("_values",)

    def __init__(self, pairs: tuple[tuple[bytes, bytes], ...] = ()) -> None:
        values: dict[str, list[str]] = {}
        for name, value in pairs:
            values.setdefault(name.decode("latin-1").lower(), []).append(value.decode("latin-1"))
        self._values = values

    @classmethod
    def of(cls, headers: Mapping[str, str] | None = None) -> "Headers":
        """Headers from plain strings, as handlers and tests write them."""
        return cls(
            tuple((k.encode("latin-1"), v.encode("latin-1")) for k, v in (headers or {}).items())
        )

    def __getitem__(self, name: str) -> str:
        return self._values[name.lower()][0]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and name.lower() in self._values

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"Headers({dict(self)!r})"

    def get_list(self, name: str) -> list[str]:
        return list(self._values.get(name.lower(), ()))
