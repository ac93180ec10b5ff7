"""``muxr routes`` — list registered routes.

Resolves an import string to a Router and prints every route it can
reach, mounted routers included, with method, pattern, and handler.
"""

import argparse
import sys

from muxr.cli._resolve import resolve_router


def _handler_name(handler: object) -> str:
    qualname = getattr(handler, "__qualname__", None)
    return qualname or getattr(handler, "__name__", None) or repr(handler)


def run_routes(args: argparse.Namespace) -> None:
    """Print a table of METHOD, PATTERN, and HANDLER for ``args.router``."""
    try:
        router = resolve_router(args.router)
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    routes = router.routes
    if not routes:
        print("No routes registered.")
        return

    rows: list[tuple[str, str, str]] = []
    for route in routes:
        for method, handler in route.handlers.items():
            label = "*" if method is None else str(method)
            rows.append((label, route.path, _handler_name(handler)))

    max_method = max(max(len(r[0]) for r in rows), 6)  # "METHOD" header
    max_path = max(max(len(r[1]) for r in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{max_method}}}  {{:<{max_path}}}  {{}}"
    print(fmt.format("METHOD", "PATTERN", "HANDLER"))
    sep_len = max_method + max_path + 4 + max(len(r[2]) for r in rows)
    print("-" * min(sep_len, 80))
    for method, path, handler_name in rows:
        print(fmt.format(method, path, handler_name))
