"""Allow ``python -m muxr``."""

from muxr.cli import main

main()
