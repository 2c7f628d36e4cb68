"""Module entrypoint for ``python -m snapid``."""

from __future__ import annotations

from snapid.main import cli_entrypoint

if __name__ == "__main__":
    raise SystemExit(cli_entrypoint())
