"""Process-terminating diagnostics for programmer-contract violations."""

from __future__ import annotations

import logging
import sys
from typing import Final, NoReturn

FATAL_EXIT_STATUS: Final[int] = 1

_LOGGER = logging.getLogger(__name__)


def die(message: str) -> NoReturn:
    """Write ``message`` to stderr and terminate the calling process.

    Raises ``SystemExit`` rather than returning, so the failure cannot be
    mistaken for a recoverable validation error by ``except Exception`` handlers.
    """

    text = message.rstrip("\n") if isinstance(message, str) else repr(message)
    _LOGGER.debug("fatal: %s", text)
    sys.stderr.write(text + "\n")
    sys.stderr.flush()
    raise SystemExit(FATAL_EXIT_STATUS)


__all__ = ["FATAL_EXIT_STATUS", "die"]
