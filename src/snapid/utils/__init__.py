"""Shared low-level helpers."""

from snapid.utils.fatal import FATAL_EXIT_STATUS, die

__all__ = ["FATAL_EXIT_STATUS", "die"]
