"""rich-backed output for the snapid CLI.

Identifiers are untrusted, so every line is built as a ``rich.text.Text``:
bracketed input is printed literally instead of being read as console markup,
and characters the terminal cannot encode (such as surrogate-escaped argv
bytes) are shown as backslash escapes.
"""

from __future__ import annotations

import os
from typing import TYPE_CHECKING

from rich.console import Console
from rich.text import Text

if TYPE_CHECKING:
    from collections.abc import Sequence
    from typing import TextIO


def _color_allowed(no_color_flag: bool) -> bool:
    """Check whether color output should be attempted."""

    if no_color_flag:
        return False
    return not os.environ.get("NO_COLOR", "")


def _displayable(value: object) -> str:
    # Lone surrogates cannot be written to a strict UTF-8 stream.
    return str(value).encode("utf-8", errors="backslashreplace").decode("utf-8")


class CLIRenderer:
    """Thin CLI output renderer.

    Produces deterministic plain text when stdout is not a terminal.
    """

    def __init__(
        self,
        *,
        no_color: bool = False,
        verbose: bool = False,
        file: TextIO | None = None,
    ) -> None:
        self.verbose = verbose
        self._console = Console(
            file=file,
            no_color=not _color_allowed(no_color),
            highlight=False,
            soft_wrap=True,
            emoji=False,
        )

    def kv(self, key: str, value: object) -> None:
        line = Text(f"{_displayable(key)}: ")
        line.append(_displayable(value))
        self._console.print(line)

    def text(self, line: str) -> None:
        self._console.print(Text(_displayable(line)))

    def items(self, entries: Sequence[str], *, prefix: str = "- ") -> None:
        """Print a bulleted list."""

        for entry in entries:
            self._console.print(Text(f"  {prefix}{_displayable(entry)}"))

    def ok(self, label: str, detail: str | None = None) -> None:
        """Print a passing check."""

        line = Text("  OK    ", style="green")
        line.append(_displayable(label))
        if detail:
            line.append(f"  {_displayable(detail)}", style="dim")
        self._console.print(line)

    def fail(self, label: str, detail: str | None = None) -> None:
        """Print a failing check."""

        line = Text("  FAIL  ", style="bold red")
        line.append(_displayable(label))
        if detail:
            line.append(f"  {_displayable(detail)}")
        self._console.print(line)


def create_renderer(*, no_color: bool = False, verbose: bool = False) -> CLIRenderer:
    """Create a CLI renderer with the given settings."""

    return CLIRenderer(no_color=no_color, verbose=verbose)


__all__ = ["CLIRenderer", "create_renderer"]
