"""
Clipboard backends for the disclosure workflow.

``SystemClipboard`` pipes text into the platform's copy tool when one is on
PATH. When none is, ``SelectableFallback`` shows the value in a transient
console panel so it can be selected by hand.
"""

from __future__ import annotations

import shutil
import subprocess
from typing import Protocol

from rich.console import Console
from rich.panel import Panel

# Tried in order; the first tool found on PATH wins.
COPY_COMMANDS: list[list[str]] = [
    ["pbcopy"],
    ["wl-copy"],
    ["xclip", "-selection", "clipboard"],
    ["xsel", "--clipboard", "--input"],
    ["clip"],
]


class ClipboardError(RuntimeError):
    """Copying failed."""


class ClipboardUnavailable(ClipboardError):
    """No platform clipboard could be used."""


class Clipboard(Protocol):
    def copy(self, text: str) -> None:
        ...


class SystemClipboard:
    def __init__(self, commands: list[list[str]] | None = None, timeout: float = 5.0) -> None:
        self._commands = commands if commands is not None else COPY_COMMANDS
        self._timeout = timeout

    def command(self) -> list[str] | None:
        for command in self._commands:
            if shutil.which(command[0]):
                return command
        return None

    def copy(self, text: str) -> None:
        command = self.command()
        if command is None:
            raise ClipboardUnavailable("no clipboard tool found on PATH")
        try:
            subprocess.run(
                command,
                input=text,
                text=True,
                check=True,
                capture_output=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.SubprocessError) as exc:
            raise ClipboardUnavailable(f"{command[0]} failed: {exc}") from exc


class SelectableFallback:
    """Shows the value once, in a panel that can be selected and copied manually."""

    def __init__(self, console: Console | None = None) -> None:
        self._console = console or Console(stderr=True)

    def copy(self, text: str) -> None:
        try:
            self._console.print(
                Panel(text, title="Select to copy", border_style="cyan", expand=False)
            )
        except OSError as exc:
            raise ClipboardError(str(exc)) from exc
