"""
proctree exceptions: a base ProcTreeError plus the command failures the
termination protocol tells apart. All of them render nicely through Rich.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from rich.console import Console, ConsoleOptions, RenderResult
from rich.panel import Panel
from rich.text import Text

__all__ = [
    "ProcTreeError",
    "CommandError",
    "ExitCodeError",
    "CommandInvocationError",
]


class ProcTreeError(Exception):
    """Base proctree exception."""

    def _rich_title(self) -> str:
        return type(self).__name__

    def _rich_body(self) -> Text:
        return Text(str(self))

    # Pretty rendering when printed via Rich Console
    def __rich_console__(self, console: Console, options: ConsoleOptions) -> RenderResult:
        _ = console
        _ = options
        yield Panel(self._rich_body(), title=self._rich_title(), title_align="left", border_style="red")


@dataclass(slots=True, eq=False)
class CommandError(ProcTreeError):
    """
    An external command failed. `argv` is the vector that was executed, kept so
    log records can name the exact invocation.
    """

    argv: Sequence[str]
    message: str

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        return f"{self.message}: {' '.join(self.argv)}"

    def _rich_body(self) -> Text:
        body = Text(self.message + "\n")
        body.append("argv: ", style="dim")
        body.append(" ".join(self.argv), style="bold")
        return body


@dataclass(slots=True, eq=False)
class ExitCodeError(CommandError):
    """The command ran but exited non-zero (e.g. `kill` on a vanished PID)."""

    exit_code: int = 1
    stderr: str = ""

    def __str__(self) -> str:  # pragma: no cover - trivial formatting
        detail = f" ({self.stderr.strip()})" if self.stderr.strip() else ""
        return f"{self.message}: {' '.join(self.argv)} exited with {self.exit_code}{detail}"

    def _rich_body(self) -> Text:
        body = CommandError._rich_body(self)
        body.append(f"\nexit code: {self.exit_code}", style="yellow")
        if self.stderr.strip():
            body.append(f"\nstderr: {self.stderr.strip()}", style="dim")
        return body


@dataclass(slots=True, eq=False)
class CommandInvocationError(CommandError):
    """The command could not be started at all (missing executable, timeout, ...)."""
