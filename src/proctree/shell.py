"""
proctree.shell
==============

The command collaborator. Everything the termination protocol does to other
processes goes through a CommandRunner, so tests can swap in a recording double
and hosts without `kill(1)` fail loudly in one place.

- CommandResult: argv + exit code + captured output
- CommandRunner: Protocol (run argv, raise ExitCodeError / CommandInvocationError)
- ShellCommandExecutor: subprocess-backed default
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from proctree.errors import CommandInvocationError, ExitCodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommandResult:
    argv: tuple[str, ...]
    exit_code: int = 0
    stdout: str = ""
    stderr: str = ""


@runtime_checkable
class CommandRunner(Protocol):
    def run(self, argv: Sequence[str], *, timeout_s: float | None = None) -> CommandResult:
        """
        Execute argv and return its result on exit code 0.

        Raises ExitCodeError when the command exits non-zero and
        CommandInvocationError when it cannot be started (or times out).
        """
        ...


class ShellCommandExecutor:
    """Run argument vectors with subprocess.run (no shell, captured text output)."""

    def __init__(self, *, env: dict[str, str] | None = None) -> None:
        self._env = env

    def run(self, argv: Sequence[str], *, timeout_s: float | None = None) -> CommandResult:
        args = tuple(str(a) for a in argv)
        if not args:
            raise ValueError("argv must be a non-empty sequence")

        try:
            proc = subprocess.run(
                list(args),
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout_s,
                env=self._env,
            )
        except subprocess.TimeoutExpired as exc:
            raise CommandInvocationError(args, f"timed out after {timeout_s}s") from exc
        except OSError as exc:
            raise CommandInvocationError(args, f"could not execute {args[0]!r} ({exc})") from exc

        result = CommandResult(
            argv=args,
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )
        logger.debug("%s exited with %d", " ".join(args), result.exit_code)

        if result.exit_code != 0:
            raise ExitCodeError(
                args,
                "command failed",
                exit_code=result.exit_code,
                stderr=result.stderr,
            )
        return result
