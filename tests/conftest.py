from __future__ import annotations

import threading
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

import pytest

from proctree.errors import CommandInvocationError, ExitCodeError
from proctree.shell import CommandResult

# A responder maps argv -> exit code (or raises CommandInvocationError itself).
Responder = Callable[[tuple[str, ...]], int]


@dataclass(frozen=True, slots=True)
class Call:
    argv: tuple[str, ...]
    at: float  # time.monotonic() when invoked
    timeout_s: float | None = None


class RecordingRunner:
    """
    CommandRunner double. Records every argv and answers liveness probes
    (`kill -0 <id>`) from `alive`, which may be a bool or a zero-arg callable.
    """

    def __init__(
        self,
        *,
        alive: bool | Callable[[], bool] = True,
        responder: Responder | None = None,
        missing: Sequence[str] = (),
    ) -> None:
        self.alive = alive
        self.responder = responder
        self.missing = set(missing)  # executables that "don't exist"
        self.calls: list[Call] = []
        self.called = threading.Event()
        self._lock = threading.Lock()

    def run(self, argv: Sequence[str], *, timeout_s: float | None = None) -> CommandResult:
        args = tuple(argv)
        with self._lock:
            self.calls.append(Call(args, time.monotonic(), timeout_s))
        self.called.set()

        if args[0] in self.missing:
            raise CommandInvocationError(args, f"could not execute {args[0]!r}")

        if self.responder is not None:
            code = self.responder(args)
        elif args[:2] == ("kill", "-0"):
            alive = self.alive() if callable(self.alive) else self.alive
            code = 0 if alive else 1
        else:
            code = 0

        if code != 0:
            raise ExitCodeError(args, "command failed", exit_code=code)
        return CommandResult(argv=args, exit_code=code)

    @property
    def argvs(self) -> list[tuple[str, ...]]:
        with self._lock:
            return [c.argv for c in self.calls]

    def first(self, argv: tuple[str, ...]) -> Call:
        with self._lock:
            return next(c for c in self.calls if c.argv == argv)


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()
