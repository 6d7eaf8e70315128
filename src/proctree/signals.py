"""
proctree.signals
================

ProcessTarget + the signal sender.

Every delivery goes through `kill(1)` via the CommandRunner. A leading "-" on
the operand addresses the whole process group; it is produced only for
targets with `is_group=True`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum

from proctree.constants import (
    END_OF_OPTIONS,
    GROUP_PREFIX,
    KILL_EXECUTABLE,
    KILL_PROBE_FLAG,
    KILL_SIGKILL_FLAG,
)
from proctree.errors import CommandError, ExitCodeError
from proctree.shell import CommandRunner

logger = logging.getLogger(__name__)


class Signal(StrEnum):
    TERM = "SIGTERM"
    KILL = "SIGKILL"
    ZERO = "0"  # liveness probe; delivers nothing


@dataclass(frozen=True, slots=True)
class ProcessTarget:
    """
    identifier: OS-assigned PID (or PGID when is_group) as text.
    is_group: only set for targets launched as group leaders; not verified here.
    """

    identifier: str
    is_group: bool = False

    def __post_init__(self) -> None:
        ident = str(self.identifier).strip()
        if not ident:
            raise ValueError("ProcessTarget.identifier must be a non-empty string")
        if ident.startswith(GROUP_PREFIX):
            raise ValueError(
                f"ProcessTarget.identifier must be the bare id (got {ident!r}); "
                "use is_group=True to address a process group"
            )
        object.__setattr__(self, "identifier", ident)

    @property
    def operand(self) -> str:
        return GROUP_PREFIX + self.identifier if self.is_group else self.identifier

    @property
    def label(self) -> str:
        return f"process group {self.identifier}" if self.is_group else f"process {self.identifier}"


def kill_argv(target: ProcessTarget, signal: Signal) -> list[str]:
    if signal is Signal.TERM:
        if target.is_group:
            # `kill -<pgid>` would parse as a signal number without "--"
            return [KILL_EXECUTABLE, END_OF_OPTIONS, target.operand]
        return [KILL_EXECUTABLE, target.operand]
    if signal is Signal.KILL:
        return [KILL_EXECUTABLE, KILL_SIGKILL_FLAG, target.operand]
    return [KILL_EXECUTABLE, KILL_PROBE_FLAG, target.operand]


def send_signal(
    runner: CommandRunner,
    target: ProcessTarget,
    signal: Signal,
    *,
    timeout_s: float | None = None,
) -> None:
    """
    Best-effort delivery: failures are logged, never retried, never raised.
    """
    argv = kill_argv(target, signal)
    exit_code: int | None = None
    try:
        exit_code = runner.run(argv, timeout_s=timeout_s).exit_code
    except ExitCodeError as exc:
        exit_code = exc.exit_code
        logger.warning("Error executing shell command %s", exc)
    except CommandError as exc:
        logger.warning("Error executing shell command %s", exc)

    logger.info("Killing %s with %s. Exit code %s", target.label, signal.value, exit_code)
