"""
proctree
========

Controlled termination of an externally spawned process, or of its whole
process group where the platform supports it.

Module-level functions operate through one process-wide ProcessTree that
shells out to `kill(1)`; build your own ProcessTree to inject a different
CommandRunner, capability flag or default config.
"""

from __future__ import annotations

import threading

from proctree.config import TerminationConfig
from proctree.constants import DEFAULT_SLEEP_BEFORE_SIGKILL_S
from proctree.errors import CommandError, CommandInvocationError, ExitCodeError, ProcTreeError
from proctree.pidfile import read_pid_from_file
from proctree.probe import GroupKillSupport, is_group_kill_supported
from proctree.shell import CommandResult, CommandRunner, ShellCommandExecutor
from proctree.signals import ProcessTarget, Signal
from proctree.termination import DelayedKillTask, ProcessTree, TerminationState

__all__ = [
    "DEFAULT_SLEEP_BEFORE_SIGKILL_S",
    "CommandError",
    "CommandInvocationError",
    "CommandResult",
    "CommandRunner",
    "DelayedKillTask",
    "ExitCodeError",
    "GroupKillSupport",
    "ProcTreeError",
    "ProcessTarget",
    "ProcessTree",
    "ShellCommandExecutor",
    "Signal",
    "TerminationConfig",
    "TerminationState",
    "default_tree",
    "destroy",
    "is_alive",
    "is_group_kill_supported",
    "read_pid_from_file",
]

_default_tree: ProcessTree | None = None
_default_tree_lock = threading.Lock()


def default_tree() -> ProcessTree:
    global _default_tree
    with _default_tree_lock:
        if _default_tree is None:
            _default_tree = ProcessTree()
        return _default_tree


def destroy(
    pid: str | int | None,
    sleep_before_force_kill_s: float = DEFAULT_SLEEP_BEFORE_SIGKILL_S,
    is_process_group: bool = False,
    run_in_background: bool = False,
) -> None:
    """
    Destroy the process (or process group led by `pid`): SIGTERM now, SIGKILL
    after `sleep_before_force_kill_s` if still alive. Never raises on failure;
    a missing or unusable pid (e.g. from an empty pid-file) is only logged.
    """
    config = TerminationConfig.make(
        sleep_before_force_kill_s=sleep_before_force_kill_s,
        run_force_kill_in_background=run_in_background,
    )
    tree = default_tree()
    if is_process_group:
        tree.destroy_process_group(pid, config)
    else:
        tree.destroy_process(pid, config)


def is_alive(pid: str | int) -> bool:
    return default_tree().is_alive(str(pid))

