"""
proctree.probe
==============

Is group kill usable on this host? We answer by trying to run `setsid` once.

Only failing to *invoke* setsid counts as "unsupported". A non-zero exit from
the smoke-test command still proves the primitive exists, so it counts as
supported.
"""

from __future__ import annotations

import logging
import threading

from proctree.constants import SETSID_PROBE_ARGV
from proctree.errors import CommandInvocationError, ExitCodeError
from proctree.shell import CommandRunner, ShellCommandExecutor

logger = logging.getLogger(__name__)

__all__ = [
    "probe_group_kill_support",
    "GroupKillSupport",
    "default_group_kill_support",
    "is_group_kill_supported",
]


def probe_group_kill_support(runner: CommandRunner) -> bool:
    exit_code: int | None = None
    supported = True
    try:
        exit_code = runner.run(SETSID_PROBE_ARGV).exit_code
    except ExitCodeError as exc:
        exit_code = exc.exit_code
    except CommandInvocationError as exc:
        logger.warning("setsid is not available on this machine. So not using it. (%s)", exc)
        supported = False

    logger.info("setsid exited with exit code %s", exit_code)
    return supported


class GroupKillSupport:
    """
    Once-computed capability flag. The probe runs on the first `get()` under a
    lock; every later call returns the cached answer without locking.
    """

    def __init__(self, runner: CommandRunner | None = None) -> None:
        self._runner = runner
        self._value: bool | None = None
        self._lock = threading.Lock()

    @classmethod
    def fixed(cls, value: bool) -> GroupKillSupport:
        inst = cls()
        inst._value = value
        return inst

    @property
    def evaluated(self) -> bool:
        return self._value is not None

    def get(self) -> bool:
        value = self._value
        if value is not None:
            return value
        with self._lock:
            if self._value is None:
                runner = self._runner if self._runner is not None else ShellCommandExecutor()
                self._value = probe_group_kill_support(runner)
            return self._value

    def __bool__(self) -> bool:
        return self.get()


_DEFAULT = GroupKillSupport()


def default_group_kill_support() -> GroupKillSupport:
    """The process-wide cache shared by every ProcessTree built without an override."""
    return _DEFAULT


def is_group_kill_supported() -> bool:
    return _DEFAULT.get()
