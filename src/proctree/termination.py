"""
proctree.termination
====================

The termination protocol: SIGTERM now, SIGKILL later if still alive.

Design recap
------------
- destroy(target, config):
    * sends SIGTERM in the calling thread (process, or whole group as -<pgid>),
    * EITHER runs the forceful phase inline (caller observes the delay)
      OR hands it to a daemon DelayedKillTask and returns immediately.
- Forceful phase:
    * waits `sleep_before_force_kill_s` (an interrupted wait goes straight on),
    * re-checks liveness of the bare identifier,
    * sends SIGKILL only if the target is still alive.
- Non-group targets only ever signal the named process; descendants are not
  discovered when group semantics are unavailable.

Nothing here raises on command failure: every failure becomes a log record.
Background tasks are tracked so an owner may `shutdown()` and join them; the
protocol itself never waits for them.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import StrEnum
from typing import Any

from proctree.config import TerminationConfig
from proctree.constants import DELAYED_KILL_THREAD_PREFIX
from proctree.liveness import is_alive
from proctree.probe import GroupKillSupport, default_group_kill_support
from proctree.shell import CommandRunner, ShellCommandExecutor
from proctree.signals import ProcessTarget, Signal, send_signal

logger = logging.getLogger(__name__)

__all__ = ["TerminationState", "ProcessTree", "DelayedKillTask"]


class TerminationState(StrEnum):
    REQUESTED = "requested"
    TERM_SENT = "term_sent"
    FORCE_CHECK = "force_check"
    FORCE_KILLED = "force_killed"
    ALREADY_DEAD = "already_dead"
    DONE = "done"


class ProcessTree:
    """
    Kill a process (or process group) with SIGTERM, then SIGKILL after a delay.

    Args:
        runner: CommandRunner used for every `kill` invocation.
        group_kill_supported: bool or GroupKillSupport; defaults to the
                              process-wide cached probe.
        config: default TerminationConfig for requests that don't pass one.
    """

    def __init__(
        self,
        runner: CommandRunner | None = None,
        *,
        group_kill_supported: bool | GroupKillSupport | None = None,
        config: TerminationConfig | None = None,
    ) -> None:
        self._runner: CommandRunner = runner if runner is not None else ShellCommandExecutor()

        if group_kill_supported is None:
            self._group_support = default_group_kill_support()
        elif isinstance(group_kill_supported, GroupKillSupport):
            self._group_support = group_kill_supported
        else:
            self._group_support = GroupKillSupport.fixed(bool(group_kill_supported))

        self._config = config or TerminationConfig()

        # Background tasks still running (joined only by shutdown()).
        self._pending: set[DelayedKillTask] = set()
        self._pending_lock = threading.Lock()

    # ---- capability ----------------------------------------------------------

    @property
    def runner(self) -> CommandRunner:
        return self._runner

    @property
    def config(self) -> TerminationConfig:
        return self._config

    @property
    def group_kill_supported(self) -> bool:
        return self._group_support.get()

    def configure_popen_group(self, popen_kwargs: dict[str, Any]) -> bool:
        """
        Make a child launched with these Popen kwargs its own group leader when
        group kill is supported. Returns the `is_group` to use when destroying it.
        """
        if not self.group_kill_supported:
            return False
        popen_kwargs["start_new_session"] = True
        return True

    # ---- public protocol -----------------------------------------------------

    def destroy(self, target: ProcessTarget, config: TerminationConfig | None = None) -> None:
        cfg = config or self._config
        logger.debug("%s: %s", target.label, TerminationState.REQUESTED)

        send_signal(self._runner, target, Signal.TERM, timeout_s=cfg.command_timeout_s)
        logger.debug("%s: %s", target.label, TerminationState.TERM_SENT)

        if cfg.run_force_kill_in_background:
            task = DelayedKillTask(self, target, cfg)
            with self._pending_lock:
                self._pending.add(task)
            try:
                task.start()
            except RuntimeError:
                self._forget(task)
                logger.exception("Could not start background SIGKILL of %s", target.label)
        else:
            self.force_kill_after_delay(target, cfg)

    def destroy_process(self, pid: str | int | None, config: TerminationConfig | None = None) -> None:
        # TODO: also kill descendants when the caller could not create a group.
        target = _target_or_none(pid, is_group=False)
        if target is not None:
            self.destroy(target, config)

    def destroy_process_group(self, pgrp_id: str | int | None, config: TerminationConfig | None = None) -> None:
        target = _target_or_none(pgrp_id, is_group=True)
        if target is not None:
            self.destroy(target, config)

    def is_alive(self, identifier: str) -> bool:
        return is_alive(self._runner, identifier, timeout_s=self._config.command_timeout_s)

    # ---- forceful phase ------------------------------------------------------

    def force_kill_after_delay(
        self,
        target: ProcessTarget,
        config: TerminationConfig,
        *,
        wake: threading.Event | None = None,
    ) -> TerminationState:
        """Wait, then SIGKILL `target` if it is still alive. Returns the outcome state."""
        wake = wake or threading.Event()
        if wake.wait(config.sleep_before_force_kill_s):
            logger.warning("Sleep before SIGKILL of %s was interrupted.", target.label)

        return self.sigkill_if_alive(target, config)

    def sigkill_if_alive(self, target: ProcessTarget, config: TerminationConfig) -> TerminationState:
        logger.debug("%s: %s", target.label, TerminationState.FORCE_CHECK)

        # Group leaders are probed by their bare pid.
        if is_alive(self._runner, target.identifier, timeout_s=config.command_timeout_s):
            send_signal(self._runner, target, Signal.KILL, timeout_s=config.command_timeout_s)
            outcome = TerminationState.FORCE_KILLED
        else:
            outcome = TerminationState.ALREADY_DEAD

        logger.debug("%s: %s -> %s", target.label, outcome, TerminationState.DONE)
        return outcome

    # ---- background task bookkeeping ------------------------------------------

    def pending_force_kills(self) -> list[DelayedKillTask]:
        with self._pending_lock:
            return [t for t in self._pending if t.is_alive()]

    def _forget(self, task: DelayedKillTask) -> None:
        with self._pending_lock:
            self._pending.discard(task)

    def shutdown(self, timeout_s: float | None = None, *, interrupt: bool = True) -> None:
        """
        Join outstanding background tasks. With `interrupt=True` their delays are
        cut short so each one checks liveness (and kills) right away.
        """
        with self._pending_lock:
            tasks = list(self._pending)

        if interrupt:
            for task in tasks:
                task.interrupt()

        deadline = None if timeout_s is None else time.monotonic() + timeout_s
        for task in tasks:
            remaining = None if deadline is None else max(0.0, deadline - time.monotonic())
            task.join(remaining)
            if task.is_alive():
                logger.warning("%s still running after shutdown timeout", task.name)


class DelayedKillTask(threading.Thread):
    """
    Daemon thread that runs the forceful phase of one destroy() request.
    Owns its own copy of target + config; never reports back to the requester.
    """

    def __init__(self, tree: ProcessTree, target: ProcessTarget, config: TerminationConfig) -> None:
        super().__init__(name=f"{DELAYED_KILL_THREAD_PREFIX}-{target.identifier}", daemon=True)
        self._tree = tree
        self.target = target
        self.config = config
        self._wake = threading.Event()
        self.outcome: TerminationState | None = None

    def interrupt(self) -> None:
        """Cut the delay short; the liveness check and kill still happen."""
        self._wake.set()

    def run(self) -> None:
        try:
            self.outcome = self._tree.force_kill_after_delay(self.target, self.config, wake=self._wake)
        except Exception:
            logger.exception("Background SIGKILL of %s failed", self.target.label)
        finally:
            self._tree._forget(self)


def _target_or_none(identifier: str | int | None, *, is_group: bool) -> ProcessTarget | None:
    """Build a ProcessTarget, logging (not raising) when the identifier is unusable."""
    if identifier is None:
        logger.warning("No pid to destroy (pid-file missing or unreadable?)")
        return None
    try:
        return ProcessTarget(str(identifier), is_group=is_group)
    except ValueError as exc:
        logger.warning("Not destroying %r: %s", identifier, exc)
        return None
