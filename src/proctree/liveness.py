from __future__ import annotations

import logging

from proctree.constants import KILL_EXECUTABLE, KILL_PROBE_FLAG
from proctree.errors import CommandInvocationError, ExitCodeError
from proctree.shell import CommandRunner

logger = logging.getLogger(__name__)


def is_alive(runner: CommandRunner, identifier: str, *, timeout_s: float | None = None) -> bool:
    """
    Is the process with this id still alive?

    The identifier goes to `kill -0` as-is, so "-<pgid>" probes a group and
    garbage is reported by `kill` itself (non-zero exit, i.e. dead).

    Assumes it was alive not long ago, so PID wrap-around is not considered.
    A probe that cannot even be launched is reported as dead, which lets a
    shutdown proceed instead of stalling.
    """
    argv = [KILL_EXECUTABLE, KILL_PROBE_FLAG, str(identifier)]
    try:
        result = runner.run(argv, timeout_s=timeout_s)
    except ExitCodeError:
        return False
    except CommandInvocationError as exc:
        logger.warning("Error executing shell command %s: %s", argv, exc)
        return False
    return result.exit_code == 0
