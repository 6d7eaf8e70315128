"""
proctree.constants
==================

Single place for defaults, argv fragments and environment variable names.
Signal sending, liveness probing and the capability probe all import from here
so we never duplicate strings like "kill".
"""

from __future__ import annotations

# ---- timing ------------------------------------------------------------------

DEFAULT_SLEEP_BEFORE_SIGKILL_S = 5.0  # 5000 ms between SIGTERM and SIGKILL

# ---- external commands -------------------------------------------------------

KILL_EXECUTABLE = "kill"
KILL_SIGKILL_FLAG = "-9"
KILL_PROBE_FLAG = "-0"
END_OF_OPTIONS = "--"
GROUP_PREFIX = "-"  # kill(1) addresses a whole process group as -<pgid>

SETSID_PROBE_ARGV: tuple[str, ...] = ("setsid", "bash", "-c", "echo $$")

# ---- configuration -----------------------------------------------------------

ENV_SLEEP_BEFORE_SIGKILL_MS = "PROCTREE_SLEEP_BEFORE_SIGKILL_MS"
ENV_FORCE_KILL_IN_BACKGROUND = "PROCTREE_FORCE_KILL_IN_BACKGROUND"
ENV_COMMAND_TIMEOUT_S = "PROCTREE_COMMAND_TIMEOUT_S"

# ---- background tasks --------------------------------------------------------

DELAYED_KILL_THREAD_PREFIX = "DelayedKillTask"
