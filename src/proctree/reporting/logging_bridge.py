"""
Opt-in bridge that routes proctree log records through Rich.
This preserves stdlib logging semantics (levels, propagation, filters).

Do NOT install this at import time. Let scripts/launchers opt in.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from rich.console import Console
from rich.logging import RichHandler

__all__ = ["install_logging_bridge"]

_ROOT_LOGGER = "proctree"


def install_logging_bridge(
    *,
    level: int | str = logging.INFO,
    console: Console | None = None,
    propagate: bool = False,
) -> Callable[[], None]:
    """
    Attach a RichHandler to the `proctree` logger.

    - Returns an `uninstall()` function restoring the previous level/propagation.
    - With `propagate=False` (default) records are not duplicated by root handlers.
    """
    # Default to stderr per logging convention
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    logger = logging.getLogger(_ROOT_LOGGER)
    prev_level = logger.level
    prev_propagate = logger.propagate

    logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate

    def uninstall() -> None:
        logger.removeHandler(handler)
        logger.setLevel(prev_level)
        logger.propagate = prev_propagate

    return uninstall
