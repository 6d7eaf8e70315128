from __future__ import annotations

import io
import logging

from rich.console import Console

from proctree.errors import CommandInvocationError, ExitCodeError
from proctree.reporting import install_logging_bridge


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=200, force_terminal=False, color_system=None), buf


def test_bridge_routes_proctree_records_and_uninstalls() -> None:
    console, buf = _console()
    logger = logging.getLogger("proctree")
    prev_level, prev_propagate, prev_handlers = logger.level, logger.propagate, list(logger.handlers)

    uninstall = install_logging_bridge(level=logging.DEBUG, console=console)
    try:
        logging.getLogger("proctree.signals").info("Killing process %s with SIGTERM", "42")
    finally:
        uninstall()

    assert "Killing process 42 with SIGTERM" in buf.getvalue()
    assert logger.level == prev_level
    assert logger.propagate == prev_propagate
    assert logger.handlers == prev_handlers


def test_exit_code_error_renders_with_rich() -> None:
    console, buf = _console()
    console.print(ExitCodeError(("kill", "-0", "42"), "command failed", exit_code=1, stderr="No such process"))
    out = buf.getvalue()
    assert "ExitCodeError" in out
    assert "kill -0 42" in out
    assert "exit code: 1" in out
    assert "No such process" in out


def test_invocation_error_str() -> None:
    err = CommandInvocationError(("setsid", "bash"), "could not execute 'setsid'")
    assert str(err) == "could not execute 'setsid': setsid bash"
