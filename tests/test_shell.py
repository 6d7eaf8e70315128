from __future__ import annotations

import shutil

import pytest

from proctree.errors import CommandInvocationError, ExitCodeError
from proctree.shell import CommandRunner, ShellCommandExecutor

posix = pytest.mark.skipif(
    shutil.which("true") is None or shutil.which("false") is None,
    reason="needs true(1)/false(1)",
)


def test_executor_satisfies_protocol() -> None:
    assert isinstance(ShellCommandExecutor(), CommandRunner)


@posix
def test_zero_exit_returns_result() -> None:
    result = ShellCommandExecutor().run(["true"])
    assert result.exit_code == 0
    assert result.argv == ("true",)


@posix
def test_nonzero_exit_raises_exit_code_error() -> None:
    with pytest.raises(ExitCodeError) as info:
        ShellCommandExecutor().run(["false"])
    assert info.value.exit_code == 1
    assert tuple(info.value.argv) == ("false",)


def test_missing_executable_raises_invocation_error() -> None:
    with pytest.raises(CommandInvocationError) as info:
        ShellCommandExecutor().run(["proctree-definitely-not-a-real-binary"])
    assert isinstance(info.value.__cause__, OSError)


@pytest.mark.skipif(shutil.which("sleep") is None, reason="needs sleep(1)")
def test_timeout_is_an_invocation_error() -> None:
    with pytest.raises(CommandInvocationError, match="timed out"):
        ShellCommandExecutor().run(["sleep", "5"], timeout_s=0.2)


def test_empty_argv_rejected() -> None:
    with pytest.raises(ValueError):
        ShellCommandExecutor().run([])
