from __future__ import annotations

import threading

from conftest import RecordingRunner

from proctree.probe import GroupKillSupport, probe_group_kill_support

SETSID = ("setsid", "bash", "-c", "echo $$")


def test_probe_success_means_supported() -> None:
    runner = RecordingRunner()
    assert probe_group_kill_support(runner) is True
    assert runner.argvs == [SETSID]


def test_probe_nonzero_exit_still_supported() -> None:
    runner = RecordingRunner(responder=lambda argv: 127)
    assert probe_group_kill_support(runner) is True


def test_probe_invocation_failure_means_unsupported() -> None:
    runner = RecordingRunner(missing=["setsid"])
    assert probe_group_kill_support(runner) is False


def test_support_is_lazy_and_memoized() -> None:
    runner = RecordingRunner()
    support = GroupKillSupport(runner)
    assert not support.evaluated
    assert runner.calls == []

    for _ in range(100):
        assert support.get() is True
    assert len(runner.calls) == 1


def test_concurrent_first_access_probes_once() -> None:
    gate = threading.Event()

    def slow(argv: tuple[str, ...]) -> int:
        gate.wait(1.0)
        return 0

    runner = RecordingRunner(responder=slow)
    support = GroupKillSupport(runner)
    results: list[bool] = []

    threads = [threading.Thread(target=lambda: results.append(support.get())) for _ in range(16)]
    for t in threads:
        t.start()
    gate.set()
    for t in threads:
        t.join(5.0)

    assert results == [True] * 16
    assert len(runner.calls) == 1


def test_fixed_never_probes() -> None:
    support = GroupKillSupport.fixed(False)
    assert support.evaluated
    assert support.get() is False
    assert not support
