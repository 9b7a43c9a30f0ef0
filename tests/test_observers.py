from __future__ import annotations

import io
import logging

import pytest
from rich.console import Console

from symopt import LoggingObserver, RecordingObserver, RichProgressObserver, solve
from symopt.cancel import CancelToken


def test_recording_observer_sees_every_iteration():
    recorder = RecordingObserver()
    result = solve("(x-2)^2", ["x"], [0.0], method="gradient", observer=recorder)
    assert len(recorder) == result.iterations
    assert [s.iteration for s in recorder.snapshots] == list(range(result.iterations))
    assert recorder.snapshots[0].point == (0.0,)
    assert recorder.snapshots[0].gradient == pytest.approx((-4.0,))
    assert all(s.method == "Gradient Descent" for s in recorder.snapshots)


def test_logging_observer(caplog):
    with caplog.at_level(logging.INFO, logger="symopt.iterations"):
        solve("x^2", ["x"], [1.0], method="gradient", max_iterations=3, observer=LoggingObserver())
    lines = [r.getMessage() for r in caplog.records if r.name == "symopt.iterations"]
    assert len(lines) == 3
    assert lines[0].startswith("Gradient Descent iter 0: x = [1.0000]")


def test_rich_progress_observer():
    console = Console(file=io.StringIO(), force_terminal=False)
    with RichProgressObserver(total=50, console=console) as progress:
        result = solve("x^2", ["x"], [1.0], method="gradient", max_iterations=50, observer=progress)
        task = progress.progress.tasks[0]
        assert task.completed == result.iterations
    assert progress.task is None


def test_rich_progress_observer_requires_context():
    with pytest.raises(RuntimeError):
        solve("x^2", ["x"], [1.0], observer=RichProgressObserver())


def test_cancel_token_timeout():
    assert CancelToken(timeout=0.0).cancelled
    assert not CancelToken(timeout=60.0).cancelled
    token = CancelToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled
