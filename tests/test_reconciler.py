from __future__ import annotations

from pathlib import Path

import pytest

from autosplit_timer.reconciler import Reconciler
from autosplit_timer.timer import Timer, TimerPhase, TimerSnapshot
from autosplit_timer.watcher import LogWatcher, WatchEvent


class StubTimer:
    """Records calls; phase and index are set directly by the test."""

    def __init__(self, phase: TimerPhase = TimerPhase.NOT_RUNNING, index: int | None = None) -> None:
        self.phase = phase
        self.index = index
        self.calls: list[str] = []

    def start(self) -> None:
        self.calls.append("start")

    def split(self) -> None:
        self.calls.append("split")

    def pause(self) -> None:
        self.calls.append("pause")

    def resume(self) -> None:
        self.calls.append("resume")

    def reset(self, discard: bool) -> None:
        self.calls.append(f"reset({discard})")

    def undo_split(self) -> None:
        self.calls.append("undo_split")
        if self.index:
            self.index -= 1

    def skip_split(self) -> None:
        self.calls.append("skip_split")
        if self.index is not None:
            self.index += 1

    def current_phase(self) -> TimerPhase:
        return self.phase

    def current_split_index(self) -> int | None:
        return self.index

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(self.phase, self.index, 0.0, ())


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    path = tmp_path / "game.log"
    path.write_text("", encoding="utf-8")
    return path


def append(path: Path, text: str) -> None:
    with path.open("a", encoding="utf-8") as handle:
        handle.write(text)


def make_watcher(path: Path, count: int = 5) -> LogWatcher:
    return LogWatcher(
        path,
        start_trigger="START",
        reset_trigger="RESET",
        split_triggers=[f"split-{i}" for i in range(count)],
    )


@pytest.mark.parametrize(
    ("phase", "applied"),
    [
        (TimerPhase.NOT_RUNNING, True),
        (TimerPhase.RUNNING, False),
        (TimerPhase.PAUSED, False),
        (TimerPhase.ENDED, False),
    ],
)
def test_start_event_requires_not_running(phase: TimerPhase, applied: bool) -> None:
    timer = StubTimer(phase)
    reconciler = Reconciler(timer)

    assert reconciler.apply_event(WatchEvent.start()) is applied
    assert timer.calls == (["start"] if applied else [])


@pytest.mark.parametrize(
    ("phase", "applied"),
    [
        (TimerPhase.NOT_RUNNING, False),
        (TimerPhase.RUNNING, True),
        (TimerPhase.PAUSED, False),
        (TimerPhase.ENDED, False),
    ],
)
def test_split_event_requires_running(phase: TimerPhase, applied: bool) -> None:
    timer = StubTimer(phase, index=0)
    reconciler = Reconciler(timer)

    assert reconciler.apply_event(WatchEvent.split(0)) is applied
    assert timer.calls == (["split"] if applied else [])


@pytest.mark.parametrize("phase", list(TimerPhase))
def test_reset_event_always_applies(log_file: Path, phase: TimerPhase) -> None:
    timer = StubTimer(phase)
    watcher = make_watcher(log_file)
    watcher.set_split_index(4)
    reconciler = Reconciler(timer, watcher)

    assert reconciler.apply_event(WatchEvent.reset()) is True
    assert timer.calls == ["reset(True)"]
    assert watcher.current_split == 0
    watcher.close()


def test_poll_applies_events_in_order(log_file: Path) -> None:
    timer = Timer([(f"S{i}", None) for i in range(3)], clock=FakeClock())
    watcher = make_watcher(log_file, count=3)
    reconciler = Reconciler(timer, watcher)

    append(log_file, "START\nsplit-0\nsplit-1\n")
    events = reconciler.poll()

    assert events == [WatchEvent.start(), WatchEvent.split(0), WatchEvent.split(1)]
    assert timer.current_split_index() == 2
    assert watcher.current_split == 2
    watcher.close()


def test_split_trigger_while_paused_does_not_split(log_file: Path) -> None:
    timer = Timer([(f"S{i}", None) for i in range(3)], clock=FakeClock())
    watcher = make_watcher(log_file, count=3)
    reconciler = Reconciler(timer, watcher)
    reconciler.start()
    reconciler.pause()

    append(log_file, "split-0\n")
    assert reconciler.poll() == [WatchEvent.split(0)]
    assert timer.current_split_index() == 0
    assert timer.current_phase() is TimerPhase.PAUSED
    watcher.close()


def test_undo_resyncs_watcher_cursor(log_file: Path) -> None:
    timer = StubTimer(TimerPhase.RUNNING, index=3)
    watcher = make_watcher(log_file)
    watcher.set_split_index(3)
    reconciler = Reconciler(timer, watcher)

    reconciler.undo_split()

    assert timer.calls == ["undo_split"]
    assert watcher.current_split == 2
    watcher.close()


def test_skip_resyncs_watcher_cursor(log_file: Path) -> None:
    timer = StubTimer(TimerPhase.RUNNING, index=1)
    watcher = make_watcher(log_file)
    watcher.set_split_index(1)
    reconciler = Reconciler(timer, watcher)

    reconciler.skip_split()

    assert watcher.current_split == 2
    append(log_file, "split-1\nsplit-2\n")
    assert watcher.poll() == [WatchEvent.split(2)]
    watcher.close()


def test_undo_when_not_running_sets_cursor_to_zero(log_file: Path) -> None:
    timer = StubTimer(TimerPhase.NOT_RUNNING, index=None)
    watcher = make_watcher(log_file)
    watcher.set_split_index(2)
    reconciler = Reconciler(timer, watcher)

    reconciler.undo_split()

    assert watcher.current_split == 0
    watcher.close()


def test_undo_rearms_previous_trigger(log_file: Path) -> None:
    timer = Timer([(f"S{i}", None) for i in range(3)], clock=FakeClock())
    watcher = make_watcher(log_file, count=3)
    reconciler = Reconciler(timer, watcher)

    append(log_file, "START\nsplit-0\n")
    reconciler.poll()
    reconciler.undo_split()
    assert timer.current_split_index() == 0
    assert watcher.current_split == 0

    append(log_file, "split-0\n")
    assert reconciler.poll() == [WatchEvent.split(0)]
    assert timer.current_split_index() == 1


def test_manual_reset_zeroes_cursor(log_file: Path) -> None:
    timer = StubTimer(TimerPhase.RUNNING, index=2)
    watcher = make_watcher(log_file)
    watcher.set_split_index(2)
    reconciler = Reconciler(timer, watcher)

    reconciler.reset()

    assert timer.calls == ["reset(True)"]
    assert watcher.current_split == 0
    watcher.close()


@pytest.mark.parametrize(
    ("phase", "expected"),
    [
        (TimerPhase.NOT_RUNNING, ["start"]),
        (TimerPhase.RUNNING, ["split"]),
        (TimerPhase.PAUSED, ["resume"]),
        (TimerPhase.ENDED, []),
    ],
)
def test_start_or_split(phase: TimerPhase, expected: list[str]) -> None:
    timer = StubTimer(phase)
    Reconciler(timer).start_or_split()
    assert timer.calls == expected


@pytest.mark.parametrize(
    ("phase", "expected"),
    [
        (TimerPhase.NOT_RUNNING, []),
        (TimerPhase.RUNNING, ["pause"]),
        (TimerPhase.PAUSED, ["resume"]),
        (TimerPhase.ENDED, []),
    ],
)
def test_toggle_pause(phase: TimerPhase, expected: list[str]) -> None:
    timer = StubTimer(phase)
    Reconciler(timer).toggle_pause()
    assert timer.calls == expected


def test_commands_without_watcher() -> None:
    timer = StubTimer(TimerPhase.RUNNING, index=2)
    reconciler = Reconciler(timer)

    assert reconciler.poll() == []
    assert reconciler.auto_splitting is False
    reconciler.undo_split()
    reconciler.skip_split()
    reconciler.reset()

    assert timer.calls == ["undo_split", "skip_split", "reset(True)"]


def test_replace_closes_previous_watcher(log_file: Path) -> None:
    first = make_watcher(log_file)
    second = make_watcher(log_file)
    reconciler = Reconciler(StubTimer(), first)

    replacement = StubTimer()
    reconciler.replace(replacement, second)

    assert reconciler.timer is replacement
    assert reconciler.watcher is second
    with pytest.raises(ValueError):
        first.poll()
    second.close()
