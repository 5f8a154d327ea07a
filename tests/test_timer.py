from __future__ import annotations

import pytest

from autosplit_timer.splits import SplitDefinition, SplitsFile
from autosplit_timer.timer import Timer, TimerPhase


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_timer(clock: FakeClock, count: int = 3) -> Timer:
    return Timer(((f"Split {i}", None) for i in range(count)), clock=clock)


def test_full_run_ends_after_last_split() -> None:
    clock = FakeClock()
    timer = make_timer(clock, count=2)
    assert timer.current_phase() is TimerPhase.NOT_RUNNING
    assert timer.current_split_index() is None

    timer.start()
    clock.advance(10)
    timer.split()
    clock.advance(5)
    timer.split()

    assert timer.current_phase() is TimerPhase.ENDED
    assert timer.current_split_index() == 2
    snapshot = timer.snapshot()
    assert [segment.split_time for segment in snapshot.segments] == [10.0, 15.0]

    clock.advance(30)
    assert timer.current_time() == 15.0


def test_pause_excludes_paused_time() -> None:
    clock = FakeClock()
    timer = make_timer(clock)
    timer.start()
    clock.advance(4)
    timer.pause()
    clock.advance(100)
    assert timer.current_time() == 4.0

    timer.split()
    assert timer.current_split_index() == 0

    timer.resume()
    clock.advance(2)
    timer.split()
    assert timer.snapshot().segments[0].split_time == 6.0


def test_skip_records_no_time_and_not_on_last_split() -> None:
    clock = FakeClock()
    timer = make_timer(clock, count=2)
    timer.start()
    timer.skip_split()
    assert timer.current_split_index() == 1
    assert timer.snapshot().segments[0].split_time is None

    timer.skip_split()
    assert timer.current_split_index() == 1


def test_undo_from_ended_returns_to_running() -> None:
    clock = FakeClock()
    timer = make_timer(clock, count=1)
    timer.start()
    clock.advance(3)
    timer.split()
    assert timer.current_phase() is TimerPhase.ENDED

    timer.undo_split()
    assert timer.current_phase() is TimerPhase.RUNNING
    assert timer.current_split_index() == 0
    assert timer.snapshot().segments[0].split_time is None

    timer.undo_split()
    assert timer.current_split_index() == 0


def test_start_is_ignored_while_running() -> None:
    clock = FakeClock()
    timer = make_timer(clock)
    timer.start()
    clock.advance(5)
    timer.start()
    assert timer.current_time() == 5.0


def test_reset_discard_keeps_best_segments() -> None:
    clock = FakeClock()
    timer = Timer([("A", 20.0), ("B", None)], clock=clock)
    timer.start()
    clock.advance(10)
    timer.split()
    timer.reset(True)

    assert timer.current_phase() is TimerPhase.NOT_RUNNING
    assert timer.current_split_index() is None
    assert timer.snapshot().segments[0].best_segment_time == 20.0


def test_reset_without_discard_improves_best_segments() -> None:
    clock = FakeClock()
    timer = Timer([("A", 20.0), ("B", 1.0), ("C", None)], clock=clock)
    timer.start()
    clock.advance(10)
    timer.split()
    clock.advance(5)
    timer.split()
    clock.advance(7)
    timer.split()
    timer.reset(False)

    bests = [segment.best_segment_time for segment in timer.snapshot().segments]
    assert bests == [10.0, 1.0, 7.0]


def test_segment_after_skip_is_not_a_best_candidate() -> None:
    clock = FakeClock()
    timer = Timer([("A", None), ("B", 50.0)], clock=clock)
    timer.start()
    timer.skip_split()
    clock.advance(1)
    timer.split()
    timer.reset(False)

    bests = [segment.best_segment_time for segment in timer.snapshot().segments]
    assert bests == [None, 50.0]


def test_from_splits_converts_milliseconds() -> None:
    splits = SplitsFile(
        game="Game",
        category="Any%",
        splits=[SplitDefinition(name="One", best_time_ms=61500), SplitDefinition(name="Two")],
    )
    timer = Timer.from_splits(splits)
    segments = timer.snapshot().segments
    assert [segment.name for segment in segments] == ["One", "Two"]
    assert segments[0].best_segment_time == 61.5
    assert segments[1].best_segment_time is None
    assert len(timer) == 2


def test_timer_requires_segments() -> None:
    with pytest.raises(ValueError):
        Timer([])
