"""In-process speedrun timer."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Protocol

from .splits import SplitsFile

logger = logging.getLogger(__name__)


class TimerPhase(str, enum.Enum):
    NOT_RUNNING = "not_running"
    RUNNING = "running"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True, slots=True)
class SegmentSnapshot:
    name: str
    split_time: float | None
    best_segment_time: float | None


@dataclass(frozen=True, slots=True)
class TimerSnapshot:
    """Point-in-time view of a run, times in seconds."""

    phase: TimerPhase
    current_split_index: int | None
    current_time: float
    segments: tuple[SegmentSnapshot, ...]


class TimerProtocol(Protocol):
    """Timer operations driven by the reconciler."""

    def start(self) -> None:
        ...

    def split(self) -> None:
        ...

    def pause(self) -> None:
        ...

    def resume(self) -> None:
        ...

    def reset(self, discard: bool) -> None:
        ...

    def undo_split(self) -> None:
        ...

    def skip_split(self) -> None:
        ...

    def current_phase(self) -> TimerPhase:
        ...

    def current_split_index(self) -> int | None:
        ...

    def snapshot(self) -> TimerSnapshot:
        ...


class Timer:
    """Phase state machine over an ordered list of segments.

    Every command is a no-op when the current phase does not allow it.
    """

    def __init__(
        self,
        segments: Iterable[tuple[str, float | None]],
        *,
        clock: Callable[[], float] | None = None,
    ) -> None:
        entries = list(segments)
        if not entries:
            raise ValueError("A timer needs at least one segment")
        self._names = [name for name, _ in entries]
        self._best_segments: list[float | None] = [best for _, best in entries]
        self._clock = clock or time.monotonic
        self._split_times: list[float | None] = [None] * len(entries)
        self._phase = TimerPhase.NOT_RUNNING
        self._index: int | None = None
        self._started_at = 0.0
        self._paused_at: float | None = None
        self._pause_total = 0.0
        self._ended_at: float | None = None

    @classmethod
    def from_splits(
        cls, splits_file: SplitsFile, *, clock: Callable[[], float] | None = None
    ) -> "Timer":
        return cls(
            ((split.name, split.best_time) for split in splits_file.splits),
            clock=clock,
        )

    def __len__(self) -> int:
        return len(self._names)

    def _elapsed(self) -> float:
        if self._phase is TimerPhase.NOT_RUNNING:
            return 0.0
        if self._phase is TimerPhase.ENDED and self._ended_at is not None:
            return self._ended_at
        now = self._paused_at if self._paused_at is not None else self._clock()
        return now - self._started_at - self._pause_total

    def start(self) -> None:
        if self._phase is not TimerPhase.NOT_RUNNING:
            return
        self._split_times = [None] * len(self._names)
        self._started_at = self._clock()
        self._paused_at = None
        self._pause_total = 0.0
        self._ended_at = None
        self._index = 0
        self._phase = TimerPhase.RUNNING
        logger.debug("Timer started")

    def split(self) -> None:
        if self._phase is not TimerPhase.RUNNING or self._index is None:
            return
        elapsed = self._elapsed()
        self._split_times[self._index] = elapsed
        self._index += 1
        if self._index >= len(self._names):
            self._ended_at = elapsed
            self._phase = TimerPhase.ENDED
        logger.debug("Split recorded", extra={"split_index": self._index - 1, "split_time": elapsed})

    def skip_split(self) -> None:
        if self._phase not in (TimerPhase.RUNNING, TimerPhase.PAUSED) or self._index is None:
            return
        if self._index >= len(self._names) - 1:
            return
        self._split_times[self._index] = None
        self._index += 1

    def undo_split(self) -> None:
        if self._phase is TimerPhase.NOT_RUNNING or not self._index:
            return
        if self._phase is TimerPhase.ENDED:
            self._ended_at = None
            self._phase = TimerPhase.RUNNING
        self._index -= 1
        self._split_times[self._index] = None

    def pause(self) -> None:
        if self._phase is not TimerPhase.RUNNING:
            return
        self._paused_at = self._clock()
        self._phase = TimerPhase.PAUSED

    def resume(self) -> None:
        if self._phase is not TimerPhase.PAUSED or self._paused_at is None:
            return
        self._pause_total += self._clock() - self._paused_at
        self._paused_at = None
        self._phase = TimerPhase.RUNNING

    def reset(self, discard: bool = True) -> None:
        if self._phase is TimerPhase.NOT_RUNNING:
            return
        if not discard:
            self._update_best_segments()
        self._split_times = [None] * len(self._names)
        self._phase = TimerPhase.NOT_RUNNING
        self._index = None
        self._paused_at = None
        self._pause_total = 0.0
        self._ended_at = None

    def _update_best_segments(self) -> None:
        # Only segments bounded by two recorded splits (or the run start) count.
        previous: float | None = 0.0
        for position, split_time in enumerate(self._split_times):
            if split_time is None:
                previous = None
                continue
            if previous is not None:
                segment = split_time - previous
                best = self._best_segments[position]
                if best is None or segment < best:
                    self._best_segments[position] = segment
            previous = split_time

    def current_phase(self) -> TimerPhase:
        return self._phase

    def current_split_index(self) -> int | None:
        return self._index

    def current_time(self) -> float:
        return self._elapsed()

    def snapshot(self) -> TimerSnapshot:
        return TimerSnapshot(
            phase=self._phase,
            current_split_index=self._index,
            current_time=self._elapsed(),
            segments=tuple(
                SegmentSnapshot(name=name, split_time=split_time, best_segment_time=best)
                for name, split_time, best in zip(
                    self._names, self._split_times, self._best_segments
                )
            ),
        )


__all__ = ["SegmentSnapshot", "Timer", "TimerPhase", "TimerProtocol", "TimerSnapshot"]
