"""Segment durations and comparison against best segments."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .timer import TimerSnapshot

CLOSE_THRESHOLD = 1.0


class DeltaClass(str, enum.Enum):
    AHEAD = "ahead"
    CLOSE = "close"
    BEHIND = "behind"


def segment_time(current: float | None, previous: float | None) -> float | None:
    """Duration of a segment from two cumulative split times."""

    if current is None:
        return None
    if previous is None:
        return current
    return current - previous


def delta(segment: float | None, best: float | None) -> float | None:
    """Segment minus best segment; negative means ahead."""

    if segment is None or best is None:
        return None
    return segment - best


def classify(value: float | None, threshold: float = CLOSE_THRESHOLD) -> DeltaClass | None:
    if value is None:
        return None
    if value < 0:
        return DeltaClass.AHEAD
    if value < threshold:
        return DeltaClass.CLOSE
    return DeltaClass.BEHIND


@dataclass(frozen=True, slots=True)
class SegmentRecord:
    name: str
    split_time: float | None
    best_segment_time: float | None
    segment_time: float | None
    delta: float | None

    @property
    def classification(self) -> DeltaClass | None:
        return classify(self.delta)


def segment_records(snapshot: TimerSnapshot) -> list[SegmentRecord]:
    """Build display records for every split in ``snapshot``.

    A skipped split has no cumulative time, so the following segment is
    measured from the last split that was actually recorded.
    """

    records: list[SegmentRecord] = []
    previous: float | None = None
    for segment in snapshot.segments:
        current = segment_time(segment.split_time, previous)
        records.append(
            SegmentRecord(
                name=segment.name,
                split_time=segment.split_time,
                best_segment_time=segment.best_segment_time,
                segment_time=current,
                delta=delta(current, segment.best_segment_time),
            )
        )
        if segment.split_time is not None:
            previous = segment.split_time
    return records


__all__ = [
    "CLOSE_THRESHOLD",
    "DeltaClass",
    "SegmentRecord",
    "classify",
    "delta",
    "segment_records",
    "segment_time",
]
