"""Incremental game-log reader that turns trigger text into timer events."""

from __future__ import annotations

import enum
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Sequence

from .splits import SplitsFile

logger = logging.getLogger(__name__)


class WatchEventKind(str, enum.Enum):
    START = "start"
    SPLIT = "split"
    RESET = "reset"


@dataclass(frozen=True, slots=True)
class WatchEvent:
    """A trigger observed in the log. ``index`` is set for splits only."""

    kind: WatchEventKind
    index: int | None = None

    @classmethod
    def start(cls) -> "WatchEvent":
        return cls(WatchEventKind.START)

    @classmethod
    def split(cls, index: int) -> "WatchEvent":
        return cls(WatchEventKind.SPLIT, index)

    @classmethod
    def reset(cls) -> "WatchEvent":
        return cls(WatchEventKind.RESET)

    def __str__(self) -> str:
        if self.kind is WatchEventKind.SPLIT:
            return f"split({self.index})"
        return self.kind.value


class LogWatcher:
    """Tail a single log file and match new lines against configured triggers.

    Only content appended after construction is considered, unless
    ``from_start`` is set. Each complete line yields at most one event, checked
    in the order reset, start, then the trigger of the split the cursor points
    at. Trailing bytes without a newline stay unread until the line completes.
    """

    def __init__(
        self,
        path: Path,
        start_trigger: str | None = None,
        reset_trigger: str | None = None,
        split_triggers: Sequence[str | None] = (),
        *,
        from_start: bool = False,
    ) -> None:
        self._path = Path(path)
        self._start_trigger = start_trigger
        self._reset_trigger = reset_trigger
        self._split_triggers: tuple[str | None, ...] = tuple(split_triggers)
        self._current_split = 0

        self._handle: BinaryIO = open(self._path, "rb")
        self._inode = os.fstat(self._handle.fileno()).st_ino
        self._position = 0 if from_start else self._handle.seek(0, os.SEEK_END)
        logger.debug(
            "Watching log file",
            extra={"path": str(self._path), "offset": self._position},
        )

    @classmethod
    def from_splits(cls, path: Path, splits_file: SplitsFile, *, from_start: bool = False) -> "LogWatcher":
        return cls(
            path,
            start_trigger=splits_file.start_trigger,
            reset_trigger=splits_file.reset_trigger,
            split_triggers=splits_file.split_triggers,
            from_start=from_start,
        )

    @property
    def path(self) -> Path:
        return self._path

    @property
    def current_split(self) -> int:
        """Index of the split whose trigger is expected next."""

        return self._current_split

    @property
    def position(self) -> int:
        return self._position

    def reset_split_index(self) -> None:
        self._current_split = 0

    def set_split_index(self, index: int) -> None:
        if not 0 <= index <= len(self._split_triggers):
            raise ValueError(
                f"Split index {index} outside 0..{len(self._split_triggers)}"
            )
        self._current_split = index

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "LogWatcher":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _reopen_if_replaced(self) -> None:
        try:
            stat = self._path.stat()
        except OSError as exc:
            logger.debug("Log file stat failed", extra={"path": str(self._path), "error": str(exc)})
            return

        truncated = stat.st_size < self._position
        rotated = stat.st_ino != self._inode
        if not (truncated or rotated):
            return

        try:
            handle = open(self._path, "rb")
        except OSError as exc:
            logger.warning(
                "Failed to reopen log file",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return

        self._handle.close()
        self._handle = handle
        self._inode = os.fstat(handle.fileno()).st_ino
        self._position = 0
        logger.info(
            "Log file truncated or rotated; reading from the beginning",
            extra={"path": str(self._path), "truncated": truncated, "rotated": rotated},
        )

    def _read_complete_lines(self) -> list[bytes]:
        try:
            self._handle.seek(self._position)
            data = self._handle.read()
        except OSError as exc:
            logger.warning(
                "Failed to read log file",
                extra={"path": str(self._path), "error": str(exc)},
            )
            return []

        end = data.rfind(b"\n")
        if end < 0:
            return []
        self._position += end + 1
        return data[:end].split(b"\n")

    def _classify(self, line: str) -> WatchEvent | None:
        if self._reset_trigger is not None and self._reset_trigger in line:
            self._current_split = 0
            return WatchEvent.reset()

        if self._start_trigger is not None and self._start_trigger in line:
            return WatchEvent.start()

        if self._current_split < len(self._split_triggers):
            trigger = self._split_triggers[self._current_split]
            if trigger is not None and trigger in line:
                event = WatchEvent.split(self._current_split)
                self._current_split += 1
                return event

        return None

    def poll(self) -> list[WatchEvent]:
        """Return events for every complete line appended since the last call."""

        self._reopen_if_replaced()

        events: list[WatchEvent] = []
        for raw in self._read_complete_lines():
            line = raw.decode("utf-8", errors="replace").strip()
            event = self._classify(line)
            if event is not None:
                logger.debug("Trigger matched", extra={"event": str(event), "line": line})
                events.append(event)
        return events


__all__ = ["LogWatcher", "WatchEvent", "WatchEventKind"]
