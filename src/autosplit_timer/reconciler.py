"""Apply watcher events and manual commands to a timer."""

from __future__ import annotations

import logging
import threading
from typing import Iterable

from .timer import TimerPhase, TimerProtocol
from .watcher import LogWatcher, WatchEvent, WatchEventKind

logger = logging.getLogger(__name__)


class Reconciler:
    """Drive a timer from log triggers and keyboard commands.

    The watcher and the timer each track a current split. Commands that move
    the timer's split pointer backwards or past a split (undo, skip, reset)
    copy the timer's index back into the watcher cursor so that the next
    trigger line arms the right split.
    """

    def __init__(self, timer: TimerProtocol, watcher: LogWatcher | None = None) -> None:
        self._timer = timer
        self._watcher = watcher
        self._lock = threading.RLock()

    @property
    def timer(self) -> TimerProtocol:
        return self._timer

    @property
    def watcher(self) -> LogWatcher | None:
        return self._watcher

    @property
    def auto_splitting(self) -> bool:
        return self._watcher is not None

    def replace(self, timer: TimerProtocol, watcher: LogWatcher | None = None) -> None:
        """Swap in a new timer/watcher pair, closing the previous watcher."""

        with self._lock:
            if self._watcher is not None and self._watcher is not watcher:
                self._watcher.close()
            self._timer = timer
            self._watcher = watcher

    def poll(self) -> list[WatchEvent]:
        """Poll the watcher and apply every event it produced, in order."""

        with self._lock:
            if self._watcher is None:
                return []
            events = self._watcher.poll()
            self.apply(events)
            return events

    def apply(self, events: Iterable[WatchEvent]) -> None:
        with self._lock:
            for event in events:
                self.apply_event(event)

    def apply_event(self, event: WatchEvent) -> bool:
        """Apply one event; returns False when the timer phase rules it out."""

        with self._lock:
            phase = self._timer.current_phase()
            if event.kind is WatchEventKind.START:
                if phase is not TimerPhase.NOT_RUNNING:
                    logger.debug("Ignoring start trigger", extra={"phase": phase.value})
                    return False
                self._timer.start()
                logger.info("Auto-start")
                return True

            if event.kind is WatchEventKind.SPLIT:
                if phase is not TimerPhase.RUNNING:
                    logger.debug(
                        "Ignoring split trigger",
                        extra={"phase": phase.value, "split_index": event.index},
                    )
                    return False
                self._timer.split()
                logger.info("Auto-split", extra={"split_index": event.index})
                return True

            self._reset()
            logger.info("Auto-reset")
            return True

    def _reset(self) -> None:
        self._timer.reset(True)
        if self._watcher is not None:
            self._watcher.reset_split_index()

    def _sync_cursor(self) -> None:
        if self._watcher is None:
            return
        index = self._timer.current_split_index()
        self._watcher.set_split_index(index or 0)

    def start(self) -> None:
        with self._lock:
            self._timer.start()

    def split(self) -> None:
        with self._lock:
            self._timer.split()

    def pause(self) -> None:
        with self._lock:
            self._timer.pause()

    def resume(self) -> None:
        with self._lock:
            self._timer.resume()

    def start_or_split(self) -> None:
        with self._lock:
            phase = self._timer.current_phase()
            if phase is TimerPhase.NOT_RUNNING:
                self._timer.start()
            elif phase is TimerPhase.RUNNING:
                self._timer.split()
            elif phase is TimerPhase.PAUSED:
                self._timer.resume()

    def toggle_pause(self) -> None:
        with self._lock:
            phase = self._timer.current_phase()
            if phase is TimerPhase.RUNNING:
                self._timer.pause()
            elif phase is TimerPhase.PAUSED:
                self._timer.resume()

    def reset(self) -> None:
        with self._lock:
            self._reset()

    def undo_split(self) -> None:
        with self._lock:
            self._timer.undo_split()
            self._sync_cursor()

    def skip_split(self) -> None:
        with self._lock:
            self._timer.skip_split()
            self._sync_cursor()


__all__ = ["Reconciler"]
