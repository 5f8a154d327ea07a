"""Assemble a split definition, timer and optional log watcher."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .bundles import AutosplitterBundle
from .splits import MalformedConfigError, SplitsFile, load_splits
from .timer import Timer
from .watcher import LogWatcher

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class Session:
    splits: SplitsFile
    timer: Timer
    watcher: LogWatcher | None = None
    bundle: AutosplitterBundle | None = None

    def close(self) -> None:
        if self.watcher is not None:
            self.watcher.close()


def open_watcher(path: Path, splits: SplitsFile) -> LogWatcher | None:
    """Open a watcher for ``path``; ``None`` (with a warning) if the file cannot be opened."""

    try:
        return LogWatcher.from_splits(path, splits)
    except OSError as exc:
        logger.warning(
            "Log file unavailable; auto-splitting disabled",
            extra={"path": str(path), "error": str(exc)},
        )
        return None


def load_session(
    splits_path: Path | None = None,
    watch_path: Path | None = None,
    *,
    clock: Callable[[], float] | None = None,
) -> Session:
    """Build a session from command-line paths.

    A malformed definition falls back to the single-split default run.
    """

    splits = SplitsFile.default_run()
    if splits_path is not None:
        try:
            splits = load_splits(splits_path)
        except MalformedConfigError as exc:
            logger.error("Using default run: %s", exc)

    watcher = open_watcher(watch_path, splits) if watch_path is not None else None
    return Session(splits=splits, timer=Timer.from_splits(splits, clock=clock), watcher=watcher)


def load_bundle_session(
    bundle: AutosplitterBundle,
    *,
    home: Path | None = None,
    clock: Callable[[], float] | None = None,
) -> Session:
    """Build a session from a discovered bundle.

    Raises ``MalformedConfigError`` if the bundle's splits cannot be loaded.
    """

    splits = bundle.load_splits()
    watcher = open_watcher(bundle.log_path(home), splits)
    logger.info(
        "Loaded auto-splitter",
        extra={"bundle": bundle.name, "game": bundle.display_name, "auto_split": watcher is not None},
    )
    return Session(
        splits=splits,
        timer=Timer.from_splits(splits, clock=clock),
        watcher=watcher,
        bundle=bundle,
    )


__all__ = ["Session", "load_bundle_session", "load_session", "open_watcher"]
