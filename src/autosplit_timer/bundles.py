"""Discovery of auto-splitter bundles on disk.

A bundle is a folder holding ``config.json`` (game name and log location) and
``splits.json`` (the split definition), e.g. ``autosplitters/my_game/``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field, ValidationError, field_validator

from .splits import SplitsFile, load_splits

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.json"
SPLITS_FILENAME = "splits.json"


class BundleNotFoundError(LookupError):
    """Raised when no discovered bundle matches the requested name."""


class GameConfig(BaseModel):
    """Contents of a bundle's ``config.json``."""

    game: str = Field(..., description="Display name of the game.")
    log_location: str = Field(
        ...,
        description="Path of the game's log file, relative to the home directory unless absolute.",
    )

    @field_validator("game", "log_location")
    @classmethod
    def _not_empty(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("must not be empty")
        return normalized


@dataclass(frozen=True, slots=True)
class AutosplitterBundle:
    folder: Path
    config: GameConfig

    @property
    def name(self) -> str:
        return self.folder.name

    @property
    def display_name(self) -> str:
        return self.config.game

    @property
    def splits_path(self) -> Path:
        return self.folder / SPLITS_FILENAME

    def load_splits(self) -> SplitsFile:
        return load_splits(self.splits_path)

    def log_path(self, home: Path | None = None) -> Path:
        base = home if home is not None else Path.home()
        return (base / Path(self.config.log_location).expanduser()).resolve()


class BundleLoader:
    """Finds bundles under a list of search directories."""

    def __init__(self, search_paths: Iterable[Path] | None = None) -> None:
        paths = [Path(path) for path in (search_paths or [])]
        self._search_paths: list[Path] = [path for path in paths if path.is_dir()]
        self.errors: list[str] = []

    @property
    def search_paths(self) -> list[Path]:
        return list(self._search_paths)

    def discover(self) -> list[AutosplitterBundle]:
        """Return every valid bundle; earlier search paths win on folder name clashes."""

        self.errors = []
        bundles: dict[str, AutosplitterBundle] = {}

        for base in self._search_paths:
            for folder in sorted(path for path in base.iterdir() if path.is_dir()):
                config_path = folder / CONFIG_FILENAME
                if not (config_path.is_file() and (folder / SPLITS_FILENAME).is_file()):
                    continue
                if folder.name in bundles:
                    continue

                try:
                    document = json.loads(config_path.read_text(encoding="utf-8"))
                    config = GameConfig.model_validate(document)
                except (OSError, json.JSONDecodeError, ValidationError) as exc:
                    message = f"Skipping bundle {folder}: {exc}"
                    logger.warning(message)
                    self.errors.append(message)
                    continue

                bundles[folder.name] = AutosplitterBundle(folder=folder, config=config)

        return list(bundles.values())

    def get(self, name: str) -> AutosplitterBundle:
        """Return a bundle by folder name or, failing that, by game display name."""

        bundles = self.discover()
        for bundle in bundles:
            if bundle.name == name:
                return bundle
        for bundle in bundles:
            if bundle.display_name == name:
                return bundle
        raise BundleNotFoundError(f"Auto-splitter '{name}' not found in search paths")


__all__ = [
    "AutosplitterBundle",
    "BundleLoader",
    "BundleNotFoundError",
    "GameConfig",
]
