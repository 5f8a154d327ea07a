"""Split definition loading utilities."""

from __future__ import annotations

import json
from pathlib import Path

import yaml
from pydantic import ValidationError

from .models import SplitsFile


class MalformedConfigError(RuntimeError):
    """Raised when a split definition file cannot be read, parsed or validated."""


def load_splits(path: Path) -> SplitsFile:
    """Load a split definition from ``path``.

    ``.json`` files are parsed as JSON; anything else is read as YAML.
    """

    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise MalformedConfigError(f"Failed to read splits file {path}: {exc}") from exc

    try:
        if path.suffix.lower() == ".json":
            document = json.loads(text)
        else:
            document = yaml.safe_load(text)
    except (json.JSONDecodeError, yaml.YAMLError) as exc:
        raise MalformedConfigError(f"Failed to parse splits file {path}: {exc}") from exc

    if not isinstance(document, dict):
        raise MalformedConfigError(f"Splits file {path} must contain a mapping at the top level")

    try:
        return SplitsFile.model_validate(document)
    except ValidationError as exc:
        raise MalformedConfigError(f"Splits validation error in {path}: {exc}") from exc


__all__ = ["MalformedConfigError", "load_splits"]
