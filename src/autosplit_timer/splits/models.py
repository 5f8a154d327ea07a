"""Split definition models for a run."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


def _normalize_trigger(value: str | None, label: str) -> str | None:
    if value is None:
        return None
    if not value.strip():
        raise ValueError(f"{label} must not be empty; omit it to disable the trigger")
    return value


class SplitDefinition(BaseModel):
    """A named checkpoint with an optional best segment and log trigger."""

    name: str = Field(..., description="Display name of the split.")
    best_time_ms: int | None = Field(
        default=None,
        ge=0,
        description="Best recorded segment time in milliseconds.",
    )
    trigger: str | None = Field(
        default=None,
        description="Substring that marks this split when it appears in the game log.",
    )

    @field_validator("name")
    @classmethod
    def _normalize_name(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError("Split name must not be empty")
        return normalized

    @field_validator("trigger")
    @classmethod
    def _validate_trigger(cls, value: str | None) -> str | None:
        return _normalize_trigger(value, "Split trigger")

    @property
    def best_time(self) -> float | None:
        """Best segment time in seconds."""

        if self.best_time_ms is None:
            return None
        return self.best_time_ms / 1000.0


class SplitsFile(BaseModel):
    """Game/category labels plus the ordered split list and run-level triggers."""

    game: str = Field(..., description="Game title shown in the header.")
    category: str = Field(..., description="Category name shown under the game title.")
    splits: list[SplitDefinition] = Field(..., min_length=1)
    start_trigger: str | None = Field(
        default=None,
        description="Substring that starts the timer when it appears in the game log.",
    )
    reset_trigger: str | None = Field(
        default=None,
        description="Substring that resets the run when it appears in the game log.",
    )

    @field_validator("start_trigger")
    @classmethod
    def _validate_start_trigger(cls, value: str | None) -> str | None:
        return _normalize_trigger(value, "Start trigger")

    @field_validator("reset_trigger")
    @classmethod
    def _validate_reset_trigger(cls, value: str | None) -> str | None:
        return _normalize_trigger(value, "Reset trigger")

    @property
    def split_triggers(self) -> list[str | None]:
        return [split.trigger for split in self.splits]

    @classmethod
    def default_run(cls) -> "SplitsFile":
        """Single-split run used when no definition file is available."""

        return cls(game="Game", category="Any%", splits=[SplitDefinition(name="Split 1")])


__all__ = ["SplitDefinition", "SplitsFile"]
