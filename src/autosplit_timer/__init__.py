"""Terminal speedrun timer with log-driven auto-splitting."""

__version__ = "0.1.0"

__all__ = ["__version__"]
