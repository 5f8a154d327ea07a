"""Split definition models and loader exports."""

from .loader import MalformedConfigError, load_splits
from .models import SplitDefinition, SplitsFile

__all__ = [
    "MalformedConfigError",
    "SplitDefinition",
    "SplitsFile",
    "load_splits",
]
