"""Directory scanning, file selection and deferred deletion."""
from .deletion import DeletionQueue
from .models import DirEntryCandidate, Selection, SortMode, Watermark, WatchConfig
from .scanner import scan
from .selection import SelectionPolicy

__all__ = [
    "DeletionQueue",
    "DirEntryCandidate",
    "Selection",
    "SelectionPolicy",
    "SortMode",
    "Watermark",
    "WatchConfig",
    "scan",
]
