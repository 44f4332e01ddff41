from __future__ import annotations

import os
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any, Mapping, Optional


class SortMode(IntEnum):
    CREATED_NEWEST = 0
    CREATED_OLDEST = 1
    MODIFIED_NEWEST = 2
    MODIFIED_OLDEST = 3
    ALPHA_FIRST = 4
    ALPHA_LAST = 5

    @classmethod
    def parse(cls, value: Any) -> "SortMode":
        """Accept an int, a numeric string or a member name; fall back to the default."""
        if isinstance(value, SortMode):
            return value
        if isinstance(value, str):
            key = value.strip().upper().replace("-", "_")
            if key in cls.__members__:
                return cls[key]
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            return DEFAULT_SORT_MODE

    @property
    def is_alphabetical(self) -> bool:
        return self in (SortMode.ALPHA_FIRST, SortMode.ALPHA_LAST)

    @property
    def prefers_newest(self) -> bool:
        return self in (SortMode.CREATED_NEWEST, SortMode.MODIFIED_NEWEST)

    @property
    def uses_created(self) -> bool:
        return self in (SortMode.CREATED_NEWEST, SortMode.CREATED_OLDEST)


DEFAULT_SORT_MODE = SortMode.MODIFIED_NEWEST

# Keys of the host settings record
S_DIRECTORY = "dir"
S_SORT_BY = "sort_by"
S_FILTER = "filter"
S_EXTENSION = "extension"


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text or None


@dataclass(frozen=True)
class WatchConfig:
    directory: Optional[str] = None
    filter: Optional[str] = None
    extension: Optional[str] = None
    sort_mode: SortMode = DEFAULT_SORT_MODE

    def __post_init__(self) -> None:
        # Empty strings mean "disabled"
        object.__setattr__(self, "directory", _opt_str(self.directory))
        object.__setattr__(self, "filter", _opt_str(self.filter))
        object.__setattr__(self, "extension", _opt_str(self.extension))
        object.__setattr__(self, "sort_mode", SortMode.parse(self.sort_mode))

    @classmethod
    def from_settings(cls, settings: Mapping[str, Any]) -> "WatchConfig":
        return cls(
            directory=settings.get(S_DIRECTORY),
            filter=settings.get(S_FILTER),
            extension=settings.get(S_EXTENSION),
            sort_mode=settings.get(S_SORT_BY, DEFAULT_SORT_MODE),
        )

    def to_settings(self) -> dict[str, Any]:
        return {
            S_DIRECTORY: self.directory or "",
            S_SORT_BY: int(self.sort_mode),
            S_FILTER: self.filter or "",
            S_EXTENSION: self.extension or "",
        }

    def resets_watermark(self, other: "WatchConfig") -> bool:
        """True when switching from ``self`` to ``other`` invalidates the watermark.

        A changed directory alone keeps the watermark.
        """
        return (
            self.sort_mode != other.sort_mode
            or self.filter != other.filter
            or self.extension != other.extension
        )


@dataclass
class DirEntryCandidate:
    name: str
    full_path: str
    is_directory: bool = False
    size_bytes: Optional[int] = None
    created_at: Optional[float] = None
    modified_at: Optional[float] = None

    @property
    def has_stats(self) -> bool:
        return self.size_bytes is not None

    def with_stats(self) -> Optional["DirEntryCandidate"]:
        """Return a copy with size and timestamps filled in, or None if stat fails."""
        if self.has_stats:
            return self
        try:
            st = os.stat(self.full_path)
        except OSError:
            return None
        created = getattr(st, "st_birthtime", None)
        if created is None:
            created = st.st_ctime
        return replace(
            self,
            size_bytes=st.st_size,
            created_at=float(created),
            modified_at=float(st.st_mtime),
        )

    def timestamp(self, sort_mode: SortMode) -> Optional[float]:
        return self.created_at if sort_mode.uses_created else self.modified_at


@dataclass
class Watermark:
    """Timestamp bound carried between scans for time-based sort modes."""

    value: Optional[float] = None

    def reset(self) -> None:
        self.value = None


@dataclass(frozen=True)
class Selection:
    winner: Optional[str] = None
    watermark: Optional[float] = None
