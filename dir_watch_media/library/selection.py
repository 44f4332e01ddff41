from __future__ import annotations

import logging
import random
from typing import Iterable, Optional

from .models import DirEntryCandidate, Selection, SortMode


class SelectionPolicy:
    """Picks at most one file out of a scan according to a sort mode.

    Alphabetical modes compare names case-insensitively and let the later
    entry win ties. Time-based modes keep a watermark across scans so repeated
    scans never move back to an older (or newer, for the oldest modes) file
    until the watermark is reset.
    """

    def __init__(self) -> None:
        self._log = logging.getLogger("selection")

    def select(
        self,
        candidates: Iterable[DirEntryCandidate],
        sort_mode: SortMode,
        watermark: Optional[float] = None,
    ) -> Selection:
        sort_mode = SortMode.parse(sort_mode)
        if sort_mode.is_alphabetical:
            return Selection(self._select_alphabetical(candidates, sort_mode), watermark)
        return self._select_by_time(candidates, sort_mode, watermark)

    def _select_alphabetical(self, candidates: Iterable[DirEntryCandidate], sort_mode: SortMode) -> Optional[str]:
        best_name: Optional[str] = None
        best_path: Optional[str] = None
        first = sort_mode == SortMode.ALPHA_FIRST
        for cand in candidates:
            if cand.is_directory:
                continue
            name = cand.name.lower()
            if best_name is None or (name <= best_name if first else name >= best_name):
                best_name = name
                best_path = cand.full_path
        return best_path

    def _select_by_time(
        self,
        candidates: Iterable[DirEntryCandidate],
        sort_mode: SortMode,
        watermark: Optional[float],
    ) -> Selection:
        newest = sort_mode.prefers_newest
        extreme = watermark
        winner: Optional[str] = None
        for cand in candidates:
            if cand.is_directory:
                continue
            stats = cand.with_stats()
            if stats is None:
                self._log.debug("stat failed for %s", cand.full_path)
                continue
            # Zero-length files may still be in the middle of being created
            if not stats.size_bytes:
                continue
            ts = stats.timestamp(sort_mode)
            if ts is None:
                continue
            if extreme is None or (ts >= extreme if newest else ts <= extreme):
                winner = stats.full_path
                extreme = ts
        return Selection(winner, extreme)

    def confirm(self, path: str) -> bool:
        """Check that ``path`` can be opened for reading right now."""
        try:
            with open(path, "rb"):
                pass
        except OSError as exc:
            self._log.debug("file transiently unreadable %s: %s", path, exc)
            return False
        return True

    def resolve_change(self, winner: Optional[str], current: Optional[str]) -> Optional[str]:
        """Return the path to push downstream, or None when nothing should change."""
        if not winner or winner == current:
            return None
        if not self.confirm(winner):
            return None
        return winner

    def pick_random(self, candidates: Iterable[DirEntryCandidate], rng: Optional[random.Random] = None) -> Optional[str]:
        """Uniformly pick one candidate path with single-slot reservoir sampling."""
        rng = rng or random
        picked: Optional[str] = None
        count = 0
        for cand in candidates:
            if cand.is_directory:
                continue
            count += 1
            if count == 1 or rng.randrange(count) == 0:
                picked = cand.full_path
        return picked
