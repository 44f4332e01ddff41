from __future__ import annotations

import logging
import os
from typing import Optional


class DeletionQueue:
    """Single-slot queue of a file to delete on a later cycle.

    A newer request replaces an older unresolved one. ``drain()`` runs once
    per cycle and keeps the path queued until the file is really gone.
    """

    def __init__(self) -> None:
        self._log = logging.getLogger("deletion")
        self._pending: Optional[str] = None

    @property
    def pending(self) -> Optional[str]:
        return self._pending

    def enqueue(self, path: str) -> None:
        if self._pending and self._pending != path:
            self._log.info("Dropping pending deletion of %s in favour of %s", self._pending, path)
        self._pending = path

    def drain(self) -> bool:
        """Try to remove the pending file.

        Returns:
            True if the slot is empty afterwards.
        """
        path = self._pending
        if path is None:
            return True
        if os.path.exists(path):
            try:
                os.remove(path)
                self._log.info("Deleted %s", path)
            except OSError as exc:
                self._log.debug("deletion failed for %s: %s", path, exc)
        if os.path.exists(path):
            return False
        self._pending = None
        return True
