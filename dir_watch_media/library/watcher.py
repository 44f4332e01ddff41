from __future__ import annotations

import logging
import threading
import time
from pathlib import Path
from typing import Callable, Optional


class TickScheduler:
    """Calls ``on_tick(elapsed_seconds)`` at a fixed interval on a daemon thread."""

    def __init__(self, on_tick: Callable[[float], None], interval_seconds: float = 0.5) -> None:
        self.on_tick = on_tick
        self.interval_seconds = interval_seconds
        self._thread: Optional[threading.Thread] = None
        self._stop = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        t = threading.Thread(target=self._loop, name="TickScheduler", daemon=True)
        self._thread = t
        t.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
            self._thread = None

    def _loop(self) -> None:
        log = logging.getLogger(__name__)
        last = time.monotonic()
        while not self._stop.wait(self.interval_seconds):
            now = time.monotonic()
            try:
                self.on_tick(now - last)
            except Exception as exc:
                log.debug("tick error: %s", exc)
            last = now


class ProfileWatcher:
    """Detects edits to a watch profile by polling its mtime.

    ``poll()`` is meant to be called from the cycle thread; it never starts a
    thread of its own.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)
        self._last_mtime = self._snapshot()

    def _snapshot(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except OSError:
            return None

    def poll(self) -> bool:
        """True once per observed change of the file's mtime (including removal)."""
        current = self._snapshot()
        if current == self._last_mtime:
            return False
        self._last_mtime = current
        return True
