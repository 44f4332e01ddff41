from __future__ import annotations

import logging
import threading
from typing import Optional, TextIO

from .abstraction import Command, CommandRegistry


class ConsoleCommandReader:
    """Reads one command per line from a text stream and queues it.

    Accepts command ids (``dwm_random``) or short names (``random``,
    ``delete-first``). Blank lines and ``#`` comments are ignored. Commands are
    only posted to the registry; they run when the cycle thread calls
    ``dispatch_pending``.
    """

    def __init__(self, registry: CommandRegistry, stream: TextIO) -> None:
        self.registry = registry
        self.stream = stream
        self._log = logging.getLogger("console")
        self._thread: Optional[threading.Thread] = None

    def handle_line(self, line: str) -> bool:
        text = line.strip()
        if not text or text.startswith("#"):
            return False
        command = Command.lookup(text)
        if command is None:
            self._log.warning("Unknown command: %s", text)
            return False
        self.registry.post(command, pressed=True)
        return True

    def run(self) -> None:
        """Consume the stream until EOF."""
        for line in self.stream:
            self.handle_line(line)

    def start(self) -> threading.Thread:
        if self._thread is None:
            self._thread = threading.Thread(target=self.run, name="ConsoleCommandReader", daemon=True)
            self._thread.start()
        return self._thread
