from __future__ import annotations

import logging
import queue
from enum import Enum
from typing import Callable, Dict, Optional, Union

CommandHandler = Callable[[bool], None]


class Command(Enum):
    CLEAR = ("dwm_clear", "Clear")
    RANDOM = ("dwm_random", "Random")
    REFRESH = ("dwm_refresh", "Refresh")
    REMOVE_FIRST = ("dwm_remove_first", "Remove First")
    REMOVE_LAST = ("dwm_remove_last", "Remove Last")
    DELETE_FIRST = ("dwm_delete_first", "Delete First")
    DELETE_LAST = ("dwm_delete_last", "Delete Last")

    def __init__(self, command_id: str, display_name: str) -> None:
        self.command_id = command_id
        self.display_name = display_name

    @property
    def playlist_only(self) -> bool:
        return self in PLAYLIST_COMMANDS

    @classmethod
    def lookup(cls, name: str) -> Optional["Command"]:
        """Find a command by id (``dwm_random``), member name or short name (``random``)."""
        key = name.strip().lower().replace("-", "_").replace(" ", "_")
        for command in cls:
            if key in (command.command_id, command.name.lower()):
                return command
        return None


PLAYLIST_COMMANDS = frozenset(
    {Command.REMOVE_FIRST, Command.REMOVE_LAST, Command.DELETE_FIRST, Command.DELETE_LAST}
)


class CommandBinder:
    """Binding mechanism that maps user input onto command handlers."""

    def register(self, command: Command, handler: CommandHandler) -> None:
        raise NotImplementedError


class CommandRegistry(CommandBinder):
    """In-process binder: handlers are triggered by command id or name.

    Input read on other threads goes through :meth:`post`; the thread that
    runs the watch cycle calls :meth:`dispatch_pending` so handlers never run
    concurrently with a tick.
    """

    def __init__(self) -> None:
        self._log = logging.getLogger("commands")
        self._handlers: Dict[Command, CommandHandler] = {}
        self._pending: queue.Queue[tuple[Union[Command, str], bool]] = queue.Queue()

    def register(self, command: Command, handler: CommandHandler) -> None:
        self._handlers[command] = handler
        self._log.debug("Registered command %s", command.command_id)

    def registered(self) -> list[Command]:
        return list(self._handlers)

    def trigger(self, command: Union[Command, str], pressed: bool = True) -> bool:
        """Invoke a registered handler. Returns False when nothing is bound."""
        if isinstance(command, str):
            resolved = Command.lookup(command)
            if resolved is None:
                self._log.warning("Unknown command: %s", command)
                return False
            command = resolved
        handler = self._handlers.get(command)
        if handler is None:
            self._log.info("Command %s is not available", command.command_id)
            return False
        handler(pressed)
        return True

    def post(self, command: Union[Command, str], pressed: bool = True) -> None:
        """Queue a command for the next :meth:`dispatch_pending` call. Thread-safe."""
        self._pending.put((command, pressed))

    def dispatch_pending(self) -> int:
        """Run every queued command on the calling thread. Returns how many ran."""
        count = 0
        while True:
            try:
                command, pressed = self._pending.get_nowait()
            except queue.Empty:
                return count
            try:
                if self.trigger(command, pressed):
                    count += 1
            except Exception as exc:
                self._log.warning("Command %s failed: %s", command, exc)
