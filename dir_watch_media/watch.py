from __future__ import annotations

import logging
from random import Random
from typing import Any, Callable, Mapping, Optional, Union

from .errors import DirectoryUnavailable
from .inputs.abstraction import Command, CommandBinder
from .library.deletion import DeletionQueue
from .library.models import Watermark, WatchConfig
from .library.scanner import scan
from .library.selection import SelectionPolicy
from .player.consumer import MediaConsumer
from .player.sinks import SinkAdapter, adapter_for

ConsumerResolver = Callable[[], Optional[MediaConsumer]]


class DirWatchMedia:
    """Watches a directory and feeds the selected file into a media consumer.

    The host calls :meth:`update` whenever its settings change and :meth:`tick`
    once per processing cycle. Nothing raised inside a cycle escapes: a failed
    step simply does nothing and the next tick tries again.
    """

    def __init__(
        self,
        resolve_consumer: ConsumerResolver,
        binder: Optional[CommandBinder] = None,
        config: Union[WatchConfig, Mapping[str, Any], None] = None,
        rng: Optional[Random] = None,
    ) -> None:
        self._log = logging.getLogger("watch")
        self._resolve_consumer = resolve_consumer
        self._binder = binder
        self._rng = rng or Random()
        self._policy = SelectionPolicy()
        self._config = WatchConfig()
        self._watermark = Watermark()
        self._selected_file: Optional[str] = None
        self._deletions = DeletionQueue()
        self._commands_registered = False
        if config is not None:
            self.update(config)

    # State
    @property
    def config(self) -> WatchConfig:
        return self._config

    @property
    def watermark(self) -> Watermark:
        return self._watermark

    @property
    def selected_file(self) -> Optional[str]:
        return self._selected_file

    @property
    def deletion_queue(self) -> DeletionQueue:
        return self._deletions

    @property
    def commands_registered(self) -> bool:
        return self._commands_registered

    # Configuration
    def update(self, config: Union[WatchConfig, Mapping[str, Any]]) -> None:
        """Replace the watch configuration.

        Changing the sort mode, the filter or the extension resets the
        watermark; a new directory alone does not.
        """
        if not isinstance(config, WatchConfig):
            config = WatchConfig.from_settings(config)
        if self._config.resets_watermark(config):
            self._watermark.reset()
        if config != self._config:
            self._log.info(
                "Watching %s (sort=%s filter=%r extension=%r)",
                config.directory,
                config.sort_mode.name,
                config.filter,
                config.extension,
            )
        self._config = config

    # Cycle
    def tick(self, seconds: float = 0.0) -> None:
        try:
            self._deletions.drain()
            consumer = self._consumer()
            if consumer is None:
                return
            if not self._commands_registered:
                self._register_commands(consumer)
            self._select_and_apply(consumer)
        except Exception:
            self._log.exception("Watch cycle failed")

    def _consumer(self) -> Optional[MediaConsumer]:
        try:
            return self._resolve_consumer()
        except Exception as exc:
            self._log.debug("consumer unresolvable: %s", exc)
            return None

    def _adapter(self) -> Optional[SinkAdapter]:
        return adapter_for(self._consumer())

    def _select_and_apply(self, consumer: MediaConsumer) -> None:
        cfg = self._config
        if not cfg.directory:
            return
        try:
            candidates = scan(cfg.directory, cfg.filter, cfg.extension)
        except DirectoryUnavailable as exc:
            self._log.debug("%s", exc)
            return
        selection = self._policy.select(candidates, cfg.sort_mode, self._watermark.value)
        self._watermark.value = selection.watermark
        path = self._policy.resolve_change(selection.winner, self._selected_file)
        if path is None:
            return
        self._selected_file = path
        self._log.info("Selected %s", path)
        adapter = adapter_for(consumer)
        if adapter is not None:
            adapter.set_file(path)

    def _register_commands(self, consumer: MediaConsumer) -> None:
        self._commands_registered = True
        if self._binder is None:
            return
        adapter = adapter_for(consumer)
        self._binder.register(Command.CLEAR, self.clear)
        self._binder.register(Command.RANDOM, self.random)
        self._binder.register(Command.REFRESH, self.refresh)
        if adapter is None or not adapter.supports_playlist:
            return
        self._binder.register(Command.REMOVE_FIRST, self.remove_first)
        self._binder.register(Command.REMOVE_LAST, self.remove_last)
        self._binder.register(Command.DELETE_FIRST, self.delete_first)
        self._binder.register(Command.DELETE_LAST, self.delete_last)

    # Commands
    def clear(self, pressed: bool = True) -> None:
        if not pressed:
            return
        adapter = self._adapter()
        if adapter is not None:
            adapter.clear()

    def random(self, pressed: bool = True) -> None:
        if not pressed:
            return
        adapter = self._adapter()
        if adapter is None or not self._config.directory:
            return
        cfg = self._config
        try:
            candidates = scan(cfg.directory, cfg.filter, cfg.extension)
        except DirectoryUnavailable as exc:
            self._log.debug("%s", exc)
            return
        path = self._policy.pick_random(candidates, self._rng)
        if path is None:
            return
        self._log.info("Random pick %s", path)
        adapter.set_file(path)

    def refresh(self, pressed: bool = True) -> None:
        if not pressed:
            return
        adapter = self._adapter()
        if adapter is not None:
            adapter.refresh()

    def remove_first(self, pressed: bool = True) -> None:
        if pressed:
            self._remove(first=True, delete=False)

    def remove_last(self, pressed: bool = True) -> None:
        if pressed:
            self._remove(first=False, delete=False)

    def delete_first(self, pressed: bool = True) -> None:
        if pressed:
            self._remove(first=True, delete=True)

    def delete_last(self, pressed: bool = True) -> None:
        if pressed:
            self._remove(first=False, delete=True)

    def _remove(self, first: bool, delete: bool) -> None:
        adapter = self._adapter()
        if adapter is None or not adapter.supports_playlist:
            return
        removed = adapter.remove(first, self._deletions if delete else None)
        if removed:
            self._log.info("Removed %s from playlist", removed)
