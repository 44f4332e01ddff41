from __future__ import annotations

import logging
import os
from enum import Enum
from typing import Any, Dict, List, Optional

from ..library.deletion import DeletionQueue
from .consumer import (
    FFMPEG_SOURCE,
    IMAGE_SOURCE,
    S_FILE,
    S_IS_LOCAL_FILE,
    S_LOCAL_FILE,
    S_PLAYLIST,
    S_VALUE,
    VLC_SOURCE,
    MediaConsumer,
)


class SinkKind(Enum):
    REPLACE_AND_RESTART = FFMPEG_SOURCE
    SET_ONLY = IMAGE_SOURCE
    ORDERED_PLAYLIST = VLC_SOURCE

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> Optional["SinkKind"]:
        for kind in cls:
            if kind.value == tag:
                return kind
        return None


class SinkAdapter:
    """Pushes file paths into a consumer using that consumer's update protocol.

    Every operation is best-effort: errors raised by the consumer are logged
    and dropped, and nothing already applied is rolled back.
    """

    kind: SinkKind

    def __init__(self, consumer: MediaConsumer) -> None:
        self.consumer = consumer
        self._log = logging.getLogger("sink")

    @property
    def supports_playlist(self) -> bool:
        return False

    def set_file(self, path: str) -> bool:
        """Hand ``path`` to the consumer. Returns True if an update was applied."""
        raise NotImplementedError

    def clear(self) -> None:
        raise NotImplementedError

    def remove(self, first: bool, delete_queue: Optional[DeletionQueue] = None) -> Optional[str]:
        return None

    def refresh(self) -> None:
        self._apply(self.consumer.get_settings())

    def _apply(self, settings: Dict[str, Any]) -> bool:
        try:
            self.consumer.update(settings)
        except Exception as exc:
            self._log.warning("Consumer update failed: %s", exc)
            return False
        return True

    def _restart(self) -> None:
        restart = getattr(self.consumer, "restart", None)
        if not callable(restart):
            return
        try:
            restart()
        except Exception as exc:
            self._log.warning("Consumer restart failed: %s", exc)


class ReplaceAndRestartSink(SinkAdapter):
    kind = SinkKind.REPLACE_AND_RESTART

    def set_file(self, path: str) -> bool:
        settings = self.consumer.get_settings()
        settings[S_LOCAL_FILE] = path
        settings[S_IS_LOCAL_FILE] = True
        applied = self._apply(settings)
        self._restart()
        return applied

    def clear(self) -> None:
        self.set_file("")


class SetOnlySink(SinkAdapter):
    kind = SinkKind.SET_ONLY

    def set_file(self, path: str) -> bool:
        settings = self.consumer.get_settings()
        settings[S_FILE] = path
        return self._apply(settings)

    def clear(self) -> None:
        self.set_file("")


class OrderedPlaylistSink(SinkAdapter):
    kind = SinkKind.ORDERED_PLAYLIST

    @property
    def supports_playlist(self) -> bool:
        return True

    def _playlist(self, settings: Dict[str, Any]) -> List[Dict[str, Any]]:
        playlist = settings.get(S_PLAYLIST)
        if not isinstance(playlist, list):
            playlist = []
            settings[S_PLAYLIST] = playlist
        return playlist

    def contains(self, path: str) -> bool:
        playlist = self._playlist(self.consumer.get_settings())
        wanted = path.lower()
        return any(str(item.get(S_VALUE, "")).lower() == wanted for item in playlist)

    def set_file(self, path: str) -> bool:
        """Append ``path`` unless an entry differing only in case is already listed."""
        settings = self.consumer.get_settings()
        playlist = self._playlist(settings)
        if self.contains(path):
            self._log.debug("%s already in playlist", path)
            return False
        playlist.append({S_VALUE: path})
        return self._apply(settings)

    def clear(self) -> None:
        settings = self.consumer.get_settings()
        del self._playlist(settings)[:]
        self._apply(settings)

    def remove(self, first: bool, delete_queue: Optional[DeletionQueue] = None) -> Optional[str]:
        settings = self.consumer.get_settings()
        playlist = self._playlist(settings)
        if not playlist:
            return None
        item = playlist.pop(0 if first else len(playlist) - 1)
        path = str(item.get(S_VALUE, "") or "")
        if delete_queue is not None and path and os.path.exists(path):
            delete_queue.enqueue(path)
        self._apply(settings)
        return path


_ADAPTERS = {
    SinkKind.REPLACE_AND_RESTART: ReplaceAndRestartSink,
    SinkKind.SET_ONLY: SetOnlySink,
    SinkKind.ORDERED_PLAYLIST: OrderedPlaylistSink,
}


def adapter_for(consumer: Optional[MediaConsumer]) -> Optional[SinkAdapter]:
    """Build the adapter matching the consumer's kind tag, or None if unsupported."""
    if consumer is None:
        return None
    kind = SinkKind.from_tag(getattr(consumer, "kind", None))
    if kind is None:
        return None
    return _ADAPTERS[kind](consumer)
