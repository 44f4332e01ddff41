from __future__ import annotations

import copy
import logging
from typing import Any, Callable, Dict, List, Optional

# Consumer kind tags
FFMPEG_SOURCE = "ffmpeg_source"
IMAGE_SOURCE = "image_source"
VLC_SOURCE = "vlc_source"

# Keys of the consumer settings record
S_LOCAL_FILE = "local_file"
S_IS_LOCAL_FILE = "is_local_file"
S_FILE = "file"
S_PLAYLIST = "playlist"
S_VALUE = "value"


class MediaConsumer:
    """Handle on a downstream media element.

    Subclasses expose a kind tag, a mutable settings record and a way to apply
    it. ``restart`` is optional: consumers that cannot restart playback leave
    it as None.
    """

    kind: str = ""
    restart: Optional[Callable[[], None]] = None

    def get_settings(self) -> Dict[str, Any]:
        raise NotImplementedError

    def update(self, settings: Dict[str, Any]) -> None:
        raise NotImplementedError


class SettingsConsumer(MediaConsumer):
    """In-process consumer that keeps its settings in a dict.

    Every applied update is recorded as a snapshot so callers (and tests) can
    see what was pushed. ``on_update`` is called with the applied settings.
    """

    def __init__(
        self,
        kind: str,
        settings: Optional[Dict[str, Any]] = None,
        on_update: Optional[Callable[[Dict[str, Any]], None]] = None,
        can_restart: bool = True,
    ) -> None:
        self.kind = kind
        self._log = logging.getLogger("consumer")
        self._settings: Dict[str, Any] = settings if settings is not None else {}
        self._on_update = on_update
        self.updates: List[Dict[str, Any]] = []
        self.restarts = 0
        if can_restart:
            self.restart = self._restart

    def get_settings(self) -> Dict[str, Any]:
        return self._settings

    def update(self, settings: Dict[str, Any]) -> None:
        self._settings = settings
        self.updates.append(copy.deepcopy(settings))
        if self._on_update is not None:
            self._on_update(settings)

    def _restart(self) -> None:
        self.restarts += 1
        self._log.debug("restart requested for %s", self.kind)

    def playlist_values(self) -> List[str]:
        return [str(item.get(S_VALUE, "")) for item in self._settings.get(S_PLAYLIST) or []]
