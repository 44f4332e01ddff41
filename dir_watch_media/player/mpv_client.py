from __future__ import annotations

import json
import logging
import socket
from typing import Any, Dict, Optional

from ..errors import ConsumerUnresolvable
from .consumer import (
    FFMPEG_SOURCE,
    S_FILE,
    S_LOCAL_FILE,
    S_PLAYLIST,
    S_VALUE,
    VLC_SOURCE,
    MediaConsumer,
)


class MpvClient:
    """Lightweight client for mpv IPC over UNIX socket.

    Methods are tolerant to connection errors; commands are best-effort.
    """

    def __init__(self, socket_path: str) -> None:
        self.socket_path = socket_path
        self._log = logging.getLogger("mpv")
        self._sock: Optional[socket.socket] = None
        self._request_id = 0

    def _connect(self) -> bool:
        if self._sock is not None:
            return True
        try:
            sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
            sock.settimeout(0.5)
            sock.connect(self.socket_path)
            self._sock = sock
            self._log.info("Connected to mpv at %s", self.socket_path)
            return True
        except Exception as exc:
            self._log.debug("mpv connect failed: %s", exc)
            self._sock = None
            return False

    @property
    def connected(self) -> bool:
        return self._connect()

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None

    def _send(self, command: list[Any], expect_response: bool = False) -> Any:
        if not self._connect():
            return None
        self._request_id += 1
        payload = {"command": command, "request_id": self._request_id}
        line = json.dumps(payload) + "\n"
        try:
            assert self._sock is not None
            self._sock.sendall(line.encode("utf-8"))
            if not expect_response:
                return None
            # Read lines until matching request_id
            buff = b""
            while True:
                chunk = self._sock.recv(4096)
                if not chunk:
                    break
                buff += chunk
                while b"\n" in buff:
                    msg, buff = buff.split(b"\n", 1)
                    if not msg:
                        continue
                    data = json.loads(msg.decode("utf-8"))
                    if data.get("request_id") == self._request_id:
                        return data
        except Exception as exc:
            self._log.debug("mpv send failed: %s", exc)
            # Drop connection for next attempt
            self.close()
        return None

    # Public commands
    def load_file(self, path: str, mode: str = "replace") -> None:
        self._send(["loadfile", path, mode])

    def seek_absolute(self, timestamp: float) -> None:
        self._send(["seek", timestamp, "absolute"])

    def stop(self) -> None:
        """Stop playback (clears the current file)."""
        self._send(["stop"])

    def playlist_clear(self) -> None:
        self._send(["playlist-clear"])

    def get_property(self, name: str) -> Any:
        resp = self._send(["get_property", name], expect_response=True)
        if isinstance(resp, dict) and resp.get("error") == "success":
            return resp.get("data")
        return None


class MpvConsumer(MediaConsumer):
    """Presents a running mpv instance as a media consumer.

    The settings record lives here; applying it drives mpv according to the
    consumer kind: single-file kinds load the file, the playlist kind rebuilds
    mpv's playlist from the ``playlist`` entries.
    """

    def __init__(self, client: MpvClient, kind: str = FFMPEG_SOURCE) -> None:
        self.client = client
        self.kind = kind
        self._log = logging.getLogger("mpv.consumer")
        self._settings: Dict[str, Any] = {}
        if kind == FFMPEG_SOURCE:
            self.restart = self._restart

    def get_settings(self) -> Dict[str, Any]:
        return self._settings

    def update(self, settings: Dict[str, Any]) -> None:
        self._settings = settings
        if self.kind == VLC_SOURCE:
            self.client.stop()
            self.client.playlist_clear()
            for item in settings.get(S_PLAYLIST) or []:
                path = item.get(S_VALUE)
                if path:
                    self.client.load_file(str(path), "append-play")
            return
        key = S_LOCAL_FILE if self.kind == FFMPEG_SOURCE else S_FILE
        path = settings.get(key) or ""
        if path:
            self.client.load_file(str(path))
        else:
            self.client.stop()

    def _restart(self) -> None:
        if self._settings.get(S_LOCAL_FILE):
            self.client.seek_absolute(0)


def resolve_mpv_consumer(consumer: MpvConsumer) -> MpvConsumer:
    """Return the consumer while mpv's IPC socket is reachable.

    Raises:
        ConsumerUnresolvable: mpv is not running or not listening yet.
    """
    if not consumer.client.connected:
        raise ConsumerUnresolvable(f"mpv not reachable at {consumer.client.socket_path}")
    return consumer
