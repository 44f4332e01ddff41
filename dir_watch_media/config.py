from __future__ import annotations

import os
import sys
from pathlib import Path


class AppConfig:
    """Centralized runtime configuration.

    Values may be overridden by environment variables to simplify dev/testing.
    """

    def __init__(self) -> None:
        self.platform = "macos" if sys.platform == "darwin" else "linux"

        # Data directory: /data on a provisioned linux box, ~/.dir-watch-media otherwise
        if self.platform == "linux" and Path("/data").is_dir() and os.access("/data", os.W_OK):
            default_data_dir = Path("/data/dir-watch-media")
        else:
            default_data_dir = Path.home() / ".dir-watch-media"
        self.data_dir = Path(os.getenv("DWM_DATA_DIR", str(default_data_dir))).expanduser().resolve()
        self.logs_dir = self.data_dir / "logs"

        # Settings file location
        self.settings_file = self.data_dir / "settings.json"

        # How often the watch cycle runs
        self.tick_seconds = self._parse_float(os.getenv("DWM_TICK_SECONDS", "0.5"), 0.5)

        # Downstream consumer
        self.sink_kind = os.getenv("DWM_SINK_KIND", "ffmpeg_source")
        default_socket = "/run/dir-watch-media/mpv.sock" if self.platform == "linux" else "/tmp/mpv-dwm.sock"
        self.mpv_socket = os.getenv("MPV_SOCKET", default_socket)

    def _parse_float(self, value: str, default: float) -> float:
        try:
            parsed = float(value)
        except (TypeError, ValueError):
            return default
        return parsed if parsed > 0 else default

    def ensure_data_dirs(self) -> None:
        """Create data directories if writable."""
        for path in (self.data_dir, self.logs_dir):
            try:
                path.mkdir(parents=True, exist_ok=True)
            except Exception:
                # Ignore if not creatable (e.g., read-only). Logging setup will handle fallbacks.
                pass
