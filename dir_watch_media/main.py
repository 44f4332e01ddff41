from __future__ import annotations

import argparse
import logging
import signal
import sys
import threading
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .config import AppConfig
from .inputs.abstraction import CommandRegistry
from .inputs.console import ConsoleCommandReader
from .library.loader import load_watch_profile
from .library.models import S_DIRECTORY, S_EXTENSION, S_FILTER, S_SORT_BY, SortMode
from .library.watcher import ProfileWatcher, TickScheduler
from .logging_setup import setup_logging
from .persistence.settings_store import SettingsStore
from .player.consumer import FFMPEG_SOURCE, IMAGE_SOURCE, VLC_SOURCE
from .player.mpv_client import MpvClient, MpvConsumer, resolve_mpv_consumer
from .watch import DirWatchMedia

SINK_KINDS = (FFMPEG_SOURCE, IMAGE_SOURCE, VLC_SOURCE)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dir-watch-media",
        description="Feed the newest (or oldest, or first/last) file of a directory into mpv.",
    )
    parser.add_argument("--dir", dest="directory", help="Directory to watch")
    parser.add_argument(
        "--sort",
        help="Sort mode: " + ", ".join(m.name.lower() for m in SortMode) + " (or 0-5)",
    )
    parser.add_argument("--filter", help="Only consider names containing this text")
    parser.add_argument("--extension", help="Only consider this extension (mp4 or .mp4)")
    parser.add_argument("--profile", type=Path, help="YAML file with dir/sort_by/filter/extension")
    parser.add_argument("--sink", choices=SINK_KINDS, help="How mpv is driven")
    parser.add_argument("--socket", help="mpv IPC socket path")
    parser.add_argument("--interval", type=float, help="Seconds between scans")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def merge_settings(stored: Dict[str, Any], profile: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Stored settings, overridden by the profile, overridden by the command line."""
    merged = dict(stored)
    merged.update(profile)
    cli = {
        S_DIRECTORY: args.directory,
        S_SORT_BY: int(SortMode.parse(args.sort)) if args.sort is not None else None,
        S_FILTER: args.filter,
        S_EXTENSION: args.extension,
    }
    merged.update({k: v for k, v in cli.items() if v is not None})
    return merged


def build_cycle(
    watcher: DirWatchMedia,
    registry: CommandRegistry,
    reload_settings: Optional[Callable[[], Optional[Dict[str, Any]]]] = None,
) -> Callable[[float], None]:
    """One processing cycle: reload settings, tick, then run queued commands.

    Everything touching the watcher happens inside this callable, so a single
    scheduler thread owns all of its state.
    """

    def _cycle(seconds: float) -> None:
        if reload_settings is not None:
            settings = reload_settings()
            if settings is not None:
                watcher.update(settings)
        watcher.tick(seconds)
        registry.dispatch_pending()

    return _cycle


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = AppConfig()
    setup_logging(config, verbose=args.verbose)
    log = logging.getLogger("dwm.main")

    settings_store = SettingsStore(config.settings_file)
    settings_store.ensure_defaults()
    profile = load_watch_profile(args.profile) if args.profile else {}
    settings = merge_settings(settings_store.watch_settings(), profile, args)
    settings_store.update(settings)

    if not settings.get(S_DIRECTORY):
        log.error("No directory configured; pass --dir or a --profile")
        return 2

    consumer = MpvConsumer(MpvClient(args.socket or config.mpv_socket), args.sink or config.sink_kind)
    registry = CommandRegistry()
    watcher = DirWatchMedia(lambda: resolve_mpv_consumer(consumer), registry, settings)

    stop = threading.Event()

    def _handle_signal(signum, frame) -> None:  # type: ignore[no-untyped-def]
        log.info("Received signal %s, shutting down", signum)
        stop.set()

    signal.signal(signal.SIGINT, _handle_signal)
    signal.signal(signal.SIGTERM, _handle_signal)

    profile_watcher = ProfileWatcher(args.profile) if args.profile else None

    def _reload_settings() -> Optional[Dict[str, Any]]:
        if profile_watcher is None or not profile_watcher.poll():
            return None
        log.info("Profile %s changed, reloading", args.profile)
        reloaded = merge_settings(settings_store.watch_settings(), load_watch_profile(args.profile), args)
        settings_store.update(reloaded)
        return reloaded

    cycle = build_cycle(watcher, registry, _reload_settings)
    scheduler = TickScheduler(cycle, args.interval or config.tick_seconds)
    scheduler.start()
    reader = ConsoleCommandReader(registry, sys.stdin)
    reader.start()
    log.info("Watching %s; type commands (clear, random, refresh, remove-first, ...) on stdin", settings[S_DIRECTORY])
    try:
        # Keep watching after stdin closes; only a signal ends the run
        while not stop.is_set():
            stop.wait(0.25)
    finally:
        scheduler.stop()
        consumer.client.close()
    return 0


if __name__ == "__main__":
    sys.exit(run())
