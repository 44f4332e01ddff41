import io
import json
import os
import threading
import time
from pathlib import Path

from dir_watch_media.library.loader import load_watch_profile
from dir_watch_media.library.models import SortMode, WatchConfig
from dir_watch_media.inputs.abstraction import CommandRegistry
from dir_watch_media.inputs.console import ConsoleCommandReader
from dir_watch_media.library.watcher import ProfileWatcher, TickScheduler
from dir_watch_media.main import build_cycle, build_parser, merge_settings
from dir_watch_media.persistence.settings_store import SettingsStore
from dir_watch_media.player.consumer import VLC_SOURCE, SettingsConsumer
from dir_watch_media.watch import DirWatchMedia

from conftest import write_file


def test_settings_store_defaults_and_roundtrip(tmp_path: Path):
    path = tmp_path / "settings.json"
    store = SettingsStore(path)
    store.ensure_defaults()
    assert store.watch_settings() == {"dir": "", "sort_by": 2, "filter": "", "extension": ""}
    store.update({"dir": "/media", "extension": "mp4"})
    reloaded = SettingsStore(path)
    assert reloaded.get("dir") == "/media"
    assert json.loads(path.read_text())["extension"] == "mp4"


def test_settings_store_ignores_corrupt_file(tmp_path: Path):
    path = tmp_path / "settings.json"
    path.write_text("{not json")
    store = SettingsStore(path)
    assert store.get("dir") is None


def test_watch_config_from_settings():
    cfg = WatchConfig.from_settings({"dir": "/m", "sort_by": 4, "filter": "", "extension": ".mp4"})
    assert cfg.sort_mode is SortMode.ALPHA_FIRST
    assert cfg.filter is None
    assert cfg.extension == ".mp4"
    assert WatchConfig.from_settings({}).sort_mode is SortMode.MODIFIED_NEWEST
    assert WatchConfig.from_settings({"sort_by": 99}).sort_mode is SortMode.MODIFIED_NEWEST


def test_sort_mode_parse():
    assert SortMode.parse("alpha_last") is SortMode.ALPHA_LAST
    assert SortMode.parse("created-oldest") is SortMode.CREATED_OLDEST
    assert SortMode.parse("3") is SortMode.MODIFIED_OLDEST
    assert SortMode.parse(None) is SortMode.MODIFIED_NEWEST


def test_load_watch_profile(tmp_path: Path):
    profile = tmp_path / "replays.yaml"
    profile.write_text("directory: clips\nsort: 5\nextension: mkv\nunused: 1\n", encoding="utf-8")
    data = load_watch_profile(profile)
    assert data == {"dir": str((tmp_path / "clips").resolve()), "sort_by": 5, "extension": "mkv"}


def test_load_watch_profile_bad_yaml(tmp_path: Path):
    profile = tmp_path / "bad.yaml"
    profile.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_watch_profile(profile) == {}
    assert load_watch_profile(tmp_path / "missing.yaml") == {}


def test_cli_overrides_profile_and_store():
    args = build_parser().parse_args(["--dir", "/cli", "--sort", "alpha_first"])
    merged = merge_settings(
        {"dir": "/stored", "sort_by": 2, "filter": "x", "extension": ""},
        {"dir": "/profile", "extension": "mp4"},
        args,
    )
    assert merged == {"dir": "/cli", "sort_by": 4, "filter": "x", "extension": "mp4"}


def test_tick_scheduler_calls_back():
    fired = threading.Event()
    elapsed = []

    def on_tick(seconds: float) -> None:
        elapsed.append(seconds)
        fired.set()

    scheduler = TickScheduler(on_tick, interval_seconds=0.01)
    scheduler.start()
    try:
        assert fired.wait(2.0)
    finally:
        scheduler.stop()
    assert not scheduler.running
    assert elapsed[0] > 0


def test_console_commands_never_overlap_the_cycle(media_dir: Path):
    state = {"active": 0, "max": 0, "calls": 0}
    lock = threading.Lock()

    def slow_update(settings: dict) -> None:
        with lock:
            state["active"] += 1
            state["calls"] += 1
            state["max"] = max(state["max"], state["active"])
        time.sleep(0.002)
        with lock:
            state["active"] -= 1

    consumer = SettingsConsumer(VLC_SOURCE, on_update=slow_update)
    registry = CommandRegistry()
    watcher = DirWatchMedia(lambda: consumer, registry, {"dir": str(media_dir), "sort_by": 2})
    scheduler = TickScheduler(build_cycle(watcher, registry), interval_seconds=0.005)
    reader = ConsoleCommandReader(registry, io.StringIO("refresh\n" * 100))
    scheduler.start()
    try:
        reader_thread = reader.start()
        base = time.time() + 1000
        for i in range(5):
            write_file(media_dir, f"clip{i}.mp4", mtime=base + i)
        newest = str(media_dir / "clip4.mp4")
        reader_thread.join(timeout=2.0)
        deadline = time.monotonic() + 10.0
        while time.monotonic() < deadline:
            if newest in consumer.playlist_values() and state["calls"] >= 100 + len(consumer.playlist_values()):
                break
            time.sleep(0.01)
    finally:
        scheduler.stop()
    assert state["max"] == 1
    assert newest in consumer.playlist_values()
    assert state["calls"] >= 100 + len(consumer.playlist_values())


def test_profile_watcher_reports_each_change(tmp_path: Path):
    profile = tmp_path / "watch.yaml"
    profile.write_text("sort_by: 2\n", encoding="utf-8")
    watcher = ProfileWatcher(profile)
    assert watcher.poll() is False
    os.utime(profile, (2000, 2000))
    assert watcher.poll() is True
    assert watcher.poll() is False
    profile.unlink()
    assert watcher.poll() is True


def test_cycle_reload_resets_watermark(media_dir: Path):
    write_file(media_dir, "a.mp4", mtime=100)
    write_file(media_dir, "b.mp4", mtime=200)
    consumer = SettingsConsumer("image_source")
    registry = CommandRegistry()
    watcher = DirWatchMedia(lambda: consumer, registry, {"dir": str(media_dir), "sort_by": 2})
    pending = []
    cycle = build_cycle(watcher, registry, lambda: pending.pop() if pending else None)

    cycle(0.5)
    assert watcher.selected_file == str(media_dir / "b.mp4")
    assert watcher.watermark.value == 200

    pending.append({"dir": str(media_dir), "sort_by": 3})
    cycle(0.5)
    assert watcher.config.sort_mode is SortMode.MODIFIED_OLDEST
    assert watcher.selected_file == str(media_dir / "a.mp4")
    assert watcher.watermark.value == 100
