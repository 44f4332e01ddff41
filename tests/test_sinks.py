from pathlib import Path

from dir_watch_media.library.deletion import DeletionQueue
from dir_watch_media.player.consumer import (
    FFMPEG_SOURCE,
    IMAGE_SOURCE,
    VLC_SOURCE,
    MediaConsumer,
    SettingsConsumer,
)
from dir_watch_media.player.sinks import (
    OrderedPlaylistSink,
    ReplaceAndRestartSink,
    SetOnlySink,
    SinkKind,
    adapter_for,
)

from conftest import write_file


def _playlist(*paths: str) -> dict:
    return {"playlist": [{"value": p} for p in paths]}


def test_adapter_for_kind_tags():
    assert isinstance(adapter_for(SettingsConsumer(FFMPEG_SOURCE)), ReplaceAndRestartSink)
    assert isinstance(adapter_for(SettingsConsumer(IMAGE_SOURCE)), SetOnlySink)
    assert isinstance(adapter_for(SettingsConsumer(VLC_SOURCE)), OrderedPlaylistSink)
    assert adapter_for(SettingsConsumer("browser_source")) is None
    assert adapter_for(None) is None
    assert SinkKind.from_tag("vlc_source") is SinkKind.ORDERED_PLAYLIST


def test_replace_and_restart_sets_file_and_restarts():
    consumer = SettingsConsumer(FFMPEG_SOURCE, {"local_file": "", "is_local_file": False})
    adapter_for(consumer).set_file("/media/a.mp4")
    assert consumer.updates == [{"local_file": "/media/a.mp4", "is_local_file": True}]
    assert consumer.restarts == 1


def test_replace_without_restart_support():
    consumer = SettingsConsumer(FFMPEG_SOURCE, can_restart=False)
    adapter_for(consumer).set_file("/media/a.mp4")
    assert consumer.get_settings()["local_file"] == "/media/a.mp4"
    assert consumer.restarts == 0


def test_set_only_never_restarts():
    consumer = SettingsConsumer(IMAGE_SOURCE)
    sink = adapter_for(consumer)
    sink.set_file("/media/a.png")
    sink.clear()
    assert [u["file"] for u in consumer.updates] == ["/media/a.png", ""]
    assert consumer.restarts == 0


def test_playlist_append_dedups_case_insensitively():
    consumer = SettingsConsumer(VLC_SOURCE)
    sink = adapter_for(consumer)
    assert sink.set_file("/media/Clip.mp4") is True
    assert sink.set_file("/MEDIA/clip.MP4") is False
    assert sink.set_file("/media/other.mp4") is True
    assert consumer.playlist_values() == ["/media/Clip.mp4", "/media/other.mp4"]
    assert len(consumer.updates) == 2


def test_playlist_clear_updates_once():
    consumer = SettingsConsumer(VLC_SOURCE, _playlist("/a", "/b", "/c"))
    adapter_for(consumer).clear()
    assert consumer.playlist_values() == []
    assert len(consumer.updates) == 1


def test_playlist_remove_first_and_last():
    consumer = SettingsConsumer(VLC_SOURCE, _playlist("/a", "/b", "/c"))
    sink = adapter_for(consumer)
    assert sink.remove(first=True) == "/a"
    assert sink.remove(first=False) == "/c"
    assert consumer.playlist_values() == ["/b"]
    assert len(consumer.updates) == 2


def test_playlist_remove_on_empty_is_noop():
    consumer = SettingsConsumer(VLC_SOURCE)
    assert adapter_for(consumer).remove(first=True) is None
    assert consumer.updates == []


def test_playlist_delete_queues_existing_file(media_dir: Path):
    existing = str(write_file(media_dir, "a.mp4"))
    consumer = SettingsConsumer(VLC_SOURCE, _playlist(existing, str(media_dir / "missing.mp4")))
    sink = adapter_for(consumer)
    queue = DeletionQueue()
    sink.remove(first=False, delete_queue=queue)
    assert queue.pending is None
    sink.remove(first=True, delete_queue=queue)
    assert queue.pending == existing
    assert Path(existing).exists()


def test_single_file_sinks_ignore_remove():
    consumer = SettingsConsumer(FFMPEG_SOURCE, {"local_file": "/a"})
    assert adapter_for(consumer).remove(first=True, delete_queue=DeletionQueue()) is None
    assert consumer.updates == []


def test_refresh_reapplies_settings():
    consumer = SettingsConsumer(IMAGE_SOURCE, {"file": "/a.png", "unload": True})
    adapter_for(consumer).refresh()
    assert consumer.updates == [{"file": "/a.png", "unload": True}]


class _BrokenConsumer(MediaConsumer):
    kind = FFMPEG_SOURCE

    def __init__(self) -> None:
        self.settings: dict = {}

    def get_settings(self) -> dict:
        return self.settings

    def update(self, settings: dict) -> None:
        raise RuntimeError("source gone")

    def restart(self) -> None:
        raise RuntimeError("no restart")


def test_consumer_errors_are_dropped():
    consumer = _BrokenConsumer()
    assert adapter_for(consumer).set_file("/a.mp4") is False
    assert consumer.settings["local_file"] == "/a.mp4"
