from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

import pytest

from dir_watch_media.library.models import DirEntryCandidate


def write_file(directory: Path, name: str, mtime: Optional[float] = None, content: bytes = b"data") -> Path:
    path = directory / name
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


def candidate(name: str, folder: str = "/media", **stats) -> DirEntryCandidate:  # type: ignore[no-untyped-def]
    return DirEntryCandidate(name=name, full_path=f"{folder}/{name}", **stats)


@pytest.fixture
def media_dir(tmp_path: Path) -> Path:
    d = tmp_path / "media"
    d.mkdir()
    return d
