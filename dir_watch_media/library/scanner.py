from __future__ import annotations

import logging
import os
from typing import Iterator, Optional

from ..errors import DirectoryUnavailable
from .models import DirEntryCandidate

_log = logging.getLogger("scanner")


def name_extension(name: str) -> Optional[str]:
    """Extension of ``name`` including the leading dot, or None if it has none."""
    idx = name.rfind(".")
    if idx < 0:
        return None
    return name[idx:]


def matches(name: str, filter: Optional[str] = None, extension: Optional[str] = None) -> bool:
    """Apply the substring and extension filters to a file name.

    The substring match is literal and case-sensitive. The extension match is
    case-insensitive and accepts the filter with or without the leading dot.
    """
    if filter and filter not in name:
        return False
    if extension:
        ext = name_extension(name)
        if ext is None:
            return False
        wanted = extension.lower()
        if wanted != ext.lower() and wanted != ext[1:].lower():
            return False
    return True


def scan(
    directory: str,
    filter: Optional[str] = None,
    extension: Optional[str] = None,
) -> Iterator[DirEntryCandidate]:
    """Enumerate the regular entries of ``directory`` that pass the filters.

    Entries come back in whatever order the filesystem lists them. Every call
    reads the directory afresh.

    Raises:
        DirectoryUnavailable: the directory cannot be opened. This is raised
            eagerly, before the first entry is produced.
    """
    try:
        it = os.scandir(directory)
    except OSError as exc:
        raise DirectoryUnavailable(str(directory), exc.strerror or str(exc)) from exc
    return _iter_entries(it, str(directory), filter, extension)


def _iter_entries(it, directory: str, filter: Optional[str], extension: Optional[str]) -> Iterator[DirEntryCandidate]:  # type: ignore[no-untyped-def]
    with it:
        for entry in it:
            try:
                if entry.is_dir():
                    continue
            except OSError as exc:
                _log.debug("skipping %s: %s", entry.name, exc)
                continue
            if not matches(entry.name, filter, extension):
                continue
            yield DirEntryCandidate(
                name=entry.name,
                full_path=os.path.join(directory, entry.name),
                is_directory=False,
            )
