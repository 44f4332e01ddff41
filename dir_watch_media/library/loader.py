from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .models import S_DIRECTORY, S_EXTENSION, S_FILTER, S_SORT_BY

PROFILE_KEYS = (S_DIRECTORY, S_SORT_BY, S_FILTER, S_EXTENSION)


def load_watch_profile(path: Path) -> Dict[str, Any]:
    """Read watch settings from a YAML profile.

    Only the known settings keys are kept. ``directory`` and ``sort`` are
    accepted as aliases of ``dir`` and ``sort_by``. A relative directory is
    resolved against the profile's own location.
    """
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            data = yaml.safe_load(fh) or {}
    except Exception as exc:
        logging.getLogger(__name__).warning("Failed to load %s: %s", path, exc)
        return {}
    if not isinstance(data, dict):
        logging.getLogger(__name__).warning("Ignoring %s: expected a mapping", path)
        return {}

    aliases = {"directory": S_DIRECTORY, "sort": S_SORT_BY}
    profile: Dict[str, Any] = {}
    for key, value in data.items():
        key = aliases.get(str(key), str(key))
        if key in PROFILE_KEYS and value is not None:
            profile[key] = value

    directory = profile.get(S_DIRECTORY)
    if directory:
        d = Path(str(directory)).expanduser()
        if not d.is_absolute():
            d = (path.parent / d).resolve()
        profile[S_DIRECTORY] = str(d)
    return profile
