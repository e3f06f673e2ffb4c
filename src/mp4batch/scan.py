from __future__ import annotations

from pathlib import Path
from typing import List

from .errors import ConfigError


def scan_source_dir(source_dir: Path, video_extensions: List[str]) -> List[str]:
    """Names of the video files directly under `source_dir`, sorted.

    Only regular files count (no symlinks, no recursion); the extension match
    is case-insensitive.
    """
    if not source_dir.exists():
        raise ConfigError(f"paths.source does not exist: {source_dir}")
    if not source_dir.is_dir():
        raise ConfigError(f"paths.source is not a directory: {source_dir}")

    exts_norm = {e.lower().lstrip(".") for e in video_extensions if e.strip()}

    names = [
        p.name
        for p in source_dir.iterdir()
        if p.is_file()
        and not p.is_symlink()
        and p.suffix.lower().lstrip(".") in exts_norm
    ]
    names.sort()
    return names
