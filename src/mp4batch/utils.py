from __future__ import annotations

import os
import uuid
from pathlib import Path
from typing import Any, Iterable, List, Optional


def as_path(s: str) -> Path:
    expanded = os.path.expandvars(os.path.expanduser(s))
    return Path(expanded).resolve()


def safe_int(v: Any) -> Optional[int]:
    try:
        if v is None:
            return None
        return int(v)
    except (TypeError, ValueError):
        return None


def auto_append_extension(filename: str, forced_ext: str = "mp4") -> str:
    """Append `.forced_ext` when `filename` has no extension at all."""
    _, ext = os.path.splitext(filename)
    if ext.lstrip("."):
        return filename
    return f"{filename.rstrip('.')}.{forced_ext}"


def append_random_suffix(filename: str) -> str:
    stem, ext = os.path.splitext(filename)
    return f"{stem}_{uuid.uuid4().hex[:8]}{ext}"


def force_mp4_extension(filename: str) -> str:
    stem, ext = os.path.splitext(filename)
    if ext == ".mp4":
        return filename
    return f"{stem}.mp4"


def file_exists(path: Path) -> bool:
    # Regular files only; symlinks never count.
    try:
        return path.is_file() and not path.is_symlink()
    except OSError:
        return False


def delete_file(path: Path) -> bool:
    """Best-effort unlink. Returns True when a file was removed."""
    try:
        path.unlink()
    except FileNotFoundError:
        return False
    except OSError as e:
        print(f"[mp4batch] could not delete {path}: {e}", flush=True)
        return False
    return True


def unique(items: Iterable[str]) -> List[str]:
    seen = set()
    out: List[str] = []
    for x in items:
        if x not in seen:
            seen.add(x)
            out.append(x)
    return out
