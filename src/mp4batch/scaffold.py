from __future__ import annotations

from pathlib import Path
from typing import List

from .model import Mp4BatchConfig


def planned_folders(cfg: Mp4BatchConfig) -> List[Path]:
    return sorted({cfg.paths.dest, cfg.paths.join}, key=lambda p: str(p))


def ensure_dirs(cfg: Mp4BatchConfig) -> List[Path]:
    ensured: List[Path] = []
    for p in planned_folders(cfg):
        p.mkdir(parents=True, exist_ok=True)
        ensured.append(p)
    return ensured
