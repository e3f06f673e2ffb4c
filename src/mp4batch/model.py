from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List


class RunMode(str, Enum):
    NORMAL = "normal"
    LEGACY_CONVERT = "legacy_convert"
    LEGACY_JOIN = "legacy_join"


class VideoStatus(str, Enum):
    BLANK = "blank"
    SUCCESSFUL = "successful"
    INPUT_MISSING = "inputMissing"
    TRANSCODE_ERROR = "transcodeError"
    JOIN_ERROR = "joinError"


@dataclass(frozen=True)
class PathsConfig:
    script_file: Path
    source: Path
    dest: Path
    join: Path


@dataclass(frozen=True)
class BitrateConfig:
    audio_kbps: int
    video_kbps: int


@dataclass(frozen=True)
class BinConfig:
    ffmpeg: str = "ffmpeg"
    ffprobe: str = "ffprobe"
    avidemux: str = "avidemux3_cli"


@dataclass(frozen=True)
class IOConfig:
    mkdirs: bool = True


@dataclass(frozen=True)
class Mp4BatchConfig:
    paths: PathsConfig
    bitrate: BitrateConfig
    video_extensions: List[str]
    bin: BinConfig = field(default_factory=BinConfig)
    io: IOConfig = field(default_factory=IOConfig)


@dataclass(frozen=True)
class RunConfig:
    mode: RunMode = RunMode.NORMAL
    dry_run: bool = False

    @property
    def legacy(self) -> bool:
        return self.mode is not RunMode.NORMAL


@dataclass(frozen=True)
class DefaultSettings:
    """Per-line settings: bitrates (kbps) plus the three working directories."""

    audio_kbps: int
    video_kbps: int
    source_dir: Path
    dest_dir: Path
    join_dir: Path

    @classmethod
    def from_config(cls, cfg: Mp4BatchConfig) -> "DefaultSettings":
        return cls(
            audio_kbps=cfg.bitrate.audio_kbps,
            video_kbps=cfg.bitrate.video_kbps,
            source_dir=cfg.paths.source,
            dest_dir=cfg.paths.dest,
            join_dir=cfg.paths.join,
        )
