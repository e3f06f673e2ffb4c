from pathlib import Path

import pytest

from mp4batch.model import (
    BinConfig,
    BitrateConfig,
    DefaultSettings,
    IOConfig,
    Mp4BatchConfig,
    PathsConfig,
)


def make_cfg(base: Path) -> Mp4BatchConfig:
    return Mp4BatchConfig(
        paths=PathsConfig(
            script_file=base / "script.txt",
            source=base / "source",
            dest=base / "dest",
            join=base / "join",
        ),
        bitrate=BitrateConfig(audio_kbps=128, video_kbps=1200),
        video_extensions=["mp4", "mkv", "avi"],
        bin=BinConfig(),
        io=IOConfig(mkdirs=True),
    )


@pytest.fixture
def cfg(tmp_path) -> Mp4BatchConfig:
    c = make_cfg(tmp_path)
    for d in (c.paths.source, c.paths.dest, c.paths.join):
        d.mkdir(parents=True)
    return c


@pytest.fixture
def settings(cfg) -> DefaultSettings:
    return DefaultSettings.from_config(cfg)
