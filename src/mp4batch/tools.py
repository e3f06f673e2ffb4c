from __future__ import annotations

from pathlib import Path
from typing import List, Sequence, Tuple

from .ffprobe import probe_dimensions
from .model import BinConfig
from .process import ToolResult, run_tool


def build_transcode_args(
    ffmpeg_bin: str,
    input_path: Path,
    output_path: Path,
    vf: str,
    video_kbps: int,
    audio_kbps: int,
) -> List[str]:
    return [
        ffmpeg_bin,
        "-i", str(input_path),
        "-hide_banner",
        "-r", "24",
        "-vf", vf,
        "-c:v", "libx264",
        "-b:v", f"{video_kbps}k",
        "-c:a", "aac",
        "-b:a", f"{audio_kbps}k",
        "-ar", "44100",
        "-ac", "2",
        "-filter:a", "loudnorm",
        "-tune", "zerolatency",
        "-preset", "veryfast",
        "-movflags", "+faststart",
        "-y", str(output_path),
    ]  # fmt: skip


def build_join_args(
    avidemux_bin: str, parts: Sequence[Path], output_path: Path
) -> List[str]:
    if not parts:
        raise ValueError("nothing to join")
    cmd = [avidemux_bin, "--load", str(parts[0])]
    for p in parts[1:]:
        cmd += ["--append", str(p)]
    cmd += [
        "--video-codec", "copy",
        "--audio-codec", "copy",
        "--output-format", "mp4",
        "--save", str(output_path),
    ]  # fmt: skip
    return cmd


class MediaTools:
    """ffprobe/ffmpeg/avidemux behind the three calls the orchestrator needs."""

    def __init__(self, bins: BinConfig) -> None:
        self.bins = bins

    def probe(self, input_path: Path) -> Tuple[int, int]:
        return probe_dimensions(self.bins.ffprobe, input_path)

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        vf: str,
        video_kbps: int,
        audio_kbps: int,
    ) -> ToolResult:
        cmd = build_transcode_args(
            self.bins.ffmpeg, input_path, output_path, vf, video_kbps, audio_kbps
        )
        print(f"[mp4batch] exec: {' '.join(cmd)}", flush=True)
        return run_tool(cmd)

    def join(self, parts: Sequence[Path], output_path: Path) -> ToolResult:
        cmd = build_join_args(self.bins.avidemux, parts, output_path)
        print(f"[mp4batch] exec: {' '.join(cmd)}", flush=True)
        return run_tool(cmd)
