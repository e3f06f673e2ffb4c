from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Tuple

from .errors import ProbeError
from .process import run_tool
from .utils import safe_int

PROBE_ARGS = ["-hide_banner", "-print_format", "json", "-show_streams", "-loglevel", "0"]


def parse_dimensions(ff: Dict[str, Any]) -> Tuple[int, int]:
    """Width/height of the first stream in ffprobe's JSON output."""
    streams = ff.get("streams")
    if not isinstance(streams, list) or not streams or not isinstance(streams[0], dict):
        raise ProbeError("ffprobe reported no streams")
    width = safe_int(streams[0].get("width"))
    height = safe_int(streams[0].get("height"))
    if not width or not height or width <= 0 or height <= 0:
        raise ProbeError(f"invalid dimensions: {width!r}x{height!r}")
    return width, height


def probe_dimensions(ffprobe_bin: str, media_path: Path) -> Tuple[int, int]:
    res = run_tool([ffprobe_bin, *PROBE_ARGS, "-i", str(media_path)], capture=True)
    if res.error:
        raise ProbeError(res.error)
    if res.returncode != 0:
        raise ProbeError(f"ffprobe exited {res.returncode}")
    try:
        ff = json.loads(res.output)
    except json.JSONDecodeError as e:
        raise ProbeError(f"ffprobe output was not valid JSON: {e}") from e
    if not isinstance(ff, dict):
        raise ProbeError("ffprobe output was not a JSON object")
    return parse_dimensions(ff)
