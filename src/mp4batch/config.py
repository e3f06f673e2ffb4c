from __future__ import annotations

import re
from pathlib import Path
from typing import Any, Dict, List

from .errors import ConfigError
from .model import BinConfig, BitrateConfig, IOConfig, Mp4BatchConfig, PathsConfig
from .utils import as_path

try:
    import tomllib  # py311+
except ModuleNotFoundError as exc:  # pragma: no cover
    raise SystemExit("Python 3.11+ required (missing tomllib).") from exc


def load_toml(path: Path) -> Dict[str, Any]:
    try:
        raw = path.read_bytes()
    except FileNotFoundError as e:
        raise ConfigError(
            f"Config file not found: {path}\n"
            "Create it by copying config.example.toml to config.toml and editing paths."
        ) from e
    try:
        return tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as e:
        raise ConfigError(f"Config is not valid UTF-8: {path}") from e
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"TOML parse error in {path}: {e}") from e


def _get(root: Dict[str, Any], path: str) -> Any:
    cur: Any = root
    for part in path.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return None
        cur = cur.get(part)
    return cur


_MISSING = object()


def expect(
    root: Dict[str, Any],
    path: str,
    typ: type,
    *,
    default: Any = _MISSING,
) -> Any:
    """Traverse `path` (dot-separated) and ensure the value exists and is `typ`.

    If `default` is provided and the value is missing, `default` is returned.
    Raises `ConfigError` on missing required values or type mismatches.
    """
    v = _get(root, path)
    if v is None:
        if default is not _MISSING:
            return default
        raise ConfigError(f"Missing required config value: {path}")
    # bool is an int subclass; never accept it where a number is expected
    if not isinstance(v, typ) or (typ is int and isinstance(v, bool)):
        raise ConfigError(
            f"Expected {typ.__name__} for '{path}', got: {type(v).__name__}"
        )
    return v


def _positive_int(root: Dict[str, Any], path: str) -> int:
    v = expect(root, path, int)
    if v <= 0:
        raise ConfigError(f"'{path}' must be a positive integer, got: {v}")
    return v


def parse_video_extensions(raw: Any) -> List[str]:
    """Normalize the extension allow-list.

    Accepts "mp4, MKV,.avi" or ["mp4", "mkv"]; entries shorter than three
    characters are dropped.
    """
    if isinstance(raw, list):
        if not all(isinstance(x, str) for x in raw):
            raise ConfigError("media.video_extensions must be a string or list of strings")
        raw = ",".join(raw)
    if not isinstance(raw, str):
        raise ConfigError(
            f"Expected string for 'media.video_extensions', got: {type(raw).__name__}"
        )
    cleaned = re.sub(r"[^,\da-zA-Z]", "", raw.lower())
    return [e for e in cleaned.split(",") if len(e) >= 3]


def parse_config(root: Dict[str, Any]) -> Mp4BatchConfig:
    # ---- paths
    paths_cfg = PathsConfig(
        script_file=as_path(expect(root, "paths.script_file", str)),
        source=as_path(expect(root, "paths.source", str)),
        dest=as_path(expect(root, "paths.dest", str)),
        join=as_path(expect(root, "paths.join", str)),
    )

    # ---- bitrate
    bitrate_cfg = BitrateConfig(
        audio_kbps=_positive_int(root, "bitrate.audio_kbps"),
        video_kbps=_positive_int(root, "bitrate.video_kbps"),
    )

    # ---- media
    raw_exts = _get(root, "media.video_extensions")
    if raw_exts is None:
        raise ConfigError("Missing required config value: media.video_extensions")
    video_extensions = parse_video_extensions(raw_exts)
    if not video_extensions:
        raise ConfigError("media.video_extensions has no usable entries")

    # ---- bin
    defaults = BinConfig()
    bin_cfg = BinConfig(
        ffmpeg=expect(root, "bin.ffmpeg", str, default=defaults.ffmpeg),
        ffprobe=expect(root, "bin.ffprobe", str, default=defaults.ffprobe),
        avidemux=expect(root, "bin.avidemux", str, default=defaults.avidemux),
    )

    # ---- io
    io_cfg = IOConfig(mkdirs=expect(root, "io.mkdirs", bool, default=True))

    return Mp4BatchConfig(
        paths=paths_cfg,
        bitrate=bitrate_cfg,
        video_extensions=video_extensions,
        bin=bin_cfg,
        io=io_cfg,
    )
