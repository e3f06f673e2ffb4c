from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Callable, List, Optional, Sequence

from .cleanup import apply_cleanup, plan_cleanup
from .config import load_toml, parse_config
from .errors import ConfigError
from .model import Mp4BatchConfig, RunConfig, RunMode
from .orchestrator import Tools, run_batch
from .scaffold import ensure_dirs
from .scan import scan_source_dir
from .script import parse_batch
from .tools import MediaTools
from .utils import as_path
from .video import VideoEntity

MODE_ENV = "MP4BATCH_MODE"


def build_arg_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="mp4batch",
        description="Convert source videos to 854x480 MP4 and join groups listed in a batch script.",
    )
    p.add_argument(
        "--config",
        default="config.toml",
        help="Path to config TOML (default: ./config.toml).",
    )
    p.add_argument(
        "--mode",
        choices=[m.value for m in RunMode],
        default=None,
        help=f"Run mode (default: ${MODE_ENV} or 'normal').",
    )
    p.add_argument(
        "--print-config",
        action="store_true",
        help="Print parsed config summary and exit (debug).",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="List what would be converted/joined without running anything.",
    )
    p.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation before converting.",
    )
    p.add_argument(
        "--write-report",
        default=None,
        help="Optional path to write a JSON run report (statuses, deleted/kept files).",
    )
    return p


def resolve_mode(arg: Optional[str], environ=os.environ) -> RunMode:
    raw = arg or environ.get(MODE_ENV) or RunMode.NORMAL.value
    try:
        return RunMode(raw.strip().lower())
    except ValueError as e:
        raise ConfigError(
            f"invalid run mode {raw!r} (expected one of: {', '.join(m.value for m in RunMode)})"
        ) from e


def print_config_summary(cfg: Mp4BatchConfig, run: RunConfig) -> None:
    print("mp4batch config summary")
    print("-----------------------")
    print(f"script_file : {cfg.paths.script_file}")
    print(f"source      : {cfg.paths.source}")
    print(f"dest        : {cfg.paths.dest}")
    print(f"join        : {cfg.paths.join}")
    print(f"bitrate     : video={cfg.bitrate.video_kbps}k audio={cfg.bitrate.audio_kbps}k")
    print(f"extensions  : {', '.join(cfg.video_extensions)}")
    print(f"ffmpeg      : {cfg.bin.ffmpeg}")
    print(f"ffprobe     : {cfg.bin.ffprobe}")
    print(f"avidemux    : {cfg.bin.avidemux}")
    print(f"mode        : {run.mode.value}")


def print_plan(entities: Sequence[VideoEntity]) -> None:
    print("[mp4batch] files scanned by the app:")
    for e in entities:
        if e.is_join_target:
            print(f"  JOIN/MERGE INTO: {e.output_path}")
            for c in e.children:
                if not c.input_exists():
                    continue
                print(
                    f"    {c.input_path} -> {c.output_path} [{c.video_kbps}k/{c.audio_kbps}k]"
                )
            print("  END")
        elif e.input_exists():
            print(
                f"  (SINGLE) {e.input_path} -> {e.output_path} [{e.video_kbps}k/{e.audio_kbps}k]"
            )


def confirm(prompt: str, reader: Optional[Callable[[str], str]] = None) -> bool:
    try:
        answer = (reader or input)(f"{prompt} [y/N] ")
    except EOFError:
        return False
    return answer.strip().lower() in {"y", "yes"}


def _entity_report(e: VideoEntity) -> dict:
    out = {
        "input": e.input_file_name,
        "output": str(e.output_path),
        "join": e.is_join_target,
        "status": e.status.value,
    }
    if e.is_join_target:
        out["children"] = [_entity_report(c) for c in e.children]
    return out


def main(argv: Optional[List[str]] = None, *, tools: Optional[Tools] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    cfg_path = as_path(str(args.config))
    try:
        cfg = parse_config(load_toml(cfg_path))
        run = RunConfig(mode=resolve_mode(args.mode), dry_run=bool(args.dry_run))
    except ConfigError as e:
        print(f"[mp4batch] config error: {e}", file=sys.stderr)
        return 2

    if args.print_config:
        print_config_summary(cfg, run)
        return 0

    try:
        entities = parse_batch(cfg, run)
    except (ConfigError, OSError) as e:
        print(f"[mp4batch] scan error: {e}", file=sys.stderr)
        return 3

    print_plan(entities)

    if run.dry_run:
        print("[mp4batch] DRY RUN (nothing converted or deleted)")
        return 0

    if not args.yes and not confirm("Do you want to continue?"):
        print("[mp4batch] aborted")
        return 1

    if cfg.io.mkdirs:
        ensure_dirs(cfg)

    run_batch(entities, tools or MediaTools(cfg.bin), run)

    try:
        scanned = scan_source_dir(cfg.paths.source, cfg.video_extensions)
    except ConfigError as e:
        print(f"[mp4batch] scan error: {e}", file=sys.stderr)
        return 3
    plan = plan_cleanup(entities, scanned, run)
    apply_cleanup(plan, cfg.paths.source)
    print("[mp4batch] cleaned up all files")

    leaves = [leaf for e in entities for leaf in e.leaves()]
    converted = sum(1 for leaf in leaves if leaf.successful)
    failed = len(leaves) - converted + sum(
        1 for e in entities if e.is_join_target and not e.successful
    )
    print(f"[mp4batch] summary: converted={converted} failed={failed}")

    if args.write_report:
        rp = as_path(str(args.write_report))
        rp.parent.mkdir(parents=True, exist_ok=True)
        payload = {
            "mode": run.mode.value,
            "entities": [_entity_report(e) for e in entities],
            "deleted": plan.delete,
            "kept": plan.keep,
        }
        rp.write_text(
            json.dumps(payload, indent=2, sort_keys=True) + "\n", encoding="utf-8"
        )
        print(f"[mp4batch] wrote report: {rp}")

    return 5 if failed else 0
