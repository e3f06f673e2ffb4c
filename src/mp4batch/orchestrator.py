from __future__ import annotations

import sys
from pathlib import Path
from typing import List, Protocol, Sequence, Tuple

from .errors import ProbeError
from .model import RunConfig, RunMode, VideoStatus
from .process import ToolResult
from .scale import compute_fit
from .utils import delete_file
from .video import VideoEntity, apply_status


class Tools(Protocol):
    def probe(self, input_path: Path) -> Tuple[int, int]: ...

    def transcode(
        self,
        input_path: Path,
        output_path: Path,
        vf: str,
        video_kbps: int,
        audio_kbps: int,
    ) -> ToolResult: ...

    def join(self, parts: Sequence[Path], output_path: Path) -> ToolResult: ...


def convert_leaf(entity: VideoEntity, tools: Tools) -> VideoStatus:
    if not entity.input_exists():
        print(f"[mp4batch] ERROR: not found {entity.input_path}", file=sys.stderr)
        apply_status(entity, VideoStatus.INPUT_MISSING)
        return entity.status

    print(
        f"[mp4batch] converting {entity.input_path} ==> {entity.output_path}",
        flush=True,
    )

    try:
        width, height = tools.probe(entity.input_path)
        fit = compute_fit(width, height)
    except (ProbeError, ValueError) as e:
        print(
            f"[mp4batch] ERROR: can't obtain video dimensions for {entity.input_path}: {e}",
            file=sys.stderr,
        )
        apply_status(entity, VideoStatus.TRANSCODE_ERROR)
        return entity.status

    res = tools.transcode(
        entity.input_path,
        entity.output_path,
        fit.vf,
        entity.video_kbps,
        entity.audio_kbps,
    )
    if not res.ok:
        print(
            f"[mp4batch] ERROR: transcode failed for {entity.input_path}: {res.describe()}",
            file=sys.stderr,
        )
        apply_status(entity, VideoStatus.TRANSCODE_ERROR)
    else:
        apply_status(entity, VideoStatus.SUCCESSFUL)
    return entity.status


def convert_join(entity: VideoEntity, tools: Tools, run: RunConfig) -> VideoStatus:
    if not entity.children:
        print(
            f"[mp4batch] ERROR: join {entity.output_path} has no files to merge",
            file=sys.stderr,
        )
        apply_status(entity, VideoStatus.JOIN_ERROR)
        return entity.status

    parts: List[Path] = []
    fails = 0
    for child in entity.children:
        if run.mode is RunMode.LEGACY_JOIN:
            # Children were converted by an earlier legacy_convert pass; the
            # join target's own output decides participation.
            if entity.output_exists():
                parts.append(child.output_path)
            else:
                apply_status(child, VideoStatus.JOIN_ERROR)
                fails += 1
            continue

        if convert_leaf(child, tools) is VideoStatus.SUCCESSFUL:
            parts.append(child.output_path)
        else:
            fails += 1

    if fails > 0:
        print(
            f"[mp4batch] ERROR: not merging {entity.output_path}: "
            f"{fails} video conversion(s) failed",
            file=sys.stderr,
        )
        apply_status(entity, VideoStatus.JOIN_ERROR)
        # a converted child is only useful once merged; keep its source
        for child in entity.children:
            if child.status is VideoStatus.SUCCESSFUL:
                apply_status(child, VideoStatus.JOIN_ERROR)
        return entity.status

    delete_file(entity.output_path)
    res = tools.join(parts, entity.output_path)
    if not res.ok:
        print(
            f"[mp4batch] ERROR: merging {entity.output_path} failed: {res.describe()}",
            file=sys.stderr,
        )
        print(
            "[mp4batch] no original files of this group will be deleted",
            file=sys.stderr,
        )
        apply_status(entity, VideoStatus.JOIN_ERROR, cascade_to_children=True)
    else:
        print(f"[mp4batch] joined into {entity.output_path}", flush=True)
        apply_status(entity, VideoStatus.SUCCESSFUL, cascade_to_children=True)
    return entity.status


def convert_entity(entity: VideoEntity, tools: Tools, run: RunConfig) -> VideoStatus:
    if entity.is_join_target:
        return convert_join(entity, tools, run)
    return convert_leaf(entity, tools)


def run_batch(
    entities: Sequence[VideoEntity], tools: Tools, run: RunConfig
) -> List[VideoStatus]:
    """Convert every entity tree in order, one subprocess at a time."""
    return [convert_entity(e, tools, run) for e in entities]
