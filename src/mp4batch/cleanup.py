from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

from .model import RunConfig, RunMode
from .utils import delete_file, unique
from .video import VideoEntity


@dataclass
class CleanupPlan:
    delete: List[str] = field(default_factory=list)
    keep: List[str] = field(default_factory=list)
    # converted/merged outputs that are stale or superseded
    remove_outputs: List[Path] = field(default_factory=list)


def plan_cleanup(
    entities: Sequence[VideoEntity], scanned: Sequence[str], run: RunConfig
) -> CleanupPlan:
    """Decide which source files are safe to delete after a run.

    A source file is deleted only when its conversion (and, for join
    children, the join) succeeded; everything else found in the source
    directory is kept.
    """
    scanned_names = list(scanned)
    to_delete: List[str] = []
    remove_outputs: List[Path] = []

    def check_leaf(item: VideoEntity, is_child: bool) -> None:
        nonlocal scanned_names, to_delete
        name = item.input_file_name
        if item.successful:
            to_delete.append(name)
            scanned_names = [n for n in scanned_names if n != name]
            if is_child:
                remove_outputs.append(item.output_path)
            return

        scanned_names.append(name)
        to_delete = [n for n in to_delete if n != name]
        # legacy_join keeps outputs of an earlier legacy_convert pass
        if run.mode is RunMode.LEGACY_JOIN and item.output_exists():
            return
        remove_outputs.append(item.output_path)

    for entity in entities:
        if not entity.is_join_target:
            check_leaf(entity, is_child=False)
            continue
        if not entity.successful:
            remove_outputs.append(entity.output_path)
        for child in entity.children:
            check_leaf(child, is_child=True)

    delete = unique(to_delete)
    drop = set(delete)
    keep = [n for n in unique(scanned_names) if n not in drop]
    return CleanupPlan(delete=delete, keep=keep, remove_outputs=remove_outputs)


def apply_cleanup(plan: CleanupPlan, source_dir: Path) -> List[Path]:
    """Remove stale outputs and successfully converted sources.

    Returns the source paths that were deleted.
    """
    deleted: List[Path] = []
    for out in plan.remove_outputs:
        delete_file(out)

    for name in plan.delete:
        path = source_dir / name
        delete_file(path)
        deleted.append(path)
        print(f"[mp4batch] DELETED: {path}", flush=True)

    for name in plan.keep:
        print(f"[mp4batch] KEPT: {source_dir / name}", flush=True)

    return deleted
