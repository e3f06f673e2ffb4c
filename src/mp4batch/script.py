from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import List, Optional, Sequence

from .errors import ScriptLexError
from .lexer import ScriptToken, TokenKind, tokenize_line
from .model import DefaultSettings, Mp4BatchConfig, RunConfig, RunMode
from .scan import scan_source_dir
from .video import VideoEntity


@dataclass
class LineResult:
    entities: List[VideoEntity] = field(default_factory=list)
    consumed_filenames: List[str] = field(default_factory=list)


def interpret_line(
    tokens: Sequence[ScriptToken], run: RunConfig, defaults: DefaultSettings
) -> LineResult:
    """Turn one tokenized line into zero or more entity trees.

    Without a ` | ` separator every bareword is a standalone file; with one,
    the last name before it is the join target.
    """
    video_kbps = defaults.video_kbps
    audio_kbps = defaults.audio_kbps
    target: Optional[str] = None
    barewords: List[str] = []
    children: List[str] = []
    has_separator = False

    for tok in tokens:
        if tok.kind is TokenKind.VIDEO_BITRATE:
            video_kbps = int(tok.value)  # type: ignore[arg-type]
        elif tok.kind is TokenKind.AUDIO_BITRATE:
            audio_kbps = int(tok.value)  # type: ignore[arg-type]
        elif tok.kind is TokenKind.JOIN_TARGET:
            barewords.append(str(tok.value))
        elif tok.kind is TokenKind.CHILD_FILE:
            children.append(str(tok.value))
        elif tok.kind is TokenKind.SEPARATOR:
            has_separator = True

    if has_separator:
        target = barewords[-1] if barewords else None
    else:
        children = barewords + children

    if run.mode is RunMode.LEGACY_CONVERT and target is not None:
        return LineResult()
    if run.mode is RunMode.LEGACY_JOIN and target is None:
        return LineResult()

    settings = replace(defaults, video_kbps=video_kbps, audio_kbps=audio_kbps)
    random_suffix = not run.legacy
    result = LineResult(consumed_filenames=list(children))

    if target is not None:
        join = VideoEntity(
            settings,
            is_join_target=True,
            use_random_suffix=False,
            input_file_name=target,
        )
        for name in children:
            child = VideoEntity(
                settings, use_random_suffix=random_suffix, input_file_name=name
            )
            # legacy_join only re-joins children converted by an earlier pass
            if run.mode is RunMode.LEGACY_JOIN and not child.output_exists():
                continue
            join.add_child(child)
        result.entities.append(join)
    else:
        for name in children:
            result.entities.append(
                VideoEntity(
                    settings, use_random_suffix=random_suffix, input_file_name=name
                )
            )

    return result


def read_script(path: Path) -> str:
    """Script contents, or "" when the file cannot be read."""
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"[mp4batch] cannot open script file: {path}: {e}", flush=True)
        return ""


def parse_script(text: str, run: RunConfig, defaults: DefaultSettings) -> LineResult:
    result = LineResult()
    for lineno, line in enumerate(text.splitlines(), start=1):
        try:
            tokens = tokenize_line(line)
        except ScriptLexError as e:
            print(f"[mp4batch] script line {lineno} skipped: {e}", flush=True)
            continue
        if not tokens:
            continue
        lr = interpret_line(tokens, run, defaults)
        result.entities.extend(lr.entities)
        result.consumed_filenames.extend(lr.consumed_filenames)
    return result


def parse_batch(cfg: Mp4BatchConfig, run: RunConfig) -> List[VideoEntity]:
    """Script-derived entities followed by unmentioned files from the source dir."""
    defaults = DefaultSettings.from_config(cfg)
    parsed = parse_script(read_script(cfg.paths.script_file), run, defaults)
    entities = list(parsed.entities)

    if run.mode is RunMode.LEGACY_JOIN:
        return entities

    consumed = set(parsed.consumed_filenames)
    for name in scan_source_dir(cfg.paths.source, cfg.video_extensions):
        if name in consumed:
            continue
        entities.append(
            VideoEntity(defaults, use_random_suffix=False, input_file_name=name)
        )
    return entities
