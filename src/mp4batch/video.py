from __future__ import annotations

from pathlib import Path
from typing import Iterator, List, Optional

from .model import DefaultSettings, VideoStatus
from .utils import (
    append_random_suffix,
    auto_append_extension,
    file_exists,
    force_mp4_extension,
)


class VideoEntity:
    """One media item: a standalone file, a join target, or a join child.

    The output name is derived once, when `input_file_name` is assigned.
    """

    def __init__(
        self,
        settings: DefaultSettings,
        *,
        is_join_target: bool = False,
        use_random_suffix: bool = True,
        input_file_name: Optional[str] = None,
    ) -> None:
        self.settings = settings
        self.is_join_target = is_join_target
        self.use_random_suffix = use_random_suffix
        self.children: List[VideoEntity] = []
        self.status = VideoStatus.BLANK
        self._input_file_name = ""
        self._output_file_name = ""
        if input_file_name is not None:
            self.input_file_name = input_file_name

    @property
    def input_file_name(self) -> str:
        return self._input_file_name

    @input_file_name.setter
    def input_file_name(self, value: str) -> None:
        value = auto_append_extension(value)
        self._input_file_name = value
        if self.is_join_target or not self.use_random_suffix:
            out = value
        else:
            out = append_random_suffix(value)
        self._output_file_name = force_mp4_extension(out)

    @property
    def output_file_name(self) -> str:
        return self._output_file_name

    @property
    def input_path(self) -> Path:
        return self.settings.source_dir / self._input_file_name

    @property
    def output_path(self) -> Path:
        base = self.settings.join_dir if self.is_join_target else self.settings.dest_dir
        return base / self._output_file_name

    @property
    def audio_kbps(self) -> int:
        return self.settings.audio_kbps

    @property
    def video_kbps(self) -> int:
        return self.settings.video_kbps

    @property
    def successful(self) -> bool:
        return self.status is VideoStatus.SUCCESSFUL

    def add_child(self, child: "VideoEntity") -> None:
        if not self.is_join_target:
            raise ValueError("only join targets take children")
        self.children.append(child)

    def input_exists(self) -> bool:
        return file_exists(self.input_path)

    def output_exists(self) -> bool:
        return file_exists(self.output_path)

    def leaves(self) -> Iterator["VideoEntity"]:
        """Entities actually transcoded from a source file."""
        if self.is_join_target:
            yield from self.children
        else:
            yield self

    def __repr__(self) -> str:
        kind = "join" if self.is_join_target else "file"
        return (
            f"VideoEntity({kind} {self._input_file_name!r} -> "
            f"{self._output_file_name!r}, status={self.status.value}, "
            f"children={len(self.children)})"
        )


def apply_status(
    entity: VideoEntity, status: VideoStatus, *, cascade_to_children: bool = False
) -> None:
    entity.status = status
    if cascade_to_children:
        for child in entity.children:
            child.status = status
