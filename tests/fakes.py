from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from mp4batch.errors import ProbeError
from mp4batch.process import ToolResult


class FakeTools:
    """Records every call; writes output files the way the real tools would."""

    def __init__(
        self,
        *,
        dims: Tuple[int, int] = (1920, 1080),
        probe_fail: Optional[set] = None,
        transcode_fail: Optional[set] = None,
        join_rc: int = 0,
    ) -> None:
        self.dims = dims
        self.probe_fail = probe_fail or set()
        self.transcode_fail = transcode_fail or set()
        self.join_rc = join_rc
        self.probed: List[Path] = []
        self.transcoded: List[Dict] = []
        self.joined: List[Tuple[List[Path], Path]] = []

    def probe(self, input_path: Path) -> Tuple[int, int]:
        self.probed.append(input_path)
        if input_path.name in self.probe_fail:
            raise ProbeError("bad json")
        return self.dims

    def transcode(self, input_path, output_path, vf, video_kbps, audio_kbps):
        self.transcoded.append(
            {
                "input": input_path,
                "output": output_path,
                "vf": vf,
                "bv": video_kbps,
                "ba": audio_kbps,
            }
        )
        if input_path.name in self.transcode_fail:
            return ToolResult(1)
        output_path.write_bytes(b"converted")
        return ToolResult(0)

    def join(self, parts: Sequence[Path], output_path: Path) -> ToolResult:
        self.joined.append((list(parts), output_path))
        if self.join_rc != 0:
            return ToolResult(self.join_rc)
        output_path.write_bytes(b"joined")
        return ToolResult(0)

    @property
    def calls(self) -> int:
        return len(self.probed) + len(self.transcoded) + len(self.joined)
