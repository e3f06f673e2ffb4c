from __future__ import annotations

import subprocess
from dataclasses import dataclass
from typing import Optional, Sequence


@dataclass(frozen=True)
class ToolResult:
    returncode: Optional[int]
    output: str = ""
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.returncode == 0

    def describe(self) -> str:
        if self.error:
            return self.error
        return f"exit code {self.returncode}"


def run_tool(cmd: Sequence[str], *, capture: bool = False) -> ToolResult:
    """Run `cmd` to completion. Never raises for spawn failures.

    With `capture=False` the tool's own progress output goes to the console.
    """
    try:
        proc = subprocess.run(
            list(cmd), check=False, capture_output=capture, text=capture
        )
    except FileNotFoundError:
        return ToolResult(None, error=f"not found: {cmd[0]}")
    except OSError as e:
        return ToolResult(None, error=f"exec error: {e}")
    return ToolResult(proc.returncode, output=proc.stdout or "")
