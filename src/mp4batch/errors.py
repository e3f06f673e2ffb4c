class Mp4BatchError(RuntimeError):
    """Base error type."""


class ConfigError(Mp4BatchError):
    """Config contract violation."""


class ScriptLexError(Mp4BatchError):
    """A script line could not be tokenized."""

    def __init__(self, line: str, column: int) -> None:
        super().__init__(f"unexpected input at column {column}: {line!r}")
        self.line = line
        self.column = column


class ProbeError(Mp4BatchError):
    """ffprobe execution/parsing problem."""
