"""Tokenizer for batch script lines.

Grammar, one directive per line::

    [bv:<int>] [ba:<int>] [<target> | <file> <file> ...]

Two states: `main` (bitrate overrides, target name, separator) and `files`
(entered after the ` | ` separator; barewords only).
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Pattern, Tuple, Union

from .errors import ScriptLexError
from .utils import auto_append_extension


class TokenKind(str, Enum):
    VIDEO_BITRATE = "videoBitrate"
    AUDIO_BITRATE = "audioBitrate"
    JOIN_TARGET = "joinTargetName"
    CHILD_FILE = "childFileName"
    SEPARATOR = "separator"


@dataclass(frozen=True)
class ScriptToken:
    kind: TokenKind
    value: Union[int, str, None] = None
    column: int = 0


_BAREWORD = re.compile(r"[._0-9A-Za-z-]+")
_SPACE = re.compile(r"\s+")

# Order matters: the first rule that matches at the cursor wins.
_MAIN: List[Tuple[Optional[TokenKind], Pattern[str]]] = [
    (TokenKind.VIDEO_BITRATE, re.compile(r"bv:(\d+)")),
    (TokenKind.AUDIO_BITRATE, re.compile(r"ba:(\d+)")),
    (TokenKind.JOIN_TARGET, _BAREWORD),
    (TokenKind.SEPARATOR, re.compile(r" \| ")),
    (None, _SPACE),
]

_FILES: List[Tuple[Optional[TokenKind], Pattern[str]]] = [
    (TokenKind.CHILD_FILE, _BAREWORD),
    (None, _SPACE),
]


def _value(kind: TokenKind, m: "re.Match[str]") -> Union[int, str, None]:
    if kind in (TokenKind.VIDEO_BITRATE, TokenKind.AUDIO_BITRATE):
        return int(m.group(1))
    if kind is TokenKind.SEPARATOR:
        return None
    return auto_append_extension(m.group(0))


def tokenize_line(line: str) -> List[ScriptToken]:
    """Tokenize one script line.

    Raises `ScriptLexError` on the first character no rule accepts.
    """
    tokens: List[ScriptToken] = []
    rules = _MAIN
    pos = 0
    while pos < len(line):
        for kind, pattern in rules:
            m = pattern.match(line, pos)
            if m is None:
                continue
            if kind is not None:
                tokens.append(ScriptToken(kind, _value(kind, m), pos))
                if kind is TokenKind.SEPARATOR:
                    rules = _FILES
            pos = m.end()
            break
        else:
            raise ScriptLexError(line, pos)
    return tokens
