# Copyright 2025 CrownOps Engineering
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Line lexer for the server configuration language.

The lexer splits text on ``\\n`` only (a trailing ``\\r`` is dropped), so other
Unicode line breaks stay inside their physical line. It drops blank lines and
comments and splits each remaining line on runs of plain space characters.
Tabs are not separators, so a tab between a directive name and its argument
stays inside the first token and is reported by the parser.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from .constants import CARRIAGE_RETURN, COMMENT_CHAR, ESCAPED_COMMENT, LINE_TERMINATOR, TOKEN_SEPARATOR

if TYPE_CHECKING:
    from collections.abc import Iterator

    from mdchat_serverconf.core.type_aliases import Token


@dataclass(slots=True, frozen=True)
class LexedLine:
    """Tokens of a single directive line.

    Attributes:
        line: 1-based physical line number.
        tokens: Non-empty ordered tokens, comment removed.
    """

    line: int
    tokens: tuple[Token, ...]


def strip_comment(text: str) -> str:
    """Return ``text`` up to the first unescaped ``#``.

    ``\\#`` does not open a comment and is replaced with a literal ``#``.
    """
    pieces: list[str] = []
    index = 0
    while index < len(text):
        if text.startswith(ESCAPED_COMMENT, index):
            pieces.append(COMMENT_CHAR)
            index += len(ESCAPED_COMMENT)
            continue
        char = text[index]
        if char == COMMENT_CHAR:
            break
        pieces.append(char)
        index += 1
    return "".join(pieces)


def tokenize_line(text: str) -> tuple[Token, ...]:
    """Split a single physical line into tokens.

    Args:
        text: Raw line without its line terminator.

    Returns:
        Tuple of tokens; empty for blank lines and comment-only lines.
    """
    stripped = text.strip()
    if not stripped or stripped.startswith(COMMENT_CHAR):
        return ()
    body = strip_comment(stripped).strip()
    return tuple(token for token in body.split(TOKEN_SEPARATOR) if token)


class Lexer:
    """Lazy, restartable token stream over configuration text.

    Iterating a ``Lexer`` yields one :class:`LexedLine` per directive line.
    Each iteration starts again from the first line, so the same instance can
    be consumed several times with identical results.
    """

    __slots__ = ("_text",)

    def __init__(self, text: str) -> None:
        self._text = text

    def __iter__(self) -> Iterator[LexedLine]:
        for number, raw in enumerate(self._text.split(LINE_TERMINATOR), start=1):
            tokens = tokenize_line(raw.removesuffix(CARRIAGE_RETURN))
            if tokens:
                yield LexedLine(line=number, tokens=tokens)


__all__ = ["LexedLine", "Lexer", "strip_comment", "tokenize_line"]
