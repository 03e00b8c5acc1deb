"""Token types produced by the OBJ tokenizer."""

from __future__ import annotations

__all__ = ["END_KINDS", "VALUE_KINDS", "Position", "Token", "TokenKind"]

import dataclasses
import enum
import typing as t


class TokenKind(enum.IntEnum):
    """The kinds of tokens that can occur in OBJ files."""

    #: Letters, digits and underscores, not starting with a digit.
    WORD = 0

    #: Digits, optionally preceded by a minus.
    INT = 1

    #: Digits with a dot between them, optionally preceded by a minus.
    FLOAT = 2

    #: The '/' character.
    SLASH = 3

    #: A run of spaces, tabs and carriage returns.
    SPACE = 4

    #: The '\n' character.
    EOL = 5

    #: The end of the byte stream.
    EOF = 6

    #: A run of characters that matches no other kind.
    UNKNOWN = 7

    #: From '#' up to, but not including, the end of the line.
    COMMENT = 8


#: Token kinds that carry a value and trigger the actions of the parser states.
VALUE_KINDS: t.Final[frozenset[TokenKind]] = frozenset({TokenKind.WORD, TokenKind.INT, TokenKind.FLOAT})

#: Token kinds that terminate a line.
END_KINDS: t.Final[frozenset[TokenKind]] = frozenset({TokenKind.EOL, TokenKind.EOF})


@dataclasses.dataclass(frozen=True)
class Position:
    """The location of the first byte of a token."""

    #: The 0-based line number.
    line: int

    #: The 0-based byte offset from the start of the line.
    column: int

    #: The 0-based byte offset from the start of the stream.
    offset: int


@dataclasses.dataclass(frozen=True)
class Token:
    """A classified lexical unit."""

    #: The kind of the token.
    kind: TokenKind

    #: The exact text of the token. Empty for EOF.
    lexeme: str

    #: Where the token starts.
    position: Position

    def __repr__(self) -> str:
        """The string representation of the token."""
        return f"{self.kind.name}({self.lexeme!r} @ {self.position.line}:{self.position.column})"
