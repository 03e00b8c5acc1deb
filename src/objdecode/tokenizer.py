"""Character-level tokenizer for OBJ files."""

from __future__ import annotations

__all__ = ["DEFAULT_CHUNK_SIZE", "Tokenizer", "tokenize"]

import io
import logging
import typing as t

from objdecode.tokens import Position, Token, TokenKind

logger = logging.getLogger(__name__)

#: The number of bytes requested from the source on every refill.
DEFAULT_CHUNK_SIZE: t.Final[int] = 4096

_NEWLINE = 0x0A

# Character classes.
_C_EOL, _C_SPACE, _C_HASH, _C_SLASH, _C_MINUS, _C_DOT, _C_DIGIT, _C_LETTER, _C_OTHER = range(9)

# Scanner states. Reaching _START again means the current token has ended.
(
    _START,
    _COMMENT,
    _EOL,
    _SPACE,
    _SLASH,
    _MINUS,
    _DOT,
    _INT,
    _FLOAT,
    _WORD,
    _UNKNOWN,
) = range(11)


def _build_classes() -> bytes:
    """Build the byte -> character class lookup table."""
    classes = bytearray([_C_OTHER]) * 256
    for byte in b" \t\r":
        classes[byte] = _C_SPACE

    for byte in b"0123456789":
        classes[byte] = _C_DIGIT

    for byte in b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_":
        classes[byte] = _C_LETTER

    classes[_NEWLINE] = _C_EOL
    classes[ord("#")] = _C_HASH
    classes[ord("/")] = _C_SLASH
    classes[ord("-")] = _C_MINUS
    classes[ord(".")] = _C_DOT
    return bytes(classes)


#: Maps every byte value to its character class.
_CLASSES: t.Final[bytes] = _build_classes()

_S = _START

#: The scanner transition table, indexed by [character class][state].
_TRANSITIONS: t.Final[tuple[tuple[int, ...], ...]] = (
    # start     comment   eol space slash minus     dot       int       float     word      unknown
    (_EOL,      _S,       _S, _S,    _S, _S,       _S,       _S,       _S,       _S,       _S),  # eol
    (_SPACE,    _COMMENT, _S, _SPACE, _S, _S,      _S,       _S,       _S,       _S,       _S),  # space
    (_COMMENT,  _COMMENT, _S, _S,    _S, _S,       _S,       _S,       _S,       _S,       _S),  # hash
    (_SLASH,    _COMMENT, _S, _S,    _S, _S,       _S,       _S,       _S,       _S,       _S),  # slash
    (_MINUS,    _COMMENT, _S, _S,    _S, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN),  # minus
    (_UNKNOWN,  _COMMENT, _S, _S,    _S, _UNKNOWN, _UNKNOWN, _DOT,     _UNKNOWN, _UNKNOWN, _UNKNOWN),  # dot
    (_INT,      _COMMENT, _S, _S,    _S, _INT,     _FLOAT,   _INT,     _FLOAT,   _WORD,    _UNKNOWN),  # digit
    (_WORD,     _COMMENT, _S, _S,    _S, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN, _WORD,    _UNKNOWN),  # letter
    (_UNKNOWN,  _COMMENT, _S, _S,    _S, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN, _UNKNOWN),  # other
)  # fmt: skip

#: The kind of token produced when the scanner leaves a state.
_KIND_OF_STATE: t.Final[tuple[TokenKind, ...]] = (
    TokenKind.UNKNOWN,
    TokenKind.COMMENT,
    TokenKind.EOL,
    TokenKind.SPACE,
    TokenKind.SLASH,
    TokenKind.UNKNOWN,  # a lone minus
    TokenKind.UNKNOWN,  # an integer followed by a dot without digits
    TokenKind.INT,
    TokenKind.FLOAT,
    TokenKind.WORD,
    TokenKind.UNKNOWN,
)


def _decode(data: bytes | bytearray) -> str:
    """Decode raw bytes so that encoding the result restores them exactly."""
    return bytes(data).decode("utf-8", "surrogateescape")


def _log_read_error(error: OSError) -> None:
    """The default handler for failures of the underlying byte source."""
    logger.error("Failed to read the OBJ source: %s", error)


class Tokenizer:
    """Splits a byte stream into OBJ tokens.

    The source is read in fixed-size chunks. Each call to :meth:`next` groups the longest run of bytes
    accepted by the scanner automaton into a single token, so that the lexemes of all returned tokens
    concatenate back to the input.

    .. code-block:: python

        tokenizer = Tokenizer(b"v 1.0 2.0 3.0\\n")
        while (token := tokenizer.next()).kind is not TokenKind.EOF:
            print(token)

    """

    #: Whether comment tokens are discarded instead of returned.
    skip_comments: bool

    def __init__(
        self,
        source: t.BinaryIO | bytes,
        *,
        skip_comments: bool = True,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        on_error: t.Callable[[OSError], None] | None = None,
    ) -> None:
        """Initialize the tokenizer.

        :param source: A binary stream or raw bytes to tokenize.
        :param skip_comments: Whether to discard comments. Default is ``True``.
        :param chunk_size: The number of bytes read from the source at once.
        :param on_error: Called with the error when reading the source fails. If ``None``, the error is logged.
            The tokenizer reports EOF after a failure.
        :raises ValueError: If the chunk size is not positive.
        """
        if chunk_size < 1:
            raise ValueError(f"Chunk size must be positive, got {chunk_size}")

        if isinstance(source, (bytes, bytearray, memoryview)):
            source = io.BytesIO(bytes(source))

        self.skip_comments = skip_comments
        self._source = source
        self._chunk_size = chunk_size
        self._on_error = on_error or _log_read_error

        self._buffer = b""
        self._pos = 0
        self._exhausted = False

        self._line = 0
        self._column = 0
        self._offset = 0
        self._line_bytes = bytearray()
        self._last_line = ""

    @property
    def line(self) -> int:
        """The 0-based number of the line being read."""
        return self._line

    @property
    def column(self) -> int:
        """The 0-based byte offset of the next byte within its line."""
        return self._column

    @property
    def offset(self) -> int:
        """The 0-based offset of the next byte within the stream."""
        return self._offset

    @property
    def last_line(self) -> str:
        """The text of the most recently completed line, without its newline."""
        return self._last_line

    @property
    def current_line(self) -> str:
        """The already consumed part of the line being read."""
        return _decode(self._line_bytes)

    def next(self) -> Token:
        """Read the next token.

        Once the source is exhausted, every call returns an EOF token.

        :return: The next token.
        """
        while True:
            token = self._scan()
            if token.kind is TokenKind.COMMENT and self.skip_comments:
                continue

            return token

    def skip_line(self) -> str:
        """Skip everything up to and including the next newline.

        :return: The complete text of the skipped line, including the part consumed before the call.
        """
        while self._fill():
            end = self._buffer.find(b"\n", self._pos)
            stop = len(self._buffer) if end < 0 else end

            segment = self._buffer[self._pos : stop]
            self._line_bytes += segment
            self._column += len(segment)
            self._offset += len(segment)
            self._pos = stop

            if end >= 0:
                self._advance(_NEWLINE)
                return self._last_line

        return _decode(self._line_bytes)

    def __iter__(self) -> t.Iterator[Token]:
        """Iterate over the tokens up to, but excluding, EOF."""
        while (token := self.next()).kind is not TokenKind.EOF:
            yield token

    def _scan(self) -> Token:
        """Run the scanner automaton over the longest possible run of bytes."""
        position = Position(self._line, self._column, self._offset)
        if not self._fill():
            return Token(TokenKind.EOF, "", position)

        state = _START
        lexeme = bytearray()
        while self._fill():
            byte = self._buffer[self._pos]
            following = _TRANSITIONS[_CLASSES[byte]][state]
            if following == _START:
                break

            state = following
            lexeme.append(byte)
            self._advance(byte)

        return Token(_KIND_OF_STATE[state], _decode(lexeme), position)

    def _advance(self, byte: int) -> None:
        """Consume the byte at the current buffer position."""
        if byte == _NEWLINE:
            self._last_line = _decode(self._line_bytes)
            self._line_bytes.clear()
            self._line += 1
            self._column = 0
        else:
            self._line_bytes.append(byte)
            self._column += 1

        self._offset += 1
        self._pos += 1

    def _fill(self) -> bool:
        """Make sure at least one unread byte is buffered.

        :return: ``False`` if the source is exhausted.
        """
        if self._pos < len(self._buffer):
            return True

        if self._exhausted:
            return False

        try:
            chunk = self._source.read(self._chunk_size)
        except OSError as e:
            self._on_error(e)
            chunk = b""

        self._buffer = chunk or b""
        self._pos = 0
        if not self._buffer:
            self._exhausted = True
            return False

        return True


def tokenize(data: bytes, *, skip_comments: bool = False) -> list[Token]:
    """Split raw bytes into tokens.

    :param data: The bytes to tokenize.
    :param skip_comments: Whether to discard comments. Default is ``False``.
    :return: All tokens up to, but excluding, EOF.
    """
    return list(Tokenizer(data, skip_comments=skip_comments))
