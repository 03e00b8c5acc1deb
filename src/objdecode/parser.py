"""Execution of compiled element parsers over a token stream."""

from __future__ import annotations

__all__ = ["ElementParser", "Failure", "Outcome", "Success", "Warned"]

import dataclasses
import typing as t

from objdecode.compiler import ERROR, START, WARNING
from objdecode.diagnostics import DiagnosticKind, Issue
from objdecode.tokens import VALUE_KINDS

if t.TYPE_CHECKING:
    from objdecode.compiler import CompiledFSM
    from objdecode.tokenizer import Tokenizer
    from objdecode.tokens import Token


@dataclasses.dataclass(frozen=True)
class Success:
    """The line was read completely."""

    #: The record built from the line.
    record: t.Any


@dataclasses.dataclass(frozen=True)
class Warned:
    """The line was read completely, but the record carries an unsupported value."""

    #: The record built from the line.
    record: t.Any

    #: The warning to report.
    issue: Issue


@dataclasses.dataclass(frozen=True)
class Failure:
    """The line could not be read."""

    #: The problem that stopped the parser.
    issue: Issue

    #: The token on which the parser stopped.
    token: Token


Outcome: t.TypeAlias = t.Union[Success, Warned, Failure]


class ElementParser:
    """Reads the fields of one element type from a tokenizer.

    The parser is started right after the element keyword was consumed and stops at the end of the line, or
    at the first token that cannot be accepted. A parser owns its working buffer and must not be shared between
    concurrently used tokenizers; the compiled machine itself may be.
    """

    #: The compiled machine driving the parser.
    fsm: CompiledFSM

    def __init__(self, fsm: CompiledFSM) -> None:
        """Initialize the parser.

        :param fsm: The compiled machine of the element type.
        """
        self.fsm = fsm
        self._buffer: dict[str, t.Any] = {}

    def run(self, tokenizer: Tokenizer) -> Outcome:
        """Read one line.

        :param tokenizer: The tokenizer positioned right after the element keyword.
        :return: The outcome of the parse.
        """
        fsm = self.fsm
        buffer = self._buffer
        buffer.clear()

        state = START
        while True:
            token = tokenizer.next()
            following = fsm.transition(state, token.kind)

            if following == ERROR:
                return Failure(fsm.issue(state, token.kind), token)

            if following == START:
                return Success(fsm.extract(buffer))

            if following == WARNING:
                return Warned(fsm.extract(buffer), fsm.issue(state, token.kind))

            if token.kind in VALUE_KINDS:
                action = fsm.action(state)
                if action is not None:
                    message = action(token.lexeme, buffer)
                    if message is not None:
                        return Failure(Issue(DiagnosticKind.SEMANTIC, message), token)

            state = following
