"""Error and warning reports produced while parsing OBJ files."""

from __future__ import annotations

__all__ = ["Diagnostic", "DiagnosticKind", "Issue", "Severity", "format_diagnostic", "parameters_not_specified"]

import dataclasses
import enum
import typing as t

if t.TYPE_CHECKING:
    from objdecode.tokens import Token


class Severity(enum.Enum):
    """How serious a diagnostic is."""

    ERROR = "ERROR"
    WARNING = "WARNING"


class DiagnosticKind(enum.Enum):
    """The categories of problems that can be found in an OBJ file."""

    #: A run of characters could not be classified.
    LEXICAL = "lexical"

    #: A wrong token kind, a wrong delimiter, a missing field or trailing tokens.
    SYNTAX = "syntax"

    #: A well-formed token could not be converted to the value of its field.
    SEMANTIC = "semantic"

    #: A repetition deviates from the optional subfields given by the first repetition.
    FORMAT_CONSISTENCY = "format consistency"

    #: The line does not start with a known element keyword.
    BAD_ELEMENT_NAME = "bad element name"

    #: The element keyword is known but has no parser.
    UNSUPPORTED_ELEMENT = "unsupported element"

    #: The record was read, but carries a value that is not supported.
    EXTRA_PARAMETER = "extra parameter"

    @property
    def severity(self) -> Severity:
        """The severity of diagnostics of this kind."""
        if self in (DiagnosticKind.UNSUPPORTED_ELEMENT, DiagnosticKind.EXTRA_PARAMETER):
            return Severity.WARNING

        return Severity.ERROR


@dataclasses.dataclass(frozen=True)
class Issue:
    """A problem detected by a parser, not yet tied to a location."""

    #: The category of the problem.
    kind: DiagnosticKind

    #: The human-readable description.
    message: str


@dataclasses.dataclass(frozen=True)
class Diagnostic:
    """A problem located in the source."""

    #: The category of the problem.
    kind: DiagnosticKind

    #: The human-readable description.
    message: str

    #: The 0-based line number.
    line: int

    #: The 0-based byte offset of the offending token within its line.
    column: int = 0

    #: The text of the offending token. Empty for EOF.
    lexeme: str = ""

    #: The text of the offending line, without its newline.
    source_line: str = ""

    @property
    def severity(self) -> Severity:
        """The severity of the diagnostic."""
        return self.kind.severity

    @classmethod
    def at_token(cls, issue: Issue, token: Token, source_line: str) -> Diagnostic:
        """Create a diagnostic pointing at a token.

        :param issue: The problem to report.
        :param token: The offending token.
        :param source_line: The text of the line containing the token.
        :return: The located diagnostic.
        """
        return cls(
            kind=issue.kind,
            message=issue.message,
            line=token.position.line,
            column=token.position.column,
            lexeme=token.lexeme,
            source_line=source_line,
        )


def parameters_not_specified(names: t.Sequence[str]) -> str:
    """Build the message for required fields missing at the end of a line.

    :param names: The labels of the missing fields.
    :return: The message.
    """
    if len(names) == 1:
        return f"parameter {names[0]} is not specified"

    return f"parameters {', '.join(names)} are not specified"


def _display_token(lexeme: str) -> tuple[str, int]:
    """Return the printable form of a token and the width of its caret run."""
    if lexeme == "\n":
        return "eol", 1

    if lexeme == "":
        return "eof", 1

    return lexeme, len(lexeme)


def format_diagnostic(diagnostic: Diagnostic) -> str:
    """Render a diagnostic as human-readable text.

    Errors are followed by the offending line and a caret run under the offending token:

    .. code-block:: text

        [ERROR] line: 1, column: 7, token: 'x', message: invalid Y coordinate, expected: FLOAT, received: WORD
                 v 1.0 x 3.0
                       ^

    Warnings are a single line: ``[WARNING] line: 1, message: unsupported element format - object``.

    :param diagnostic: The diagnostic to render.
    :return: The rendered text, without a trailing newline.
    """
    severity = diagnostic.severity.value
    if diagnostic.severity is Severity.WARNING:
        return f"[{severity}] line: {diagnostic.line + 1}, message: {diagnostic.message}"

    token, width = _display_token(diagnostic.lexeme)
    header = (
        f"[{severity}] line: {diagnostic.line + 1}, column: {diagnostic.column + 1}, "
        f"token: '{token}', message: {diagnostic.message}"
    )

    source = diagnostic.source_line
    indent = " " * (len(severity) + 4)
    # Keep tabs so the carets line up with the echoed source.
    padding = "".join("\t" if char == "\t" else " " for char in source[: diagnostic.column])
    padding += " " * max(0, diagnostic.column - len(source))

    return f"{header}\n{indent}{source}\n{indent}{padding}{'^' * width}"
