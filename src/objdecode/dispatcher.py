"""Line dispatching and error recovery for OBJ token streams."""

from __future__ import annotations

__all__ = ["Dispatcher", "Report", "log_diagnostic"]

import logging
import typing as t

from objdecode.diagnostics import Diagnostic, DiagnosticKind, Issue, Severity, format_diagnostic
from objdecode.parser import ElementParser, Failure, Warned
from objdecode.registry import ElementType, default_registry
from objdecode.tokens import TokenKind

if t.TYPE_CHECKING:
    from objdecode.parser import Outcome
    from objdecode.registry import Registry
    from objdecode.tokenizer import Tokenizer
    from objdecode.tokens import Token

logger = logging.getLogger(__name__)

#: Receives every diagnostic produced while dispatching.
Report: t.TypeAlias = t.Callable[[Diagnostic], None]

#: Tokens ignored at the start of a line.
_BLANK_KINDS: t.Final[frozenset[TokenKind]] = frozenset({TokenKind.EOL, TokenKind.SPACE, TokenKind.COMMENT})


def log_diagnostic(diagnostic: Diagnostic) -> None:
    """Log a rendered diagnostic at its severity. This is the default report."""
    level = logging.ERROR if diagnostic.severity is Severity.ERROR else logging.WARNING
    logger.log(level, "%s", format_diagnostic(diagnostic))


class Dispatcher:
    """Reads the elements of an OBJ file one line at a time.

    The first word of every line selects the element parser. Lines that cannot be parsed are reported and
    skipped, so a single malformed line never stops the stream.

    .. code-block:: python

        dispatcher = Dispatcher(Tokenizer(stream))
        for element_type, outcome in dispatcher:
            print(element_type, outcome.record)

    """

    #: The tokenizer the elements are read from.
    tokenizer: Tokenizer

    #: The compiled parsers, keyed by element keyword.
    registry: Registry

    #: Whether warnings are passed to the report.
    ignore_warnings: bool

    #: Whether errors are passed to the report.
    ignore_errors: bool

    #: The number of errors found so far, including ignored ones.
    error_count: int

    #: The number of warnings found so far, including ignored ones.
    warning_count: int

    def __init__(
        self,
        tokenizer: Tokenizer,
        registry: Registry | None = None,
        *,
        report: Report | None = None,
        ignore_warnings: bool = False,
        ignore_errors: bool = False,
    ) -> None:
        """Initialize the dispatcher.

        :param tokenizer: The tokenizer to read from.
        :param registry: The compiled parsers. If ``None``, the default registry is used.
        :param report: Receives every diagnostic. If ``None``, diagnostics are logged.
        :param ignore_warnings: Whether to withhold warnings from the report. Default is ``False``.
        :param ignore_errors: Whether to withhold errors from the report. Default is ``False``.
        """
        self.tokenizer = tokenizer
        self.registry = registry if registry is not None else default_registry()
        self.ignore_warnings = ignore_warnings
        self.ignore_errors = ignore_errors
        self.error_count = 0
        self.warning_count = 0

        self._report = report or log_diagnostic
        self._parsers = {keyword: ElementParser(fsm) for keyword, fsm in self.registry.items()}
        self._keyword: Token | None = None

    @property
    def line(self) -> int:
        """The 0-based line number of the element returned last."""
        return 0 if self._keyword is None else self._keyword.position.line

    def next(self) -> tuple[ElementType, Outcome | None]:
        """Read the next element.

        :return: The element type and the outcome of its parser, which is either a success or a warning.
            At the end of the input, ``(ElementType.END_OF_FILE, None)`` is returned on every call.
        """
        tokenizer = self.tokenizer
        while True:
            token = tokenizer.next()
            if token.kind in _BLANK_KINDS:
                continue

            if token.kind is TokenKind.EOF:
                return ElementType.END_OF_FILE, None

            element_type = ElementType.from_keyword(token.lexeme) if token.kind is TokenKind.WORD else None
            if element_type is None:
                self._fail(Issue(DiagnosticKind.BAD_ELEMENT_NAME, "error in the name of the element type"), token)
                continue

            parser = self._parsers.get(token.lexeme)
            if parser is None:
                source_line = tokenizer.skip_line()
                message = f"unsupported element format - {element_type.description}"
                self.emit(Diagnostic.at_token(Issue(DiagnosticKind.UNSUPPORTED_ELEMENT, message), token, source_line))
                continue

            outcome = parser.run(tokenizer)
            if isinstance(outcome, Failure):
                self._fail(outcome.issue, outcome.token)
                continue

            self._keyword = token
            if isinstance(outcome, Warned):
                self.report(outcome.issue)

            return element_type, outcome

    def __iter__(self) -> t.Iterator[tuple[ElementType, Outcome]]:
        """Iterate over the elements up to, but excluding, the end of the input."""
        while True:
            element_type, outcome = self.next()
            if outcome is None:
                return

            yield element_type, outcome

    def report(self, issue: Issue) -> None:
        """Report a problem with the element returned last, such as an invalid vertex reference.

        :param issue: The problem to report.
        """
        keyword = self._keyword
        if keyword is None:
            raise RuntimeError("No element has been read yet")

        tokenizer = self.tokenizer
        source_line = tokenizer.current_line if tokenizer.line == keyword.position.line else tokenizer.last_line
        self.emit(Diagnostic.at_token(issue, keyword, source_line))

    def emit(self, diagnostic: Diagnostic) -> None:
        """Count a diagnostic and pass it to the report unless its severity is ignored.

        :param diagnostic: The diagnostic.
        """
        if diagnostic.severity is Severity.ERROR:
            self.error_count += 1
            if self.ignore_errors:
                return
        else:
            self.warning_count += 1
            if self.ignore_warnings:
                return

        self._report(diagnostic)

    def _fail(self, issue: Issue, token: Token) -> None:
        """Report a failed line and move past it."""
        tokenizer = self.tokenizer
        if token.kind is TokenKind.EOL:
            source_line = tokenizer.last_line
        elif token.kind is TokenKind.EOF:
            source_line = tokenizer.current_line
        else:
            source_line = tokenizer.skip_line()

        self.emit(Diagnostic.at_token(issue, token, source_line))
