"""Exceptions raised by objdecode."""

from __future__ import annotations

__all__ = ["OBJError", "OBJParseError", "OBJSchemaError", "SchemaRule"]

import enum
import typing as t

if t.TYPE_CHECKING:
    from objdecode.diagnostics import Diagnostic


class SchemaRule(enum.Enum):
    """The schema invariants checked when compiling an element parser."""

    EMPTY_SCHEMA = "the schema must contain at least one field"
    OPTIONAL_FIRST_FIELD = "the first field of the schema cannot be optional"
    OPTIONAL_NOT_TRAILING = "an optional field cannot be followed by a required field"
    REPEATED_NOT_LAST = "a repeated field must be the last field of the schema"
    NON_NUMERIC_SUBFIELD = "composite subfields must be of an integer or float kind"
    OPTIONAL_IN_SPACE_COMPOSITE = "a composite with a space delimiter cannot contain optional subfields"
    OPTIONAL_FIRST_SUBFIELD = "the first subfield of a composite cannot be optional"
    OPTIONAL_SUBFIELD_NOT_TRAILING = "an optional subfield cannot be followed by a required subfield"
    EMPTY_COMPOSITE = "a composite must contain at least one subfield"
    OPTIONAL_REPEATED_ELEMENT = "the element of a repeated field cannot be optional"
    INVALID_MIN_COUNT = "the minimum count of a repeated field must be at least one"
    INVALID_CHOICES = "choices must be given for enum fields and only for enum fields"
    MISPLACED_WARNING = "a warning can only be attached to a top-level scalar field"
    DUPLICATE_FIELD = "field attribute names must be unique"


class OBJError(Exception):
    """Base class for all objdecode errors."""


class OBJSchemaError(OBJError):
    """Raised when an element schema violates one of the schema invariants."""

    #: The violated invariant.
    rule: SchemaRule

    def __init__(self, rule: SchemaRule, detail: str | None = None) -> None:
        """Initialize the error.

        :param rule: The violated invariant.
        :param detail: Additional context, such as the offending field.
        """
        self.rule = rule
        message = rule.value if detail is None else f"{rule.value}: {detail}"
        super().__init__(message)


class OBJParseError(OBJError):
    """Raised by strict loading when a line of the OBJ file cannot be parsed."""

    #: The diagnostic describing the failure.
    diagnostic: Diagnostic

    def __init__(self, diagnostic: Diagnostic) -> None:
        """Initialize the error.

        :param diagnostic: The diagnostic describing the failure.
        """
        self.diagnostic = diagnostic
        super().__init__(f"line {diagnostic.line + 1}: {diagnostic.message}")
