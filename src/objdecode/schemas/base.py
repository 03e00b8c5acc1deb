"""Declarative field schemas describing the layout of OBJ element lines."""

from __future__ import annotations

__all__ = ["AnyField", "Composite", "Delimiter", "Repeated", "Scalar", "Schema", "ValueKind"]

import dataclasses
import enum
import typing as t


class ValueKind(enum.Enum):
    """The kinds of values a scalar field can hold."""

    INT = "int"
    FLOAT = "float"
    BOOL = "bool"
    STRING = "string"
    ENUM = "enum"

    @property
    def is_numeric(self) -> bool:
        """Whether the kind is read from numeric tokens."""
        return self in (ValueKind.INT, ValueKind.FLOAT)


class Delimiter(enum.Enum):
    """The delimiters that can separate the subfields of a composite field."""

    SPACE = "space"
    SLASH = "slash"


@dataclasses.dataclass(frozen=True)
class Scalar:
    """A field holding a single value."""

    #: The attribute name passed to the record factory.
    attr: str

    #: The kind of value.
    kind: ValueKind

    #: The label used in messages. Defaults to the attribute name.
    name: str | None = None

    #: Whether the field may be omitted.
    optional: bool = False

    #: The value used when an optional field is omitted.
    default: t.Any = None

    #: The accepted words of an enum field.
    choices: tuple[str, ...] = ()

    #: If set, reading the field completes the line with this warning.
    warning: str | None = None

    @property
    def label(self) -> str:
        """The label used in messages."""
        return self.name or self.attr


@dataclasses.dataclass(frozen=True)
class Composite:
    """A small group of numeric subfields joined by a single delimiter, such as ``1/2/3``."""

    #: The attribute name passed to the record factory.
    attr: str

    #: The delimiter between the subfields.
    delimiter: Delimiter

    #: The subfields, in order.
    subfields: tuple[Scalar, ...]

    #: The label used in messages. Defaults to the attribute name.
    name: str | None = None

    #: Builds the composite value from keyword arguments named after the subfields.
    #: If ``None``, a tuple of the subfield values is produced.
    factory: t.Callable[..., t.Any] | None = None

    @property
    def label(self) -> str:
        """The label used in messages."""
        return self.name or self.attr

    @property
    def required_count(self) -> int:
        """The number of leading required subfields."""
        count = 0
        for subfield in self.subfields:
            if subfield.optional:
                break

            count += 1

        return count

    def build(self, values: dict[str, t.Any]) -> t.Any:
        """Build the composite value, filling omitted subfields with their defaults.

        :param values: The values read for the subfields, keyed by attribute name.
        :return: The composite value.
        """
        full = {sub.attr: values.get(sub.attr, sub.default) for sub in self.subfields}
        if self.factory is None:
            return tuple(full.values())

        return self.factory(**full)


@dataclasses.dataclass(frozen=True)
class Repeated:
    """A variable number of fields of the same layout, such as the vertices of a face."""

    #: The attribute name passed to the record factory.
    attr: str

    #: The layout of a single repetition.
    element: Scalar | Composite

    #: The minimum number of repetitions.
    min_count: int = 1

    #: The label used in messages. Defaults to the attribute name.
    name: str | None = None

    @property
    def label(self) -> str:
        """The label used in messages."""
        return self.name or self.attr

    def ordinal(self, index: int) -> str:
        """The label of a single repetition.

        :param index: The 0-based number of the repetition.
        :return: The label, such as ``vertex number 3``.
        """
        return f"{self.label} number {index + 1}"

    @property
    def extra(self) -> str:
        """The label of the repetitions past the minimum count."""
        return f"additional {self.label}"


AnyField: t.TypeAlias = t.Union[Scalar, Composite, Repeated]


@dataclasses.dataclass(frozen=True)
class Schema:
    """The layout of the fields following the keyword of one element type."""

    #: The name of the element, used in messages.
    element: str

    #: The fields, in the order they appear on the line.
    fields: tuple[AnyField, ...]

    #: Builds the record from keyword arguments named after the fields.
    factory: t.Callable[..., t.Any]

    def required_labels(self, start: int = 0) -> list[str]:
        """List the labels of the required values from a field onwards.

        :param start: The index of the first field to consider.
        :return: The labels, in order.
        """
        labels: list[str] = []
        for field in self.fields[start:]:
            if isinstance(field, Scalar):
                if not field.optional:
                    labels.append(field.label)
            elif isinstance(field, Composite):
                labels.extend(f"{sub.label} of the {field.label}" for sub in field.subfields[: field.required_count])
            else:
                labels.extend(field.ordinal(i) for i in range(field.min_count))

        return labels
