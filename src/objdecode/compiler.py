"""Compilation of element schemas into finite state machines.

A compiled machine is a table indexed by ``(state, token kind)``. Every cell holds the next state and, for
transitions into the error state, the issue describing what went wrong. Value-reading states additionally carry
an action converting the accepted token and storing it into a working buffer, from which the record is extracted
once the line has been read.

Three states are reserved:

* :data:`START` is the initial state and the state of successful completion;
* :data:`ERROR` is the failure sink;
* :data:`WARNING` is the state of successful completion with an unsupported value in the record.
"""

from __future__ import annotations

__all__ = ["ERROR", "START", "WARNING", "Action", "CompiledFSM", "compile_schema", "validate_schema"]

import dataclasses
import logging
import math
import typing as t

from objdecode.diagnostics import DiagnosticKind, Issue, parameters_not_specified
from objdecode.exceptions import OBJSchemaError, SchemaRule
from objdecode.schemas.base import Composite, Delimiter, Repeated, Scalar, Schema, ValueKind
from objdecode.tokens import TokenKind

logger = logging.getLogger(__name__)

#: The initial state and the state of successful completion.
START: t.Final[int] = 0

#: The state of a failed parse.
ERROR: t.Final[int] = 1

#: The state of a successful parse whose record carries an unsupported value.
WARNING: t.Final[int] = 2

#: Converts a token and stores it into the working buffer. Returns a message if the conversion fails.
Action: t.TypeAlias = t.Callable[[str, dict], t.Optional[str]]

_FIRST: t.Final[int] = 3
_PENDING: t.Final[int] = -1

_INT64_MIN: t.Final[int] = -(2**63)
_INT64_MAX: t.Final[int] = 2**63 - 1

_VALUE_TOKENS = (TokenKind.WORD, TokenKind.INT, TokenKind.FLOAT)

#: The token kind reported as expected for each value kind.
_EXPECTED: t.Final[dict[ValueKind, TokenKind]] = {
    ValueKind.INT: TokenKind.INT,
    ValueKind.FLOAT: TokenKind.FLOAT,
    ValueKind.BOOL: TokenKind.WORD,
    ValueKind.STRING: TokenKind.WORD,
    ValueKind.ENUM: TokenKind.WORD,
}

#: The token kinds accepted for each value kind. An integer literal is valid wherever a float is expected.
_ACCEPTED: t.Final[dict[ValueKind, frozenset[TokenKind]]] = {
    ValueKind.INT: frozenset({TokenKind.INT}),
    ValueKind.FLOAT: frozenset({TokenKind.INT, TokenKind.FLOAT}),
    ValueKind.BOOL: frozenset({TokenKind.WORD}),
    ValueKind.STRING: frozenset(_VALUE_TOKENS),
    ValueKind.ENUM: frozenset({TokenKind.WORD}),
}


def _impossible(name: str, kind: TokenKind) -> str:
    return f"impossible token received when reading the {name} - {kind.name}"


def _invalid(name: str, expected: TokenKind, received: TokenKind) -> str:
    return f"invalid {name}, expected: {expected.name}, received: {received.name}"


def _between(predecessor: str, successor: str) -> str:
    return f"delimiter between {predecessor} and {successor}"


def _after(name: str) -> str:
    return f"token after {name}"


def _missing_in_repetition(subfield: str, repetition: str, group: str) -> str:
    return f"the {subfield} is not specified for the {repetition}, but is specified for the first {group}"


def _extra_in_repetition(subfield: str, repetition: str, group: str) -> str:
    return f"the {subfield} is specified for the {repetition}, but is not specified for the first {group}"


class _Row:
    """The transitions out of a single state while the machine is being built."""

    __slots__ = ("issues", "targets")

    def __init__(self, name: str) -> None:
        self.targets: list[int] = [ERROR] * len(TokenKind)
        self.issues: list[Issue | None] = [
            Issue(self._category(kind, DiagnosticKind.SYNTAX), _impossible(name, kind)) for kind in TokenKind
        ]

    @staticmethod
    def _category(kind: TokenKind, category: DiagnosticKind) -> DiagnosticKind:
        if kind is TokenKind.UNKNOWN and category is DiagnosticKind.SYNTAX:
            return DiagnosticKind.LEXICAL

        return category

    def on(self, kind: TokenKind, state: int) -> _Row:
        self.targets[kind] = state
        self.issues[kind] = None
        return self

    def fail(self, kind: TokenKind, message: str, category: DiagnosticKind = DiagnosticKind.SYNTAX) -> _Row:
        self.targets[kind] = ERROR
        self.issues[kind] = Issue(self._category(kind, category), message)
        return self

    def on_end(self, state: int = START, issue: Issue | None = None) -> _Row:
        for kind in (TokenKind.EOL, TokenKind.EOF):
            self.targets[kind] = state
            self.issues[kind] = issue

        return self

    def fail_end(self, message: str, category: DiagnosticKind = DiagnosticKind.SYNTAX) -> _Row:
        return self.fail(TokenKind.EOL, message, category).fail(TokenKind.EOF, message, category)


@dataclasses.dataclass
class _Task:
    """A pending branch of the first repetition of a repeated composite field."""

    #: The transitions to point at the first state created by the task.
    edges: list[tuple[_Row, TokenKind]]

    #: The presence of the optional subfields decided so far.
    prefix: tuple[bool, ...]

    #: The index of the optional subfield to read, for slot tasks.
    position: int = 0

    #: Whether the presence pattern is complete and the later repetitions must be built.
    continuation: bool = False


def _converter(field: Scalar) -> t.Callable[[str], t.Any]:
    """Create the function converting a token to the value of a scalar field."""
    label = field.label

    if field.kind is ValueKind.INT:

        def convert_int(lexeme: str) -> int:
            value = int(lexeme)
            if not _INT64_MIN <= value <= _INT64_MAX:
                raise ValueError(f"failed to convert the token to an integer when reading the {label}")

            return value

        return convert_int

    if field.kind is ValueKind.FLOAT:

        def convert_float(lexeme: str) -> float:
            value = float(lexeme)
            if not math.isfinite(value):
                raise ValueError(f"failed to convert the token to a float when reading the {label}")

            return value

        return convert_float

    if field.kind is ValueKind.BOOL:

        def convert_bool(lexeme: str) -> bool:
            if lexeme == "on":
                return True

            if lexeme == "off":
                return False

            raise ValueError(f"the {label} must take the values 'on' or 'off'")

        return convert_bool

    if field.kind is ValueKind.ENUM:
        allowed = ", ".join(f"'{choice}'" for choice in field.choices)

        def convert_enum(lexeme: str) -> str:
            if lexeme not in field.choices:
                raise ValueError(f"the {label} must take one of the values {allowed}")

            return lexeme

        return convert_enum

    return str


def _action(field: Scalar, store: t.Callable[[dict, t.Any], None]) -> Action:
    """Combine the conversion of a field with the way its value is stored."""
    convert = _converter(field)

    def action(lexeme: str, buffer: dict) -> str | None:
        try:
            value = convert(lexeme)
        except ValueError as e:
            return str(e)

        store(buffer, value)
        return None

    return action


def _store_scalar(attr: str) -> t.Callable[[dict, t.Any], None]:
    def store(buffer: dict, value: t.Any) -> None:
        buffer[attr] = value

    return store


def _store_subfield(attr: str, sub: str) -> t.Callable[[dict, t.Any], None]:
    def store(buffer: dict, value: t.Any) -> None:
        buffer.setdefault(attr, {})[sub] = value

    return store


def _store_item(attr: str) -> t.Callable[[dict, t.Any], None]:
    def store(buffer: dict, value: t.Any) -> None:
        buffer.setdefault(attr, []).append(value)

    return store


def _store_new_group(attr: str, sub: str) -> t.Callable[[dict, t.Any], None]:
    def store(buffer: dict, value: t.Any) -> None:
        buffer.setdefault(attr, []).append({sub: value})

    return store


def _store_group_subfield(attr: str, sub: str) -> t.Callable[[dict, t.Any], None]:
    def store(buffer: dict, value: t.Any) -> None:
        buffer[attr][-1][sub] = value

    return store


@dataclasses.dataclass(frozen=True)
class CompiledFSM:
    """An immutable parser table for one element type.

    Instances are shared read-only between any number of element parsers.
    """

    #: The schema the machine was compiled from.
    schema: Schema

    #: The next state, indexed by ``[state][token kind]``.
    transitions: tuple[tuple[int, ...], ...]

    #: The issue reported when a transition leads to the error or warning state, indexed like the transitions.
    issues: tuple[tuple[Issue | None, ...], ...]

    #: The action applied to a value token accepted in a state.
    actions: tuple[Action | None, ...]

    @property
    def state_count(self) -> int:
        """The number of states, including the reserved ones."""
        return len(self.transitions)

    @property
    def element(self) -> str:
        """The name of the element read by the machine."""
        return self.schema.element

    def transition(self, state: int, kind: TokenKind) -> int:
        """Look up the state following a token.

        :param state: The current state.
        :param kind: The kind of the received token.
        :return: The next state.
        """
        return self.transitions[state][kind]

    def issue(self, state: int, kind: TokenKind) -> Issue | None:
        """Look up the issue attached to a transition.

        :param state: The current state.
        :param kind: The kind of the received token.
        :return: The issue, or ``None`` for ordinary transitions.
        """
        return self.issues[state][kind]

    def action(self, state: int) -> Action | None:
        """Look up the action of a value-reading state.

        :param state: The state.
        :return: The action, or ``None`` if the state reads no value.
        """
        return self.actions[state]

    def extract(self, buffer: dict) -> t.Any:
        """Build the record from the values collected while reading a line.

        :param buffer: The working buffer filled by the actions.
        :return: The record.
        """
        values: dict[str, t.Any] = {}
        for field in self.schema.fields:
            if isinstance(field, Scalar):
                values[field.attr] = buffer.get(field.attr, field.default)
            elif isinstance(field, Composite):
                values[field.attr] = field.build(buffer.get(field.attr, {}))
            elif isinstance(field.element, Composite):
                element = field.element
                values[field.attr] = tuple(element.build(item) for item in buffer.get(field.attr, ()))
            else:
                values[field.attr] = tuple(buffer.get(field.attr, ()))

        return self.schema.factory(**values)


class _Builder:
    """Allocates the states of a machine while walking the fields of a schema."""

    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.rows: list[_Row] = []
        self.actions: list[Action | None] = []
        self.warning: Issue | None = None

    def next_state(self) -> int:
        return len(self.rows)

    def row(self, name: str, action: Action | None = None) -> _Row:
        row = _Row(name)
        self.rows.append(row)
        self.actions.append(action)
        return row

    def end(self, row: _Row) -> None:
        """Accept the end of the line, flagging it if an unsupported value was read."""
        if self.warning is None:
            row.on_end(START)
        else:
            row.on_end(WARNING, self.warning)

    def end_or_fail(self, row: _Row, unread: t.Sequence[str]) -> None:
        if unread:
            row.fail_end(parameters_not_specified(unread))
        else:
            self.end(row)

    def value_row(self, field: Scalar, label: str, action: Action | None, unread: t.Sequence[str]) -> _Row:
        """Create a state reading one value. Accepted tokens lead to the state created next."""
        row = self.row(label, action)
        expected = _EXPECTED[field.kind]
        accepted = _ACCEPTED[field.kind]
        following = self.next_state()
        for kind in _VALUE_TOKENS:
            if kind in accepted:
                row.on(kind, following)
            else:
                row.fail(kind, _invalid(label, expected, kind))

        row.fail(TokenKind.SLASH, _invalid(label, expected, TokenKind.SLASH))
        row.fail(TokenKind.UNKNOWN, _invalid(label, expected, TokenKind.UNKNOWN))
        self.end_or_fail(row, unread)
        return row

    def wait_delimiter(self, delimiter: Delimiter, name: str, unread: t.Sequence[str]) -> _Row:
        """Create a state reading a delimiter. The delimiter leads to the state created next."""
        row = self.row(name)
        if delimiter is Delimiter.SPACE:
            row.fail(TokenKind.SLASH, _invalid(name, TokenKind.SPACE, TokenKind.SLASH))
            row.on(TokenKind.SPACE, self.next_state())
        else:
            row.fail(TokenKind.SPACE, _invalid(name, TokenKind.SLASH, TokenKind.SPACE))
            row.on(TokenKind.SLASH, self.next_state())

        self.end_or_fail(row, unread)
        return row

    def build(self) -> CompiledFSM:
        self._initialize()

        fields = self.schema.fields
        exits: list[tuple[_Row, TokenKind]] = []
        for index, field in enumerate(fields):
            for row, kind in exits:
                row.on(kind, self.next_state())

            exits = []
            unread = self.schema.required_labels(index)
            unread_after = self.schema.required_labels(index + 1)
            is_last = index == len(fields) - 1

            if isinstance(field, Repeated):
                self._repeated(field)
                return self._freeze()

            if isinstance(field, Scalar):
                self.value_row(field, field.label, _action(field, _store_scalar(field.attr)), unread)
                if field.warning is not None:
                    self.warning = Issue(DiagnosticKind.EXTRA_PARAMETER, field.warning)
            elif field.delimiter is Delimiter.SPACE:
                self._space_composite(field, unread_after)
            else:
                exits = self._slash_composite(field, unread_after)
                continue

            if not is_last:
                self.wait_delimiter(Delimiter.SPACE, _between(field.label, fields[index + 1].label), unread_after)

        self._finalize(exits)
        return self._freeze()

    def _initialize(self) -> None:
        """Create the reserved states."""
        start = self.row("start state")
        for kind in TokenKind:
            start.fail(kind, f"impossible token received in the start state - {kind.name}")

        start.on(TokenKind.SPACE, _FIRST)
        start.fail_end(parameters_not_specified(self.schema.required_labels()))

        for _ in (ERROR, WARNING):
            sink = self.row("finished parser")
            for kind in TokenKind:
                sink.fail(kind, "parser cannot be used in the error state")

    def _finalize(self, exits: list[tuple[_Row, TokenKind]]) -> None:
        """Create the states reading the optional whitespace after the last field."""
        element = self.schema.element
        if not exits:
            after = self.row(_after(element))
            after.fail(TokenKind.SLASH, f"unexpected token received after describing a {element} - SLASH")
            after.on(TokenKind.SPACE, self.next_state())
            self.end(after)

        for row, kind in exits:
            row.on(kind, self.next_state())

        trailing = self.row(_after(element))
        for kind in TokenKind:
            trailing.fail(kind, f"unexpected token received after describing a {element} - {kind.name}")

        self.end(trailing)

    def _space_composite(self, field: Composite, unread_after: list[str]) -> None:
        labels = [f"{sub.label} of the {field.label}" for sub in field.subfields]
        for q, sub in enumerate(field.subfields):
            action = _action(sub, _store_subfield(field.attr, sub.attr))
            self.value_row(sub, labels[q], action, labels[q:] + unread_after)
            if q < len(labels) - 1:
                self.wait_delimiter(Delimiter.SPACE, _between(labels[q], labels[q + 1]), labels[q + 1 :] + unread_after)

    def _slash_composite(self, field: Composite, unread_after: list[str]) -> list[tuple[_Row, TokenKind]]:
        """Create the states of a slash-delimited composite.

        Each subfield gets a value state followed by a state reading the token after it, so the value state of
        subfield ``q`` is ``base + 2 * q``.

        :return: The transitions on the space ending the composite, to be pointed at whatever follows it.
        """
        subs = field.subfields
        required = field.required_count
        labels = [f"{sub.label} of the {field.label}" for sub in subs]
        base = self.next_state()
        exits: list[tuple[_Row, TokenKind]] = []

        for q, sub in enumerate(subs):
            has_next = q < len(subs) - 1
            unread = ([labels[q]] if sub.optional else labels[q:required]) + unread_after
            value = self.value_row(sub, labels[q], _action(sub, _store_subfield(field.attr, sub.attr)), unread)
            if sub.optional and has_next:
                value.on(TokenKind.SLASH, base + 2 * (q + 1))

            name = _between(labels[q], labels[q + 1]) if has_next else _after(field.label)
            after = self.row(name)
            if has_next:
                after.on(TokenKind.SLASH, base + 2 * (q + 1))
            else:
                after.fail(TokenKind.SLASH, _invalid(name, TokenKind.SPACE, TokenKind.SLASH))

            if q + 1 < required:
                after.fail(TokenKind.SPACE, _invalid(name, TokenKind.SLASH, TokenKind.SPACE))
                after.fail_end(parameters_not_specified(labels[q + 1 : required] + unread_after))
            else:
                exits.append((after, TokenKind.SPACE))
                self.end_or_fail(after, unread_after)

        return exits

    def _repeated(self, field: Repeated) -> None:
        if isinstance(field.element, Composite):
            _RepeatedComposite(self, field, field.element).build()
        else:
            self._repeated_scalar(field, field.element)

    def _repeated_scalar(self, field: Repeated, element: Scalar) -> None:
        names = [field.ordinal(i) for i in range(field.min_count)]
        action = _action(element, _store_item(field.attr))
        for i, name in enumerate(names):
            self.value_row(element, name, action, names[i:])
            following = _between(name, names[i + 1]) if i < len(names) - 1 else _after(name)
            self.wait_delimiter(Delimiter.SPACE, following, names[i + 1 :])

        # Any number of additional values after the required ones.
        loop = self.next_state()
        self.value_row(element, field.extra, action, [])
        name = _after(field.extra)
        tail = self.row(name)
        tail.fail(TokenKind.SLASH, _invalid(name, TokenKind.SPACE, TokenKind.SLASH))
        tail.on(TokenKind.SPACE, loop)
        self.end(tail)

    def _freeze(self) -> CompiledFSM:
        for state, row in enumerate(self.rows):
            if _PENDING in row.targets:
                raise RuntimeError(f"State {state} of the {self.schema.element} parser has an unresolved transition")

        return CompiledFSM(
            schema=self.schema,
            transitions=tuple(tuple(row.targets) for row in self.rows),
            issues=tuple(tuple(row.issues) for row in self.rows),
            actions=tuple(self.actions),
        )


class _RepeatedComposite:
    """Builds the states of a repeated composite field, such as the vertices of a face.

    The first repetition may omit any of the optional subfields. Every possible presence pattern gets its own
    copy of the states reading the later repetitions, which must repeat the pattern exactly. The branches are
    expanded from a stack of pending tasks so that states are allocated in a fixed order.
    """

    def __init__(self, builder: _Builder, field: Repeated, composite: Composite) -> None:
        self.b = builder
        self.field = field
        self.composite = composite
        self.subs = composite.subfields
        self.required = composite.required_count
        self.ordinals = [field.ordinal(i) for i in range(field.min_count)]
        self.actions = [
            _action(
                sub,
                _store_new_group(field.attr, sub.attr) if q == 0 else _store_group_subfield(field.attr, sub.attr),
            )
            for q, sub in enumerate(self.subs)
        ]

    def label(self, q: int, repetition: str) -> str:
        return f"{self.subs[q].label} of the {repetition}"

    def build(self) -> None:
        first = self.ordinals[0]
        self.repetition(first, list(range(self.required)), self.ordinals, self.ordinals[1:])

        tasks = list(reversed(self.probe(self.required, ())))
        while tasks:
            task = tasks.pop()
            state = self.b.next_state()
            for row, kind in task.edges:
                row.on(kind, state)

            if task.continuation:
                self.continuation(task.prefix)
                continue

            tasks.extend(reversed(self.slot(task.position, task.prefix)))

    def probe(self, position: int, prefix: tuple[bool, ...]) -> list[_Task]:
        """Create the state after a value of the first repetition, deciding whether more subfields follow."""
        first = self.ordinals[0]
        count = len(self.subs)
        children: list[_Task] = []

        if position < count:
            row = self.b.row(_between(self.label(position - 1, first), self.label(position, first)))
            children.append(_Task([(row, TokenKind.SLASH)], prefix, position=position))
        else:
            name = _after(first)
            row = self.b.row(name)
            row.fail(TokenKind.SLASH, _invalid(name, TokenKind.SPACE, TokenKind.SLASH))

        pattern = prefix + (False,) * (count - position)
        children.append(_Task([(row, TokenKind.SPACE)], pattern, continuation=True))
        self.b.end_or_fail(row, self.ordinals[1:])
        return children

    def slot(self, position: int, prefix: tuple[bool, ...]) -> list[_Task]:
        """Create the state reading an optional subfield of the first repetition after a slash."""
        first = self.ordinals[0]
        sub = self.subs[position]
        label = self.label(position, first)

        row = self.b.value_row(sub, label, self.actions[position], [label] + self.ordinals[1:])
        row.fail(TokenKind.SPACE, _invalid(label, _EXPECTED[sub.kind], TokenKind.SPACE))

        children: list[_Task] = []
        if position < len(self.subs) - 1:
            # A second slash means the subfield is omitted, but a later one is given.
            children.append(_Task([(row, TokenKind.SLASH)], prefix + (False,), position=position + 1))

        children.extend(self.probe(position + 1, prefix + (True,)))
        return children

    def continuation(self, pattern: tuple[bool, ...]) -> None:
        """Create the states of the repetitions after the first one, enforcing its presence pattern."""
        present = list(range(self.required)) + [self.required + q for q, given in enumerate(pattern) if given]
        last = present[-1]
        group = self.field.label
        repetitions = self.ordinals[1:] + [self.field.extra]

        for n, repetition in enumerate(repetitions):
            is_loop = n == len(repetitions) - 1
            loop = self.b.next_state()
            rest = [] if is_loop else self.ordinals[n + 2 :]
            self.repetition(repetition, present, [] if is_loop else self.ordinals[n + 1 :], rest)

            name = _after(repetition)
            after = self.b.row(name)
            after.on(TokenKind.SPACE, loop if is_loop else self.b.next_state())
            if last < len(self.subs) - 1:
                message = _extra_in_repetition(self.subs[last + 1].label, repetition, group)
                after.fail(TokenKind.SLASH, message, DiagnosticKind.FORMAT_CONSISTENCY)
            else:
                after.fail(TokenKind.SLASH, _invalid(name, TokenKind.SPACE, TokenKind.SLASH))

            self.b.end_or_fail(after, rest)

    def repetition(self, repetition: str, present: list[int], first_unread: list[str], rest: list[str]) -> None:
        """Create the states reading one repetition with the given subfields present.

        :param repetition: The label of the repetition.
        :param present: The indices of the subfields that must be given.
        :param first_unread: The labels reported if the line ends before the repetition starts.
        :param rest: The labels of the required repetitions after this one.
        """
        group = self.field.label
        given = set(present)
        consistency = DiagnosticKind.FORMAT_CONSISTENCY

        def unread(q: int) -> list[str]:
            return [self.label(p, repetition) for p in present if p >= q] + rest

        for q in range(present[-1] + 1):
            sub = self.subs[q]
            label = self.label(q, repetition)
            if q == 0:
                self.b.value_row(sub, label, self.actions[0], first_unread)
                continue

            previous = self.label(q - 1, repetition)
            if q < self.required:
                self.b.wait_delimiter(self.composite.delimiter, _between(previous, label), unread(q))
                self.b.value_row(sub, label, self.actions[q], unread(q))
                continue

            upcoming = min(p for p in present if p >= q)
            missing = _missing_in_repetition(self.subs[upcoming].label, repetition, group)
            if q - 1 in given:
                row = self.b.row(_between(previous, label))
                row.on(TokenKind.SLASH, self.b.next_state())
                row.fail(TokenKind.SPACE, missing, consistency).fail_end(missing, consistency)

            if q in given:
                row = self.b.value_row(sub, label, self.actions[q], [])
                row.fail(TokenKind.SLASH, missing, consistency)
                row.fail(TokenKind.SPACE, missing, consistency).fail_end(missing, consistency)
            else:
                row = self.b.row(label)
                row.on(TokenKind.SLASH, self.b.next_state())
                extra = _extra_in_repetition(sub.label, repetition, group)
                for kind in _VALUE_TOKENS:
                    row.fail(kind, extra, consistency)

                row.fail(TokenKind.SPACE, missing, consistency).fail_end(missing, consistency)


def _check_scalar(field: Scalar, *, top_level: bool) -> None:
    if (field.kind is ValueKind.ENUM) != bool(field.choices):
        raise OBJSchemaError(SchemaRule.INVALID_CHOICES, field.label)

    if field.warning is not None and not top_level:
        raise OBJSchemaError(SchemaRule.MISPLACED_WARNING, field.label)


def _check_unique(names: t.Iterable[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise OBJSchemaError(SchemaRule.DUPLICATE_FIELD, name)

        seen.add(name)


def _check_composite(field: Composite) -> None:
    if not field.subfields:
        raise OBJSchemaError(SchemaRule.EMPTY_COMPOSITE, field.label)

    _check_unique(sub.attr for sub in field.subfields)
    if field.subfields[0].optional:
        raise OBJSchemaError(SchemaRule.OPTIONAL_FIRST_SUBFIELD, field.label)

    optional = False
    for sub in field.subfields:
        _check_scalar(sub, top_level=False)
        if not sub.kind.is_numeric:
            raise OBJSchemaError(SchemaRule.NON_NUMERIC_SUBFIELD, f"{sub.label} of the {field.label}")

        if sub.optional and field.delimiter is Delimiter.SPACE:
            raise OBJSchemaError(SchemaRule.OPTIONAL_IN_SPACE_COMPOSITE, field.label)

        if sub.optional:
            optional = True
        elif optional:
            raise OBJSchemaError(SchemaRule.OPTIONAL_SUBFIELD_NOT_TRAILING, f"{sub.label} of the {field.label}")


def validate_schema(schema: Schema) -> None:
    """Check that a schema can be compiled.

    :param schema: The schema to check.
    :raises OBJSchemaError: If the schema violates an invariant. The ``rule`` attribute names the invariant.
    """
    fields = schema.fields
    if not fields:
        raise OBJSchemaError(SchemaRule.EMPTY_SCHEMA, schema.element)

    _check_unique(field.attr for field in fields)

    optional = False
    for index, field in enumerate(fields):
        if isinstance(field, Scalar):
            _check_scalar(field, top_level=True)
            if field.optional and index == 0:
                raise OBJSchemaError(SchemaRule.OPTIONAL_FIRST_FIELD, field.label)

            if field.optional:
                optional = True
                continue
        elif isinstance(field, Composite):
            _check_composite(field)
        else:
            if index != len(fields) - 1:
                raise OBJSchemaError(SchemaRule.REPEATED_NOT_LAST, field.label)

            if field.min_count < 1:
                raise OBJSchemaError(SchemaRule.INVALID_MIN_COUNT, field.label)

            if isinstance(field.element, Composite):
                _check_composite(field.element)
            else:
                _check_scalar(field.element, top_level=False)
                if field.element.optional:
                    raise OBJSchemaError(SchemaRule.OPTIONAL_REPEATED_ELEMENT, field.label)

        if optional:
            raise OBJSchemaError(SchemaRule.OPTIONAL_NOT_TRAILING, field.label)


def compile_schema(schema: Schema) -> CompiledFSM:
    """Compile a schema into a parser table.

    .. code-block:: python

        fsm = compile_schema(VERTEX_SCHEMA)
        parser = ElementParser(fsm)

    :param schema: The schema to compile.
    :return: The compiled machine.
    :raises OBJSchemaError: If the schema violates an invariant.
    """
    validate_schema(schema)
    fsm = _Builder(schema).build()
    logger.debug("Compiled %s parser with %d states", schema.element, fsm.state_count)
    return fsm
