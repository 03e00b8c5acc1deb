import typing as t

import pytest

from objdecode.compiler import compile_schema
from objdecode.diagnostics import DiagnosticKind
from objdecode.elements import Face, FaceVertex, LevelOfDetail, Line, LineVertex, Point, Switch, TextureVertex, Vertex
from objdecode.parser import ElementParser, Failure, Outcome, Success, Warned
from objdecode.schemas import Composite, Delimiter, Scalar, Schema, ValueKind, get_schema
from objdecode.tokenizer import Tokenizer
from objdecode.tokens import TokenKind

ParseLine: t.TypeAlias = t.Callable[[Schema, bytes], Outcome]

#: A schema with a space-delimited composite followed by a scalar.
RANGE_SCHEMA = Schema(
    element="range",
    fields=(
        Composite("span", Delimiter.SPACE, (Scalar("lo", ValueKind.INT), Scalar("hi", ValueKind.INT)), name="range"),
        Scalar("step", ValueKind.FLOAT),
    ),
    factory=dict,
)

#: A schema with a slash-delimited composite followed by an optional scalar.
REFERENCE_SCHEMA = Schema(
    element="reference",
    fields=(
        Composite(
            "ref",
            Delimiter.SLASH,
            (
                Scalar("a", ValueKind.INT),
                Scalar("b", ValueKind.INT, optional=True),
                Scalar("c", ValueKind.INT, optional=True),
            ),
        ),
        Scalar("tail", ValueKind.INT, optional=True),
    ),
    factory=dict,
)

#: A schema whose optional enum field is recognized but not supported.
TAGGED_SCHEMA = Schema(
    element="tag",
    fields=(
        Scalar("name", ValueKind.STRING),
        Scalar("mode", ValueKind.ENUM, optional=True, choices=("fast", "slow"), warning="the mode is not supported"),
    ),
    factory=dict,
)


def failure(outcome: Outcome) -> Failure:
    assert isinstance(outcome, Failure), outcome
    return outcome


class TestScalarFields:
    """Tests for elements made of scalar fields."""

    def test_vertex(self, parse_line: ParseLine) -> None:
        """Read a vertex with the default weight."""
        assert parse_line(get_schema("v"), b"v 1.0 2.0 3.0\n") == Success(Vertex(1.0, 2.0, 3.0, 0.0))

    def test_vertex_weight(self, parse_line: ParseLine) -> None:
        """Read the optional weight and accept integers for floats."""
        assert parse_line(get_schema("v"), b"v 1 2 3 0.5\n") == Success(Vertex(1.0, 2.0, 3.0, 0.5))

    @pytest.mark.parametrize("line", [b"v 1.0 2.0 3.0", b"v 1.0 2.0 3.0 \n", b"v 1.0 2.0 3.0 4.0 \n"])
    def test_line_endings(self, parse_line: ParseLine, line: bytes) -> None:
        """Accept EOF and one trailing space as the end of the line."""
        assert isinstance(parse_line(get_schema("v"), line), Success)

    def test_texture_vertex_defaults(self, parse_line: ParseLine) -> None:
        """Fill omitted optional fields with their defaults."""
        assert parse_line(get_schema("vt"), b"vt 0.5\n") == Success(TextureVertex(0.5, 0.0, 0.0))

    def test_invalid_kind(self, parse_line: ParseLine) -> None:
        """Report a word where a coordinate is expected."""
        result = failure(parse_line(get_schema("v"), b"v 1.0 x 3.0\n"))

        assert result.issue.kind is DiagnosticKind.SYNTAX
        assert result.issue.message == "invalid Y coordinate, expected: FLOAT, received: WORD"
        assert result.token.lexeme == "x"
        assert result.token.position.column == 6

    def test_unknown_token(self, parse_line: ParseLine) -> None:
        """Report a malformed number as a lexical error."""
        result = failure(parse_line(get_schema("v"), b"v 1.0 $ 3.0\n"))

        assert result.issue.kind is DiagnosticKind.LEXICAL
        assert result.issue.message == "invalid Y coordinate, expected: FLOAT, received: UNKNOWN"

    def test_missing_field(self, parse_line: ParseLine) -> None:
        """Name the missing coordinate at the end of the line."""
        result = failure(parse_line(get_schema("v"), b"v 1.0 2.0\n"))

        assert result.issue.message == "parameter Z coordinate is not specified"
        assert result.token.kind is TokenKind.EOL

    def test_keyword_only(self, parse_line: ParseLine) -> None:
        """Report every required field when only the keyword and a space are given."""
        result = failure(parse_line(get_schema("v"), b"v \n"))

        assert result.issue.message == "parameters X coordinate, Y coordinate, Z coordinate are not specified"

    def test_extra_value(self, parse_line: ParseLine) -> None:
        """Reject values after the last field."""
        result = failure(parse_line(get_schema("v"), b"v 1.0 2.0 3.0 4.0 5.0\n"))

        assert result.issue.message == "unexpected token received after describing a vertex - FLOAT"

    def test_space_composite(self, parse_line: ParseLine) -> None:
        """Read a space-delimited composite into a tuple."""
        assert parse_line(RANGE_SCHEMA, b"r 1 5 0.5\n") == Success({"span": (1, 5), "step": 0.5})

    def test_space_composite_missing(self, parse_line: ParseLine) -> None:
        """Name the missing subfield and the fields after it."""
        result = failure(parse_line(RANGE_SCHEMA, b"r 1\n"))

        assert result.issue.message == "parameters hi of the range, step are not specified"

    @pytest.mark.parametrize(
        ("line", "expected"),
        [
            (b"r 1/2/3 9\n", {"ref": (1, 2, 3), "tail": 9}),
            (b"r 1//3\n", {"ref": (1, None, 3), "tail": None}),
            (b"r 1/2 \n", {"ref": (1, 2, None), "tail": None}),
            (b"r 1 7\n", {"ref": (1, None, None), "tail": 7}),
        ],
    )
    def test_slash_composite(self, parse_line: ParseLine, line: bytes, expected: dict) -> None:
        """Read a slash-delimited composite with omitted optional subfields."""
        assert parse_line(REFERENCE_SCHEMA, line) == Success(expected)

    def test_slash_composite_trailing_slash(self, parse_line: ParseLine) -> None:
        """Require a value after a slash."""
        result = failure(parse_line(REFERENCE_SCHEMA, b"r 1/\n"))

        assert result.issue.message == "parameter b of the ref is not specified"


class TestConversion:
    """Tests for the conversion of accepted tokens."""

    def test_integer_overflow(self, parse_line: ParseLine) -> None:
        """Reject integers that do not fit in 64 bits."""
        result = failure(parse_line(get_schema("lod"), b"lod 99999999999999999999\n"))

        assert result.issue.kind is DiagnosticKind.SEMANTIC
        assert result.issue.message == "failed to convert the token to an integer when reading the level"

    def test_float_overflow(self, parse_line: ParseLine) -> None:
        """Reject floats that are not finite."""
        line = b"v 1" + b"0" * 400 + b".0 2.0 3.0\n"
        result = failure(parse_line(get_schema("v"), line))

        assert result.issue.kind is DiagnosticKind.SEMANTIC
        assert result.issue.message == "failed to convert the token to a float when reading the X coordinate"

    def test_bool(self, parse_line: ParseLine) -> None:
        """Read on and off switches."""
        assert parse_line(get_schema("bevel"), b"bevel on\n") == Success(Switch(True))
        assert parse_line(get_schema("c_interp"), b"c_interp off\n") == Success(Switch(False))

    def test_invalid_bool(self, parse_line: ParseLine) -> None:
        """Reject words other than on and off."""
        result = failure(parse_line(get_schema("bevel"), b"bevel maybe\n"))

        assert result.issue.kind is DiagnosticKind.SEMANTIC
        assert result.issue.message == "the bevel interpolation parameter must take the values 'on' or 'off'"

    def test_integer(self, parse_line: ParseLine) -> None:
        """Read negative integers."""
        assert parse_line(get_schema("lod"), b"lod -3\n") == Success(LevelOfDetail(-3))

    def test_string_accepts_numbers(self, parse_line: ParseLine) -> None:
        """Accept numeric tokens as strings."""
        assert parse_line(TAGGED_SCHEMA, b"tag 42\n") == Success({"name": "42", "mode": None})

    def test_invalid_enum(self, parse_line: ParseLine) -> None:
        """Reject words outside the choices of an enum."""
        result = failure(parse_line(TAGGED_SCHEMA, b"tag name medium\n"))

        assert result.issue.kind is DiagnosticKind.SEMANTIC
        assert result.issue.message == "the mode must take one of the values 'fast', 'slow'"

    def test_warning(self, parse_line: ParseLine) -> None:
        """Complete the line with a warning when the flagged field is given."""
        result = parse_line(TAGGED_SCHEMA, b"tag name fast\n")

        assert isinstance(result, Warned)
        assert result.record == {"name": "name", "mode": "fast"}
        assert result.issue.kind is DiagnosticKind.EXTRA_PARAMETER
        assert result.issue.message == "the mode is not supported"


class TestRepeatedFields:
    """Tests for elements with a variable number of repetitions."""

    def test_point(self, parse_line: ParseLine) -> None:
        """Read any number of vertex numbers."""
        assert parse_line(get_schema("p"), b"p 1 2 3\n") == Success(Point((1, 2, 3)))

    def test_point_requires_integer(self, parse_line: ParseLine) -> None:
        """Name the repetition holding an invalid value."""
        result = failure(parse_line(get_schema("p"), b"p 1.5\n"))

        assert result.issue.message == "invalid vertex number 1, expected: INT, received: FLOAT"

    def test_point_empty(self, parse_line: ParseLine) -> None:
        """Require the first repetition."""
        result = failure(parse_line(get_schema("p"), b"p\n"))

        assert result.issue.message == "parameter vertex number 1 is not specified"

    def test_line(self, parse_line: ParseLine) -> None:
        """Read line vertices with optional texture references."""
        assert parse_line(get_schema("l"), b"l 1/4 2/5 3/6\n") == Success(
            Line((LineVertex(1, 4), LineVertex(2, 5), LineVertex(3, 6)))
        )

    def test_line_too_short(self, parse_line: ParseLine) -> None:
        """Require two line vertices."""
        result = failure(parse_line(get_schema("l"), b"l 1\n"))

        assert result.issue.message == "parameter vertex number 2 is not specified"

    def test_face_indices(self, parse_line: ParseLine) -> None:
        """Read a face of bare vertex numbers."""
        assert parse_line(get_schema("f"), b"f 1 2 3\n") == Success(
            Face((FaceVertex(1), FaceVertex(2), FaceVertex(3)))
        )

    def test_face_full(self, parse_line: ParseLine) -> None:
        """Read a face with texture and normal references."""
        result = parse_line(get_schema("f"), b"f 1/2/3 4/5/6 7/8/9\n")

        assert result == Success(Face((FaceVertex(1, 2, 3), FaceVertex(4, 5, 6), FaceVertex(7, 8, 9))))

    def test_face_normals_only(self, parse_line: ParseLine) -> None:
        """Read a face whose texture references are left empty."""
        result = parse_line(get_schema("f"), b"f 1//3 2//4 3//5\n")

        assert result == Success(Face((FaceVertex(1, None, 3), FaceVertex(2, None, 4), FaceVertex(3, None, 5))))

    def test_face_additional_vertices(self, parse_line: ParseLine) -> None:
        """Read repetitions past the minimum count."""
        result = parse_line(get_schema("f"), b"f 1/2 3/4 5/6 7/8 9/10\n")

        assert isinstance(result, Success)
        assert result.record.num_vertices == 5
        assert result.record.vertices[-1] == FaceVertex(9, 10)

    def test_face_too_short(self, parse_line: ParseLine) -> None:
        """Name the first missing face vertex."""
        result = failure(parse_line(get_schema("f"), b"f 1 2\n"))

        assert result.issue.kind is DiagnosticKind.SYNTAX
        assert result.issue.message == "parameter vertex number 3 is not specified"

    def test_face_empty(self, parse_line: ParseLine) -> None:
        """Name every required face vertex."""
        result = failure(parse_line(get_schema("f"), b"f\n"))

        assert result.issue.message == "parameters vertex number 1, vertex number 2, vertex number 3 are not specified"

    def test_face_missing_texture(self, parse_line: ParseLine) -> None:
        """Report a repetition omitting a subfield given by the first one."""
        result = failure(parse_line(get_schema("f"), b"f 1/2/3 4/5/6 7\n"))

        assert result.issue.kind is DiagnosticKind.FORMAT_CONSISTENCY
        assert result.issue.message == (
            "the texture is not specified for the vertex number 3, but is specified for the first vertex"
        )

    def test_face_extra_texture(self, parse_line: ParseLine) -> None:
        """Report a repetition giving a subfield omitted by the first one."""
        result = failure(parse_line(get_schema("f"), b"f 1 2/5 3\n"))

        assert result.issue.kind is DiagnosticKind.FORMAT_CONSISTENCY
        assert result.issue.message == (
            "the texture is specified for the vertex number 2, but is not specified for the first vertex"
        )

    def test_face_extra_inner_texture(self, parse_line: ParseLine) -> None:
        """Report a value in a subfield left empty by the first repetition."""
        result = failure(parse_line(get_schema("f"), b"f 1//3 2/7/4 3//5\n"))

        assert result.issue.kind is DiagnosticKind.FORMAT_CONSISTENCY
        assert result.token.lexeme == "7"

    def test_face_additional_vertex_inconsistent(self, parse_line: ParseLine) -> None:
        """Enforce the pattern of the first repetition past the minimum count."""
        result = failure(parse_line(get_schema("f"), b"f 1/1 2/2 3/3 4\n"))

        assert result.issue.message == (
            "the texture is not specified for the additional vertex, but is specified for the first vertex"
        )


class TestElementParser:
    """Tests for the ElementParser class."""

    def test_buffer_reused(self) -> None:
        """Start every line with an empty working buffer."""
        parser = ElementParser(compile_schema(get_schema("f")))
        tokenizer = Tokenizer(b"f 1 2 3 4\nf 5 6 7\n")

        tokenizer.next()
        first = parser.run(tokenizer)
        tokenizer.next()
        second = parser.run(tokenizer)

        assert isinstance(first, Success)
        assert isinstance(second, Success)
        assert first.record.num_vertices == 4
        assert second.record == Face((FaceVertex(5), FaceVertex(6), FaceVertex(7)))

    def test_stops_at_failure(self) -> None:
        """Leave the tokens after the failing one unread."""
        tokenizer = Tokenizer(b"v 1.0 x 3.0\n")
        tokenizer.next()
        ElementParser(compile_schema(get_schema("v"))).run(tokenizer)

        assert tokenizer.next().kind is TokenKind.SPACE

    def test_comment_skipping(self) -> None:
        """Parse a line with a skipped comment like the same line without it."""
        fsm = compile_schema(get_schema("v"))
        outcomes = []
        for line in (b"v 1.0 2.0 3.0 # note\n", b"v 1.0 2.0 3.0\n"):
            tokenizer = Tokenizer(line, skip_comments=True)
            tokenizer.next()
            outcomes.append(ElementParser(fsm).run(tokenizer))

        assert outcomes[0] == outcomes[1]
