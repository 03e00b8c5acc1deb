"""Element types of the OBJ format and the registry of their compiled parsers."""

from __future__ import annotations

__all__ = ["ElementType", "Registry", "RegistryBuilder", "default_registry"]

import collections.abc
import enum
import functools
import logging
import types
import typing as t

from objdecode.compiler import compile_schema
from objdecode.schemas import SUPPORTED_ELEMENTS, get_schema

if t.TYPE_CHECKING:
    from objdecode.compiler import CompiledFSM
    from objdecode.schemas import Schema

logger = logging.getLogger(__name__)


class ElementType(enum.Enum):
    """The element types of the OBJ format, identified by their keywords."""

    VERTEX = "v"
    VERTEX_TEXTURE = "vt"
    VERTEX_NORMAL = "vn"
    VERTEX_PARAMETER = "vp"
    CURVE_SURFACE_TYPE = "cstype"
    DEGREE = "deg"
    BASIS_MATRIX = "bmat"
    STEP = "step"
    POINT = "p"
    LINE = "l"
    FACE = "f"
    CURVE = "curv"
    CURVE_2D = "curv2"
    SURFACE = "surf"
    PARAMETER = "parm"
    TRIM = "trim"
    HOLE = "hole"
    SPECIAL_CURVE = "scrv"
    SPECIAL_POINT = "sp"
    END = "end"
    CONNECT = "con"
    GROUP = "g"
    SMOOTHING_GROUP = "s"
    MERGING_GROUP = "mg"
    OBJECT = "o"
    BEVEL_INTERPOLATION = "bevel"
    COLOR_INTERPOLATION = "c_interp"
    DISSOLVE_INTERPOLATION = "d_interp"
    LEVEL_OF_DETAIL = "lod"
    MAP_LIBRARY = "maplib"
    USE_MAPPING = "usemap"
    USE_MATERIAL = "usemtl"
    MATERIAL_LIBRARY = "mtllib"
    SHADOW_OBJECT = "shadow_obj"
    TRACE_OBJECT = "trace_obj"
    CURVE_APPROXIMATION = "ctech"
    SURFACE_APPROXIMATION = "stech"
    CALL = "call"
    SCMP = "scmp"
    CSH = "csh"

    #: Returned by the dispatcher once the input is exhausted. Not a keyword.
    END_OF_FILE = ""

    @property
    def keyword(self) -> str:
        """The keyword starting lines of this type."""
        return self.value

    @property
    def description(self) -> str:
        """The human-readable name used in messages."""
        if self is ElementType.CURVE_2D:
            return "curve 2D"

        if self in (ElementType.CALL, ElementType.SCMP, ElementType.CSH):
            return f"{self.value} command"

        if self in (ElementType.CURVE_APPROXIMATION, ElementType.SURFACE_APPROXIMATION):
            return f"{self.name.split('_')[0].lower()} approximation technique"

        return self.name.replace("_", " ").lower()

    @classmethod
    def from_keyword(cls, keyword: str) -> ElementType | None:
        """Look up the element type of a keyword.

        :param keyword: The first word of a line.
        :return: The element type, or ``None`` if the word is not an OBJ keyword.
        """
        if not keyword:
            return None

        try:
            return cls(keyword)
        except ValueError:
            return None


class Registry(collections.abc.Mapping):
    """An immutable mapping of element keywords to compiled parsers.

    Registries are created by :class:`RegistryBuilder` and can be shared between any number of dispatchers.
    """

    def __init__(self, machines: dict[str, CompiledFSM]) -> None:
        self._machines = types.MappingProxyType(dict(machines))

    def __getitem__(self, keyword: str) -> CompiledFSM:
        return self._machines[keyword]

    def __iter__(self) -> t.Iterator[str]:
        return iter(self._machines)

    def __len__(self) -> int:
        return len(self._machines)

    def __repr__(self) -> str:
        return f"Registry({', '.join(self._machines)})"


class RegistryBuilder:
    """Collects the compiled parsers of a registry.

    .. code-block:: python

        registry = RegistryBuilder().register("v", VERTEX_SCHEMA).register("f", FACE_SCHEMA).build()

    """

    def __init__(self) -> None:
        self._machines: dict[str, CompiledFSM] = {}

    def register(self, keyword: str, schema: Schema) -> RegistryBuilder:
        """Compile a schema and install it as the parser of an element.

        Nothing is installed if the schema cannot be compiled.

        :param keyword: The element keyword, such as ``"v"``.
        :param schema: The schema of the element.
        :return: The builder, for chaining.
        :raises ValueError: If the keyword is not an OBJ keyword or already has a parser.
        :raises OBJSchemaError: If the schema is invalid.
        """
        if ElementType.from_keyword(keyword) is None:
            raise ValueError(f"Unknown OBJ element keyword: {keyword!r}")

        if keyword in self._machines:
            raise ValueError(f"A parser for the '{keyword}' element is already registered")

        self._machines[keyword] = compile_schema(schema)
        return self

    def build(self) -> Registry:
        """Create the immutable registry.

        :return: The registry holding every parser registered so far.
        """
        return Registry(self._machines)


@functools.lru_cache(maxsize=None)
def default_registry() -> Registry:
    """Get the registry of all supported elements.

    The registry is compiled on first use and shared afterwards.

    :return: The registry.
    """
    builder = RegistryBuilder()
    for keyword in SUPPORTED_ELEMENTS:
        builder.register(keyword, get_schema(keyword))

    registry = builder.build()
    logger.debug("Built the default registry with %d parsers", len(registry))
    return registry
