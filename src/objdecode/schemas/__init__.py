"""Schemas of the OBJ elements that have compiled parsers."""

from __future__ import annotations

__all__ = [
    "SUPPORTED_ELEMENTS",
    "AnyField",
    "Composite",
    "Delimiter",
    "Repeated",
    "Scalar",
    "Schema",
    "ValueKind",
    "get_schema",
]

import typing as t

from objdecode.schemas.base import AnyField, Composite, Delimiter, Repeated, Scalar, Schema, ValueKind
from objdecode.schemas.polygon import FACE_SCHEMA, LINE_SCHEMA, POINT_SCHEMA
from objdecode.schemas.state import LEVEL_OF_DETAIL_SCHEMA, switch_schema
from objdecode.schemas.vertex import NORMAL_SCHEMA, PARAMETER_VERTEX_SCHEMA, TEXTURE_VERTEX_SCHEMA, VERTEX_SCHEMA

#: Mapping of element keywords to the schemas of their parsers.
_ELEMENT_SCHEMAS: t.Final[t.Dict[str, Schema]] = {
    "v": VERTEX_SCHEMA,
    "vt": TEXTURE_VERTEX_SCHEMA,
    "vn": NORMAL_SCHEMA,
    "vp": PARAMETER_VERTEX_SCHEMA,
    "p": POINT_SCHEMA,
    "l": LINE_SCHEMA,
    "f": FACE_SCHEMA,
    "bevel": switch_schema("bevel interpolation"),
    "c_interp": switch_schema("color interpolation"),
    "d_interp": switch_schema("dissolve interpolation"),
    "lod": LEVEL_OF_DETAIL_SCHEMA,
}

#: Tuple of the element keywords that have compiled parsers.
SUPPORTED_ELEMENTS: t.Final[tuple[str, ...]] = tuple(_ELEMENT_SCHEMAS)


def get_schema(keyword: str) -> Schema:
    """Get the schema of a supported element.

    :param keyword: The element keyword (e.g., "v", "f").
    :return: The schema of the element.
    :raises KeyError: If the element is not supported.
    """
    return _ELEMENT_SCHEMAS[keyword]
