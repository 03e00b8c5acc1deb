"""Schemas for the vertex data elements: ``v``, ``vt``, ``vn`` and ``vp``."""

from __future__ import annotations

__all__ = ["NORMAL_SCHEMA", "PARAMETER_VERTEX_SCHEMA", "TEXTURE_VERTEX_SCHEMA", "VERTEX_SCHEMA"]

import typing as t

from objdecode.elements import Normal, ParameterVertex, TextureVertex, Vertex
from objdecode.schemas.base import Scalar, Schema, ValueKind

#: Geometric vertex: ``v x y z [w]``.
VERTEX_SCHEMA: t.Final[Schema] = Schema(
    element="vertex",
    fields=(
        Scalar("x", ValueKind.FLOAT, name="X coordinate"),
        Scalar("y", ValueKind.FLOAT, name="Y coordinate"),
        Scalar("z", ValueKind.FLOAT, name="Z coordinate"),
        Scalar("w", ValueKind.FLOAT, name="weight parameter", optional=True, default=0.0),
    ),
    factory=Vertex,
)

#: Texture vertex: ``vt u [v] [w]``.
TEXTURE_VERTEX_SCHEMA: t.Final[Schema] = Schema(
    element="vertex texture",
    fields=(
        Scalar("u", ValueKind.FLOAT, name="U coordinate"),
        Scalar("v", ValueKind.FLOAT, name="V coordinate", optional=True, default=0.0),
        Scalar("w", ValueKind.FLOAT, name="W coordinate", optional=True, default=0.0),
    ),
    factory=TextureVertex,
)

#: Vertex normal: ``vn i j k``.
NORMAL_SCHEMA: t.Final[Schema] = Schema(
    element="vertex normal",
    fields=(
        Scalar("i", ValueKind.FLOAT, name="I coordinate"),
        Scalar("j", ValueKind.FLOAT, name="J coordinate"),
        Scalar("k", ValueKind.FLOAT, name="K coordinate"),
    ),
    factory=Normal,
)

#: Parameter space vertex: ``vp u [v] [w]``.
PARAMETER_VERTEX_SCHEMA: t.Final[Schema] = Schema(
    element="vertex parameter",
    fields=(
        Scalar("u", ValueKind.FLOAT, name="U coordinate"),
        Scalar("v", ValueKind.FLOAT, name="V coordinate", optional=True, default=0.0),
        Scalar("w", ValueKind.FLOAT, name="weight parameter", optional=True, default=1.0),
    ),
    factory=ParameterVertex,
)
