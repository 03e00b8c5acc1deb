"""Schemas for the polygonal geometry elements: ``p``, ``l`` and ``f``."""

from __future__ import annotations

__all__ = ["FACE_SCHEMA", "LINE_SCHEMA", "POINT_SCHEMA"]

import typing as t

from objdecode.elements import Face, FaceVertex, Line, LineVertex, Point
from objdecode.schemas.base import Composite, Delimiter, Repeated, Scalar, Schema, ValueKind

#: Point: ``p v1 v2 v3 ...``.
POINT_SCHEMA: t.Final[Schema] = Schema(
    element="point",
    fields=(Repeated("vertices", Scalar("index", ValueKind.INT), min_count=1, name="vertex"),),
    factory=Point,
)

#: Line: ``l v1/[vt1] v2/[vt2] ...``.
LINE_SCHEMA: t.Final[Schema] = Schema(
    element="line",
    fields=(
        Repeated(
            "vertices",
            Composite(
                "vertex",
                Delimiter.SLASH,
                (
                    Scalar("index", ValueKind.INT),
                    Scalar("texture", ValueKind.INT, optional=True),
                ),
                factory=LineVertex,
            ),
            min_count=2,
            name="vertex",
        ),
    ),
    factory=Line,
)

#: Face: ``f v1/[vt1]/[vn1] v2/[vt2]/[vn2] v3/[vt3]/[vn3] ...``.
FACE_SCHEMA: t.Final[Schema] = Schema(
    element="face",
    fields=(
        Repeated(
            "vertices",
            Composite(
                "vertex",
                Delimiter.SLASH,
                (
                    Scalar("index", ValueKind.INT),
                    Scalar("texture", ValueKind.INT, optional=True),
                    Scalar("normal", ValueKind.INT, optional=True),
                ),
                factory=FaceVertex,
            ),
            min_count=3,
            name="vertex",
        ),
    ),
    factory=Face,
)
