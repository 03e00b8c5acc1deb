"""Records produced for the OBJ elements that have parsers."""

from __future__ import annotations

__all__ = [
    "Face",
    "FaceVertex",
    "LevelOfDetail",
    "Line",
    "LineVertex",
    "Normal",
    "ParameterVertex",
    "Point",
    "Switch",
    "TextureVertex",
    "Vertex",
]

import dataclasses


@dataclasses.dataclass(frozen=True)
class Vertex:
    """A geometric vertex: ``v x y z [w]``."""

    #: The X coordinate.
    x: float

    #: The Y coordinate.
    y: float

    #: The Z coordinate.
    z: float

    #: The weight used by rational curves and surfaces.
    w: float = 0.0


@dataclasses.dataclass(frozen=True)
class TextureVertex:
    """A texture vertex: ``vt u [v] [w]``."""

    #: The horizontal texture coordinate.
    u: float

    #: The vertical texture coordinate.
    v: float = 0.0

    #: The depth texture coordinate.
    w: float = 0.0


@dataclasses.dataclass(frozen=True)
class Normal:
    """A vertex normal: ``vn i j k``."""

    i: float
    j: float
    k: float


@dataclasses.dataclass(frozen=True)
class ParameterVertex:
    """A parameter space vertex: ``vp u [v] [w]``."""

    u: float
    v: float = 0.0
    w: float = 1.0


@dataclasses.dataclass(frozen=True)
class Point:
    """A point element: ``p v1 v2 v3 ...``."""

    #: The referenced vertex numbers.
    vertices: tuple[int, ...]


@dataclasses.dataclass(frozen=True)
class LineVertex:
    """One vertex reference of a line element."""

    #: The referenced vertex number.
    index: int

    #: The referenced texture vertex number, if given.
    texture: int | None = None


@dataclasses.dataclass(frozen=True)
class Line:
    """A line element: ``l v1/[vt1] v2/[vt2] ...``."""

    vertices: tuple[LineVertex, ...]


@dataclasses.dataclass(frozen=True)
class FaceVertex:
    """One vertex reference of a face element."""

    #: The referenced vertex number.
    index: int

    #: The referenced texture vertex number, if given.
    texture: int | None = None

    #: The referenced vertex normal number, if given.
    normal: int | None = None


@dataclasses.dataclass(frozen=True)
class Face:
    """A face element: ``f v1/[vt1]/[vn1] v2/[vt2]/[vn2] v3/[vt3]/[vn3] ...``."""

    vertices: tuple[FaceVertex, ...]

    @property
    def num_vertices(self) -> int:
        """The number of vertices of the face."""
        return len(self.vertices)

    @property
    def has_texture(self) -> bool:
        """Whether the face references texture vertices."""
        return self.vertices[0].texture is not None

    @property
    def has_normals(self) -> bool:
        """Whether the face references vertex normals."""
        return self.vertices[0].normal is not None


@dataclasses.dataclass(frozen=True)
class Switch:
    """An on/off statement, such as ``bevel on`` or ``c_interp off``."""

    enabled: bool


@dataclasses.dataclass(frozen=True)
class LevelOfDetail:
    """A level of detail statement: ``lod level``."""

    level: int
