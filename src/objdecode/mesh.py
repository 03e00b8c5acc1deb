"""Mesh data structures for loaded OBJ content."""

from __future__ import annotations

__all__ = ["OBJMesh"]

import dataclasses
import typing as t

import numpy as np

if t.TYPE_CHECKING:
    import numpy.typing as npt

    from objdecode.registry import ElementType


@dataclasses.dataclass
class OBJMesh:
    """Triangulated 3D mesh data."""

    #: Vertex positions as (N, 3) float array.
    vertices: npt.NDArray[np.floating]

    #: Zero-based vertex indices of the triangles as (M, 3) integer array.
    faces: npt.NDArray[np.integer]

    #: Texture coordinates as (T, 2) float array, or empty.
    texture_coords: npt.NDArray[np.floating]

    #: Vertex normals as (K, 3) float array, or empty.
    normals: npt.NDArray[np.floating]

    #: Zero-based texture coordinate indices of the triangle corners as (M, 3) integer array, or empty.
    #: Corners of faces without texture references hold -1.
    face_texture: npt.NDArray[np.integer]

    #: Zero-based normal indices of the triangle corners as (M, 3) integer array, or empty.
    #: Corners of faces without normal references hold -1.
    face_normals: npt.NDArray[np.integer]

    #: The number of successfully read elements of each type, including the unsupported by the mesh.
    element_counts: dict[ElementType, int] = dataclasses.field(default_factory=dict)

    @property
    def num_vertices(self) -> int:
        """Number of vertices in the mesh."""
        return int(self.vertices.shape[0])

    @property
    def num_faces(self) -> int:
        """Number of triangles in the mesh."""
        return int(self.faces.shape[0])

    @property
    def has_texture_coords(self) -> bool:
        """Whether the mesh has texture coordinates."""
        return self.texture_coords.size > 0

    @property
    def has_normals(self) -> bool:
        """Whether the mesh has vertex normals."""
        return self.normals.size > 0

    def bounds(self) -> tuple[npt.NDArray[np.floating], npt.NDArray[np.floating]]:
        """Compute the axis-aligned bounding box of the vertices.

        :return: The minimum and maximum corners.
        :raises ValueError: If the mesh has no vertices.
        """
        if self.num_vertices == 0:
            raise ValueError("Cannot compute the bounds of a mesh without vertices")

        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    @classmethod
    def empty(cls) -> OBJMesh:
        """Create a mesh without any data."""
        return cls(
            vertices=np.empty((0, 3), dtype=np.float64),
            faces=np.empty((0, 3), dtype=np.int64),
            texture_coords=np.empty((0, 2), dtype=np.float64),
            normals=np.empty((0, 3), dtype=np.float64),
            face_texture=np.empty((0, 3), dtype=np.int64),
            face_normals=np.empty((0, 3), dtype=np.int64),
        )
