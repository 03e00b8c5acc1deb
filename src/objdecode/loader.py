"""Utilities for loading Wavefront OBJ files into meshes."""

from __future__ import annotations

__all__ = ["load_obj", "resolve_index"]

import collections
import contextlib
import typing as t

import numpy as np

from objdecode.diagnostics import DiagnosticKind, Issue, Severity
from objdecode.dispatcher import Dispatcher, log_diagnostic
from objdecode.exceptions import OBJParseError
from objdecode.mesh import OBJMesh
from objdecode.registry import ElementType
from objdecode.tokenizer import Tokenizer

if t.TYPE_CHECKING:
    import os

    from objdecode.diagnostics import Diagnostic
    from objdecode.dispatcher import Report
    from objdecode.elements import Face, FaceVertex, Normal, TextureVertex, Vertex
    from objdecode.registry import Registry

#: Vertex weights that do not change the position of a vertex.
_NEUTRAL_WEIGHTS: t.Final[tuple[float, ...]] = (0.0, 1.0)


def resolve_index(index: int, count: int) -> int | None:
    """Convert an OBJ reference to a zero-based index.

    Positive references count from the first element, starting at 1. Negative references count back from the
    last element read so far.

    :param index: The reference as written in the file.
    :param count: The number of elements read so far.
    :return: The zero-based index, or ``None`` if the reference is zero or out of range.
    """
    if index > 0:
        resolved = index - 1
    elif index < 0:
        resolved = count + index
    else:
        return None

    return resolved if 0 <= resolved < count else None


class _MeshBuilder:
    """Collects elements into the arrays of a mesh."""

    def __init__(self, dispatcher: Dispatcher) -> None:
        self.dispatcher = dispatcher
        self.vertices: list[tuple[float, float, float]] = []
        self.texture_coords: list[tuple[float, float]] = []
        self.normals: list[tuple[float, float, float]] = []
        self.faces: list[tuple[int, int, int]] = []
        self.face_texture: list[tuple[int, int, int]] = []
        self.face_normals: list[tuple[int, int, int]] = []
        self.has_face_texture = False
        self.has_face_normals = False
        self.element_counts: collections.Counter[ElementType] = collections.Counter()

    def add_vertex(self, vertex: Vertex) -> None:
        if vertex.w not in _NEUTRAL_WEIGHTS:
            self.dispatcher.report(Issue(DiagnosticKind.EXTRA_PARAMETER, "vertex weights are not supported"))

        self.vertices.append((vertex.x, vertex.y, vertex.z))

    def add_texture_vertex(self, texture: TextureVertex) -> None:
        self.texture_coords.append((texture.u, texture.v))

    def add_normal(self, normal: Normal) -> None:
        self.normals.append((normal.i, normal.j, normal.k))

    def add_face(self, face: Face) -> None:
        corners: list[tuple[int, int, int]] = []
        for number, vertex in enumerate(face.vertices, 1):
            corner = self._resolve_corner(number, vertex)
            if corner is None:
                return

            corners.append(corner)

        indices, textures, normals = zip(*corners)
        if face.has_texture:
            self.has_face_texture = True

        if face.has_normals:
            self.has_face_normals = True

        # Fan triangulation around the first corner.
        for i in range(1, len(indices) - 1):
            self.faces.append((indices[0], indices[i], indices[i + 1]))
            self.face_texture.append((textures[0], textures[i], textures[i + 1]))
            self.face_normals.append((normals[0], normals[i], normals[i + 1]))

    def _resolve_corner(self, number: int, vertex: FaceVertex) -> tuple[int, int, int] | None:
        """Resolve the references of one face corner, reporting the first invalid one."""
        resolved: list[int] = []
        for reference, count, name in (
            (vertex.index, len(self.vertices), "vertex"),
            (vertex.texture, len(self.texture_coords), "texture vertex"),
            (vertex.normal, len(self.normals), "vertex normal"),
        ):
            index = self._resolve(reference, count, name, number)
            if index is None:
                return None

            resolved.append(index)

        return resolved[0], resolved[1], resolved[2]

    def _resolve(self, reference: int | None, count: int, name: str, number: int) -> int | None:
        if reference is None:
            return -1

        resolved = resolve_index(reference, count)
        if resolved is None:
            message = f"the {name} index {reference} of the vertex number {number} is out of range"
            self.dispatcher.report(Issue(DiagnosticKind.SEMANTIC, message))

        return resolved

    def build(self) -> OBJMesh:
        mesh = OBJMesh.empty()
        mesh.element_counts = dict(self.element_counts)

        if self.vertices:
            mesh.vertices = np.array(self.vertices, dtype=np.float64)

        if self.texture_coords:
            mesh.texture_coords = np.array(self.texture_coords, dtype=np.float64)

        if self.normals:
            mesh.normals = np.array(self.normals, dtype=np.float64)

        if self.faces:
            mesh.faces = np.array(self.faces, dtype=np.int64)

            if self.has_face_texture:
                mesh.face_texture = np.array(self.face_texture, dtype=np.int64)

            if self.has_face_normals:
                mesh.face_normals = np.array(self.face_normals, dtype=np.int64)

        return mesh


def _open(file: str | os.PathLike[str] | bytes | t.BinaryIO) -> t.ContextManager[t.BinaryIO | bytes]:
    """Open the source of an OBJ file, leaving streams and raw bytes to the caller."""
    if isinstance(file, (bytes, bytearray)) or hasattr(file, "read"):
        return contextlib.nullcontext(file)  # type: ignore[arg-type]

    return open(file, "rb")  # noqa: SIM115


def load_obj(
    file: str | os.PathLike[str] | bytes | t.BinaryIO,
    *,
    registry: Registry | None = None,
    skip_comments: bool = True,
    strict: bool = False,
    report: Report | None = None,
) -> OBJMesh:
    """Load an OBJ file into a triangulated mesh.

    Vertices, texture vertices, normals and faces are collected into the mesh. Faces with more than three
    vertices are split into triangles around their first vertex. Every other element is only counted.

    :param file: The path to the OBJ file, raw bytes, or a binary file-like object.
    :param registry: The compiled element parsers. If ``None``, the default registry is used.
    :param skip_comments: Whether to discard comments. Default is ``True``.
    :param strict: Whether to raise on the first error instead of skipping the offending line.
        Default is ``False``.
    :param report: Receives every diagnostic. If ``None``, diagnostics are logged.
    :return: The loaded mesh.
    :raises OBJParseError: If ``strict`` is set and a line cannot be loaded.
    :raises OSError: If the file cannot be opened.

    .. code-block:: python

        mesh = load_obj("model.obj")
        print(f"Loaded {mesh.num_vertices} vertices and {mesh.num_faces} triangles.")

    """

    def forward(diagnostic: Diagnostic) -> None:
        if strict and diagnostic.severity is Severity.ERROR:
            raise OBJParseError(diagnostic)

        (report or log_diagnostic)(diagnostic)

    with _open(file) as source:
        dispatcher = Dispatcher(Tokenizer(source, skip_comments=skip_comments), registry, report=forward)
        builder = _MeshBuilder(dispatcher)

        for element_type, outcome in dispatcher:
            builder.element_counts[element_type] += 1
            record = outcome.record  # type: ignore[union-attr]

            if element_type is ElementType.VERTEX:
                builder.add_vertex(record)
            elif element_type is ElementType.VERTEX_TEXTURE:
                builder.add_texture_vertex(record)
            elif element_type is ElementType.VERTEX_NORMAL:
                builder.add_normal(record)
            elif element_type is ElementType.FACE:
                builder.add_face(record)

    return builder.build()
