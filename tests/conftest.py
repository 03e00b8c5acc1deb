import typing as t

import numpy as np
import pytest

from objdecode import OBJMesh
from objdecode.compiler import compile_schema
from objdecode.diagnostics import Diagnostic
from objdecode.parser import ElementParser, Outcome
from objdecode.schemas import Schema
from objdecode.tokenizer import Tokenizer


@pytest.fixture
def empty_mesh() -> OBJMesh:
    """An empty mesh with no vertices, faces, normals, or texture coordinates."""
    return OBJMesh.empty()


@pytest.fixture
def simple_mesh() -> OBJMesh:
    """A mesh with a single triangle and no normals or texture coordinates."""
    mesh = OBJMesh.empty()
    mesh.vertices = np.array(
        [
            [0.0, 0.0, 0.0],
            [1.0, 0.0, 0.0],
            [0.0, 1.0, 0.0],
        ],
        dtype=np.float64,
    )
    mesh.faces = np.array([[0, 1, 2]], dtype=np.int64)
    return mesh


@pytest.fixture
def textured_mesh() -> OBJMesh:
    """A mesh with a single triangle, texture coordinates and a normal."""
    mesh = OBJMesh.empty()
    mesh.vertices = np.array(
        [
            [0.0, 0.0, 0.0],
            [2.0, 0.0, 0.0],
            [0.0, 3.0, -1.0],
        ],
        dtype=np.float64,
    )
    mesh.faces = np.array([[0, 1, 2]], dtype=np.int64)
    mesh.texture_coords = np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]], dtype=np.float64)
    mesh.normals = np.array([[0.0, 0.0, 1.0]], dtype=np.float64)
    mesh.face_texture = np.array([[0, 1, 2]], dtype=np.int64)
    mesh.face_normals = np.array([[0, 0, 0]], dtype=np.int64)
    return mesh


@pytest.fixture
def diagnostics() -> list[Diagnostic]:
    """A list collecting the diagnostics passed to a report."""
    return []


@pytest.fixture
def parse_line() -> t.Callable[[Schema, bytes], Outcome]:
    """Run the compiled parser of a schema over one line, starting after its keyword."""

    def parse(schema: Schema, line: bytes) -> Outcome:
        tokenizer = Tokenizer(line)
        tokenizer.next()
        return ElementParser(compile_schema(schema)).run(tokenizer)

    return parse
