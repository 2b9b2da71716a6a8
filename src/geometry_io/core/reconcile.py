"""
Vertex Attribute Reconciliation
===============================

Single responsibility: Turn face-corner normal references into one normal per
vertex, and back again for writing.

Faces reference normals per corner, so a vertex shared by several faces may be
given several normals. Readers resolve this by "last writer wins": every face
writes its corner normals onto its vertices in parse order, and the normal
buffer is then rebuilt from the vertices.
"""

from dataclasses import replace
from typing import List, Optional, Sequence, Tuple

from geometry_io.core.exceptions import OutOfRangeReferenceError
from geometry_io.core.types import ABSENT, Face, Mesh, Vector3, Vertex
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)


def check_index(sequence: str, index: int, size: int, line: Optional[int] = None) -> int:
    """
    Validate a 0-based corner index against a sequence length.

    Args:
        sequence: Sequence name used in the error message
        index: 0-based index
        size: Current sequence length
        line: Source line for diagnostics

    Returns:
        The index, unchanged

    Raises:
        OutOfRangeReferenceError: If index is outside [0, size)
    """
    if not 0 <= index < size:
        raise OutOfRangeReferenceError(sequence, index, size, line=line)
    return index


def check_face_vertices(face: Face, vertex_count: int, line: Optional[int] = None) -> None:
    """Raise OutOfRangeReferenceError unless all three vertex references resolve."""
    for index in face.vertex_indices:
        check_index("vertex", index, vertex_count, line)


def assign_face_normals(mesh: Mesh, face: Face, line: Optional[int] = None) -> None:
    """
    Write a face's corner normals onto its three vertices.

    A later face referencing the same vertex overwrites the value.
    Corners without a normal reference are left untouched.

    Args:
        mesh: Mesh holding vertices and normals parsed so far
        face: Face whose corner normals are applied
        line: Source line for diagnostics

    Raises:
        OutOfRangeReferenceError: If a vertex or normal reference does not resolve
    """
    for v_idx, n_idx in zip(face.vertex_indices, face.normal_indices):
        if n_idx == ABSENT:
            continue
        check_index("vertex", v_idx, len(mesh.vertices), line)
        check_index("normal", n_idx, len(mesh.normals), line)
        mesh.vertices[v_idx].normal = mesh.normals[n_idx]


def assign_sequential_normals(mesh: Mesh) -> bool:
    """
    Assign normals to vertices 1:1 by position.

    Only applies when there is exactly one normal per vertex.

    Returns:
        True if normals were assigned
    """
    if len(mesh.vertices) != len(mesh.normals):
        return False
    for vertex, normal in zip(mesh.vertices, mesh.normals):
        vertex.normal = normal
    return True


def rebuild_vertex_normals(mesh: Mesh) -> None:
    """
    Replace the normal buffer with one entry per vertex, in vertex order.

    Any per-corner divergence collected while parsing is discarded; the
    values kept are the ones already written onto the vertices.
    """
    mesh.normals[:] = [v.normal for v in mesh.vertices]


def bind_face_normals(mesh: Mesh) -> None:
    """
    Point every face corner that has a normal at its own vertex's normal.

    Run after rebuild_vertex_normals so that n1..n3 index the per-vertex
    normal buffer instead of the normal list found in the file.
    """
    def bound(n: int, v: int) -> int:
        return ABSENT if n == ABSENT else v

    mesh.faces[:] = [
        replace(
            face,
            n1=bound(face.n1, face.a),
            n2=bound(face.n2, face.b),
            n3=bound(face.n3, face.c),
        )
        for face in mesh.faces
    ]


def reconcile_normals(mesh: Mesh) -> None:
    """
    Post-pass run after a mesh has been parsed.

    - No faces: assign normals 1:1 when counts match.
    - Faces and normals: rebuild normals so there is one per vertex,
      and rebind face normal indices to the vertex indices.
    """
    if not mesh.has_faces:
        if assign_sequential_normals(mesh):
            logger.debug(f"Assigned {len(mesh.normals):,} normals by position")
    elif mesh.has_normals:
        before = len(mesh.normals)
        rebuild_vertex_normals(mesh)
        bind_face_normals(mesh)
        logger.debug(f"Rebuilt normals per vertex: {before:,} -> {len(mesh.normals):,}")


def expand_vertex_normals(
    vertices: Sequence[Vertex],
    faces: Sequence[Face],
    normals: Optional[Sequence[Vector3]] = None,
) -> Tuple[List[Vector3], List[Face]]:
    """
    Expand per-vertex normals into a flat, face-ordered list.

    This is the inverse of rebuild_vertex_normals: face i gets entries
    3*i, 3*i+1, 3*i+2 holding the normals of its corners a, b, c.

    Args:
        vertices: Vertex sequence
        faces: Faces to expand
        normals: Per-vertex normals (defaults to each vertex's own normal)

    Returns:
        Tuple of (flat normal list, copies of faces with n1..n3 rewritten)

    Raises:
        OutOfRangeReferenceError: If a face references a missing vertex

    Example:
        >>> flat, faces_out = expand_vertex_normals(mesh.vertices, mesh.faces)
        >>> len(flat) == 3 * len(faces_out)
        True
    """
    if normals is None:
        normals = [v.normal for v in vertices]

    flat: List[Vector3] = []
    expanded: List[Face] = []
    for face in faces:
        check_face_vertices(face, len(normals))
        base = len(flat)
        flat.extend(normals[i] for i in face.vertex_indices)
        expanded.append(replace(face, n1=base, n2=base + 1, n3=base + 2))

    return flat, expanded
