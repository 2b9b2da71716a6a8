"""
Input Validation
================

Single responsibility: Validate inputs before a codec touches them.
"""

from pathlib import Path
from typing import Union

from geometry_io.core.exceptions import FileAccessError, UnsupportedFormatError
from geometry_io.core.reconcile import check_face_vertices, check_index
from geometry_io.core.types import ABSENT, Mesh


def validate_input_file(filepath: Union[str, Path]) -> Path:
    """
    Validate that an input file exists and has a readable format.

    Args:
        filepath: Path to geometry file

    Returns:
        Path object

    Raises:
        FileAccessError: If the file doesn't exist
        UnsupportedFormatError: If the extension is not ply, obj or ptx
    """
    from geometry_io.core.dispatch import SUPPORTED_READ_FORMATS, detect_format

    filepath = Path(filepath)

    if not filepath.is_file():
        raise FileAccessError(
            f"File not found: {filepath}\n"
            f"Please check the path."
        )

    fmt = detect_format(filepath)
    if fmt not in SUPPORTED_READ_FORMATS:
        raise UnsupportedFormatError(fmt, SUPPORTED_READ_FORMATS)

    return filepath


def validate_mesh(mesh: Mesh, check_normals: bool = False) -> Mesh:
    """
    Check that every face reference resolves.

    Vertex references are always checked and texcoord references when the
    mesh has texture coordinates. Normal references are only checked on
    request: after an OBJ read the normal buffer holds one entry per vertex
    while faces keep their original normal indices.

    Args:
        mesh: Mesh to check
        check_normals: Also check n1..n3 against mesh.normals

    Returns:
        The mesh, unchanged

    Raises:
        OutOfRangeReferenceError: On the first unresolved reference
    """
    for face in mesh.faces:
        check_face_vertices(face, len(mesh.vertices))
        if mesh.has_texcoords:
            for t in face.texcoord_indices:
                if t != ABSENT:
                    check_index("texcoord", t, len(mesh.tex_coords))
        if check_normals and mesh.has_normals:
            for n in face.normal_indices:
                if n != ABSENT:
                    check_index("normal", n, len(mesh.normals))
    return mesh
