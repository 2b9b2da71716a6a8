"""
OBJ Codec
=========

Single responsibility: Read and write Wavefront OBJ meshes.

Supported records: v, vt, vn, f (triangles) and mtllib. The face grammar is
picked from the attributes seen so far in the file, not per line, so a file
that declares normals early uses the a//n grammar for every later face.
"""

from enum import Enum
from pathlib import Path
from typing import IO, List, Optional, Sequence, Union

from geometry_io.config import IOConfig
from geometry_io.core.exceptions import FormatError, ValidationError
from geometry_io.core.reconcile import (
    assign_face_normals,
    check_face_vertices,
    expand_vertex_normals,
    reconcile_normals,
)
from geometry_io.core.texture import apply_material_textures
from geometry_io.core.types import ABSENT, CLEARED_COLOR, Face, Mesh, Vertex
from geometry_io.utils.context import open_text
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)


class FaceGrammar(Enum):
    """Corner reference layout of an f record."""

    PLAIN = "a"
    TEXCOORD = "a/t"
    NORMAL = "a//n"
    FULL = "a/t/n"

    @classmethod
    def select(cls, has_normals: bool, has_texcoords: bool) -> "FaceGrammar":
        if has_normals and has_texcoords:
            return cls.FULL
        if has_normals:
            return cls.NORMAL
        if has_texcoords:
            return cls.TEXCOORD
        return cls.PLAIN


def _parse_floats(fields: Sequence[str], count: int, record: str, line: int) -> tuple:
    if len(fields) < count:
        raise FormatError(
            f"'{record}' record needs {count} values, got {len(fields)}", line=line
        )
    try:
        return tuple(float(x) for x in fields[:count])
    except ValueError as e:
        raise FormatError(f"Invalid number in '{record}' record: {e}", line=line) from e


def _parse_index(field: str, line: int) -> int:
    """1-based OBJ index -> 0-based; empty field -> ABSENT."""
    if not field:
        return ABSENT
    try:
        return int(field) - 1
    except ValueError as e:
        raise FormatError(f"Invalid index '{field}' in face record", line=line) from e


def parse_corner(token: str, grammar: FaceGrammar, line: int) -> tuple:
    """
    Split one face corner into (vertex, texcoord, normal) indices.

    Fields that are not present where the grammar expects them are ABSENT;
    the vertex field is mandatory.

    Args:
        token: Corner text, e.g. '3', '3/1', '3//2', '3/1/2'
        grammar: Grammar selected for the file
        line: Source line for diagnostics

    Returns:
        Tuple (vertex, texcoord, normal), 0-based
    """
    parts = token.split("/")
    vertex = _parse_index(parts[0], line)
    if vertex == ABSENT:
        raise FormatError(f"Face corner '{token}' has no vertex index", line=line)

    texcoord = normal = ABSENT
    if grammar is FaceGrammar.TEXCOORD and len(parts) >= 2:
        texcoord = _parse_index(parts[1], line)
    elif grammar is FaceGrammar.NORMAL and len(parts) >= 3 and parts[1] == "":
        normal = _parse_index(parts[2], line)
    elif grammar is FaceGrammar.FULL and len(parts) >= 2:
        texcoord = _parse_index(parts[1], line)
        if len(parts) >= 3:
            normal = _parse_index(parts[2], line)

    return vertex, texcoord, normal


def parse_face(fields: Sequence[str], grammar: FaceGrammar, line: int) -> Face:
    """
    Build a Face from the corner tokens of an f record.

    Only the first three corners are used.

    Raises:
        FormatError: If fewer than three corners are given
    """
    if len(fields) < 3:
        raise FormatError(f"Face needs 3 corners, got {len(fields)}", line=line)
    if len(fields) > 3:
        logger.debug(f"Line {line}: face with {len(fields)} corners, keeping first 3")

    (a, t1, n1), (b, t2, n2), (c, t3, n3) = (
        parse_corner(token, grammar, line) for token in fields[:3]
    )
    return Face(a=a, b=b, c=c, n1=n1, n2=n2, n3=n3, t1=t1, t2=t2, t3=t3)


def parse_obj(stream: IO[str], mesh: Mesh, working_dir: Path) -> None:
    """
    Parse OBJ records from an open text stream into mesh.

    Args:
        stream: Text stream positioned at the start of the file
        mesh: Buffers to append to
        working_dir: Directory used to resolve mtllib names

    Raises:
        FormatError: On malformed records
        OutOfRangeReferenceError: If a face references a missing vertex or normal
    """
    for line_no, raw in enumerate(stream, start=1):
        fields = raw.split()
        if not fields:
            continue
        record, values = fields[0], fields[1:]

        if record == "v":
            position = _parse_floats(values, 3, record, line_no)
            mesh.vertices.append(Vertex(position, color=CLEARED_COLOR))
        elif record == "vt":
            mesh.tex_coords.append(_parse_floats(values, 2, record, line_no))
        elif record == "vn":
            mesh.normals.append(_parse_floats(values, 3, record, line_no))
        elif record == "f":
            grammar = FaceGrammar.select(mesh.has_normals, mesh.has_texcoords)
            face = parse_face(values, grammar, line_no)
            check_face_vertices(face, len(mesh.vertices), line_no)
            mesh.faces.append(face)
            if mesh.has_normals:
                assign_face_normals(mesh, face, line_no)
        elif record == "mtllib":
            name = raw.strip()[len(record):].strip()
            if name:
                mesh.materials.append(str(working_dir / name))


def read_obj(
    path: Union[str, Path],
    mesh: Optional[Mesh] = None,
    config: Optional[IOConfig] = None,
) -> Mesh:
    """
    Load an OBJ file.

    After parsing, normals are reconciled to one per vertex and, when a
    material is referenced, vertices are colorized from its diffuse texture.

    Args:
        path: OBJ file
        mesh: Optional buffers to fill in place (cleared first)
        config: Codec configuration

    Returns:
        The filled mesh

    Raises:
        FileAccessError: If the file cannot be opened
        FormatError: On malformed records or when no vertex is found
        OutOfRangeReferenceError: On unresolved face references

    Example:
        >>> mesh = read_obj("bunny.obj")
        >>> len(mesh.normals) == len(mesh.vertices)
        True
    """
    path = Path(path)
    config = config or IOConfig()
    mesh = mesh if mesh is not None else Mesh()
    mesh.clear()

    working_dir = path.parent
    with open_text(path) as f:
        parse_obj(f, mesh, working_dir)

    reconcile_normals(mesh)

    if not mesh.vertices:
        raise FormatError(f"No vertices parsed from {path}")

    if mesh.materials and config.load_textures:
        apply_material_textures(mesh, working_dir)

    logger.debug(
        f"Loaded {path.name}: {len(mesh.vertices):,} vertices, "
        f"{len(mesh.faces):,} faces, {len(mesh.normals):,} normals, "
        f"{len(mesh.tex_coords):,} texcoords"
    )
    return mesh


def format_face(face: Face, has_normals: bool, has_texcoords: bool) -> str:
    """Render an f record (1-based) in the grammar matching the written buffers."""
    grammar = FaceGrammar.select(has_normals, has_texcoords)
    corners = zip(face.vertex_indices, face.texcoord_indices, face.normal_indices)

    tokens: List[str] = []
    for v, t, n in corners:
        t = t if grammar in (FaceGrammar.TEXCOORD, FaceGrammar.FULL) else ABSENT
        n = n if grammar in (FaceGrammar.NORMAL, FaceGrammar.FULL) else ABSENT
        if n != ABSENT:
            tail = f"/{t + 1}/{n + 1}" if t != ABSENT else f"//{n + 1}"
        elif t != ABSENT:
            tail = f"/{t + 1}"
        else:
            tail = ""
        tokens.append(f"{v + 1}{tail}")

    if grammar is not FaceGrammar.PLAIN and any("/" not in tok for tok in tokens):
        logger.debug(f"Face {face.vertex_indices} written with missing corner references")
    return "f " + " ".join(tokens)


def write_obj(
    path: Union[str, Path],
    mesh: Mesh,
    config: Optional[IOConfig] = None,
) -> Path:
    """
    Save a mesh as OBJ.

    Vertex colors are appended to a v record only when the red component is
    non-zero. Normals and faces are written as stored; when
    config.expand_normals is set, mesh.normals is taken as one normal per
    vertex and written as a face-ordered list instead.

    Args:
        path: Output file
        mesh: Mesh to write
        config: Codec configuration

    Returns:
        Path written

    Raises:
        FileAccessError: If the file cannot be created
        ValidationError: If expand_normals is set and there is not one normal
            per vertex
    """
    path = Path(path)
    config = config or IOConfig()
    fmt = config.float_format

    def num(x: float) -> str:
        return format(float(x), fmt)

    normals, faces = mesh.normals, mesh.faces
    if config.expand_normals and faces and normals:
        if len(normals) != len(mesh.vertices):
            raise ValidationError(
                f"expand_normals needs one normal per vertex, got "
                f"{len(normals):,} normals for {len(mesh.vertices):,} vertices"
            )
        normals, faces = expand_vertex_normals(mesh.vertices, faces, normals)

    has_normals = len(normals) > 0
    has_texcoords = mesh.has_texcoords

    with open_text(path, "w") as f:
        for material in mesh.materials:
            f.write(f"mtllib {material}\n")

        for vertex in mesh.vertices:
            x, y, z = vertex.position
            record = f"v {num(x)} {num(y)} {num(z)}"
            if vertex.color[0] != 0:
                r, g, b = vertex.color
                record += f" {num(r)} {num(g)} {num(b)}"
            f.write(record + "\n")

        for nx, ny, nz in normals:
            f.write(f"vn {num(nx)} {num(ny)} {num(nz)}\n")

        for u, v in mesh.tex_coords:
            f.write(f"vt {num(u)} {num(v)}\n")

        for face in faces:
            f.write(format_face(face, has_normals, has_texcoords) + "\n")

    logger.debug(
        f"Saved {path.name}: {len(mesh.vertices):,} vertices, {len(faces):,} faces, "
        f"{len(normals):,} normals"
    )
    return path
