"""
PLY Codec
=========

Single responsibility: Read and write point clouds as PLY via plyfile.

Only the "vertex" element is used. Faces in a PLY input are never read and
never written; meshes with faces are saved as OBJ by the dispatcher.
"""

from pathlib import Path
from typing import Optional, Union

import numpy as np
from plyfile import PlyData, PlyElement, PlyParseError

from geometry_io.config import IOConfig
from geometry_io.core.exceptions import FileAccessError, FormatError
from geometry_io.core.types import Mesh, Vertex
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)

POSITION_FIELDS = ("x", "y", "z")
NORMAL_FIELDS = ("nx", "ny", "nz")
COLOR_FIELDS = ("red", "green", "blue")


def _has_fields(names, fields) -> bool:
    return all(name in names for name in fields)


def _columns(data: np.ndarray, fields) -> np.ndarray:
    return np.stack([np.asarray(data[name], dtype=np.float64) for name in fields], axis=1)


def read_ply(
    path: Union[str, Path],
    mesh: Optional[Mesh] = None,
    config: Optional[IOConfig] = None,
) -> Mesh:
    """
    Load the vertex element of a PLY file.

    x, y, z are required; nx, ny, nz (normals) and red, green, blue
    (8-bit colors, widened to float) are read when all three are present.

    Args:
        path: PLY file (binary or ASCII)
        mesh: Optional buffers to fill in place (cleared first)
        config: Codec configuration (unused by the reader)

    Returns:
        The filled mesh

    Raises:
        FileAccessError: If the file cannot be opened
        FormatError: If the file is not valid PLY, has no vertex element,
            or the vertex element lacks x, y or z
    """
    path = Path(path)
    mesh = mesh if mesh is not None else Mesh()
    mesh.clear()

    try:
        ply = PlyData.read(str(path))
    except PlyParseError as e:
        raise FormatError(f"Invalid PLY file {path}: {e}") from e
    except OSError as e:
        raise FileAccessError(f"Cannot open {path}: {e.strerror or e}") from e

    try:
        data = ply["vertex"].data
    except KeyError as e:
        raise FormatError(f"No 'vertex' element in {path}") from e

    names = data.dtype.names or ()
    if not _has_fields(names, POSITION_FIELDS):
        raise FormatError(f"Vertex element in {path} lacks x, y, z properties")

    positions = _columns(data, POSITION_FIELDS)
    normals = _columns(data, NORMAL_FIELDS) if _has_fields(names, NORMAL_FIELDS) else None
    colors = _columns(data, COLOR_FIELDS) if _has_fields(names, COLOR_FIELDS) else None

    for i, position in enumerate(positions):
        vertex = Vertex(tuple(position.tolist()))
        if normals is not None:
            vertex.normal = tuple(normals[i].tolist())
            mesh.normals.append(vertex.normal)
        if colors is not None:
            vertex.color = tuple(colors[i].tolist())
        mesh.vertices.append(vertex)

    logger.debug(
        f"Loaded {path.name}: {len(mesh.vertices):,} vertices, "
        f"normals={'Yes' if normals is not None else 'No'}, "
        f"colors={'Yes' if colors is not None else 'No'}"
    )
    return mesh


def build_vertex_table(mesh: Mesh, scalar_dtype: str = "f4") -> np.ndarray:
    """
    Pack mesh vertices into a structured array for plyfile.

    Normal columns are added when there is one normal per vertex; color
    columns when at least one vertex has a valid color. Colors are clipped
    to 0..255 and truncated to uint8.

    Args:
        mesh: Source mesh
        scalar_dtype: numpy type code for positions and normals

    Returns:
        Structured array with x, y, z[, nx, ny, nz][, red, green, blue]
    """
    use_normals = len(mesh.normals) == len(mesh.vertices)
    use_colors = mesh.has_colors

    dtype = [(name, scalar_dtype) for name in POSITION_FIELDS]
    if use_normals:
        dtype += [(name, scalar_dtype) for name in NORMAL_FIELDS]
    if use_colors:
        dtype += [(name, "u1") for name in COLOR_FIELDS]

    table = np.empty(len(mesh.vertices), dtype=dtype)
    if not mesh.vertices:
        return table

    positions = np.array([v.position for v in mesh.vertices], dtype=np.float64)
    for k, name in enumerate(POSITION_FIELDS):
        table[name] = positions[:, k]

    if use_normals:
        normals = np.array(mesh.normals, dtype=np.float64)
        for k, name in enumerate(NORMAL_FIELDS):
            table[name] = normals[:, k]

    if use_colors:
        colors = np.array([v.color for v in mesh.vertices], dtype=np.float64)
        colors = np.clip(colors, 0, 255).astype(np.uint8)
        for k, name in enumerate(COLOR_FIELDS):
            table[name] = colors[:, k]

    return table


def write_ply(
    path: Union[str, Path],
    mesh: Mesh,
    config: Optional[IOConfig] = None,
) -> Path:
    """
    Save mesh vertices as a PLY point cloud.

    Args:
        path: Output file
        mesh: Mesh to write (faces are ignored)
        config: Codec configuration (binary/ASCII, scalar type, comment)

    Returns:
        Path written

    Raises:
        FileAccessError: If the file cannot be created
    """
    path = Path(path)
    config = config or IOConfig()

    table = build_vertex_table(mesh, config.ply_scalar_dtype)
    element = PlyElement.describe(table, "vertex")
    ply = PlyData(
        [element],
        text=not config.ply_binary,
        byte_order="<" if config.ply_binary else "=",
        comments=[config.ply_comment],
    )

    try:
        ply.write(str(path))
    except OSError as e:
        raise FileAccessError(f"Cannot create {path}: {e.strerror or e}") from e

    logger.debug(
        f"Saved {path.name}: {len(table):,} vertices, "
        f"columns={','.join(table.dtype.names)}"
    )
    return path
