"""
Format Dispatch
===============

Single responsibility: Pick the codec for a path.

Reads are selected by the lowercase extension. Writes ignore the requested
extension: meshes with faces are saved as OBJ, point clouds as PLY.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Callable, Mapping, Optional, Union

from geometry_io.config import IOConfig
from geometry_io.core.exceptions import UnsupportedFormatError
from geometry_io.core.types import Mesh
from geometry_io.core.validator import validate_mesh
from geometry_io.formats.obj import read_obj, write_obj
from geometry_io.formats.ply import read_ply, write_ply
from geometry_io.formats.ptx import read_ptx
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)

Reader = Callable[..., Mesh]

READERS: Mapping[str, Reader] = MappingProxyType({
    "ply": read_ply,
    "obj": read_obj,
    "ptx": read_ptx,
})

SUPPORTED_READ_FORMATS = tuple(READERS)


def detect_format(path: Union[str, Path]) -> str:
    """
    Return the lowercase text after the last '.' of a file name.

    Returns an empty string when the name has no '.'.

    Example:
        >>> detect_format("scans/Room.PTX")
        'ptx'
    """
    name = str(path)
    dot = name.rfind(".")
    if dot < 0:
        return ""
    return name[dot + 1:].lower()


def read_object(
    path: Union[str, Path],
    mesh: Optional[Mesh] = None,
    config: Optional[IOConfig] = None,
) -> Mesh:
    """
    Load a mesh or point cloud, choosing the codec by extension.

    Args:
        path: .ply, .obj or .ptx file (case-insensitive)
        mesh: Optional buffers to fill in place
        config: Codec configuration

    Returns:
        The filled mesh

    Raises:
        UnsupportedFormatError: If the extension is not ply, obj or ptx
        GeometryIOError: Any codec failure (see the codec modules)

    Example:
        >>> mesh = read_object("bunny.obj")
        >>> mesh.has_faces
        True
    """
    fmt = detect_format(path)
    reader = READERS.get(fmt)
    if reader is None:
        raise UnsupportedFormatError(fmt, SUPPORTED_READ_FORMATS)

    logger.debug(f"Reading {path} as {fmt.upper()}")
    return reader(path, mesh=mesh, config=config)


def output_path_for(path: Union[str, Path], has_faces: bool) -> Path:
    """
    Rewrite an output path to the extension of the format that will be used.

    If the name has a three-letter extension it is replaced, otherwise the
    extension is appended.

    Example:
        >>> output_path_for("out/cloud.obj", has_faces=False)
        PosixPath('out/cloud.ply')
        >>> output_path_for("out/mesh", has_faces=True)
        PosixPath('out/mesh.obj')
    """
    ext = "obj" if has_faces else "ply"
    name = str(path)
    if len(name) >= 4 and name[-4] == ".":
        return Path(name[:-3] + ext)
    return Path(f"{name}.{ext}")


def write_object(
    path: Union[str, Path],
    mesh: Mesh,
    config: Optional[IOConfig] = None,
) -> Path:
    """
    Save a mesh as OBJ (it has faces) or PLY (it has none).

    Args:
        path: Requested output path; its extension is rewritten to match
        mesh: Mesh to save
        config: Codec configuration

    Returns:
        Path actually written

    Raises:
        FileAccessError: If the output file cannot be created
        OutOfRangeReferenceError: If a face references a missing vertex or texcoord
    """
    validate_mesh(mesh)

    target = output_path_for(path, mesh.has_faces)
    if target != Path(path):
        logger.info(f"Writing {target.name} instead of {Path(path).name}")

    if mesh.has_faces:
        return write_obj(target, mesh, config)
    return write_ply(target, mesh, config)
