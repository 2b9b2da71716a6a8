"""
PTX Codec
=========

Single responsibility: Read scanner point grids stored as PTX.

Layout: column count, row count, eight lines of scanner pose and transform
(ignored), then one 'x y z intensity r g b' line per point. There is no
write path for this format.
"""

from pathlib import Path
from typing import IO, Optional, Union

from geometry_io.config import IOConfig
from geometry_io.core.exceptions import FormatError, ShortReadError
from geometry_io.core.types import Mesh, Vertex
from geometry_io.utils.context import open_text
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)

TRANSFORM_LINES = 8
HEADER_LINES = 2 + TRANSFORM_LINES


def _read_count(stream: IO[str], what: str, line: int) -> int:
    fields = stream.readline().split()
    if not fields:
        raise FormatError(f"Missing PTX {what} count", line=line)
    try:
        value = int(fields[0])
    except ValueError as e:
        raise FormatError(f"Invalid PTX {what} count '{fields[0]}'", line=line) from e
    if value < 0:
        raise FormatError(f"Negative PTX {what} count {value}", line=line)
    return value


def parse_point(fields, line: int) -> Vertex:
    """
    Build a vertex from one PTX point record.

    Intensity is discarded. Records carrying only x y z intensity produce
    a colorless vertex.

    Raises:
        FormatError: If fewer than four numbers are present
    """
    if len(fields) < 4:
        raise FormatError(f"PTX point needs at least 4 values, got {len(fields)}", line=line)
    try:
        values = [float(x) for x in fields[:7]]
    except ValueError as e:
        raise FormatError(f"Invalid number in PTX point: {e}", line=line) from e

    vertex = Vertex(tuple(values[:3]))
    if len(values) >= 7:
        vertex.color = tuple(values[4:7])
    return vertex


def read_ptx(
    path: Union[str, Path],
    mesh: Optional[Mesh] = None,
    config: Optional[IOConfig] = None,
) -> Mesh:
    """
    Load a PTX scan.

    Reading stops once rows * columns points have been read or the file
    ends. Blank lines inside the point block are skipped. Transformations declared in the header are ignored.

    Args:
        path: PTX file
        mesh: Optional buffers to fill in place (cleared first)
        config: Codec configuration (max_vertices is honoured)

    Returns:
        The filled mesh

    Raises:
        FileAccessError: If the file cannot be opened
        FormatError: If the header is malformed or exceeds config.max_vertices
        ShortReadError: If the file holds fewer points than declared

    Example:
        >>> mesh = read_ptx("scan.ptx")
        >>> mesh.vertices[0].has_color
        True
    """
    path = Path(path)
    config = config or IOConfig()
    mesh = mesh if mesh is not None else Mesh()
    mesh.clear()

    with open_text(path) as f:
        cols = _read_count(f, "column", 1)
        rows = _read_count(f, "row", 2)
        expected = rows * cols

        if config.max_vertices is not None and expected > config.max_vertices:
            raise FormatError(
                f"PTX header declares {expected:,} vertices, "
                f"limit is {config.max_vertices:,}"
            )

        # Scanner position, axes and 4x4 transform
        for _ in range(TRANSFORM_LINES):
            f.readline()

        for offset, raw in enumerate(f, start=HEADER_LINES + 1):
            if len(mesh.vertices) == expected:
                break
            fields = raw.split()
            if not fields:
                continue
            mesh.vertices.append(parse_point(fields, offset))

    if len(mesh.vertices) != expected:
        raise ShortReadError(expected, len(mesh.vertices), path)

    logger.debug(f"Loaded {path.name}: {rows:,} x {cols:,} = {expected:,} vertices")
    return mesh
