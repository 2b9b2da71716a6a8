"""Geometry I/O - point cloud and mesh codecs for the registration pipeline.

Reads PLY, OBJ and PTX files into a shared in-memory mesh, and writes meshes
back as OBJ (when they have faces) or PLY (when they don't).

Quick Start:
    >>> from geometry_io import read_object, write_object
    >>> from geometry_io.utils.logging import setup_logger
    >>>
    >>> logger = setup_logger(verbose=True)
    >>>
    >>> mesh = read_object('scan.ptx')
    >>> len(mesh.vertices)
    1024
    >>> write_object('scan_out.obj', mesh)  # no faces: written as PLY
    PosixPath('scan_out.ply')

Modules:
    core: Mesh types, dispatch, attribute reconciliation, texture sampling
    formats: OBJ, PLY and PTX codecs
    config: Codec configuration
    cli: Command-line interface
    utils: Logging, scoped file handles, array/tensor conversion
"""

__version__ = "1.0.0"
__author__ = "Geometry I/O Contributors"
__license__ = "MIT"

from .core.exceptions import (
    GeometryIOError,
    FileAccessError,
    UnsupportedFormatError,
    FormatError,
    ShortReadError,
    OutOfRangeReferenceError,
    ValidationError,
)
from .core.types import Vertex, Face, Mesh, NO_COLOR
from .core.dispatch import read_object, write_object, detect_format
from .config import IOConfig
from .utils.logging import setup_logger, get_logger

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Exceptions
    "GeometryIOError",
    "FileAccessError",
    "UnsupportedFormatError",
    "FormatError",
    "ShortReadError",
    "OutOfRangeReferenceError",
    "ValidationError",
    # Types
    "Vertex",
    "Face",
    "Mesh",
    "NO_COLOR",
    # I/O
    "read_object",
    "write_object",
    "detect_format",
    "IOConfig",
    # Logging
    "setup_logger",
    "get_logger",
]
