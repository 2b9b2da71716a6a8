"""Core types and the logic shared by every codec.

- Mesh buffers (vertices, faces, normals, texture coordinates, materials)
- Format dispatch by file extension
- Face-corner to per-vertex attribute reconciliation
- Material texture sampling
- Input validation
"""

from .types import Vertex, Face, Mesh, NO_COLOR, CLEARED_COLOR, ABSENT
from .exceptions import *

__all__ = [
    "Vertex",
    "Face",
    "Mesh",
    "NO_COLOR",
    "CLEARED_COLOR",
    "ABSENT",
]
