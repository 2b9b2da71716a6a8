"""File format codecs.

- obj: Wavefront OBJ read/write (faces, normals, texcoords, materials)
- ply: PLY vertex read/write through plyfile
- ptx: PTX scanner grid read
"""

from .obj import read_obj, write_obj
from .ply import read_ply, write_ply
from .ptx import read_ptx

__all__ = [
    'read_obj',
    'write_obj',
    'read_ply',
    'write_ply',
    'read_ptx',
]
