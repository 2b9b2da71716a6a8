"""
Mesh Buffers
============

Single responsibility: In-memory vertices, faces and the parallel mesh buffers
filled by the readers and drained by the writers.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

Vector3 = Tuple[float, float, float]
TexCoord = Tuple[float, float]

# Invalid colors are encoded with -1
NO_COLOR: Vector3 = (-1.0, -1.0, -1.0)
# Color given to OBJ vertices on read; also "unset" for has_color
CLEARED_COLOR: Vector3 = (0.0, 0.0, 0.0)
ZERO_NORMAL: Vector3 = (0.0, 0.0, 0.0)

ABSENT = -1


@dataclass
class Vertex:
    """
    A point with optional normal and color.

    Attributes:
        position: (x, y, z)
        normal: (nx, ny, nz), zero vector when unknown
        color: (r, g, b) in 0..255, NO_COLOR when unknown
    """

    position: Vector3
    normal: Vector3 = ZERO_NORMAL
    color: Vector3 = NO_COLOR

    @property
    def has_color(self) -> bool:
        """True only when every color component is strictly positive."""
        return all(c > 0 for c in self.color)


@dataclass
class Face:
    """
    Triangle with per-corner vertex, normal and texcoord references.

    All indices are 0-based; ABSENT (-1) marks a missing corner reference.
    """

    a: int = ABSENT
    b: int = ABSENT
    c: int = ABSENT
    n1: int = ABSENT
    n2: int = ABSENT
    n3: int = ABSENT
    t1: int = ABSENT
    t2: int = ABSENT
    t3: int = ABSENT

    @property
    def vertex_indices(self) -> Tuple[int, int, int]:
        return (self.a, self.b, self.c)

    @property
    def normal_indices(self) -> Tuple[int, int, int]:
        return (self.n1, self.n2, self.n3)

    @property
    def texcoord_indices(self) -> Tuple[int, int, int]:
        return (self.t1, self.t2, self.t3)

    @property
    def has_texcoords(self) -> bool:
        return all(t != ABSENT for t in self.texcoord_indices)


@dataclass
class Mesh:
    """
    Parallel buffers exchanged with every codec.

    Readers fill the buffers in place, writers only read them. Nothing
    is kept by a codec between calls.

    Attributes:
        vertices: Vertex sequence; list index is the vertex identity
        tex_coords: (u, v) pairs referenced by Face.t1..t3
        normals: Normal vectors referenced by Face.n1..n3
        faces: Triangles
        materials: Material file paths (mtllib)
        warnings: Non-fatal diagnostics collected while reading

    Example:
        >>> mesh = Mesh()
        >>> mesh.vertices.append(Vertex((0.0, 0.0, 0.0)))
        >>> mesh.has_faces
        False
    """

    vertices: List[Vertex] = field(default_factory=list)
    tex_coords: List[TexCoord] = field(default_factory=list)
    normals: List[Vector3] = field(default_factory=list)
    faces: List[Face] = field(default_factory=list)
    materials: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def has_faces(self) -> bool:
        return len(self.faces) > 0

    @property
    def has_normals(self) -> bool:
        return len(self.normals) > 0

    @property
    def has_texcoords(self) -> bool:
        return len(self.tex_coords) > 0

    @property
    def has_colors(self) -> bool:
        """True when at least one vertex passes the color sentinel test."""
        return any(v.has_color for v in self.vertices)

    def clear(self) -> None:
        """Empty every buffer."""
        self.vertices.clear()
        self.tex_coords.clear()
        self.normals.clear()
        self.faces.clear()
        self.materials.clear()
        self.warnings.clear()

    def __repr__(self) -> str:
        return (
            f"Mesh(vertices={len(self.vertices)}, faces={len(self.faces)}, "
            f"normals={len(self.normals)}, tex_coords={len(self.tex_coords)}, "
            f"materials={len(self.materials)})"
        )
