"""
Material Texture Sampling
=========================

Single responsibility: Colorize vertices from the diffuse texture of a mesh's
first material file.

Failures to find or decode the material or its image are recoverable: they are
logged as warnings, recorded on mesh.warnings, and the mesh keeps its colors.
"""

from pathlib import Path
from typing import Iterator, Optional, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from geometry_io.core.reconcile import check_face_vertices, check_index
from geometry_io.core.types import Mesh, Vertex
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)

DIFFUSE_MAP = "map_Kd"
RGB_CHANNELS = 3


class TextureImage:
    """
    Decoded RGB image as a flat interleaved uint8 buffer.

    Attributes:
        width: Width in pixels
        height: Height in pixels
        channels: Channel count of the buffer (always 3)
        data: Flat array of length width * height * channels
    """

    def __init__(self, width: int, height: int, data: np.ndarray):
        self.width = width
        self.height = height
        self.channels = RGB_CHANNELS
        self.data = data

    def sample(self, u: float, v: float) -> tuple:
        """
        Look up the RGB triple for a texture coordinate.

        The pixel offset is int(v*height*width + u*width), row-major, clamped
        to the buffer so coordinates at or beyond 1.0 hit the last pixel.

        Args:
            u: Horizontal texture coordinate
            v: Vertical texture coordinate

        Returns:
            (r, g, b) as floats in 0..255
        """
        pixel_count = self.width * self.height
        offset = int(v * self.height * self.width + u * self.width)
        offset = min(max(offset, 0), pixel_count - 1)
        start = offset * self.channels
        r, g, b = self.data[start:start + self.channels]
        return (float(r), float(g), float(b))


def load_texture_image(path: Union[str, Path]) -> TextureImage:
    """
    Decode an image file into an RGB TextureImage.

    Args:
        path: Image path

    Returns:
        Decoded image

    Raises:
        OSError: If the file is missing or cannot be decoded
    """
    with Image.open(path) as img:
        rgb = img.convert("RGB")
        data = np.asarray(rgb, dtype=np.uint8).reshape(-1)
        return TextureImage(rgb.width, rgb.height, data)


def iter_diffuse_maps(material_path: Union[str, Path]) -> Iterator[str]:
    """
    Yield every diffuse map name found in a material file.

    The file is scanned as whitespace-separated tokens; the token following
    each map_Kd directive is the image name.

    Raises:
        OSError: If the material file cannot be read
    """
    tokens = Path(material_path).read_text(encoding="utf-8", errors="replace").split()
    for i, token in enumerate(tokens):
        if token == DIFFUSE_MAP and i + 1 < len(tokens):
            yield tokens[i + 1]


def colorize_from_texture(mesh: Mesh, image: TextureImage) -> int:
    """
    Assign sampled texture colors to the vertices of textured faces.

    Faces without three texcoord references are skipped. A vertex shared
    by several faces keeps the color written by the last one.

    Args:
        mesh: Mesh with faces and tex_coords
        image: Decoded texture

    Returns:
        Number of faces that were sampled

    Raises:
        OutOfRangeReferenceError: If a face references a missing vertex or texcoord
    """
    sampled = 0
    for face in mesh.faces:
        if not face.has_texcoords:
            continue
        check_face_vertices(face, len(mesh.vertices))
        for v_idx, t_idx in zip(face.vertex_indices, face.texcoord_indices):
            check_index("texcoord", t_idx, len(mesh.tex_coords))
            u, v = mesh.tex_coords[t_idx]
            vertex: Vertex = mesh.vertices[v_idx]
            vertex.color = image.sample(u, v)
        sampled += 1
    return sampled


def _warn(mesh: Mesh, message: str) -> None:
    logger.warning(message)
    mesh.warnings.append(message)


def apply_material_textures(mesh: Mesh, working_dir: Optional[Path] = None) -> bool:
    """
    Colorize a mesh from the diffuse map of its first material.

    Image names are resolved against working_dir (the directory of the OBJ
    file that referenced the material). Every map_Kd entry is applied in
    file order.

    Args:
        mesh: Mesh read from an OBJ file
        working_dir: Directory used to resolve image names

    Returns:
        True if at least one texture was applied
    """
    if not mesh.materials:
        return False

    material_path = Path(mesh.materials[0])
    working_dir = Path(working_dir) if working_dir is not None else material_path.parent

    try:
        image_names = list(iter_diffuse_maps(material_path))
    except OSError as e:
        _warn(mesh, f"Material loading failed: {e.strerror or e}\nPath: {material_path}")
        return False

    if not image_names:
        logger.debug(f"No {DIFFUSE_MAP} entry in {material_path}")
        return False

    applied = False
    for name in image_names:
        image_path = working_dir / name
        try:
            image = load_texture_image(image_path)
        except (OSError, UnidentifiedImageError, Image.DecompressionBombError, ValueError) as e:
            _warn(mesh, f"Image loading failed: {e}\nPath: {image_path}")
            continue

        sampled = colorize_from_texture(mesh, image)
        logger.debug(
            f"Sampled {image_path.name} ({image.width}x{image.height}) "
            f"on {sampled:,} faces"
        )
        applied = True

    return applied
