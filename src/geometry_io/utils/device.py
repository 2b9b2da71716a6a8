"""Array and tensor views of mesh buffers.

The registration pipeline works on dense arrays rather than per-vertex
objects. These helpers pack a Mesh into numpy arrays and move them onto a
torch device.
"""

from typing import Dict, Optional, Union

import numpy as np
import torch

from geometry_io.core.exceptions import ValidationError
from geometry_io.core.types import Mesh
from geometry_io.utils.logging import get_logger

logger = get_logger(__name__)


def validate_device(device: Union[str, torch.device]) -> torch.device:
    """
    Validate and create torch device.

    Args:
        device: Device string ('cpu', 'cuda', etc.) or torch.device

    Returns:
        torch.device object

    Raises:
        ValidationError: If CUDA requested but not available
    """
    device = torch.device(device)

    if device.type == 'cuda' and not torch.cuda.is_available():
        raise ValidationError(
            "CUDA requested but not available.\n"
            "Options:\n"
            "  1. Use CPU: pass device='cpu'\n"
            "  2. Reinstall PyTorch with CUDA support"
        )

    return device


def mesh_to_arrays(mesh: Mesh) -> Dict[str, Optional[np.ndarray]]:
    """
    Pack mesh buffers into dense numpy arrays.

    Args:
        mesh: Source mesh

    Returns:
        Dict with:
        - 'positions': (N, 3) float32
        - 'normals': (N, 3) float32 when there is one normal per vertex, else None
        - 'colors': (N, 3) float32 when any vertex has a color, else None
        - 'faces': (F, 3) int64 vertex indices
        - 'tex_coords': (T, 2) float32

    Example:
        >>> arrays = mesh_to_arrays(read_object("scan.ptx"))
        >>> arrays['positions'].shape
        (1024, 3)
    """
    n = len(mesh.vertices)
    positions = np.array([v.position for v in mesh.vertices], dtype=np.float32).reshape(n, 3)

    normals = None
    if n and len(mesh.normals) == n:
        normals = np.array(mesh.normals, dtype=np.float32).reshape(n, 3)

    colors = None
    if mesh.has_colors:
        colors = np.array([v.color for v in mesh.vertices], dtype=np.float32).reshape(n, 3)

    faces = np.array(
        [f.vertex_indices for f in mesh.faces], dtype=np.int64
    ).reshape(len(mesh.faces), 3)
    tex_coords = np.array(mesh.tex_coords, dtype=np.float32).reshape(len(mesh.tex_coords), 2)

    return {
        'positions': positions,
        'normals': normals,
        'colors': colors,
        'faces': faces,
        'tex_coords': tex_coords,
    }


def mesh_to_tensors(
    mesh: Mesh,
    device: Union[str, torch.device] = 'cpu',
) -> Dict[str, Optional[torch.Tensor]]:
    """
    Pack mesh buffers into torch tensors on the given device.

    Same keys and shapes as mesh_to_arrays(); absent attributes stay None.

    Args:
        mesh: Source mesh
        device: Target device

    Returns:
        Dict of tensors (or None)

    Raises:
        ValidationError: If CUDA requested but not available
    """
    device = validate_device(device)
    arrays = mesh_to_arrays(mesh)

    tensors = {
        key: torch.from_numpy(value).to(device) if value is not None else None
        for key, value in arrays.items()
    }
    logger.debug(f"Moved mesh to {device}: {len(mesh.vertices):,} vertices")
    return tensors
