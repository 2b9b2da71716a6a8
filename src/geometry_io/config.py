"""
I/O Configuration
=================

Single responsibility: Configure the codecs with validation.
"""

from dataclasses import dataclass
from typing import Optional

from geometry_io.core.exceptions import ValidationError

DEFAULT_PLY_COMMENT = "Registered with OpenGR (https://github.com/STORM-IRIT/OpenGR/)"


@dataclass
class IOConfig:
    """
    Configuration shared by the readers and writers.

    This dataclass encapsulates all codec settings, with validation in
    __post_init__ to catch errors early.

    Attributes:
        load_textures: Colorize OBJ vertices from the first material's diffuse map
        expand_normals: Treat normals as per-vertex and write them face-ordered on OBJ save
        float_format: Format string used for numbers in OBJ output
        ply_binary: Write binary little-endian PLY (False writes ASCII)
        ply_scalar_dtype: PLY position/normal property type ('f4' or 'f8')
        ply_comment: Attribution comment stored in written PLY headers
        max_vertices: Optional cap on header-declared vertex counts (PTX)

    Example:
        >>> config = IOConfig(ply_binary=False)
        >>> config.ply_scalar_dtype
        'f4'
    """

    # Reading
    load_textures: bool = True
    max_vertices: Optional[int] = None

    # Writing
    expand_normals: bool = False
    float_format: str = "g"
    ply_binary: bool = True
    ply_scalar_dtype: str = "f4"
    ply_comment: str = DEFAULT_PLY_COMMENT

    def __post_init__(self):
        """
        Validate and normalize configuration after initialization.

        Raises:
            ValidationError: If any setting is invalid
        """
        try:
            format(1.5, self.float_format)
        except (ValueError, TypeError) as e:
            raise ValidationError(
                f"Invalid float_format: {self.float_format!r} ({e})"
            ) from e

        if self.ply_scalar_dtype not in ("f4", "f8"):
            raise ValidationError(
                f"ply_scalar_dtype must be 'f4' or 'f8', got '{self.ply_scalar_dtype}'"
            )

        if self.max_vertices is not None and self.max_vertices < 0:
            raise ValidationError(f"max_vertices must be >= 0, got {self.max_vertices}")
