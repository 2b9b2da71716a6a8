"""Custom exceptions for geometry file I/O.

This module defines domain-specific exceptions that provide clear,
actionable error messages for the failure modes of the mesh codecs.
"""

from typing import Optional


class GeometryIOError(Exception):
    """Base exception for all geometry I/O errors.

    All custom exceptions in the geometry_io package inherit from this base
    class. This allows catching every codec failure with a single except clause.

    Example:
        >>> try:
        ...     mesh = read_object("scan.ptx")
        ... except GeometryIOError as e:
        ...     print(f"Loading failed: {e}")
    """
    pass


class FileAccessError(GeometryIOError, OSError):
    """Raised when a geometry file cannot be opened or created.

    Common causes:
    - File not found
    - Permission denied
    - Output directory missing

    Example:
        >>> try:
        ...     f = open(path)
        ... except OSError as e:
        ...     raise FileAccessError(f"Cannot open {path}: {e}") from e
    """
    pass


class UnsupportedFormatError(GeometryIOError):
    """Raised when a file extension is not recognized on read.

    Attributes:
        extension: The lowercase extension that failed to match
    """

    def __init__(self, extension: str, supported=("ply", "obj", "ptx")):
        self.extension = extension
        msg = (
            f"Unsupported file format: '{extension}'\n"
            f"Supported: {', '.join(supported)}"
        )
        super().__init__(msg)


class FormatError(GeometryIOError):
    """Raised when a required structural element is missing or malformed.

    Examples are a PLY file without a "vertex" element, a PTX header that is
    not numeric, or an OBJ file without any vertex.

    Attributes:
        line: 1-based line number of the offending record, if known
    """

    def __init__(self, message: str, line: Optional[int] = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class ShortReadError(FormatError):
    """Raised when a file holds fewer records than its header declares.

    Attributes:
        expected: Record count declared by the header
        parsed: Record count actually read
    """

    def __init__(self, expected: int, parsed: int, path=None):
        self.expected = expected
        self.parsed = parsed
        where = f" in {path}" if path is not None else ""
        super().__init__(
            f"Short read{where}: header declares {expected:,} vertices, "
            f"found {parsed:,}"
        )


class OutOfRangeReferenceError(FormatError):
    """Raised when a face corner index falls outside its attribute sequence.

    Attributes:
        sequence: Name of the referenced sequence ('vertex', 'normal', 'texcoord')
        index: Offending 0-based index
        size: Length of the referenced sequence when the index was consumed

    Example:
        >>> raise OutOfRangeReferenceError('normal', 7, 4, line=12)
        OutOfRangeReferenceError: normal index 8 out of range (4 available) (line 12)
    """

    def __init__(self, sequence: str, index: int, size: int, line: Optional[int] = None):
        self.sequence = sequence
        self.index = index
        self.size = size
        # Report the 1-based value found in the file
        super().__init__(
            f"{sequence} index {index + 1} out of range ({size} available)",
            line=line,
        )


class ValidationError(GeometryIOError):
    """Raised when input validation fails.

    Used for invalid configuration values and caller-supplied buffers.

    Example:
        >>> if dtype not in ('f4', 'f8'):
        ...     raise ValidationError(f"Unsupported PLY scalar type: {dtype}")
    """
    pass
