"""
Configuration and Protocol Constants for idxio.
"""

from enum import Enum
from typing import Union, assert_never

import numpy as np

from .errors import UnsupportedType

# --- Header Layout ---
HEADER_PREFIX_SIZE = 4  #: Two reserved zero bytes, type code, dimension count
DIM_SIZE = 4  #: Each dimension is a big-endian u32
MAX_NDIM = 255  #: Dimension count is a single byte
MAX_DIM = 2**32 - 1  #: Largest encodable dimension size

# --- Security Limits (DoS Protection) ---
MAX_ELEMENTS = 10**9  #: Maximum elements a decoder will allocate

# --- Streaming ---
DEFAULT_BATCH_SIZE = 1024  #: Elements per encoded batch on write
DEFAULT_CHUNK_SIZE = 65536  #: Bytes requested per read on the pull side


class ElementKind(Enum):
    """The closed set of element kinds the format carries."""

    FLOAT32 = "float32"
    INT32 = "int32"
    UINT8 = "uint8"

    @property
    def code(self) -> int:
        return code_of(self)

    @property
    def width(self) -> int:
        return width_of(self)

    @property
    def dtype(self) -> np.dtype:
        """Native numpy dtype for decoded buffers."""
        return np.dtype(self.value)

    @property
    def wire_dtype(self) -> np.dtype:
        """Big-endian numpy dtype matching the on-disk layout."""
        return wire_dtype(self)


# --- Wire Codes ---
_REV_CODE_MAP = {
    13: ElementKind.FLOAT32,
    12: ElementKind.INT32,
    8: ElementKind.UINT8,
}

# (numpy kind char, itemsize) -> ElementKind, independent of byte order
_DTYPE_MAP = {
    ("f", 4): ElementKind.FLOAT32,
    ("i", 4): ElementKind.INT32,
    ("u", 1): ElementKind.UINT8,
}


def code_of(kind: ElementKind) -> int:
    """Return the one-byte wire code for ``kind``."""
    if kind is ElementKind.FLOAT32:
        return 13
    elif kind is ElementKind.INT32:
        return 12
    elif kind is ElementKind.UINT8:
        return 8
    elif isinstance(kind, ElementKind):
        assert_never(kind)
    raise UnsupportedType(f"Unsupported element kind: {kind!r}")


def kind_of(code: int) -> ElementKind:
    """Return the element kind for a wire code.

    Raises
    ------
    UnsupportedType
        If ``code`` is not 8, 12 or 13.
    """
    kind = _REV_CODE_MAP.get(code)
    if kind is None:
        raise UnsupportedType(f"Unsupported type code: {code}")
    return kind


def width_of(kind: Union[ElementKind, int]) -> int:
    """Return the byte width of an element kind or wire code."""
    if not isinstance(kind, ElementKind):
        kind = kind_of(kind)
    if kind is ElementKind.FLOAT32:
        return 4
    elif kind is ElementKind.INT32:
        return 4
    elif kind is ElementKind.UINT8:
        return 1
    else:
        assert_never(kind)


def wire_dtype(kind: ElementKind) -> np.dtype:
    """Return the big-endian numpy dtype used to encode and decode ``kind``."""
    if kind is ElementKind.FLOAT32:
        return np.dtype(">f4")
    elif kind is ElementKind.INT32:
        return np.dtype(">i4")
    elif kind is ElementKind.UINT8:
        return np.dtype("u1")
    elif isinstance(kind, ElementKind):
        assert_never(kind)
    raise UnsupportedType(f"Unsupported element kind: {kind!r}")


def kind_of_dtype(dtype) -> ElementKind:
    """Infer the element kind of a numpy dtype, ignoring byte order."""
    dt = np.dtype(dtype)
    kind = _DTYPE_MAP.get((dt.kind, dt.itemsize))
    if kind is None:
        raise UnsupportedType(f"Unsupported dtype: {dt}")
    return kind


def as_kind(kind: Union[ElementKind, str, int]) -> ElementKind:
    """Coerce a kind given as enum, name ("float32") or wire code."""
    if isinstance(kind, ElementKind):
        return kind
    if isinstance(kind, str):
        try:
            return ElementKind(kind)
        except ValueError:
            raise UnsupportedType(f"Unsupported element kind: {kind!r}") from None
    return kind_of(kind)
