"""
IDX header encoding and decoding.

Layout::

    offset 0      2 bytes   reserved, zero
    offset 2      1 byte    type code (8=uint8, 12=int32, 13=float32)
    offset 3      1 byte    dimension count N
    offset 4+4*i  4 bytes   dimension i, big-endian u32
"""

import operator
import struct
from typing import Sequence, Tuple, Union

from .config import (
    DIM_SIZE,
    HEADER_PREFIX_SIZE,
    MAX_DIM,
    MAX_NDIM,
    ElementKind,
    code_of,
    kind_of,
)
from .errors import TruncatedHeader

_PREFIX_FMT = ">HBB"

Buffer = Union[bytes, bytearray, memoryview]


def header_length(ndim: int) -> int:
    """Total header size in bytes for ``ndim`` dimensions."""
    return HEADER_PREFIX_SIZE + DIM_SIZE * ndim


def encode_header(shape: Sequence[int], kind: ElementKind) -> bytes:
    """
    Build the header bytes for a tensor.

    Parameters
    ----------
    shape : sequence of int
        Dimension sizes, written in order.
    kind : ElementKind
        Element kind, written as its wire code.

    Returns
    -------
    bytes
        ``4 + 4 * len(shape)`` header bytes.
    """
    ndim = len(shape)
    if ndim > MAX_NDIM:
        raise ValueError(f"Too many dimensions ({ndim} > {MAX_NDIM})")
    # TypeError for non-integral dimensions such as 2.5
    dims = [operator.index(d) for d in shape]
    for dim in dims:
        if not 0 <= dim <= MAX_DIM:
            raise ValueError(f"Dimension size out of range: {dim}")

    buf = bytearray(header_length(ndim))
    struct.pack_into(_PREFIX_FMT, buf, 0, 0, code_of(kind), ndim)
    struct.pack_into(f">{ndim}I", buf, HEADER_PREFIX_SIZE, *dims)
    return bytes(buf)


def decode_header(buf: Buffer) -> Tuple[ElementKind, Tuple[int, ...], int]:
    """
    Parse a header from the start of ``buf``.

    Parameters
    ----------
    buf : bytes-like
        Bytes beginning at offset 0 of an IDX stream. May extend past the
        header.

    Returns
    -------
    tuple
        ``(kind, shape, header_length)``.

    Raises
    ------
    TruncatedHeader
        If ``buf`` ends before the declared header does.
    UnsupportedType
        If the type code is unknown.
    """
    mv = memoryview(buf)
    if len(mv) < HEADER_PREFIX_SIZE:
        raise TruncatedHeader(
            f"Header needs at least {HEADER_PREFIX_SIZE} bytes, got {len(mv)}"
        )
    # reserved bytes are not checked
    _, code, ndim = struct.unpack_from(_PREFIX_FMT, mv, 0)
    length = header_length(ndim)
    if len(mv) < length:
        raise TruncatedHeader(
            f"Header declares {ndim} dimensions ({length} bytes), got {len(mv)}"
        )
    kind = kind_of(code)
    shape = struct.unpack_from(f">{ndim}I", mv, HEADER_PREFIX_SIZE)
    return kind, shape, length
