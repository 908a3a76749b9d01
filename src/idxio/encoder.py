"""
Batched big-endian encoding of element buffers.
"""

import logging
import operator
from typing import Any, Generator, Optional, Sequence, Tuple, Union

import numpy as np

from .config import DEFAULT_BATCH_SIZE, ElementKind, as_kind, kind_of_dtype
from .header import encode_header

logger = logging.getLogger(__name__)


def prepare(
    data: Any,
    shape: Optional[Sequence[int]] = None,
    kind: Union[ElementKind, str, int, None] = None,
) -> Tuple[np.ndarray, Tuple[int, ...], ElementKind]:
    """Normalise caller input to ``(flat C-ordered array, shape, kind)``.

    Without ``kind`` the element kind is inferred from ``data.dtype``; with it
    the data is cast. ``shape`` defaults to the array's own shape and is not
    checked against the element count.
    """
    if kind is None:
        arr = np.asarray(data)
        kind = kind_of_dtype(arr.dtype)
    else:
        kind = as_kind(kind)
        arr = np.asarray(data, dtype=kind.dtype)
    if shape is None:
        shape = arr.shape
    flat = np.ascontiguousarray(arr).reshape(-1)
    return flat, tuple(operator.index(d) for d in shape), kind


def iter_batches(
    data: np.ndarray, kind: ElementKind, batch_size: int = DEFAULT_BATCH_SIZE
) -> Generator[bytes, None, None]:
    """
    Encode ``data`` as consecutive big-endian batches.

    Parameters
    ----------
    data : np.ndarray
        Flat element buffer.
    kind : ElementKind
        Element kind selecting width and byte layout.
    batch_size : int, default 1024
        Elements per batch. The last batch is clamped to the end of ``data``.

    Yields
    ------
    bytes
        ``(end - start) * kind.width`` bytes per batch, in index order.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size must be positive, got {batch_size}")
    wire = kind.wire_dtype
    n = len(data)
    for start in range(0, n, batch_size):
        end = min(start + batch_size, n)
        yield data[start:end].astype(wire, copy=False).tobytes()


def iter_dumps(
    data: Any,
    shape: Optional[Sequence[int]] = None,
    kind: Union[ElementKind, str, int, None] = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> Generator[bytes, None, None]:
    """
    Yield an IDX stream part by part: the header, then each data batch.

    Parameters
    ----------
    data : array_like
        Elements to write. Flattened in C order.
    shape : sequence of int, optional
        Shape to declare in the header. Defaults to ``data.shape``.
    kind : ElementKind, str or int, optional
        Element kind. Inferred from ``data.dtype`` when omitted.
    batch_size : int, default 1024
        Elements per data batch.

    Yields
    ------
    bytes
        Stream parts in write order.
    """
    flat, shape, kind = prepare(data, shape, kind)
    logger.debug(
        "Encoding %s tensor shape=%s (%d elements)", kind.value, shape, len(flat)
    )
    yield encode_header(shape, kind)
    yield from iter_batches(flat, kind, batch_size)
