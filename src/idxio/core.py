"""
Core Read/Write Operations for idxio.
"""

import logging
from pathlib import Path
from typing import Any, BinaryIO, Generator, Iterable, Optional, Sequence, Union

from .config import DEFAULT_BATCH_SIZE, DEFAULT_CHUNK_SIZE, ElementKind
from .decoder import StreamDecoder
from .encoder import iter_dumps
from .tensor import IdxTensor

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]
KindLike = Union[ElementKind, str, int, None]


def iter_chunks(
    source: Any, chunk_size: int = DEFAULT_CHUNK_SIZE
) -> Generator[bytes, None, None]:
    """Pull byte chunks from a file, socket or iterable until end of input."""
    if isinstance(source, (bytes, bytearray, memoryview)):
        yield source
    elif hasattr(source, "read"):
        while True:
            chunk = source.read(chunk_size)
            if not chunk:
                return
            yield chunk
    elif hasattr(source, "recv"):
        while True:
            try:
                chunk = source.recv(chunk_size)
            except BlockingIOError:
                continue
            if not chunk:
                return
            yield chunk
    else:
        yield from source


def decode_chunks(chunks: Iterable[Any], carry_partial: bool = True) -> IdxTensor:
    """Feed every chunk to a fresh :class:`StreamDecoder` and finish it."""
    decoder = StreamDecoder(carry_partial=carry_partial)
    for chunk in chunks:
        decoder.feed(chunk)
    return decoder.finish()


def read_stream(
    source: Any, chunk_size: int = DEFAULT_CHUNK_SIZE, carry_partial: bool = True
) -> IdxTensor:
    """
    Read and decode an IDX tensor from a stream source.

    Parameters
    ----------
    source : file-like, socket or iterable of bytes
        Anything with ``read(n)`` or ``recv(n)``, or an iterable of chunks.
    chunk_size : int, default 65536
        Bytes requested per read.
    carry_partial : bool, default True
        Reassemble headers and elements split across chunks. ``False``
        reproduces the legacy reader (see :class:`StreamDecoder`).

    Returns
    -------
    IdxTensor
        The decoded tensor.

    Raises
    ------
    NoData
        If the source is empty.
    """
    return decode_chunks(iter_chunks(source, chunk_size), carry_partial=carry_partial)


def write_stream(
    data: Any,
    dest: Any,
    shape: Optional[Sequence[int]] = None,
    kind: KindLike = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """
    Write a tensor to a sink in IDX format.

    Parameters
    ----------
    data : array_like
        The elements to write.
    dest : file-like object
        Sink with a ``write`` method. ``flush`` is called at the end when
        present.
    shape : sequence of int, optional
        Declared shape. Defaults to ``data.shape``.
    kind : ElementKind, str or int, optional
        Element kind. Inferred from ``data.dtype`` when omitted.
    batch_size : int, default 1024
        Elements per written batch.

    Returns
    -------
    int
        Number of bytes written.
    """
    written = 0
    for part in iter_dumps(data, shape=shape, kind=kind, batch_size=batch_size):
        dest.write(part)
        written += len(part)
    if hasattr(dest, "flush"):
        dest.flush()
    logger.debug("Wrote %d bytes", written)
    return written


def dumps(
    data: Any,
    shape: Optional[Sequence[int]] = None,
    kind: KindLike = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> bytes:
    """Serialize a tensor to IDX bytes."""
    return b"".join(iter_dumps(data, shape=shape, kind=kind, batch_size=batch_size))


def loads(
    data: Union[bytes, bytearray, memoryview], carry_partial: bool = True
) -> IdxTensor:
    """Deserialize IDX bytes held in memory.

    Parameters
    ----------
    data : bytes, bytearray or memoryview
        A complete IDX stream.
    carry_partial : bool, optional
        Passed to :class:`StreamDecoder`. Irrelevant for a single chunk
        except that ``False`` drops a trailing partial element silently.

    Returns
    -------
    IdxTensor
        The decoded tensor.
    """
    return decode_chunks([data], carry_partial=carry_partial)


def dump(
    data: Any,
    fp: BinaryIO,
    shape: Optional[Sequence[int]] = None,
    kind: KindLike = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """Serialize a tensor and write it to a binary file object."""
    return write_stream(data, fp, shape=shape, kind=kind, batch_size=batch_size)


def load(
    fp: BinaryIO, chunk_size: int = DEFAULT_CHUNK_SIZE, carry_partial: bool = True
) -> IdxTensor:
    """Deserialize a tensor from a binary file object."""
    return read_stream(fp, chunk_size=chunk_size, carry_partial=carry_partial)


def save(
    path: PathLike,
    data: Any,
    shape: Optional[Sequence[int]] = None,
    kind: KindLike = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """
    Write a tensor to ``path``, creating missing parent directories.

    Parameters
    ----------
    path : str or Path
        Destination file. Overwritten if it exists.
    data : array_like
        The elements to write.
    shape, kind, batch_size
        As for :func:`write_stream`.

    Returns
    -------
    int
        Number of bytes written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "wb") as f:
        written = dump(data, f, shape=shape, kind=kind, batch_size=batch_size)
    logger.debug("Saved %s (%d bytes)", path, written)
    return written


def load_file(
    path: PathLike, chunk_size: int = DEFAULT_CHUNK_SIZE, carry_partial: bool = True
) -> IdxTensor:
    """Read an IDX file from ``path``."""
    with open(path, "rb") as f:
        return load(f, chunk_size=chunk_size, carry_partial=carry_partial)
