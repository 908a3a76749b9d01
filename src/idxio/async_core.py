"""
Async I/O Support for idxio.
"""

import asyncio
from typing import Any, Optional, Sequence

from .config import DEFAULT_BATCH_SIZE, DEFAULT_CHUNK_SIZE
from .core import KindLike
from .decoder import StreamDecoder
from .encoder import iter_dumps
from .tensor import IdxTensor


async def aread_stream(
    reader: asyncio.StreamReader,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    carry_partial: bool = True,
) -> IdxTensor:
    """Asynchronously read an IDX tensor from a StreamReader.

    Parameters
    ----------
    reader : asyncio.StreamReader
        The stream reader to read from. Read until EOF.
    chunk_size : int, optional
        Maximum bytes per read. Default is 65536.
    carry_partial : bool, optional
        Reassemble headers and elements split across chunks. Default is True.

    Returns
    -------
    IdxTensor
        The deserialized tensor.

    Raises
    ------
    NoData
        If the stream ends before any byte arrives.
    """
    decoder = StreamDecoder(carry_partial=carry_partial)
    while True:
        chunk = await reader.read(chunk_size)
        if not chunk:
            break
        decoder.feed(chunk)
    return decoder.finish()


async def awrite_stream(
    data: Any,
    writer: asyncio.StreamWriter,
    shape: Optional[Sequence[int]] = None,
    kind: KindLike = None,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> int:
    """Asynchronously write a tensor to a StreamWriter.

    The writer is drained after every part, so at most one batch is buffered
    ahead of a slow peer.

    Parameters
    ----------
    data : array_like
        The elements to write.
    writer : asyncio.StreamWriter
        The stream writer to write to.
    shape : sequence of int, optional
        Declared shape. Defaults to ``data.shape``.
    kind : ElementKind, str or int, optional
        Element kind. Inferred from ``data.dtype`` when omitted.
    batch_size : int, optional
        Elements per batch. Default is 1024.

    Returns
    -------
    int
        Number of bytes written.
    """
    written = 0
    for part in iter_dumps(data, shape=shape, kind=kind, batch_size=batch_size):
        writer.write(part)
        await writer.drain()
        written += len(part)
    return written
