import asyncio

import numpy as np
import pytest

import idxio
from idxio import ElementKind, NoData
from idxio.async_core import aread_stream, awrite_stream


class FakeWriter:
    """Records writes and drains in call order."""
    def __init__(self):
        self.events = []

    def write(self, data):
        self.events.append(("write", bytes(data)))

    async def drain(self):
        self.events.append(("drain", None))


async def _reader_for(chunks):
    reader = asyncio.StreamReader()
    for chunk in chunks:
        reader.feed_data(chunk)
    reader.feed_eof()
    return reader


def test_aread_stream():
    data = np.arange(3000, dtype=np.int32).reshape(30, 100)
    packet = idxio.dumps(data)

    async def main():
        reader = await _reader_for([packet[:5], packet[5:4001], packet[4001:]])
        return await aread_stream(reader, chunk_size=1000)

    result = asyncio.run(main())

    assert result.type is ElementKind.INT32
    assert np.array_equal(result.to_array(), data)


def test_aread_stream_empty():
    async def main():
        reader = await _reader_for([])
        return await aread_stream(reader)

    with pytest.raises(NoData):
        asyncio.run(main())


def test_awrite_stream_drains_every_batch():
    """Each part is followed by a drain so a slow peer applies backpressure."""
    data = np.arange(2049, dtype=np.uint8)
    writer = FakeWriter()

    written = asyncio.run(awrite_stream(data, writer))

    kinds = [kind for kind, _ in writer.events]
    assert kinds == ["write", "drain"] * 4
    payload = b"".join(chunk for kind, chunk in writer.events if kind == "write")
    assert written == len(payload) == 8 + 2049
    assert payload == idxio.dumps(data)
