import numpy as np
import pytest

import idxio
from idxio import ElementKind


@pytest.mark.parametrize(
    "n, expected",
    [
        (0, []),
        (1, [1]),
        (1023, [1023]),
        (1024, [1024]),
        (1025, [1024, 1]),
        (2048, [1024, 1024]),
    ],
)
def test_batch_sizes_clamped_at_end(n, expected):
    """Exact multiples produce no empty trailing batch; the last one is clamped."""
    data = np.zeros(n, dtype=np.float32)

    batches = list(idxio.iter_batches(data, ElementKind.FLOAT32))

    assert [len(b) // 4 for b in batches] == expected
    assert all(len(b) % 4 == 0 for b in batches)


def test_batches_in_index_order():
    data = np.arange(10, dtype=np.uint8)

    batches = list(idxio.iter_batches(data, ElementKind.UINT8, batch_size=3))

    assert batches == [b"\x00\x01\x02", b"\x03\x04\x05", b"\x06\x07\x08", b"\x09"]


def test_int32_big_endian_twos_complement():
    data = np.array([1, -1, -(2**31)], dtype=np.int32)

    (batch,) = idxio.iter_batches(data, ElementKind.INT32)

    assert batch == bytes.fromhex("00000001" "ffffffff" "80000000")


def test_float32_big_endian_ieee754():
    data = np.array([1.0, -2.0], dtype=np.float32)

    (batch,) = idxio.iter_batches(data, ElementKind.FLOAT32)

    assert batch == bytes.fromhex("3f800000" "c0000000")


def test_invalid_batch_size():
    with pytest.raises(ValueError, match="batch_size"):
        list(idxio.iter_batches(np.zeros(3, dtype=np.uint8), ElementKind.UINT8, 0))


def test_iter_dumps_header_first():
    parts = list(idxio.iter_dumps(np.arange(6, dtype=np.uint8), shape=[3, 2], batch_size=4))

    assert parts == [
        bytes.fromhex("00000802" "00000003" "00000002"),
        b"\x00\x01\x02\x03",
        b"\x04\x05",
    ]


def test_custom_batch_size_round_trip():
    data = np.arange(100, dtype=np.int32)

    packet = idxio.dumps(data, batch_size=7)

    assert packet == idxio.dumps(data)
    assert np.array_equal(idxio.loads(packet).data, data)
