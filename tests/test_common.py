import io

import numpy as np
import pytest

from nnuekit.common import (
    VERSION,
    NnueFormatError,
    ceil_to_multiple,
    read_little_endian,
    write_little_endian,
)


@pytest.mark.parametrize("n, base", [(0, 32), (1, 32), (30, 32), (32, 32), (33, 32), (1024, 32), (7, 4)])
def test_ceil_to_multiple_invariants(n, base):
    result = ceil_to_multiple(n, base)
    assert result % base == 0
    assert n <= result < n + base


def test_ceil_to_multiple_exact_multiple_unchanged():
    assert ceil_to_multiple(64, 32) == 64


def test_ceil_to_multiple_rejects_zero_base():
    with pytest.raises(ValueError):
        ceil_to_multiple(5, 0)


def test_version_is_written_little_endian():
    buf = io.BytesIO()
    write_little_endian(buf, np.uint32, VERSION)
    assert buf.getvalue() == b"\x20\x2f\xf3\x7a"


def test_single_value_round_trip():
    buf = io.BytesIO()
    write_little_endian(buf, np.uint32, 0xEC42E90D)
    buf.seek(0)
    assert read_little_endian(buf, np.uint32) == 0xEC42E90D


@pytest.mark.parametrize("dtype", [np.int8, np.uint8, np.int16, np.int32, np.uint32])
def test_array_round_trip(dtype):
    info = np.iinfo(dtype)
    values = [info.min, 0, info.max, 1, info.max // 2]
    buf = io.BytesIO()
    write_little_endian(buf, dtype, values)
    assert len(buf.getvalue()) == np.dtype(dtype).itemsize * len(values)
    buf.seek(0)
    out = read_little_endian(buf, dtype, len(values))
    assert out.tolist() == values
    assert out.dtype == np.dtype(dtype)


def test_least_significant_byte_comes_first():
    buf = io.BytesIO()
    write_little_endian(buf, np.int16, [1])
    assert buf.getvalue()[0] == 1


def test_negative_value_round_trip():
    buf = io.BytesIO()
    write_little_endian(buf, np.int16, -2)
    buf.seek(0)
    assert read_little_endian(buf, np.int16) == -2


def test_short_read_raises():
    buf = io.BytesIO(b"\x01\x02\x03")
    with pytest.raises(NnueFormatError):
        read_little_endian(buf, np.uint32)


def test_short_array_read_raises():
    buf = io.BytesIO(b"\x00" * 7)
    with pytest.raises(NnueFormatError):
        read_little_endian(buf, np.int16, 4)


def test_out_of_range_write_raises():
    with pytest.raises(OverflowError):
        write_little_endian(io.BytesIO(), np.int8, [200])


def test_read_returns_writable_array():
    buf = io.BytesIO(b"\x00\x00\x00\x00")
    out = read_little_endian(buf, np.int16, 2)
    out[0] = 5
    assert out[0] == 5