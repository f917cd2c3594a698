"""Constants and little-endian I/O helpers shared by the network layers."""

from __future__ import annotations

from typing import BinaryIO, Iterable

import numpy as np

# Version tag of the evaluation file format.
VERSION = 0x7AF32F20

# Scale applied to the raw network output to reach internal units.
OUTPUT_SCALE = 16
WEIGHT_SCALE_BITS = 6

CACHE_LINE_SIZE = 64
MAX_SIMD_WIDTH = 32

# Types of the transformed features and of indices.
TRANSFORMED_FEATURE_DTYPE = np.uint8
INDEX_DTYPE = np.uint32


class NnueFormatError(ValueError):
    """Raised when network data is truncated or does not match the expected layout."""


def ceil_to_multiple(n: int, base: int) -> int:
    """Round ``n`` up to the nearest multiple of ``base``."""
    if base <= 0:
        raise ValueError("base must be positive")
    return (n + base - 1) // base * base


def _little_endian(dtype) -> np.dtype:
    dt = np.dtype(dtype)
    if dt.kind not in "iu":
        raise TypeError(f"expected an integer dtype, got {dt}")
    return dt.newbyteorder("<")


def read_little_endian(stream: BinaryIO, dtype, count: int | None = None):
    """Read integers stored in little-endian order.

    With ``count`` left as ``None`` a single Python ``int`` is returned;
    otherwise a native-order numpy array of ``count`` elements.
    """
    dt = _little_endian(dtype)
    n = 1 if count is None else count
    if n < 0:
        raise ValueError("count must not be negative")
    size = dt.itemsize * n
    data = stream.read(size)
    if data is None or len(data) < size:
        raise NnueFormatError(
            f"unexpected end of data: wanted {size} bytes, got {len(data or b'')}"
        )
    values = np.frombuffer(data, dtype=dt).astype(np.dtype(dtype).newbyteorder("="))
    if count is None:
        return int(values[0])
    return values


def write_little_endian(stream: BinaryIO, dtype, values: int | Iterable[int]) -> None:
    """Write one integer or a sequence of integers in little-endian order."""
    dt = _little_endian(dtype)
    array = np.asarray(values)
    if array.size and not np.all(
        (array >= np.iinfo(dt).min) & (array <= np.iinfo(dt).max)
    ):
        raise OverflowError(f"value out of range for {np.dtype(dtype)}")
    stream.write(array.astype(dt).reshape(-1).tobytes())