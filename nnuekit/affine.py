"""Fully connected (affine transform) layer of the evaluation network."""

from __future__ import annotations

from typing import BinaryIO, Iterable

import numpy as np

from .common import MAX_SIMD_WIDTH, ceil_to_multiple, read_little_endian, write_little_endian

_AFFINE_HASH = 0xCC03DAE4
_MASK32 = 0xFFFFFFFF


class AffineTransform:
    """Maps uint8 inputs to int32 outputs: ``biases + weights @ inputs``.

    Weights are int8 and stored row by row, one row per output, each row
    padded to a multiple of the SIMD width; biases are int32.
    """

    def __init__(self, input_dimensions: int, output_dimensions: int) -> None:
        if input_dimensions <= 0 or output_dimensions <= 0:
            raise ValueError("dimensions must be positive")
        self.input_dimensions = input_dimensions
        self.output_dimensions = output_dimensions
        self.padded_input_dimensions = ceil_to_multiple(input_dimensions, MAX_SIMD_WIDTH)
        self.padded_output_dimensions = ceil_to_multiple(output_dimensions, MAX_SIMD_WIDTH)
        self.biases = np.zeros(output_dimensions, dtype=np.int32)
        self.weights = np.zeros(
            (output_dimensions, self.padded_input_dimensions), dtype=np.int8
        )

    def hash_value(self, prev_hash: int) -> int:
        """Hash of this layer chained onto the hash of the previous layers."""
        prev = prev_hash & _MASK32
        value = (_AFFINE_HASH + self.output_dimensions) & _MASK32
        value ^= prev >> 1
        value ^= (prev << 31) & _MASK32
        return value

    def read_parameters(self, stream: BinaryIO) -> None:
        """Read biases then weights; raises NnueFormatError on short data."""
        biases = read_little_endian(stream, np.int32, self.output_dimensions)
        weights = read_little_endian(
            stream, np.int8, self.output_dimensions * self.padded_input_dimensions
        )
        self.biases = biases.astype(np.int32)
        self.weights = weights.astype(np.int8).reshape(
            self.output_dimensions, self.padded_input_dimensions
        )

    def write_parameters(self, stream: BinaryIO) -> None:
        """Write biases then weights in the layout read_parameters expects."""
        write_little_endian(stream, np.int32, self.biases)
        write_little_endian(stream, np.int8, self.weights.reshape(-1))

    def propagate(self, values: Iterable[int]) -> np.ndarray:
        """Forward pass; only the first ``input_dimensions`` values are used."""
        x = np.asarray(values, dtype=np.int64).reshape(-1)
        if x.size < self.input_dimensions:
            raise ValueError(
                f"expected at least {self.input_dimensions} inputs, got {x.size}"
            )
        x = x[: self.input_dimensions]
        w = self.weights[:, : self.input_dimensions].astype(np.int64)
        out = self.biases.astype(np.int64) + w @ x
        # Wrap around like 32-bit integer arithmetic.
        return out.astype(np.int32)