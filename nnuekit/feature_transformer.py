"""Input feature transformer: the first, incrementally updated network layer."""

from __future__ import annotations

from typing import BinaryIO, Iterable

import numpy as np

from .accumulator import PSQT_BUCKETS, TRANSFORMED_FEATURE_DIMENSIONS, Accumulator
from .common import read_little_endian, write_little_endian
from .features import DIMENSIONS as FEATURE_DIMENSIONS
from .features import HASH_VALUE as FEATURE_HASH_VALUE
from .features import Color

HALF_DIMENSIONS = TRANSFORMED_FEATURE_DIMENSIONS
INPUT_DIMENSIONS = FEATURE_DIMENSIONS
OUTPUT_DIMENSIONS = HALF_DIMENSIONS
# One uint8 per transformed feature.
BUFFER_SIZE = OUTPUT_DIMENSIONS

_MASK32 = 0xFFFFFFFF


def _perspective(value: int) -> Color:
    try:
        return Color(value)
    except ValueError:
        raise ValueError(f"invalid perspective: {value!r}") from None


class FeatureTransformer:
    """Converts active input features into the transformed feature vector.

    ``weights`` has one row of ``HALF_DIMENSIONS`` int16 values per input
    feature, ``psqt_weights`` one row of ``PSQT_BUCKETS`` int32 values per
    input feature, and ``biases`` holds ``HALF_DIMENSIONS`` int16 values.
    """

    def __init__(self) -> None:
        self.biases = np.zeros(HALF_DIMENSIONS, dtype=np.int16)
        self.weights = np.zeros((INPUT_DIMENSIONS, HALF_DIMENSIONS), dtype=np.int16)
        self.psqt_weights = np.zeros((INPUT_DIMENSIONS, PSQT_BUCKETS), dtype=np.int32)

    def hash_value(self) -> int:
        """Hash of this layer as embedded in the evaluation file."""
        return (FEATURE_HASH_VALUE ^ (OUTPUT_DIMENSIONS * 2)) & _MASK32

    def read_parameters(self, stream: BinaryIO) -> None:
        """Read biases, weights and PSQT weights; raises NnueFormatError on short data."""
        biases = read_little_endian(stream, np.int16, HALF_DIMENSIONS)
        weights = read_little_endian(stream, np.int16, HALF_DIMENSIONS * INPUT_DIMENSIONS)
        psqt = read_little_endian(stream, np.int32, PSQT_BUCKETS * INPUT_DIMENSIONS)
        self.biases = biases.astype(np.int16, copy=False)
        self.weights = weights.astype(np.int16, copy=False).reshape(
            INPUT_DIMENSIONS, HALF_DIMENSIONS
        )
        self.psqt_weights = psqt.astype(np.int32, copy=False).reshape(
            INPUT_DIMENSIONS, PSQT_BUCKETS
        )

    def write_parameters(self, stream: BinaryIO) -> None:
        """Write parameters in the layout read_parameters expects."""
        write_little_endian(stream, np.int16, self.biases)
        write_little_endian(stream, np.int16, self.weights.reshape(-1))
        write_little_endian(stream, np.int32, self.psqt_weights.reshape(-1))

    def _indices(self, indices: Iterable[int]) -> np.ndarray:
        array = np.asarray(list(indices), dtype=np.int64).reshape(-1)
        if array.size and (array.min() < 0 or array.max() >= INPUT_DIMENSIONS):
            raise ValueError("feature index out of range")
        return array.astype(np.intp)

    def _sums(self, indices: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
        weights = self.weights[indices].astype(np.int64).sum(axis=0)
        psqt = self.psqt_weights[indices].astype(np.int64).sum(axis=0)
        return weights, psqt

    def refresh(self, accumulator: Accumulator, perspective: int, active: Iterable[int]) -> None:
        """Recompute one perspective of ``accumulator`` from its active features."""
        p = _perspective(perspective)
        indices = self._indices(active)
        weights, psqt = self._sums(indices)
        accumulator.accumulation[p] = (self.biases.astype(np.int64) + weights).astype(np.int16)
        accumulator.psqt_accumulation[p] = psqt.astype(np.int32)
        accumulator.computed[p] = True

    def update(
        self,
        source: Accumulator,
        target: Accumulator,
        perspective: int,
        removed: Iterable[int],
        added: Iterable[int],
    ) -> None:
        """Derive ``target`` from the computed ``source`` by feature differences."""
        p = _perspective(perspective)
        if not source.computed[p]:
            raise ValueError("source accumulator is not computed for this perspective")
        removed_w, removed_psqt = self._sums(self._indices(removed))
        added_w, added_psqt = self._sums(self._indices(added))
        acc = source.accumulation[p].astype(np.int64) - removed_w + added_w
        psqt = source.psqt_accumulation[p].astype(np.int64) - removed_psqt + added_psqt
        target.accumulation[p] = acc.astype(np.int16)
        target.psqt_accumulation[p] = psqt.astype(np.int32)
        target.computed[p] = True

    def transform(
        self, accumulator: Accumulator, side_to_move: int, bucket: int
    ) -> tuple[int, np.ndarray]:
        """Return the PSQT value for ``bucket`` and the transformed uint8 features.

        The first half of the output comes from the side to move, the second
        half from the other side.
        """
        us = _perspective(side_to_move)
        them = Color(1 - us)
        if not 0 <= bucket < PSQT_BUCKETS:
            raise ValueError(f"invalid bucket: {bucket!r}")
        if not all(accumulator.computed):
            raise ValueError("accumulator must be computed for both perspectives")

        diff = int(accumulator.psqt_accumulation[us][bucket]) - int(
            accumulator.psqt_accumulation[them][bucket]
        )
        # Integer division truncating toward zero.
        psqt = abs(diff) // 2 * (1 if diff >= 0 else -1)

        half = HALF_DIMENSIONS // 2
        output = np.empty(OUTPUT_DIMENSIONS, dtype=np.uint8)
        for p, side in enumerate((us, them)):
            row = accumulator.accumulation[side].astype(np.int32)
            sum0 = np.clip(row[:half], 0, 127)
            sum1 = np.clip(row[half:], 0, 127)
            output[half * p : half * (p + 1)] = (sum0 * sum1 // 128).astype(np.uint8)
        return psqt, output