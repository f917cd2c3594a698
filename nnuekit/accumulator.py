"""Accumulated first-layer outputs of a position, for both perspectives."""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np

TRANSFORMED_FEATURE_DIMENSIONS = 1024
PSQT_BUCKETS = 8


def _zeros_accumulation() -> np.ndarray:
    return np.zeros((2, TRANSFORMED_FEATURE_DIMENSIONS), dtype=np.int16)


def _zeros_psqt() -> np.ndarray:
    return np.zeros((2, PSQT_BUCKETS), dtype=np.int32)


@dataclass
class Accumulator:
    """Affine-transformed input features indexed by perspective (white, black)."""

    accumulation: np.ndarray = field(default_factory=_zeros_accumulation)
    psqt_accumulation: np.ndarray = field(default_factory=_zeros_psqt)
    computed: list[bool] = field(default_factory=lambda: [False, False])

    def __post_init__(self) -> None:
        self.accumulation = np.asarray(self.accumulation, dtype=np.int16)
        self.psqt_accumulation = np.asarray(self.psqt_accumulation, dtype=np.int32)
        if self.accumulation.ndim != 2 or self.accumulation.shape[0] != 2:
            raise ValueError("accumulation must have shape (2, dimensions)")
        if self.psqt_accumulation.ndim != 2 or self.psqt_accumulation.shape[0] != 2:
            raise ValueError("psqt_accumulation must have shape (2, buckets)")
        self.computed = [bool(c) for c in self.computed]
        if len(self.computed) != 2:
            raise ValueError("computed must hold one flag per perspective")

    def copy(self) -> "Accumulator":
        """An independent copy of this accumulator."""
        return Accumulator(
            accumulation=self.accumulation.copy(),
            psqt_accumulation=self.psqt_accumulation.copy(),
            computed=list(self.computed),
        )

    def invalidate(self) -> None:
        """Mark both perspectives as needing recomputation."""
        self.computed = [False, False]