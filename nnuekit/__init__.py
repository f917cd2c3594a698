"""Quantized NNUE building blocks: HalfKAv2_hm features, accumulators, feature transformer and affine layer."""

__version__ = "0.1.0"

__all__ = [
    "accumulator",
    "affine",
    "common",
    "feature_transformer",
    "features",
]