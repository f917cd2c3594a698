# nnuekit

Numpy-backed building blocks of a quantized NNUE ("efficiently updatable
neural network") chess evaluator: the HalfKAv2_hm input feature set, the
per-position accumulator, the feature transformer that refreshes or
incrementally updates it, the int8 fully connected layer, and little-endian
parameter I/O.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `nnuekit.common`: constants (`VERSION`, `OUTPUT_SCALE`,
  `WEIGHT_SCALE_BITS`, ...), `ceil_to_multiple`, and little-endian integer
  I/O. `read_little_endian(stream, dtype, count=None)` returns a single `int`
  when `count` is `None`, otherwise a numpy array; it raises
  `NnueFormatError` (a `ValueError`) when the stream ends early.
  `write_little_endian(stream, dtype, values)` raises `OverflowError` for
  values that do not fit the dtype.
- `nnuekit.features`: the HalfKAv2_hm feature set. `Color` and `Piece`
  enums (pieces 1..6 are white pawn..king, 9..14 black pawn..king; squares
  are 0 = a1 .. 63 = h8), `make_index`, `active_indices`, `changed_indices`,
  `update_cost`, `refresh_cost`, `requires_refresh`, and `DirtyPiece`, the
  record of the pieces a move changed (`None` for "no square").
- `nnuekit.accumulator`: `Accumulator`, holding the int16 accumulation
  (2 x 1024), the int32 PSQT accumulation (2 x 8) and a `computed` flag per
  perspective, with `copy()` and `invalidate()`.
- `nnuekit.feature_transformer`: `FeatureTransformer`, with `refresh`,
  `update`, `transform`, `hash_value`, `read_parameters` and
  `write_parameters`. Its weight table holds 22528 x 1024 int16 values
  (about 46 MB).
- `nnuekit.affine`: `AffineTransform(input_dimensions, output_dimensions)`,
  computing `biases + weights · inputs` with int32 wrap-around, plus
  `hash_value`, `read_parameters` and `write_parameters`.

## Usage

```python
import io

from nnuekit.accumulator import Accumulator
from nnuekit.affine import AffineTransform
from nnuekit.feature_transformer import FeatureTransformer
from nnuekit.features import Color, DirtyPiece, Piece, active_indices, changed_indices

pieces = {4: Piece.W_KING, 60: Piece.B_KING, 12: Piece.W_PAWN, 52: Piece.B_PAWN}

transformer = FeatureTransformer()
acc = Accumulator()
transformer.refresh(acc, Color.WHITE, active_indices(Color.WHITE, pieces, 4))
transformer.refresh(acc, Color.BLACK, active_indices(Color.BLACK, pieces, 60))

# Incremental update after the white pawn moves e2-e4.
move = DirtyPiece(pieces=(Piece.W_PAWN,), from_squares=(12,), to_squares=(28,))
after = Accumulator()
for side, king in ((Color.WHITE, 4), (Color.BLACK, 60)):
    removed, added = changed_indices(side, king, move)
    transformer.update(acc, after, side, removed, added)

psqt, features = transformer.transform(after, side_to_move=Color.BLACK, bucket=0)

layer = AffineTransform(1024, 16)
outputs = layer.propagate(features)

# Parameters round-trip through any binary stream.
buffer = io.BytesIO()
layer.write_parameters(buffer)
buffer.seek(0)
layer.read_parameters(buffer)
```

`requires_refresh(dirty_piece, perspective)` tells when a move changed the
perspective's own king, in which case `refresh` must be used instead of
`update`.

## What this package does not do

- It has no complete network: there are no activation layers and no layer
  stack that chains the feature transformer and affine layers into a score.
- It does not read or write whole network files (version header, structure
  hash, description); only the parameters of the feature transformer and of
  single affine layers can be read and written.
- It does not evaluate positions or print per-piece evaluation tables.
- It has no board, move generation or position state; pieces are given as a
  mapping from square to piece code.