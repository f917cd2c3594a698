"""HalfKAv2_hm input features: own king square combined with every piece.

The board is mirrored so that the king always sits on files e..h, and
rotated for the black perspective.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Mapping

SQUARE_NB = 64

NAME = "HalfKAv2_hm(Friend)"
HASH_VALUE = 0x7F234CB8
MAX_ACTIVE_DIMENSIONS = 32


class Color(IntEnum):
    WHITE = 0
    BLACK = 1


class Piece(IntEnum):
    NO_PIECE = 0
    W_PAWN = 1
    W_KNIGHT = 2
    W_BISHOP = 3
    W_ROOK = 4
    W_QUEEN = 5
    W_KING = 6
    B_PAWN = 9
    B_KNIGHT = 10
    B_BISHOP = 11
    B_ROOK = 12
    B_QUEEN = 13
    B_KING = 14


KING = 6

# Base offsets of each piece kind on the 64 squares.
PS_NONE = 0
PS_W_PAWN = 0
PS_B_PAWN = 1 * SQUARE_NB
PS_W_KNIGHT = 2 * SQUARE_NB
PS_B_KNIGHT = 3 * SQUARE_NB
PS_W_BISHOP = 4 * SQUARE_NB
PS_B_BISHOP = 5 * SQUARE_NB
PS_W_ROOK = 6 * SQUARE_NB
PS_B_ROOK = 7 * SQUARE_NB
PS_W_QUEEN = 8 * SQUARE_NB
PS_B_QUEEN = 9 * SQUARE_NB
PS_KING = 10 * SQUARE_NB
PS_NB = 11 * SQUARE_NB

DIMENSIONS = SQUARE_NB * PS_NB // 2

# Convention: W is "us", B is "them"; seen from the other side they swap.
PIECE_SQUARE_INDEX: tuple[tuple[int, ...], tuple[int, ...]] = (
    (PS_NONE, PS_W_PAWN, PS_W_KNIGHT, PS_W_BISHOP, PS_W_ROOK, PS_W_QUEEN, PS_KING, PS_NONE,
     PS_NONE, PS_B_PAWN, PS_B_KNIGHT, PS_B_BISHOP, PS_B_ROOK, PS_B_QUEEN, PS_KING, PS_NONE),
    (PS_NONE, PS_B_PAWN, PS_B_KNIGHT, PS_B_BISHOP, PS_B_ROOK, PS_B_QUEEN, PS_KING, PS_NONE,
     PS_NONE, PS_W_PAWN, PS_W_KNIGHT, PS_W_BISHOP, PS_W_ROOK, PS_W_QUEEN, PS_KING, PS_NONE),
)

_SQ_A1, _SQ_H1, _SQ_A8, _SQ_H8 = 0, 7, 56, 63


def _mirrored_file(square: int) -> int:
    f = square % 8
    return f if f < 4 else 7 - f


def _king_buckets(perspective: Color) -> tuple[int, ...]:
    buckets = []
    for sq in range(SQUARE_NB):
        rank = sq // 8
        rel_rank = 7 - rank if perspective == Color.WHITE else rank
        buckets.append((rel_rank * 4 + _mirrored_file(sq)) * PS_NB)
    return tuple(buckets)


def _orient_table(perspective: Color) -> tuple[int, ...]:
    low, high = (_SQ_H1, _SQ_A1) if perspective == Color.WHITE else (_SQ_H8, _SQ_A8)
    return tuple(low if sq % 8 < 4 else high for sq in range(SQUARE_NB))


KING_BUCKETS = (_king_buckets(Color.WHITE), _king_buckets(Color.BLACK))
ORIENT_TABLE = (_orient_table(Color.WHITE), _orient_table(Color.BLACK))

_VALID_PIECES = frozenset(int(p) for p in Piece if p != Piece.NO_PIECE)


@dataclass(frozen=True)
class DirtyPiece:
    """Pieces changed by one move: each piece moved from a square to a square.

    ``None`` stands for "no square": a captured piece has no destination and
    a promoted piece has no origin.
    """

    pieces: tuple[int, ...] = ()
    from_squares: tuple[int | None, ...] = ()
    to_squares: tuple[int | None, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "pieces", tuple(self.pieces))
        object.__setattr__(self, "from_squares", tuple(self.from_squares))
        object.__setattr__(self, "to_squares", tuple(self.to_squares))
        n = len(self.pieces)
        if len(self.from_squares) != n or len(self.to_squares) != n:
            raise ValueError("pieces, from_squares and to_squares must have equal length")
        if n > 3:
            raise ValueError("a move changes at most three pieces")

    @property
    def dirty_num(self) -> int:
        return len(self.pieces)


def _check_perspective(perspective: int) -> Color:
    try:
        return Color(perspective)
    except ValueError:
        raise ValueError(f"invalid perspective: {perspective!r}") from None


def _check_square(square: int) -> int:
    if not 0 <= square < SQUARE_NB:
        raise ValueError(f"invalid square: {square!r}")
    return square


def _check_piece(piece: int) -> int:
    if int(piece) not in _VALID_PIECES:
        raise ValueError(f"invalid piece: {piece!r}")
    return int(piece)


def make_index(perspective: int, square: int, piece: int, king_square: int) -> int:
    """Feature index of ``piece`` on ``square`` with our king on ``king_square``."""
    p = _check_perspective(perspective)
    s = _check_square(square)
    k = _check_square(king_square)
    pc = _check_piece(piece)
    return (s ^ ORIENT_TABLE[p][k]) + PIECE_SQUARE_INDEX[p][pc] + KING_BUCKETS[p][k]


def active_indices(perspective: int, pieces: Mapping[int, int], king_square: int) -> list[int]:
    """Indices of all active features, in increasing square order."""
    if len(pieces) > MAX_ACTIVE_DIMENSIONS:
        raise ValueError(f"more than {MAX_ACTIVE_DIMENSIONS} pieces on the board")
    return [
        make_index(perspective, square, pieces[square], king_square)
        for square in sorted(pieces)
    ]


def changed_indices(
    perspective: int, king_square: int, dirty_piece: DirtyPiece
) -> tuple[list[int], list[int]]:
    """Indices removed and added by the changes in ``dirty_piece``."""
    removed: list[int] = []
    added: list[int] = []
    for piece, src, dst in zip(
        dirty_piece.pieces, dirty_piece.from_squares, dirty_piece.to_squares
    ):
        if src is not None:
            removed.append(make_index(perspective, src, piece, king_square))
        if dst is not None:
            added.append(make_index(perspective, dst, piece, king_square))
    return removed, added


def update_cost(dirty_piece: DirtyPiece) -> int:
    """Cost of an incremental update for one perspective."""
    return dirty_piece.dirty_num


def refresh_cost(piece_count: int) -> int:
    """Cost of a full refresh: one feature per piece on the board."""
    return piece_count


def requires_refresh(dirty_piece: DirtyPiece, perspective: int) -> bool:
    """Whether the move moved the perspective's own king, forcing a refresh."""
    p = _check_perspective(perspective)
    if not dirty_piece.pieces:
        return False
    return int(dirty_piece.pieces[0]) == int(p) * 8 + KING