"""Unit tests for /chess_engine/rules/castling.py"""

import pytest

from chess_engine.rules.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_directions,
    castling_from_fen,
    castling_to_fen,
)
from chess_engine.rules.pieces import Colour
from chess_engine.rules.position import Position


def squares(*names: str) -> list[Position]:
    return [Position.from_algebraic(name) for name in names]


@pytest.mark.parametrize(
    "direction, between, king_path",
    [
        (CastlingDirection.WHITE_KING_SIDE, ["f1", "g1"], ["e1", "f1", "g1"]),
        (CastlingDirection.WHITE_QUEEN_SIDE, ["d1", "c1", "b1"], ["e1", "d1", "c1"]),
        (CastlingDirection.BLACK_KING_SIDE, ["f8", "g8"], ["e8", "f8", "g8"]),
        (CastlingDirection.BLACK_QUEEN_SIDE, ["d8", "c8", "b8"], ["e8", "d8", "c8"]),
    ],
)
def test_castling_squares(
    direction: CastlingDirection, between: list[str], king_path: list[str]
) -> None:
    """b1 / b8 must be empty for queen-side castling, but the king never crosses it"""
    rule = CASTLING_RULES[direction]
    assert rule.squares_between() == squares(*between)
    assert rule.king_path() == squares(*king_path)


def test_direction_colour() -> None:
    assert castling_directions(Colour.WHITE) == [
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    ]
    assert all(
        direction.colour == Colour.BLACK for direction in castling_directions(Colour.BLACK)
    )


@pytest.mark.parametrize("castling_fen", ["KQkq", "Kq", "Q", "kq", "-"])
def test_castling_fen_roundtrip(castling_fen: str) -> None:
    assert castling_to_fen(castling_from_fen(castling_fen)) == castling_fen


def test_castling_from_fen() -> None:
    rights = castling_from_fen("Kq")
    assert rights[CastlingDirection.WHITE_KING_SIDE]
    assert not rights[CastlingDirection.WHITE_QUEEN_SIDE]
    assert not rights[CastlingDirection.BLACK_KING_SIDE]
    assert rights[CastlingDirection.BLACK_QUEEN_SIDE]
