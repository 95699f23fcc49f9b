"""Unit tests for /chess_engine/rules/moves.py"""

from typing import Callable
from unittest.mock import Mock, patch

import pytest

from chess_engine.rules.board import Board
from chess_engine.rules.castling import CastlingDirection
from chess_engine.rules.moves import (
    Move,
    attacked_squares,
    candidate_bishop_moves,
    candidate_castling_moves,
    candidate_king_moves,
    candidate_knight_moves,
    candidate_pawn_moves,
    candidate_queen_moves,
    candidate_rook_moves,
    en_passant_capture_square,
    en_passant_row,
    en_passant_target_after,
    generate_candidate_moves,
    is_promotion_square,
    is_square_attacked,
    pseudo_legal_moves,
)
from chess_engine.rules.pieces import Colour, PieceType
from chess_engine.rules.position import Position

PlacePieces = Callable[[Board, dict[str, str]], Board]


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


def destinations(moves: list[Move]) -> set[str]:
    return {move.to_square.to_algebraic() for move in moves}


# -- MOVE ENCODING IN UCI NOTATION ---
@pytest.mark.parametrize(
    "uci_move, from_uci, to_uci",
    [
        ("e2e4", "e2", "e4"),
        ("a1a5", "a1", "a5"),
        ("d2e4", "d2", "e4"),
        ("g3a7", "g3", "a7"),
    ],
)
def test_move_uci(uci_move: str, from_uci: str, to_uci: str) -> None:
    """UCI notation for the move should be <from_square><to_square>"""
    move = Move(sq(from_uci), sq(to_uci))
    assert move.to_uci() == uci_move


# -- PIECE GEOMETRY --
@pytest.mark.parametrize(
    "square, expected",
    [
        ("d4", {"b3", "b5", "c2", "c6", "e2", "e6", "f3", "f5"}),
        ("a1", {"b3", "c2"}),
        ("h8", {"f7", "g6"}),
    ],
)
def test_knight_moves(
    empty_board: Board, place_pieces: PlacePieces, square: str, expected: set[str]
) -> None:
    board = place_pieces(empty_board, {square: "N"})
    assert destinations(candidate_knight_moves(sq(square), board)) == expected


def test_knight_cannot_land_on_own_piece(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"a1": "N", "b3": "P", "c2": "p"})
    assert destinations(candidate_knight_moves(sq("a1"), board)) == {"c2"}


def test_rook_moves_blocked(empty_board: Board, place_pieces: PlacePieces) -> None:
    """Raycasting stops at the first piece: the opponent's piece can be taken, your own piece cannot"""
    board = place_pieces(empty_board, {"d4": "R", "d6": "p", "f4": "P"})
    assert destinations(candidate_rook_moves(sq("d4"), board)) == {
        "d5",
        "d6",
        "d3",
        "d2",
        "d1",
        "e4",
        "c4",
        "b4",
        "a4",
    }


def test_bishop_moves(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"c1": "B", "e3": "P"})
    assert destinations(candidate_bishop_moves(sq("c1"), board)) == {"d2", "b2", "a3"}


def test_queen_combines_rook_and_bishop(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"d4": "Q"})
    queen = destinations(candidate_queen_moves(sq("d4"), board))
    rook = destinations(candidate_rook_moves(sq("d4"), board))
    bishop = destinations(candidate_bishop_moves(sq("d4"), board))
    assert queen == rook | bishop
    assert len(queen) == 27


def test_king_moves(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"a1": "K", "a2": "P"})
    assert destinations(candidate_king_moves(sq("a1"), board)) == {"b1", "b2"}


# -- PAWNS --
@pytest.mark.parametrize(
    "fen_char, square, expected",
    [
        ("P", "e2", {"e3", "e4"}),
        ("P", "e3", {"e4"}),
        ("p", "e7", {"e6", "e5"}),
        ("p", "e6", {"e5"}),
    ],
)
def test_pawn_pushes(
    empty_board: Board, place_pieces: PlacePieces, fen_char: str, square: str, expected: set[str]
) -> None:
    board = place_pieces(empty_board, {square: fen_char})
    assert destinations(candidate_pawn_moves(sq(square), board)) == expected


def test_double_push_flag(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"e2": "P"})
    moves = {move.to_square.to_algebraic(): move for move in candidate_pawn_moves(sq("e2"), board)}
    assert moves["e4"].is_double_push
    assert not moves["e3"].is_double_push


@pytest.mark.parametrize(
    "blocker, expected",
    [
        ("e3", set()),  # directly blocked: no double step either
        ("e4", {"e3"}),
    ],
)
def test_blocked_pawn(
    empty_board: Board, place_pieces: PlacePieces, blocker: str, expected: set[str]
) -> None:
    board = place_pieces(empty_board, {"e2": "P", blocker: "n"})
    assert destinations(candidate_pawn_moves(sq("e2"), board)) == expected


def test_pawn_captures_diagonally_only_opponents(
    empty_board: Board, place_pieces: PlacePieces
) -> None:
    board = place_pieces(empty_board, {"d4": "P", "c5": "p", "e5": "N", "d5": "p"})
    assert destinations(candidate_pawn_moves(sq("d4"), board)) == {"c5"}


def test_en_passant_candidate(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"e5": "P", "d5": "p"})
    board.en_passant_target = sq("d6")
    moves = candidate_pawn_moves(sq("e5"), board)
    en_passant = [move for move in moves if move.is_en_passant]
    assert len(en_passant) == 1
    assert en_passant[0].to_square == sq("d6")
    assert en_passant_capture_square(en_passant[0]) == sq("d5")


def test_no_en_passant_without_target(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"e5": "P", "d5": "p"})
    assert destinations(candidate_pawn_moves(sq("e5"), board)) == {"e6"}


def test_en_passant_only_for_capturing_colour(empty_board: Board, place_pieces: PlacePieces) -> None:
    """The target square left by a white double push cannot be used by a white pawn"""
    board = place_pieces(empty_board, {"d2": "P", "c2": "P"})
    board.en_passant_target = sq("d3")
    assert "d3" not in destinations(candidate_pawn_moves(sq("c2"), board))


def test_en_passant_helpers() -> None:
    assert en_passant_row(Colour.WHITE) == 5
    assert en_passant_row(Colour.BLACK) == 2
    double_push = Move(sq("c7"), sq("c5"), is_double_push=True)
    assert en_passant_target_after(double_push, Colour.BLACK) == sq("c6")
    assert en_passant_target_after(Move(sq("c7"), sq("c6")), Colour.BLACK) is None


@pytest.mark.parametrize(
    "square, colour, expected",
    [
        ("e8", Colour.WHITE, True),
        ("e7", Colour.WHITE, False),
        ("e1", Colour.BLACK, True),
        ("e8", Colour.BLACK, False),
    ],
)
def test_promotion_square(square: str, colour: Colour, expected: bool) -> None:
    assert is_promotion_square(sq(square), colour) == expected


# -- DISPATCH --
def test_pseudo_legal_moves_dispatches_by_piece_type(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"d4": "N"})
    expected = [Move(sq("d4"), sq("e6"))]
    mock_rule = Mock(return_value=expected)
    with patch.dict("chess_engine.rules.moves.MOVEMENT_RULES", {PieceType.KNIGHT: mock_rule}):
        assert pseudo_legal_moves(sq("d4"), board) == expected
    mock_rule.assert_called_once_with(sq("d4"), board)


def test_pseudo_legal_moves_of_empty_square(empty_board: Board) -> None:
    assert pseudo_legal_moves(sq("d4"), empty_board) == []


def test_starting_position_has_twenty_candidates() -> None:
    board = Board.initial()
    assert len(generate_candidate_moves(board, Colour.WHITE)) == 20
    assert len(generate_candidate_moves(board, Colour.BLACK)) == 20


# -- ATTACKS --
def test_attacked_squares_of_pawns() -> None:
    """Pawns attack diagonally forward, not the square in front of them"""
    board = Board.initial()
    coverage = attacked_squares(board, Colour.WHITE)
    assert sq("d3") in coverage
    assert sq("e4") not in coverage
    assert sq("f6") in attacked_squares(board, Colour.BLACK)


def test_attack_includes_defended_pieces(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"a1": "R", "a4": "P"})
    coverage = attacked_squares(board, Colour.WHITE)
    assert sq("a4") in coverage
    assert sq("a5") not in coverage


def test_is_square_attacked(empty_board: Board, place_pieces: PlacePieces) -> None:
    board = place_pieces(empty_board, {"h8": "b", "e1": "K"})
    assert is_square_attacked(sq("a1"), Colour.BLACK, board)
    assert not is_square_attacked(sq("a2"), Colour.BLACK, board)


# -- CASTLING --
def test_all_castling_moves_available(castling_board: Board) -> None:
    white = candidate_castling_moves(Colour.WHITE, castling_board)
    black = candidate_castling_moves(Colour.BLACK, castling_board)
    assert {move.castling_direction for move in white} == {
        CastlingDirection.WHITE_KING_SIDE,
        CastlingDirection.WHITE_QUEEN_SIDE,
    }
    assert destinations(black) == {"g8", "c8"}


def test_castling_included_in_king_moves(castling_board: Board) -> None:
    assert {"g1", "c1"} <= destinations(candidate_king_moves(sq("e1"), castling_board))


def test_no_castling_without_rights(castling_board: Board) -> None:
    castling_board.revoke_castling_rights(CastlingDirection.WHITE_KING_SIDE)
    assert destinations(candidate_castling_moves(Colour.WHITE, castling_board)) == {"c1"}


@pytest.mark.parametrize(
    "blocker, expected",
    [
        ("f1", {"c1"}),
        ("g1", {"c1"}),
        ("b1", {"g1"}),  # the king does not cross b1, but it must still be empty
        ("d1", {"g1"}),
    ],
)
def test_no_castling_through_pieces(
    castling_board: Board, place_pieces: PlacePieces, blocker: str, expected: set[str]
) -> None:
    board = place_pieces(castling_board, {blocker: "N"})
    assert destinations(candidate_castling_moves(Colour.WHITE, board)) == expected


@pytest.mark.parametrize(
    "attacker_square, expected",
    [
        ("e4", set()),  # king in check: no castling at all
        ("f4", {"c1"}),  # passing through an attacked square
        ("g4", {"c1"}),  # landing on an attacked square
        ("d4", {"g1"}),
        ("b4", {"g1", "c1"}),  # b1 may be attacked, the king never crosses it
    ],
)
def test_no_castling_out_of_or_through_check(
    castling_board: Board, place_pieces: PlacePieces, attacker_square: str, expected: set[str]
) -> None:
    board = place_pieces(castling_board, {attacker_square: "r"})
    assert destinations(candidate_castling_moves(Colour.WHITE, board)) == expected


def test_no_castling_if_rook_missing(castling_board: Board) -> None:
    """Rights are still there, but the rook is gone"""
    castling_board.remove_piece(sq("a1"))
    assert destinations(candidate_castling_moves(Colour.WHITE, castling_board)) == {"g1"}
