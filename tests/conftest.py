"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable

import pytest

from chess_engine.rules.board import Board
from chess_engine.rules.castling import CastlingDirection
from chess_engine.rules.pieces import Piece
from chess_engine.rules.position import Position

EMPTY_FEN = "/".join(["8"] * 8)


@pytest.fixture
def empty_board() -> Board:
    return Board.from_fen(EMPTY_FEN)


@pytest.fixture
def kings_only_board() -> Board:
    """
    Create a board with only kings on their canonical starting squares.
    Because making a move involves inferring if a king is under attack, most tests want both kings on the board.
    """
    board = Board.from_fen(EMPTY_FEN)
    board.place_piece(Piece.from_fen("K"), Position.from_algebraic("e1"))
    board.place_piece(Piece.from_fen("k"), Position.from_algebraic("e8"))
    return board


@pytest.fixture
def castling_board() -> Board:
    """Create a board with only the Kings and the Rooks. Ready to perform any castling move (all rights available)."""
    board = Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R")
    board.castling_rights = {direction: True for direction in CastlingDirection}
    return board


@pytest.fixture
def place_pieces() -> Callable[[Board, dict[str, str]], Board]:
    """Call the inner function with {square name: FEN character} to add pieces to a board"""

    def _place(board: Board, pieces: dict[str, str]) -> Board:
        for square_name, fen_char in pieces.items():
            board.place_piece(Piece.from_fen(fen_char), Position.from_algebraic(square_name))
        return board

    return _place
