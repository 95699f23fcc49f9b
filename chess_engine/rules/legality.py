"""
Legality filter
---

A pseudo-legal move (src: chess_engine/rules/moves.py) is legal if, after making it, your own king is not attacked.

plan:
1. Copy the board
2. make the candidate move (incl. side effects: captured pawn for en passant, rook for castling)
3. determine if king is attacked on the new board

The copies are scratch boards owned by the call that makes them. Nothing keeps a reference to them.
"""

from typing import Optional

from chess_engine.rules.board import Board
from chess_engine.rules.castling import CASTLING_RULES
from chess_engine.rules.game_state import GameOverReason, GameState
from chess_engine.rules.moves import (
    Move,
    en_passant_capture_square,
    generate_candidate_moves,
    is_square_attacked,
    pseudo_legal_moves,
)
from chess_engine.rules.pieces import Colour, Piece
from chess_engine.rules.position import Position


def apply_move(board: Board, move: Move) -> Optional[Piece]:
    """
    Update the pieces on the board for the given move. Returns the captured piece (if any)
    ---

    * regular move / capture: the piece moves, whatever stood on the target square is gone
    * en passant: the pawn moves diagonally, the opponent's pawn beside it gets removed
    * castling: both king and rook move

    NOTE: Promotion is not handled here. The pawn stays a pawn on the last rank until the player makes a choice.
    NOTE: Castling rights / en passant target are bookkeeping of the Game, not done here.
    """
    if move.castling_direction is not None:
        squares = CASTLING_RULES[move.castling_direction]
        board.move_piece(squares.king_from, squares.king_to)
        board.move_piece(squares.rook_from, squares.rook_to)
        return None

    captured = board.move_piece(move.from_square, move.to_square)
    if move.is_en_passant:
        captured = board.remove_piece(en_passant_capture_square(move))
    return captured


def simulate_move(board: Board, move: Move) -> Board:
    """The board as it would look after the move. The original board is left alone."""
    scratch_board = board.copy()
    apply_move(scratch_board, move)
    return scratch_board


def is_in_check(board: Board, colour: Colour) -> bool:
    """Is the king of `colour` attacked? (A board without that king is never in check.)"""
    king_square = board.locate_king(colour)
    if king_square is None:
        return False
    return is_square_attacked(king_square, colour.opponent, board)


def is_putting_yourself_in_check(board: Board, move: Move) -> bool:
    """Return True if the move leaves the mover's own king attacked"""
    moving_piece = board.piece(move.from_square)
    assert moving_piece is not None
    return is_in_check(simulate_move(board, move), moving_piece.colour)


def legal_moves(board: Board, square: Position) -> list[Move]:
    """The pseudo-legal moves of the piece on `square` that survive the self-check test"""
    return [
        move
        for move in pseudo_legal_moves(square, board)
        if not is_putting_yourself_in_check(board, move)
    ]


def all_legal_moves(board: Board, colour: Colour) -> list[Move]:
    return [
        move
        for move in generate_candidate_moves(board, colour)
        if not is_putting_yourself_in_check(board, move)
    ]


def has_legal_move(board: Board, colour: Colour) -> bool:
    """Stops at the first legal move found (cheaper than generating them all)"""
    return any(
        not is_putting_yourself_in_check(board, move)
        for move in generate_candidate_moves(board, colour)
    )


def classify(board: Board, colour: Colour) -> tuple[GameState, Optional[GameOverReason]]:
    """
    Check / checkmate / stalemate, seen from the side to move (`colour`)
    ---

    * no legal move, king attacked --> checkmate
    * no legal move, king safe --> stalemate
    * otherwise check (if attacked) or simply in progress
    """
    in_check = is_in_check(board, colour)
    if not has_legal_move(board, colour):
        reason = GameOverReason.CHECKMATE if in_check else GameOverReason.STALEMATE
        return GameState.GAME_OVER, reason
    return (GameState.CHECK if in_check else GameState.IN_PROGRESS), None
