"""
Draw detection
---

Claimable draws (a player has to act on them):
* 50-move rule: 50 moves by each side without a pawn move or a capture
* threefold repetition: the same position occurred 3 times

Automatic draws (the game simply ends):
* 75-move rule
* fivefold repetition
* dead position: nobody has enough material left to ever deliver checkmate
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chess_engine.rules.board import Board
from chess_engine.rules.castling import CastlingDirection
from chess_engine.rules.pieces import Colour, Piece, PieceType
from chess_engine.rules.position import Position

# The clock counts half-moves (plies): 100 plies are 50 moves of each player
FIFTY_MOVE_RULE_PLIES = 100
SEVENTY_FIVE_MOVE_RULE_PLIES = 150
THREEFOLD_REPETITIONS = 3
FIVEFOLD_REPETITIONS = 5

MINOR_PIECES = (PieceType.KNIGHT, PieceType.BISHOP)


@dataclass(frozen=True)
class Fingerprint:
    """
    What makes two positions 'the same' for repetition counting.

    NOTE: The en passant target is compared as is, even when no pawn could actually capture on it. Two positions that
    only differ in that bookkeeping (or in castling rights) count as different positions.
    """

    placement: tuple[Optional[Piece], ...]
    active_colour: Colour
    castling_rights: frozenset[CastlingDirection]
    en_passant_target: Optional[Position]

    @classmethod
    def from_board(cls, board: Board, active_colour: Colour) -> Fingerprint:
        return cls(
            placement=board.snapshot(),
            active_colour=active_colour,
            castling_rights=frozenset(
                direction for direction, allowed in board.castling_rights.items() if allowed
            ),
            en_passant_target=board.en_passant_target,
        )


# --- MOVE COUNTER RULES ---
def can_claim_fifty_move_rule(half_move_clock: int) -> bool:
    return half_move_clock >= FIFTY_MOVE_RULE_PLIES


def is_seventy_five_move_rule(half_move_clock: int) -> bool:
    return half_move_clock >= SEVENTY_FIVE_MOVE_RULE_PLIES


# --- REPETITION RULES ---
def repetition_count(history: list[Fingerprint], fingerprint: Fingerprint) -> int:
    return history.count(fingerprint)


def can_claim_threefold_repetition(history: list[Fingerprint]) -> bool:
    """The latest position in the history (the current one) has occurred at least 3 times"""
    if not history:
        return False
    return repetition_count(history, history[-1]) >= THREEFOLD_REPETITIONS


def is_fivefold_repetition(history: list[Fingerprint]) -> bool:
    if not history:
        return False
    return repetition_count(history, history[-1]) >= FIVEFOLD_REPETITIONS


# --- DEAD POSITION ---
def is_dead_position(board: Board) -> bool:
    """
    Insufficient material for either side to checkmate
    ---

    * king vs king
    * king + a single knight or bishop vs king
    * king + bishop vs king + bishop, with both bishops on the same square colour
    """
    non_kings = [
        (square, piece) for square, piece in board.pieces() if piece.type != PieceType.KING
    ]

    if not non_kings:
        return True

    if len(non_kings) == 1:
        _, piece = non_kings[0]
        return piece.type in MINOR_PIECES

    if len(non_kings) == 2:
        (square_1, piece_1), (square_2, piece_2) = non_kings
        both_bishops = piece_1.type == piece_2.type == PieceType.BISHOP
        one_each = piece_1.colour != piece_2.colour
        same_square_colour = square_1.is_light_square() == square_2.is_light_square()
        return both_bishops and one_each and same_square_colour

    return False
