"""
Type definitions used across layers
"""

from enum import StrEnum

# --- The domain layer has its own Colour / PieceType enums (src: chess_engine/rules/pieces.py).
# --- These string versions are what crosses the boundary (requests, responses). Conversion happens in the service.


class Status(StrEnum):
    IN_PROGRESS = "in progress"
    CHECK = "check"
    WAITING_ON_PROMOTION_CHOICE = "waiting on promotion choice"
    GAME_OVER = "game over"


class GameOverReason(StrEnum):
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    DEAD_POSITION = "dead position"
    FIVEFOLD_REPETITION_RULE = "fivefold repetition"
    SEVENTY_FIVE_MOVE_RULE = "75-move rule"
    MUTUAL_DRAW = "mutual draw"


class Colour(StrEnum):
    WHITE = "white"
    BLACK = "black"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
