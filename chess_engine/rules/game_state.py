"""States of the Game state machine (src: chess_engine/rules/game.py) and the reasons a game can end"""

from enum import Enum, auto


class GameState(Enum):
    IN_PROGRESS = auto()
    # the active colour's king is attacked
    CHECK = auto()
    # a pawn reached the last rank; nothing else happens until the player picks a piece type
    WAITING_ON_PROMOTION_CHOICE = auto()
    # terminal
    GAME_OVER = auto()


class GameOverReason(Enum):
    CHECKMATE = auto()
    STALEMATE = auto()
    DEAD_POSITION = auto()
    FIVEFOLD_REPETITION_RULE = auto()
    SEVENTY_FIVE_MOVE_RULE = auto()
    MUTUAL_DRAW = auto()
