"""
Error kinds shared across layers.

Every failure the engine reports is one of these. They are raised before any state is mutated,
so a caller can catch them, show feedback and simply try again with corrected input.

NOTE: None of these derive from ValueError. Pydantic wraps ValueErrors raised inside validators into a
ValidationError, and the boundary models want the domain error to come through as is.
"""


class ChessError(Exception):
    """Base class of everything the engine raises on purpose."""


# --- INPUT ERRORS ---
class InvalidPositionError(ChessError):
    """Coordinates out of range or unparsable algebraic notation."""


class InvalidFENError(ChessError):
    """String cannot be interpreted as FEN."""


class BoardSetupError(ChessError):
    """A board layout that the engine refuses to play with (e.g. two kings of one colour)."""


# --- MOVE ERRORS ---
class WrongTurnError(ChessError):
    """No piece on the source square, or it belongs to the player who is not to move."""


class InvalidMoveError(ChessError):
    """Destination is not in the legal move set of the piece."""


class InvalidPromotionChoiceError(ChessError):
    """A pawn cannot promote to a pawn or a king."""


# --- GAME STATE ERRORS ---
class GameStateError(ChessError):
    """Operation not allowed in the current state of the game."""


class GameAlreadyOverError(GameStateError):
    pass


class PromotionPendingError(GameStateError):
    """The game waits for a promotion choice before anything else can happen."""


class NoPromotionPendingError(GameStateError):
    pass


class DrawNotClaimableError(GameStateError):
    """Neither the 50-move rule nor threefold repetition applies (yet)."""


# --- BOUNDARY ERRORS ---
class InvalidRequestError(ChessError):
    pass


class GameNotFoundError(ChessError):
    pass
