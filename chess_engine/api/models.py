"""Requests and Response models"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel, field_validator

from chess_engine.core.exceptions import InvalidPositionError, InvalidRequestError
from chess_engine.core.shared_types import Colour, GameOverReason, PieceType, Status
from chess_engine.rules.position import Position


def _validate_square_name(value: str) -> str:
    """Squares travel as algebraic notation: 'a1' - 'h8'"""
    try:
        return Position.from_algebraic(value).to_algebraic()
    except InvalidPositionError as error:
        raise InvalidRequestError(
            f"Cannot interpret {value!r} as a valid square name."
        ) from error


def _validate_promotion_choice(value: PieceType) -> PieceType:
    if value in (PieceType.PAWN, PieceType.KING):
        raise InvalidRequestError(f"A pawn cannot promote to a {value}.")
    return value


# --- REQUEST MODELS ---
class CreateGameRequest(BaseModel):
    starting_fen: Optional[str] = None

    @field_validator("starting_fen")
    @classmethod
    def validate_starting_fen(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value

        parts = value.strip().split(" ")
        if len(parts) != 6:
            raise InvalidRequestError(
                "FEN string must contain 6 space-separated parts."
            )
        return value.strip()


class GetGameRequest(BaseModel):
    game_id: UUID


class DeleteGameRequest(BaseModel):
    game_id: UUID


class LegalMovesRequest(BaseModel):
    game_id: UUID
    square: str

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)


class MoveRequest(BaseModel):
    game_id: UUID
    from_square: str
    to_square: str
    # only used when the move promotes a pawn, ignored otherwise
    promote_to: Optional[PieceType] = None

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        return _validate_square_name(value)

    @field_validator("promote_to")
    @classmethod
    def validate_promotion_choice(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value is None:
            return value
        return _validate_promotion_choice(value)


class PromotionRequest(BaseModel):
    game_id: UUID
    promote_to: PieceType

    @field_validator("promote_to")
    @classmethod
    def validate_promotion_choice(cls, value: PieceType) -> PieceType:
        return _validate_promotion_choice(value)


class DrawRequest(BaseModel):
    """
    claim=False: both players agree to a draw.
    claim=True: a player claims the draw by the 50-move rule or threefold repetition (only accepted if it applies).
    """

    game_id: UUID
    claim: bool = False


# --- RESPONSE MODELS ---
class PieceModel(BaseModel):
    type: PieceType
    colour: Colour


class GameResponse(BaseModel):
    game_id: UUID
    fen: str
    # 64 slots, a1 first, h8 last
    board: list[Optional[PieceModel]]
    active_colour: Colour
    status: Status
    game_over_reason: Optional[GameOverReason]
    winner: Optional[Colour]
    can_claim_draw: bool
    move_history: list[str]


class LegalMovesResponse(BaseModel):
    game_id: UUID
    square: str
    legal_moves: list[str]
