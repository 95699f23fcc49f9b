"""Defines the types of chess pieces"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Self


class PieceType(Enum):
    PAWN = auto()
    KNIGHT = auto()
    BISHOP = auto()
    ROOK = auto()
    QUEEN = auto()
    KING = auto()

    @classmethod
    def from_str(cls, text: str) -> PieceType:
        """
        Parse user input into a piece type.

        Accepts English names ("queen", "Knight"), FEN letters ("q", "N") and unicode chess symbols ("♕", "♞").
        """
        cleaned = text.strip()
        if cleaned in UNICODE_TO_PIECE:
            return UNICODE_TO_PIECE[cleaned]
        cleaned = cleaned.lower()
        if cleaned in FEN_TO_PIECE:
            return FEN_TO_PIECE[cleaned]
        if cleaned.upper() in cls.__members__:
            return cls[cleaned.upper()]
        raise ValueError(f"{text!r} does not represent a piece")


class Colour(Enum):
    WHITE = auto()
    BLACK = auto()

    @property
    def opponent(self) -> Colour:
        return Colour.BLACK if self == Colour.WHITE else Colour.WHITE

    @property
    def pawn_direction(self) -> int:
        """White pawns move up the board (towards row 7), black pawns move down"""
        return 1 if self == Colour.WHITE else -1

    @property
    def home_row(self) -> int:
        """Row of the back rank (where the king starts)"""
        return 0 if self == Colour.WHITE else 7


FEN_TO_PIECE: dict[str, PieceType] = {
    "p": PieceType.PAWN,
    "n": PieceType.KNIGHT,
    "b": PieceType.BISHOP,
    "r": PieceType.ROOK,
    "q": PieceType.QUEEN,
    "k": PieceType.KING,
}

PIECE_TO_FEN: dict[PieceType, str] = {value: key for key, value in FEN_TO_PIECE.items()}

UNICODE_TO_PIECE: dict[str, PieceType] = {
    "♙": PieceType.PAWN,
    "♘": PieceType.KNIGHT,
    "♗": PieceType.BISHOP,
    "♖": PieceType.ROOK,
    "♕": PieceType.QUEEN,
    "♔": PieceType.KING,
    "♟": PieceType.PAWN,
    "♞": PieceType.KNIGHT,
    "♝": PieceType.BISHOP,
    "♜": PieceType.ROOK,
    "♛": PieceType.QUEEN,
    "♚": PieceType.KING,
}

# A pawn can become any of these
PROMOTION_OPTIONS: list[PieceType] = [
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
]


@dataclass(frozen=True)
class Piece:
    type: PieceType
    colour: Colour

    @classmethod
    def from_fen(cls, character: str) -> Self:
        # lower case: Black pieces, upper case: White pieces
        colour = Colour.WHITE if character.isupper() else Colour.BLACK
        piece_type = FEN_TO_PIECE[character.lower()]
        return cls(piece_type, colour)

    def to_fen(self) -> str:
        return (
            PIECE_TO_FEN[self.type].upper()
            if self.colour == Colour.WHITE
            else PIECE_TO_FEN[self.type].lower()
        )

    def promote_to(self, new_type: PieceType) -> Piece:
        """Pieces are immutable: promotion hands back a new piece of the same colour"""
        return Piece(new_type, self.colour)
