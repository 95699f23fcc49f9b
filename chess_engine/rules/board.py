"""
The Game board: where the pieces stand, plus the bits of state that belong to the position rather than to the game
(castling rights and the en passant target square).

The squares are a flat list of 64 slots, indexed by `Position.index` (a1 = 0, h8 = 63).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Self

from chess_engine.core.exceptions import BoardSetupError, InvalidFENError
from chess_engine.rules.castling import (
    CastlingDirection,
    castling_directions,
)
from chess_engine.rules.pieces import Colour, Piece, PieceType
from chess_engine.rules.position import BOARD_DIMENSIONS, NUM_SQUARES, Position

# a run of empty squares within one rank
EMPTY_RUN_DIGITS = "12345678"

BACK_RANK: list[PieceType] = [
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
]


def _no_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: False for direction in CastlingDirection}


def _all_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CastlingDirection}


@dataclass
class Board:
    squares: list[Optional[Piece]] = field(default_factory=lambda: [None] * NUM_SQUARES)
    castling_rights: dict[CastlingDirection, bool] = field(
        default_factory=_no_castling_rights
    )
    en_passant_target: Optional[Position] = None

    # -- CONSTRUCTION --
    @classmethod
    def empty(cls) -> Self:
        """No pieces, no castling rights. Place pieces yourself."""
        return cls()

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position: White on rows 0-1, Black on rows 6-7. Everybody may still castle."""
        board = cls(castling_rights=_all_castling_rights())
        for col, piece_type in enumerate(BACK_RANK):
            board.place_piece(Piece(piece_type, Colour.WHITE), Position(0, col))
            board.place_piece(Piece(PieceType.PAWN, Colour.WHITE), Position(1, col))
            board.place_piece(Piece(PieceType.PAWN, Colour.BLACK), Position(6, col))
            board.place_piece(Piece(piece_type, Colour.BLACK), Position(7, col))
        return board

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given FEN string.

        That is, we supply the first part of the FEN string that denotes the board position
        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * black pieces are on the 8th rank, starting with rook on a8, knight on b8, etc.
        * pawns cover 7th rank entirely
        * ranks 6 through 3 have 8 consecutive empty squares
        * rank 2 are the white pawns (capital letters)
        * 1st rank are the white pieces. Again, left-to-right reads a1-h1.

        NOTE: castling rights and en passant square are not part of this field. The board starts without them.
        """
        board = cls()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidFENError(f"Expected 8 ranks in piece placement: {fen_str!r}")

        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # FEN string is read from top rank (8th) to bottom rank (1st)
            row = BOARD_DIMENSIONS[1] - 1 - rank_idx
            # ... but the first character is the a-file, so reads in normal direction
            col = 0
            for character in fen_one_rank:
                if character in EMPTY_RUN_DIGITS:
                    # A number denotes the amount of empty squares after each other
                    col += int(character)
                    continue
                if col >= BOARD_DIMENSIONS[0]:
                    raise InvalidFENError(f"Too many squares on a rank: {fen_one_rank!r}")
                try:
                    piece = Piece.from_fen(character)
                except KeyError:
                    raise InvalidFENError(
                        f"Invalid piece character {character!r} in {fen_str!r}"
                    ) from None
                board.place_piece(piece, Position(row, col))
                col += 1
            if col != BOARD_DIMENSIONS[0]:
                raise InvalidFENError(f"Rank does not cover 8 squares: {fen_one_rank!r}")
        return board

    def to_fen(self) -> str:
        """Ranks are separated by slashes in FEN string."""
        return "/".join(
            self._rank_to_fen(row) for row in range(BOARD_DIMENSIONS[1] - 1, -1, -1)
        )

    def _rank_to_fen(self, row: int) -> str:
        """FEN string of a single rank"""
        fen_characters: list[str] = []
        empty_count = 0
        for col in range(BOARD_DIMENSIONS[0]):
            piece = self.piece(Position(row, col))

            if piece is not None:
                if empty_count > 0:
                    fen_characters.append(str(empty_count))
                    empty_count = 0
                fen_characters.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def copy(self) -> Board:
        """Pieces are immutable, so copying the slots (and the small rights dict) is a full value copy."""
        return Board(
            squares=list(self.squares),
            castling_rights=dict(self.castling_rights),
            en_passant_target=self.en_passant_target,
        )

    # -- QUERIES --
    def piece(self, square: Position) -> Optional[Piece]:
        return self.squares[square.index]

    def is_empty(self, square: Position) -> bool:
        return self.squares[square.index] is None

    def is_any_occupied(self, squares: list[Position]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    def snapshot(self) -> tuple[Optional[Piece], ...]:
        """Read-only view of all 64 slots"""
        return tuple(self.squares)

    def pieces(self) -> list[tuple[Position, Piece]]:
        """All occupied squares with the piece standing on them"""
        return [
            (Position.from_index(idx), piece)
            for idx, piece in enumerate(self.squares)
            if piece is not None
        ]

    def locate_colour(self, colour: Colour) -> list[Position]:
        return [square for square, piece in self.pieces() if piece.colour == colour]

    def locate_pieces(
        self, piece_type: PieceType, colour: Optional[Colour] = None
    ) -> list[Position]:
        return [
            square
            for square, piece in self.pieces()
            if piece.type == piece_type and (colour is None or piece.colour == colour)
        ]

    def locate_king(self, colour: Colour) -> Optional[Position]:
        kings = self.locate_pieces(PieceType.KING, colour)
        return kings[0] if kings else None

    # -- MUTATION (only Game and the legality filter's scratch copies call these) --
    def place_piece(self, piece: Piece, square: Position) -> None:
        if piece.type == PieceType.KING:
            king_square = self.locate_king(piece.colour)
            if king_square is not None and king_square != square:
                raise BoardSetupError(
                    f"The {piece.colour.name.lower()} king is already on {king_square}, a second one cannot be placed"
                )
        self.squares[square.index] = piece

    def remove_piece(self, square: Position) -> Optional[Piece]:
        removed = self.squares[square.index]
        self.squares[square.index] = None
        return removed

    def move_piece(self, from_square: Position, to_square: Position) -> Optional[Piece]:
        """Move whatever stands on `from_square`. Returns the piece that got captured on `to_square` (if any)."""
        piece_that_moved = self.squares[from_square.index]
        captured = self.squares[to_square.index]
        self.squares[from_square.index] = None
        self.squares[to_square.index] = piece_that_moved
        return captured

    # -- CASTLING RIGHTS --
    def has_castling_rights(self, direction: CastlingDirection) -> bool:
        return self.castling_rights[direction]

    def castling_options(self, colour: Colour) -> list[CastlingDirection]:
        """Directions in which the colour has not (yet) lost the right to castle"""
        return [
            direction
            for direction in castling_directions(colour)
            if self.castling_rights[direction]
        ]

    def revoke_castling_rights(self, direction: CastlingDirection) -> None:
        self.castling_rights[direction] = False

    def revoke_all_castling_rights(self, colour: Colour) -> None:
        for direction in castling_directions(colour):
            self.revoke_castling_rights(direction)
