"""
Forsyth-Edwards Notation (FEN) of a full game position
---

Six space-separated fields:

    rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1
    |                                           | |    | | |
    placement (see Board.from_fen)              | |    | | full move number (starts at 1, +1 after Black moves)
                                 side to move --+ |    | +-- half-move clock (plies since last pawn move / capture)
               castling rights (KQkq order, or -) +    +-- en passant target square (or -)
"""

from dataclasses import dataclass
from typing import Optional, Self

from chess_engine.core.exceptions import InvalidFENError, InvalidPositionError
from chess_engine.rules.board import EMPTY_RUN_DIGITS, Board
from chess_engine.rules.castling import (
    CASTLING_ORDER,
    CastlingDirection,
    castling_from_fen,
    castling_to_fen,
)
from chess_engine.rules.pieces import FEN_TO_PIECE, Colour
from chess_engine.rules.position import BOARD_DIMENSIONS, Position

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
NUM_FEN_FIELDS = 6

COLOUR_CODES: dict[str, Colour] = {"w": Colour.WHITE, "b": Colour.BLACK}
CASTLING_LETTERS = "".join(direction.value for direction in CASTLING_ORDER)


# --- FIELD VALIDATION ---
def is_valid_fen(fen: str) -> bool:
    fields = fen.split(" ")
    if len(fields) != NUM_FEN_FIELDS:
        return False

    placement, colour, castling, en_passant, half_move_clock, full_move_number = fields
    return all(
        [
            is_valid_placement(placement),
            colour in COLOUR_CODES,
            is_valid_castling_rights(castling),
            is_valid_en_passant(en_passant),
            is_valid_move_counter(half_move_clock),
            is_valid_move_counter(full_move_number),
        ]
    )


def is_valid_placement(placement: str) -> bool:
    """8 ranks, each one covering exactly 8 files with piece letters and runs of empty squares"""
    num_files, num_ranks = BOARD_DIMENSIONS
    ranks = placement.split("/")
    if len(ranks) != num_ranks:
        return False
    return all(_rank_width(rank) == num_files for rank in ranks)


def _rank_width(rank: str) -> Optional[int]:
    """Number of files a rank covers. None if it contains anything but piece letters and the digits 1-8."""
    width = 0
    for character in rank:
        if character in EMPTY_RUN_DIGITS:
            width += int(character)
        elif character.lower() in FEN_TO_PIECE:
            width += 1
        else:
            return None
    return width


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or a non-empty selection of 'KQkq', in that order, every letter at most once"""
    if castling == "-":
        return True
    in_canonical_order = "".join(letter for letter in CASTLING_LETTERS if letter in castling)
    return bool(castling) and castling == in_canonical_order


def is_valid_en_passant(en_passant: str) -> bool:
    if en_passant == "-":
        return True
    try:
        Position.from_algebraic(en_passant)
    except InvalidPositionError:
        return False
    # no surrounding whitespace or capitals inside a FEN field
    return en_passant == en_passant.strip().lower()


def is_valid_move_counter(counter: str) -> bool:
    """Plain ASCII digits only ('²' or '٣' count as digits for str.isdigit, but not for int())"""
    return counter.isascii() and counter.isdecimal()


@dataclass
class FENState:
    """Everything a FEN string describes, parsed. `position` keeps the placement field as is."""

    position: str
    colour_to_move: Colour
    castling_rights: dict[CastlingDirection, bool]
    en_passant_square: Optional[Position]
    half_move_clock: int
    num_turns: int

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        if not is_valid_fen(fen):
            raise InvalidFENError(f"Cannot interpret supplied string as FEN: {fen!r}")

        placement, colour, castling, en_passant, half_move_clock, full_move_number = fen.split(" ")
        return cls(
            position=placement,
            colour_to_move=COLOUR_CODES[colour],
            castling_rights=castling_from_fen(castling),
            en_passant_square=None if en_passant == "-" else Position.from_algebraic(en_passant),
            half_move_clock=int(half_move_clock),
            num_turns=int(full_move_number),
        )

    @classmethod
    def from_board(
        cls,
        board: Board,
        colour_to_move: Colour,
        half_move_clock: int,
        num_turns: int,
    ) -> Self:
        return cls(
            board.to_fen(),
            colour_to_move,
            dict(board.castling_rights),
            board.en_passant_target,
            half_move_clock,
            num_turns,
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    def to_fen(self) -> str:
        colour_code = next(code for code, colour in COLOUR_CODES.items() if colour == self.colour_to_move)
        en_passant = self.en_passant_square.to_algebraic() if self.en_passant_square else "-"
        fields = [
            self.position,
            colour_code,
            castling_to_fen(self.castling_rights),
            en_passant,
            str(self.half_move_clock),
            str(self.num_turns),
        ]
        return " ".join(fields)

    def to_board(self) -> Board:
        """Pieces from the placement field, castling rights and en passant target from their own fields"""
        board = Board.from_fen(self.position)
        board.castling_rights = dict(self.castling_rights)
        board.en_passant_target = self.en_passant_square
        return board
