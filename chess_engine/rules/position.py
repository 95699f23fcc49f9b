"""
A square on the board

(placed in its own module as multiple other modules need to import it)

Three equivalent ways to refer to a square:
* (row, col): both 0-7. Row 0 is the 1st rank (White's side), col 0 is the a-file.
* index: row * 8 + col, so a1 = 0, h1 = 7, a8 = 56, h8 = 63. This is the slot in the Board's flat list.
* algebraic notation: 'a1' - 'h8'
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from chess_engine.core.exceptions import InvalidPositionError

# Chess board is always 8x8 (files, ranks).
BOARD_DIMENSIONS = (8, 8)
NUM_SQUARES = BOARD_DIMENSIONS[0] * BOARD_DIMENSIONS[1]
FILE_NAMES = "abcdefgh"
RANK_NAMES = "12345678"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    def __post_init__(self) -> None:
        if not (_is_coordinate(self.row) and _is_coordinate(self.col)):
            raise InvalidPositionError(
                f"Row and col must be integers, got row: {self.row!r}, col: {self.col!r}"
            )
        if not _within_bounds(self.row, self.col):
            raise InvalidPositionError(
                f"Invalid row: {self.row} or col: {self.col}; both should be between 0-7"
            )

    @classmethod
    def from_index(cls, idx: int) -> Position:
        """Index into the flat board: a1 = 0 ... h8 = 63"""
        if not _is_coordinate(idx) or not 0 <= idx < NUM_SQUARES:
            raise InvalidPositionError(f"Invalid index: {idx}; should be between 0-63")
        return cls(idx // BOARD_DIMENSIONS[0], idx % BOARD_DIMENSIONS[0])

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a1' - 'h8' get converted to (0,0) - (7,7)

        Surrounding whitespace and upper case file letters are tolerated ('E4 ' is e4).
        """
        if not isinstance(sq, str):
            raise InvalidPositionError(f"Cannot interpret {sq!r} as a square name")

        cleaned = sq.strip().lower()
        if len(cleaned) != 2:
            raise InvalidPositionError(f"Square name {sq!r} should be exactly 2 characters")

        file_char, rank_char = cleaned
        if file_char not in FILE_NAMES:
            raise InvalidPositionError(
                f"File {file_char!r} of {sq!r} invalid, should be some character between a-h"
            )
        if rank_char not in RANK_NAMES:
            raise InvalidPositionError(
                f"Rank {rank_char!r} of {sq!r} invalid, should be some number between 1-8"
            )
        return cls(RANK_NAMES.index(rank_char), FILE_NAMES.index(file_char))

    @property
    def index(self) -> int:
        return self.row * BOARD_DIMENSIONS[0] + self.col

    def to_algebraic(self) -> str:
        return f"{FILE_NAMES[self.col]}{RANK_NAMES[self.row]}"

    def offset(self, d_row: int, d_col: int) -> Position:
        """New position shifted by the given amount of rows/cols. Raises if that falls off the board."""
        return Position(self.row + d_row, self.col + d_col)

    def try_offset(self, d_row: int, d_col: int) -> Optional[Position]:
        """Like `offset()`, but returns None when falling off the board (the usual case when walking along a ray)"""
        row, col = self.row + d_row, self.col + d_col
        if not _within_bounds(row, col):
            return None
        return Position(row, col)

    def is_light_square(self) -> bool:
        # a1 is a dark square
        return (self.row + self.col) % 2 == 1

    def __str__(self) -> str:
        return self.to_algebraic()


def _is_coordinate(value: object) -> bool:
    # bool is a subclass of int, but True/False are no coordinates
    return isinstance(value, int) and not isinstance(value, bool)


def _within_bounds(row: int, col: int) -> bool:
    return (0 <= row < BOARD_DIMENSIONS[1]) and (0 <= col < BOARD_DIMENSIONS[0])
