"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define the pseudo-legal move sets for each piece type.
A pseudo-legal move respects how a piece moves and which squares are occupied, but might still leave your own king
attacked.

Legality is checked later (src: chess_engine/rules/legality.py)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from chess_engine.rules.board import Board
from chess_engine.rules.castling import CASTLING_RULES, CastlingDirection
from chess_engine.rules.pieces import Colour, PieceType
from chess_engine.rules.position import BOARD_DIMENSIONS, Position

Vector = tuple[int, int]  # (d_row, d_col)

KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = [
    (0, 1),
    (0, -1),
    (1, 0),
    (-1, 0),
    (1, 1),
    (1, -1),
    (-1, 1),
    (-1, -1),
]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]
STRAIGHTS: list[Vector] = [(1, 0), (-1, 0), (0, 1), (0, -1)]


@dataclass(frozen=True)
class Move:
    """basic definition of a move to be made"""

    from_square: Position
    to_square: Position
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False
    is_double_push: bool = False

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}"


# --- MOVEMENT RULES ---
def raycasting_move(
    square: Position, board: Board, directions: list[Vector]
) -> list[Move]:
    """
    Raycasting algorithm
    -----

    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board.
    """
    moves: list[Move] = []
    for target_square in raycasting_targets(square, board, directions):
        if _is_own_piece(square, target_square, board):
            continue
        moves.append(Move(from_square=square, to_square=target_square))
    return moves


def single_step_move(square: Position, board: Board, deltas: list[Vector]) -> list[Move]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump to a fixed set of squares"""
    moves: list[Move] = []
    for target_square in single_step_targets(square, deltas):
        if _is_own_piece(square, target_square, board):
            continue
        moves.append(Move(from_square=square, to_square=target_square))
    return moves


def candidate_pawn_moves(square: Position, board: Board) -> list[Move]:
    """
    A pawn:
    - moves by a single square forward (onto an empty square).
    - It can move by two in their first move (so when on their starting rank) if both squares are empty
    - takes diagonally: onto an opponent's piece, or onto the en passant target square
    """
    pawn = board.piece(square)
    assert pawn is not None
    direction = pawn.colour.pawn_direction

    moves: list[Move] = []
    one_step = square.try_offset(direction, 0)
    if one_step is not None and board.is_empty(one_step):
        moves.append(Move(from_square=square, to_square=one_step))

        starting_row = pawn.colour.home_row + direction
        two_steps = square.try_offset(2 * direction, 0)
        if (
            square.row == starting_row
            and two_steps is not None
            and board.is_empty(two_steps)
        ):
            moves.append(
                Move(from_square=square, to_square=two_steps, is_double_push=True)
            )

    for target_square in pawn_attack_targets(square, pawn.colour):
        target_piece = board.piece(target_square)
        if target_piece is not None and target_piece.colour != pawn.colour:
            moves.append(Move(from_square=square, to_square=target_square))
        elif (
            target_piece is None
            and target_square == board.en_passant_target
            and target_square.row == en_passant_row(pawn.colour)
        ):
            moves.append(
                Move(from_square=square, to_square=target_square, is_en_passant=True)
            )
    return moves


def candidate_knight_moves(square: Position, board: Board) -> list[Move]:
    """Knights always move such that |delta_rank| + |delta_file| = 3"""
    return single_step_move(square, board, KNIGHT_DELTAS)


def candidate_bishop_moves(square: Position, board: Board) -> list[Move]:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    return raycasting_move(square, board, DIAGONALS)


def candidate_rook_moves(square: Position, board: Board) -> list[Move]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(square, board, STRAIGHTS)


def candidate_queen_moves(square: Position, board: Board) -> list[Move]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    diagonal_moves = candidate_bishop_moves(square, board)
    horizontal_and_vertical_moves = candidate_rook_moves(square, board)
    return diagonal_moves + horizontal_and_vertical_moves


def candidate_king_moves(square: Position, board: Board) -> list[Move]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move of two squares towards the rook.
    """
    king = board.piece(square)
    assert king is not None
    return single_step_move(square, board, KING_DELTAS) + candidate_castling_moves(
        king.colour, board
    )


# -- STRATEGY PATTERN: MOVEMENT RULES ---
CandidateMovesFn = Callable[[Position, Board], list[Move]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def pseudo_legal_moves(square: Position, board: Board) -> list[Move]:
    """Candidate moves of whatever piece stands on the square (none for an empty square)"""
    piece = board.piece(square)
    if piece is None:
        return []
    movement_rule: CandidateMovesFn = MOVEMENT_RULES[piece.type]
    return movement_rule(square, board)


def generate_candidate_moves(board: Board, colour: Colour) -> list[Move]:
    """Candidate moves of all pieces of one colour"""
    candidate_moves: list[Move] = []
    for starting_square in board.locate_colour(colour):
        candidate_moves.extend(pseudo_legal_moves(starting_square, board))
    return candidate_moves


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_targets(
    square: Position, board: Board, directions: list[Vector]
) -> list[Position]:
    """
    Every square in the line of sight along the given directions.
    The first occupied square along a ray is included, whoever stands on it: it is either a capture or a defended piece.
    """
    targets: list[Position] = []
    for d_row, d_col in directions:
        target_square = square.try_offset(d_row, d_col)
        while target_square is not None:
            targets.append(target_square)
            if not board.is_empty(target_square):
                break
            target_square = target_square.try_offset(d_row, d_col)
    return targets


def single_step_targets(square: Position, deltas: list[Vector]) -> list[Position]:
    """The squares reachable with a single jump, as long as they are on the board"""
    targets: list[Position] = []
    for d_row, d_col in deltas:
        target_square = square.try_offset(d_row, d_col)
        if target_square is not None:
            targets.append(target_square)
    return targets


def pawn_attack_targets(square: Position, colour: Colour) -> list[Position]:
    """Pawns take diagonally forward. They attack those squares even if nothing stands there (yet)."""
    direction = colour.pawn_direction
    return single_step_targets(square, [(direction, 1), (direction, -1)])


def pawn_attacks(square: Position, board: Board) -> list[Position]:
    pawn = board.piece(square)
    assert pawn is not None
    return pawn_attack_targets(square, pawn.colour)


def knight_attacks(square: Position, board: Board) -> list[Position]:
    return single_step_targets(square, KNIGHT_DELTAS)


def bishop_attacks(square: Position, board: Board) -> list[Position]:
    return raycasting_targets(square, board, DIAGONALS)


def rook_attacks(square: Position, board: Board) -> list[Position]:
    return raycasting_targets(square, board, STRAIGHTS)


def queen_attacks(square: Position, board: Board) -> list[Position]:
    return raycasting_targets(square, board, DIAGONALS + STRAIGHTS)


def king_attacks(square: Position, board: Board) -> list[Position]:
    """NOTE: castling never attacks anything, so it is not part of this."""
    return single_step_targets(square, KING_DELTAS)


# --- STRATEGY PATTERN: ATTACKING RULES ---
AttackedSquaresFn = Callable[[Position, Board], list[Position]]
ATTACK_RULES: dict[PieceType, AttackedSquaresFn] = {
    PieceType.PAWN: pawn_attacks,
    PieceType.KNIGHT: knight_attacks,
    PieceType.BISHOP: bishop_attacks,
    PieceType.ROOK: rook_attacks,
    PieceType.QUEEN: queen_attacks,
    PieceType.KING: king_attacks,
}


def attacked_squares(board: Board, by_colour: Colour) -> set[Position]:
    """
    Attack coverage: every square a piece of `by_colour` could capture on (if an opponent's piece stood there).

    Ignores castling and en passant on purpose. Neither attacks a square, and generating castling moves itself
    needs this function, which would otherwise recurse.
    """
    coverage: set[Position] = set()
    for square, piece in board.pieces():
        if piece.colour != by_colour:
            continue
        coverage.update(ATTACK_RULES[piece.type](square, board))
    return coverage


def is_square_attacked(square: Position, by_colour: Colour, board: Board) -> bool:
    return square in attacked_squares(board, by_colour)


def is_any_under_attack(squares: list[Position], by_colour: Colour, board: Board) -> bool:
    coverage = attacked_squares(board, by_colour)
    return any(square in coverage for square in squares)


# -- CASTLING MOVES ---
def candidate_castling_moves(colour: Colour, board: Board) -> list[Move]:
    """
    Castling directions that are available for `colour` on this board
    ---

    **you are allowed to castle if**

    * Castling rights are not yet revoked (neither king nor that rook has moved, and the rook was not captured).
    * King and rook actually stand on their starting squares.
    * There is no piece in between the king and the rook.
    * The king does not start on, pass through or land on a square that is under attack
      (so you cannot castle out of, through or into check).
    """
    moves: list[Move] = []
    for direction in board.castling_options(colour):
        rule = CASTLING_RULES[direction]
        king = board.piece(rule.king_from)
        rook = board.piece(rule.rook_from)
        if king is None or king.type != PieceType.KING or king.colour != colour:
            continue
        if rook is None or rook.type != PieceType.ROOK or rook.colour != colour:
            continue

        if board.is_any_occupied(rule.squares_between()):
            continue

        if is_any_under_attack(rule.king_path(), colour.opponent, board):
            continue

        moves.append(
            Move(rule.king_from, rule.king_to, castling_direction=direction)
        )
    return moves


# -- EN PASSANT --
def en_passant_row(capturing_colour: Colour) -> int:
    """Row of the square the opponent's pawn skipped over. Rank 6 when White captures, rank 3 when Black captures."""
    opponent = capturing_colour.opponent
    return opponent.home_row + 2 * opponent.pawn_direction


def en_passant_target_after(move: Move, colour: Colour) -> Optional[Position]:
    """A double pawn push leaves the skipped square as the en passant target for exactly one ply"""
    if not move.is_double_push:
        return None
    return move.from_square.offset(colour.pawn_direction, 0)


def en_passant_capture_square(move: Move) -> Position:
    """The pawn taken en passant stands beside the capturing pawn: same row as where it came from, file it lands on"""
    return Position(move.from_square.row, move.to_square.col)


# -- PAWN PROMOTION --
def is_promotion_square(square: Position, colour: Colour) -> bool:
    """The last rank, as seen from the pawn's colour"""
    last_row = BOARD_DIMENSIONS[1] - 1 if colour == Colour.WHITE else 0
    return square.row == last_row


# -- HELPERS --
def _is_own_piece(square: Position, target_square: Position, board: Board) -> bool:
    moving_piece = board.piece(square)
    target_piece = board.piece(target_square)
    return (
        moving_piece is not None
        and target_piece is not None
        and target_piece.colour == moving_piece.colour
    )
