"""
The Game class is the entrypoint into the domain layer for the service layer (and anything else that wants to play).
It is responsible for orchestrating all the business logic required to play a turn:
validate the request, update the board, do the bookkeeping (castling rights, en passant, move counters, history)
and work out the new state of the game.

State machine
---
IN_PROGRESS <--> CHECK
IN_PROGRESS / CHECK --> WAITING_ON_PROMOTION_CHOICE (pawn reached the last rank) --> IN_PROGRESS / CHECK / GAME_OVER
any non-terminal state --> GAME_OVER (checkmate, stalemate, automatic draws, draw by agreement)

GAME_OVER is terminal.

Every check happens before anything gets mutated, so a failed call leaves the Game exactly as it was.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from chess_engine.core.exceptions import (
    DrawNotClaimableError,
    GameAlreadyOverError,
    InvalidMoveError,
    InvalidPositionError,
    InvalidPromotionChoiceError,
    NoPromotionPendingError,
    PromotionPendingError,
    WrongTurnError,
)
from chess_engine.rules.board import Board
from chess_engine.rules.castling import CASTLING_RULES
from chess_engine.rules.draws import (
    Fingerprint,
    can_claim_fifty_move_rule,
    can_claim_threefold_repetition,
    is_dead_position,
    is_fivefold_repetition,
    is_seventy_five_move_rule,
)
from chess_engine.rules.fen import STARTING_FEN, FENState
from chess_engine.rules.game_state import GameOverReason, GameState
from chess_engine.rules.legality import apply_move, classify, legal_moves
from chess_engine.rules.moves import (
    Move,
    en_passant_target_after,
    is_promotion_square,
)
from chess_engine.rules.pieces import (
    PIECE_TO_FEN,
    PROMOTION_OPTIONS,
    Colour,
    Piece,
    PieceType,
)
from chess_engine.rules.position import Position

logger = logging.getLogger(__name__)

SquareInput = Position | str


@dataclass
class MoveRecord:
    """One entry in the move history of a game."""

    fen_before: str
    from_square: Position
    to_square: Position
    piece_moved: Piece
    piece_captured: Optional[Piece] = None
    promoted_to: Optional[PieceType] = None

    def to_uci(self) -> str:
        promotion = PIECE_TO_FEN[self.promoted_to] if self.promoted_to else ""
        return f"{self.from_square}{self.to_square}{promotion}"


@dataclass
class Game:
    board: Board = field(default_factory=Board.initial)
    active_colour: Colour = Colour.WHITE
    state: GameState = GameState.IN_PROGRESS
    game_over_reason: Optional[GameOverReason] = None
    half_move_clock: int = 0
    full_move_number: int = 1
    # fingerprints of every position reached so far, the current one last
    history: list[Fingerprint] = field(default_factory=list)
    moves: list[MoveRecord] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self._fingerprint())

    # --- CONSTRUCTION ---
    @classmethod
    def new_game(cls) -> Self:
        """Standard starting position, White to move."""
        return cls()

    @classmethod
    def from_fen(cls, fen: str = STARTING_FEN) -> Self:
        """Start from any position. The state (check, mate, ...) is worked out straight away."""
        fen_state = FENState.from_fen(fen)
        game = cls(
            board=fen_state.to_board(),
            active_colour=fen_state.colour_to_move,
            half_move_clock=fen_state.half_move_clock,
            full_move_number=fen_state.num_turns,
        )
        game._update_game_state()
        return game

    # --- QUERIES ---
    def get_board(self) -> tuple[Optional[Piece], ...]:
        """All 64 slots, indexed by Position.index (a1 = 0, h8 = 63)"""
        return self.board.snapshot()

    def get_active_colour(self) -> Colour:
        return self.active_colour

    def get_game_state(self) -> GameState:
        return self.state

    def get_game_over_reason(self) -> Optional[GameOverReason]:
        """None unless the game is over"""
        return self.game_over_reason

    def get_history(self) -> list[MoveRecord]:
        return list(self.moves)

    @property
    def winner(self) -> Optional[Colour]:
        """
        Only checkmate has a winner.
        Given we know it is checkmate, the side that is to move just got mated and the opponent must be the winner
        """
        if self.game_over_reason != GameOverReason.CHECKMATE:
            return None
        return self.active_colour.opponent

    def fen(self) -> str:
        return FENState.from_board(
            self.board, self.active_colour, self.half_move_clock, self.full_move_number
        ).to_fen()

    def get_possible_moves(self, square: SquareInput) -> list[Position]:
        """
        Legal destinations of the piece on `square`.
        ----

        Empty if there is no piece, it is the opponent's piece, or the game is over.
        Nothing can be asked while the game waits for a promotion choice.
        """
        return [move.to_square for move in self._legal_moves_from(square)]

    def get_possible_capture_moves(self, square: SquareInput) -> list[Position]:
        """The legal destinations that capture a piece (en passant included)"""
        return [
            move.to_square
            for move in self._legal_moves_from(square)
            if self._is_capture(move)
        ]

    def get_possible_non_capture_moves(self, square: SquareInput) -> list[Position]:
        return [
            move.to_square
            for move in self._legal_moves_from(square)
            if not self._is_capture(move)
        ]

    def can_enact_50_move_rule(self) -> bool:
        """50 moves by each side without pawn move or capture. A player may claim a draw, the game does not end by itself."""
        return can_claim_fifty_move_rule(self.half_move_clock)

    def can_enact_threefold_repetition_rule(self) -> bool:
        """The current position occurred 3 times. A player may claim a draw, the game does not end by itself."""
        return can_claim_threefold_repetition(self.history)

    # --- MUTATIONS ---
    def make_move(self, from_square: str, to_square: str) -> GameState:
        """
        Attempt to make a move given in algebraic notation, e.g. make_move("e2", "e4")
        -----

        Same as `make_move_pos()` once the squares have been parsed.
        """
        from_pos = Position.from_algebraic(from_square)
        to_pos = Position.from_algebraic(to_square)
        return self.make_move_pos(from_pos, to_pos)

    def make_move_pos(self, from_square: Position, to_square: Position) -> GameState:
        """
        Attempt to make a move
        -----

        1. make sure the game still accepts moves (not over, no promotion choice outstanding)
        2. make sure you are moving your own piece
        3. make sure the move is legal
        4. update the board (NOTE: castling moves the rook too, en passant removes the pawn beside you)
        5. bookkeeping: castling rights, en passant target, half-move clock, move history
        6. promotion? --> wait for the choice. Otherwise hand the turn over and update the game state.
        """
        from_square = self._to_position(from_square)
        to_square = self._to_position(to_square)

        self._assert_game_not_over()
        self._assert_no_promotion_pending()
        self._assert_your_turn(from_square)
        move = self._find_legal_move(from_square, to_square)

        moving_piece = self.board.piece(from_square)
        assert moving_piece is not None
        record = MoveRecord(
            fen_before=self.fen(),
            from_square=from_square,
            to_square=to_square,
            piece_moved=moving_piece,
        )

        captured_piece = apply_move(self.board, move)
        record.piece_captured = captured_piece
        self.moves.append(record)

        self._revoke_castling_rights_if_needed(move, moving_piece, captured_piece)
        self.board.en_passant_target = en_passant_target_after(move, self.active_colour)
        self._update_half_move_clock(moving_piece, captured_piece)
        logger.debug(
            "%s played %s (captured: %s)",
            self.active_colour.name.lower(),
            move.to_uci(),
            captured_piece,
        )

        if moving_piece.type == PieceType.PAWN and is_promotion_square(
            to_square, moving_piece.colour
        ):
            # NOTE: the turn does not pass yet. The same player still has to pick a piece.
            self._change_state(GameState.WAITING_ON_PROMOTION_CHOICE)
            return self.state

        self._end_turn()
        return self.state

    def set_promotion(self, piece_type: PieceType | str) -> GameState:
        """Replace the pawn that just reached the last rank by a piece of the given type, then hand over the turn."""
        self._assert_game_not_over()
        if self.state != GameState.WAITING_ON_PROMOTION_CHOICE:
            raise NoPromotionPendingError(
                f"The game is not waiting for a promotion. state: {self.state.name}"
            )

        if isinstance(piece_type, str):
            try:
                piece_type = PieceType.from_str(piece_type)
            except ValueError as error:
                raise InvalidPromotionChoiceError(str(error)) from error

        if piece_type not in PROMOTION_OPTIONS:
            raise InvalidPromotionChoiceError(
                f"A pawn cannot promote to {piece_type!r}, choose one of: "
                + ", ".join(option.name.lower() for option in PROMOTION_OPTIONS)
            )

        last_move = self.moves[-1]
        pawn = self.board.piece(last_move.to_square)
        assert pawn is not None
        self.board.place_piece(pawn.promote_to(piece_type), last_move.to_square)
        last_move.promoted_to = piece_type
        logger.debug(
            "%s promoted on %s to %s",
            self.active_colour.name.lower(),
            last_move.to_square,
            piece_type.name.lower(),
        )

        self._end_turn()
        return self.state

    def submit_draw(self) -> GameState:
        """Both players agreed to a draw. Allowed at any moment before the game is over."""
        self._assert_game_not_over()
        self._end_game(GameOverReason.MUTUAL_DRAW)
        return self.state

    def claim_draw(self) -> GameState:
        """End the game in a draw, but only when the 50-move rule or threefold repetition can be enacted."""
        self._assert_game_not_over()
        self._assert_no_promotion_pending()
        if not (self.can_enact_50_move_rule() or self.can_enact_threefold_repetition_rule()):
            raise DrawNotClaimableError(
                "Neither the 50-move rule nor threefold repetition applies."
            )
        return self.submit_draw()

    # -- PRIVATE HELPERS ---
    def _to_position(self, square: SquareInput) -> Position:
        if isinstance(square, Position):
            return square
        if isinstance(square, str):
            return Position.from_algebraic(square)
        raise InvalidPositionError(f"Cannot interpret {square!r} as a square")

    def _fingerprint(self) -> Fingerprint:
        return Fingerprint.from_board(self.board, self.active_colour)

    def _legal_moves_from(self, square: SquareInput) -> list[Move]:
        square = self._to_position(square)
        if self.state == GameState.GAME_OVER:
            return []
        self._assert_no_promotion_pending()

        piece = self.board.piece(square)
        if piece is None or piece.colour != self.active_colour:
            return []
        return legal_moves(self.board, square)

    def _is_capture(self, move: Move) -> bool:
        return move.is_en_passant or self.board.piece(move.to_square) is not None

    def _assert_game_not_over(self) -> None:
        if self.state == GameState.GAME_OVER:
            raise GameAlreadyOverError(
                f"The game is over. reason: {self.game_over_reason.name if self.game_over_reason else None}"
            )

    def _assert_no_promotion_pending(self) -> None:
        if self.state == GameState.WAITING_ON_PROMOTION_CHOICE:
            raise PromotionPendingError(
                "Choose the piece type to promote to first (set_promotion)."
            )

    def _assert_your_turn(self, from_square: Position) -> None:
        """You can only move your own pieces, and only when it is your turn."""
        piece = self.board.piece(from_square)
        if piece is None:
            raise WrongTurnError(f"There is no piece on {from_square} to move.")
        if piece.colour != self.active_colour:
            raise WrongTurnError(
                f"It is not {piece.colour.name.lower()}'s turn. Waiting for {self.active_colour.name.lower()} to move."
            )

    def _find_legal_move(self, from_square: Position, to_square: Position) -> Move:
        """Match the requested squares against the generated legal moves (that is where castling/en passant flags come from)"""
        for move in legal_moves(self.board, from_square):
            if move.to_square == to_square:
                return move
        raise InvalidMoveError(
            f"Move not allowed: {from_square}{to_square}. The piece cannot move this way, or it would leave your king in check."
        )

    def _revoke_castling_rights_if_needed(
        self, move: Move, moving_piece: Piece, captured_piece: Optional[Piece]
    ) -> None:
        """
        Checks which rights should get revoked
        ----

        1. If you are moving your king (castling included) --> revoke both
        2. If you are moving a rook away from its starting square --> revoke the right in that direction
        3. If you are taking your opponent's rook on its starting square --> revoke the opponent's right in that direction

        Rights never come back, even when a rook later returns to the corner.
        """
        colour = moving_piece.colour

        if moving_piece.type == PieceType.KING:
            self.board.revoke_all_castling_rights(colour)

        if moving_piece.type == PieceType.ROOK:
            for direction in self.board.castling_options(colour):
                if move.from_square == CASTLING_RULES[direction].rook_from:
                    self.board.revoke_castling_rights(direction)

        if captured_piece is not None and captured_piece.type == PieceType.ROOK:
            for direction in self.board.castling_options(colour.opponent):
                if move.to_square == CASTLING_RULES[direction].rook_from:
                    self.board.revoke_castling_rights(direction)

    def _update_half_move_clock(
        self, moving_piece: Piece, captured_piece: Optional[Piece]
    ) -> None:
        """Reset on any pawn move or capture, otherwise one more half-move without progress"""
        if moving_piece.type == PieceType.PAWN or captured_piece is not None:
            self.half_move_clock = 0
        else:
            self.half_move_clock += 1

    def _end_turn(self) -> None:
        """Hand the turn to the opponent, record the new position and work out the new state."""
        if self.active_colour == Colour.BLACK:
            self.full_move_number += 1
        self.active_colour = self.active_colour.opponent
        self.history.append(self._fingerprint())
        self._update_game_state()

    def _update_game_state(self) -> None:
        """
        Performs checks to see if game has ended and changes state accordingly.
        ---

        Fixed priority, first match wins:
        1. checkmate / stalemate (the side to move has no legal move)
        2. dead position
        3. fivefold repetition
        4. 75-move rule
        Otherwise: check or in progress.
        """
        state, reason = classify(self.board, self.active_colour)
        if reason is None:
            reason = self._automatic_draw_reason()

        if reason is not None:
            self._end_game(reason)
        else:
            self._change_state(state)

    def _automatic_draw_reason(self) -> Optional[GameOverReason]:
        if is_dead_position(self.board):
            return GameOverReason.DEAD_POSITION
        if is_fivefold_repetition(self.history):
            return GameOverReason.FIVEFOLD_REPETITION_RULE
        if is_seventy_five_move_rule(self.half_move_clock):
            return GameOverReason.SEVENTY_FIVE_MOVE_RULE
        return None

    def _change_state(self, new_state: GameState) -> None:
        if new_state != self.state:
            logger.debug("game state %s -> %s", self.state.name, new_state.name)
        self.state = new_state

    def _end_game(self, reason: GameOverReason) -> None:
        self._change_state(GameState.GAME_OVER)
        self.game_over_reason = reason
        logger.info("game over: %s", reason.name.lower())
