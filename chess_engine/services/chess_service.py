"""Orchestration of communication from a front-end's requests to the business logic (and the reverse direction)."""

import logging
from uuid import UUID, uuid4

from chess_engine.api.models import (
    CreateGameRequest,
    DeleteGameRequest,
    DrawRequest,
    GameResponse,
    GetGameRequest,
    LegalMovesRequest,
    LegalMovesResponse,
    MoveRequest,
    PieceModel,
    PromotionRequest,
)
from chess_engine.core import shared_types
from chess_engine.core.exceptions import GameNotFoundError
from chess_engine.rules.game import Game
from chess_engine.rules.game_state import GameState
from chess_engine.rules.pieces import Piece, PieceType

logger = logging.getLogger(__name__)


class ChessService:
    """
    Orchestration of layers for chess games.

    Keeps every game as its own Game instance (in memory, nothing gets stored elsewhere).
    Games share no state with each other. A single game must not be used by two requests at the same time:
    callers serialize the requests per game.
    """

    def __init__(self) -> None:
        self.games: dict[UUID, Game] = {}

    # -- Requests logic ---
    def create_new_game(self, request: CreateGameRequest) -> GameResponse:
        """Start a game from the standard starting position (or the given FEN)."""
        game = (
            Game.from_fen(request.starting_fen)
            if request.starting_fen
            else Game.new_game()
        )
        game_id = uuid4()
        self.games[game_id] = game
        logger.debug("created game %s", game_id)
        return self._create_game_response(game_id, game)

    def get_game_state(self, request: GetGameRequest) -> GameResponse:
        """
        Retrieve current game state.
        ----
        Used in "polling" loop by frontend to check when it is the player's turn for instance.
        """
        game = self._fetch_game(request.game_id)
        return self._create_game_response(request.game_id, game)

    def legal_moves(self, request: LegalMovesRequest) -> LegalMovesResponse:
        """Legal destinations for the piece on the requested square."""
        game = self._fetch_game(request.game_id)
        destinations = game.get_possible_moves(request.square)
        return LegalMovesResponse(
            game_id=request.game_id,
            square=request.square,
            legal_moves=[square.to_algebraic() for square in destinations],
        )

    def make_move(self, request: MoveRequest) -> GameResponse:
        """
        Make a move attempt.

        If the move promotes a pawn and the request already says into what, the promotion is completed right away.
        `promote_to` is ignored for any move that does not promote: a front-end may send its preferred piece with every
        pawn move.
        """
        game = self._fetch_game(request.game_id)
        state = game.make_move(request.from_square, request.to_square)
        if (
            state == GameState.WAITING_ON_PROMOTION_CHOICE
            and request.promote_to is not None
        ):
            game.set_promotion(PieceType[request.promote_to.name])
        return self._create_game_response(request.game_id, game)

    def set_promotion(self, request: PromotionRequest) -> GameResponse:
        game = self._fetch_game(request.game_id)
        game.set_promotion(PieceType[request.promote_to.name])
        return self._create_game_response(request.game_id, game)

    def draw(self, request: DrawRequest) -> GameResponse:
        """Either a draw by agreement, or a claimed draw (50-move rule / threefold repetition)."""
        game = self._fetch_game(request.game_id)
        if request.claim:
            game.claim_draw()
        else:
            game.submit_draw()
        return self._create_game_response(request.game_id, game)

    def delete_game(self, request: DeleteGameRequest) -> None:
        """Forget about a game."""
        self._fetch_game(request.game_id)
        del self.games[request.game_id]

    # -- Internal helpers --
    def _create_game_response(self, game_id: UUID, game: Game) -> GameResponse:
        """Convert the Game into a GameResponse (for game with given ID.)"""
        reason = game.get_game_over_reason()
        winner = game.winner
        return GameResponse(
            game_id=game_id,
            fen=game.fen(),
            board=[self._to_piece_model(piece) for piece in game.get_board()],
            active_colour=shared_types.Colour[game.get_active_colour().name],
            status=shared_types.Status[game.get_game_state().name],
            game_over_reason=(
                shared_types.GameOverReason[reason.name] if reason else None
            ),
            winner=shared_types.Colour[winner.name] if winner else None,
            can_claim_draw=(
                game.can_enact_50_move_rule()
                or game.can_enact_threefold_repetition_rule()
            ),
            move_history=[record.to_uci() for record in game.get_history()],
        )

    def _to_piece_model(self, piece: Piece | None) -> PieceModel | None:
        if piece is None:
            return None
        return PieceModel(
            type=shared_types.PieceType[piece.type.name],
            colour=shared_types.Colour[piece.colour.name],
        )

    def _fetch_game(self, game_id: UUID) -> Game:
        """Attempt to find the game and raise error if it fails."""
        game = self.games.get(game_id)
        if game is None:
            raise GameNotFoundError(f"Game with {game_id=} not found.")
        return game
