"""
The Game class is the entrypoint into the domain layer for the service layer (and for the AI).
It is responsible for orchestrating all the business logic required to play a turn of the board game:
selecting squares, executing moves, detecting the end of the game and taking moves back.

Observers (AI scheduler, rating updates, UI) subscribe to `Game.events`.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Optional, Self

from src.chess.board import Board
from src.chess.castling import castling_squares
from src.chess.clock import GameTimer
from src.chess.history import (
    CapturedPieces,
    HistorySnapshot,
    empty_captures,
)
from src.chess.moves import (
    Move,
    en_passant_capture_square,
    is_castling_move,
    is_square_under_attack,
    promotion_row,
)
from src.chess.pieces import Piece
from src.chess.quality import WORST_MOVE_THRESHOLD, classify_move_quality
from src.chess import rules
from src.chess.square import Square
from src.core.exceptions import GameStateError, IllegalMoveError, NotYourTurnError
from src.core.shared_types import Color, MoveQuality, PieceType, SoundEvent, Winner


@dataclass(frozen=True)
class MoveResult:
    """What happened during a move. Handed to observers (sound, UI) and returned to the caller."""

    move: Move
    notation: str
    piece_type: PieceType
    captured: tuple[Piece, ...]
    quality: MoveQuality
    sound: SoundEvent
    is_check: bool
    winner: Optional[Winner]


@dataclass(frozen=True)
class SelectionResult:
    """State of the selection after a click on a square (and the move, if the click made one)."""

    selected: Optional[Square]
    legal_destinations: frozenset[str]
    move: Optional[MoveResult] = None
    promotion_pending: bool = False


# --- EVENTS ---
MoveCallback = Callable[[MoveResult], None]
GameOverCallback = Callable[[Winner], None]
TurnChangeCallback = Callable[[Color], None]
ResetCallback = Callable[[], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_turn_change: list[TurnChangeCallback] = field(default_factory=list)
    on_reset: list[ResetCallback] = field(default_factory=list)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    board: Board = field(default_factory=Board.starting_position)
    turn: Color = Color.WHITE
    selected_square: Optional[Square] = None
    legal_destinations: set[str] = field(default_factory=set)
    is_check: bool = False
    winner: Optional[Winner] = None
    last_move: Optional[Move] = None
    captured_pieces: CapturedPieces = field(default_factory=empty_captures)
    move_notation: list[str] = field(default_factory=list)
    history: list[HistorySnapshot] = field(default_factory=list)
    pending_promotion: Optional[Move] = None
    ranked: bool = True
    worst_move_threshold: int = WORST_MOVE_THRESHOLD
    timer: GameTimer = field(default_factory=GameTimer)
    events: GameEvents = field(default_factory=GameEvents)

    @classmethod
    def new_game(
        cls, ranked: bool = True, worst_move_threshold: int = WORST_MOVE_THRESHOLD
    ) -> Self:
        """Game in the standard starting position, white to move."""
        game = cls(ranked=ranked, worst_move_threshold=worst_move_threshold)
        game.reset()
        return game

    @classmethod
    def from_position(
        cls,
        placement_fen: str,
        turn: Color = Color.WHITE,
        last_move: Optional[Move] = None,
        ranked: bool = True,
    ) -> Self:
        """
        Start from an arbitrary position (placement part of a FEN string).

        Check and end of game are determined right away, so a position that is already mate is a finished game.
        """
        game = cls(board=Board.from_fen(placement_fen), turn=turn, last_move=last_move, ranked=ranked)
        game.is_check = rules.king_in_check(game.board, turn, last_move)
        game.winner = rules.terminal_winner(game.board, turn, last_move)
        game._seed_history()
        game.timer.start()
        return game

    # --- GAME LIFECYCLE ---
    def reset(self) -> None:
        """Back to the starting position. Anything that was pending (promotion, scheduled AI move) is dropped."""
        self.board = Board.starting_position()
        self.turn = Color.WHITE
        self.selected_square = None
        self.legal_destinations = set()
        self.is_check = False
        self.winner = None
        self.last_move = None
        self.captured_pieces = empty_captures()
        self.move_notation = []
        self.pending_promotion = None
        self._seed_history()
        self.timer.start()
        self._emit_reset()

    def set_ranked_mode(self, ranked: bool) -> None:
        self.ranked = ranked

    @property
    def is_over(self) -> bool:
        return self.winner is not None

    @property
    def white_score(self) -> int:
        """Material captured by white"""
        return sum(piece.points for piece in self.captured_pieces[Color.WHITE])

    @property
    def black_score(self) -> int:
        """Material captured by black"""
        return sum(piece.points for piece in self.captured_pieces[Color.BLACK])

    # --- RULE QUERIES ---
    def king_in_check(self, color: Color) -> bool:
        return rules.king_in_check(self.board, color, self.last_move)

    def has_any_legal_move(self, color: Color) -> bool:
        return rules.has_any_legal_move(self.board, color, self.last_move)

    def is_square_under_attack(self, row: int, col: int, defender_color: Color) -> bool:
        square = Square(row, col)
        square.assert_within_bounds()
        return is_square_under_attack(self.board, square, defender_color, self.last_move)

    def legal_moves(self, color: Optional[Color] = None) -> list[Move]:
        """Every legal move of `color` (defaults to the side to move)"""
        return rules.legal_moves(self.board, color or self.turn, self.last_move)

    def calculate_legal_destinations(self, row: int, col: int) -> set[str]:
        """
        Legal destinations ('row,col') of the piece on the square.

        A pure query: the highlighted squares of the current selection are left alone (see `_select`).
        """
        square = Square(row, col)
        square.assert_within_bounds()
        return rules.legal_destinations(self.board, square, self.last_move)

    # --- SELECTION (what a click on a square does) ---
    def select_or_move(self, row: int, col: int) -> SelectionResult:
        """
        Stateful entry point for the UI
        -----

        * game over, or a promotion choice is pending: ignored
        * nothing selected: select your own piece (clicks elsewhere are ignored)
        * clicked the selected square again: deselect
        * clicked another one of your own pieces: switch selection
        * clicked a highlighted destination: make the move (or wait for the promotion choice if a pawn reaches the last rank)
        * clicked anything else: deselect

        Misclicks never raise. Coordinates off the board do: the caller should never send those.
        """
        square = Square(row, col)
        square.assert_within_bounds()

        if self.is_over or self.pending_promotion is not None:
            return self._selection()

        clicked_piece = self.board.piece(square)
        clicked_own_piece = clicked_piece is not None and clicked_piece.color == self.turn

        if self.selected_square is None:
            if clicked_own_piece:
                self._select(square)
            return self._selection()

        if square == self.selected_square:
            self._clear_selection()
            return self._selection()

        if clicked_own_piece:
            self._select(square)
            return self._selection()

        if square.key() not in self.legal_destinations:
            self._clear_selection()
            return self._selection()

        origin = self.selected_square
        moving_piece = self.board.piece(origin)
        if moving_piece.type == PieceType.PAWN and square.row == promotion_row(moving_piece.color):
            self.pending_promotion = Move(origin, square)
            return self._selection(promotion_pending=True)

        result = self.perform_move(origin.row, origin.col, square.row, square.col)
        return self._selection(move=result)

    def promote_pawn(self, piece_type: PieceType) -> Optional[MoveResult]:
        """Finish the pawn move that waited for the choice of piece. Nothing happens if no promotion is pending."""
        if self.pending_promotion is None:
            return None
        move = self.pending_promotion
        self.pending_promotion = None
        return self.perform_move(
            move.from_square.row,
            move.from_square.col,
            move.to_square.row,
            move.to_square.col,
            piece_type,
        )

    def cancel_promotion(self) -> None:
        self.pending_promotion = None

    # --- MOVE EXECUTION ---
    def perform_move(
        self,
        from_row: int,
        from_col: int,
        to_row: int,
        to_col: int,
        promotion_type: Optional[PieceType] = None,
    ) -> MoveResult:
        """
        Apply a move that was ALREADY found legal (by the selection or by the AI)
        -----

        1. record the move in coordinate notation
        2. take the piece on the destination (if any)
        3. en passant: take the pawn that passed by
        4. castling: bring the rook next to the king
        5. relocate the piece, mark it as moved
        6. promote the pawn (if a piece type is given)
        7. pass the turn, update check / end of the game
        8. judge the move
        9. push a snapshot onto the history

        NOTE legality is not checked again. Only the contract of the caller is (board coordinates, whose turn it is).
        """
        from_square = Square(from_row, from_col)
        to_square = Square(to_row, to_col)
        self._assert_move_allowed(from_square, to_square)

        piece = self.board.piece(from_square)
        move = Move(from_square, to_square, promotion_type)
        notation = move.to_notation()
        self.move_notation.append(notation)

        captured: list[Piece] = []
        target = self.board.piece(to_square)
        captured_value = target.points if target else 0
        moved_value = piece.points
        if target is not None:
            captured.append(target)

        en_passant_square = en_passant_capture_square(self.board, from_square, to_square)
        if en_passant_square is not None:
            passed_pawn = self.board.remove_piece(en_passant_square)
            if passed_pawn is not None:
                captured.append(passed_pawn)

        if is_castling_move(piece, from_square, to_square):
            self._move_castling_rook(piece.color, from_square, to_square)

        self.captured_pieces[self.turn].extend(captured)
        self.last_move = Move(from_square, to_square)
        self.board.move_piece(from_square, to_square)
        piece.has_moved = True

        if promotion_type is not None:
            piece.promote_to(promotion_type)

        self._clear_selection()
        self.turn = self.turn.opponent
        self.is_check = rules.king_in_check(self.board, self.turn, self.last_move)
        self.winner = rules.terminal_winner(self.board, self.turn, self.last_move)

        quality = classify_move_quality(
            is_terminal=self.winner is not None,
            is_threatened=is_square_under_attack(
                self.board, to_square, piece.color, self.last_move
            ),
            moved_value=moved_value,
            captured_value=captured_value,
            gives_check=self.is_check,
            worst_threshold=self.worst_move_threshold,
        )

        self.history.append(
            HistorySnapshot.capture(
                board=self.board,
                captured_pieces=self.captured_pieces,
                turn=self.turn,
                is_check=self.is_check,
                last_move=self.last_move,
                move_notation=notation,
                move_quality=quality,
            )
        )

        result = MoveResult(
            move=move,
            notation=notation,
            piece_type=piece.type,
            captured=tuple(p.copy() for p in captured),
            quality=quality,
            sound=self._sound_for(bool(captured)),
            is_check=self.is_check,
            winner=self.winner,
        )

        self._emit_move(result)
        if self.winner is not None:
            self.timer.stop()
            self._emit_game_over(self.winner)
        self._emit_turn_change(self.turn)
        return result

    def undo_move(self) -> bool:
        """
        Take back the last move.

        Returns False (and changes nothing) if there is nothing to take back: the starting snapshot always stays.
        """
        if len(self.history) <= 1:
            return False

        self.history.pop()
        self.move_notation.pop()

        previous = self.history[-1]
        self.board = previous.restore_board()
        self.captured_pieces = previous.restore_captures()
        self.turn = previous.turn
        self.is_check = previous.is_check
        self.last_move = previous.last_move
        self.pending_promotion = None
        self._clear_selection()

        # an undone end of the game is no longer the end of the game
        if self.winner is not None:
            self.winner = None
            self.timer.resume()

        self._emit_turn_change(self.turn)
        return True

    # -- PRIVATE HELPERS ---
    def _seed_history(self) -> None:
        self.history = [
            HistorySnapshot.capture(
                board=self.board,
                captured_pieces=self.captured_pieces,
                turn=self.turn,
                is_check=self.is_check,
                last_move=self.last_move,
            )
        ]

    def _assert_move_allowed(self, from_square: Square, to_square: Square) -> None:
        """Contract of perform_move. Violations are bugs in the calling layer, so fail loudly."""
        from_square.assert_within_bounds()
        to_square.assert_within_bounds()

        if self.is_over:
            raise GameStateError(f"Game is over (winner: {self.winner}). No more moves accepted.")

        piece = self.board.piece(from_square)
        if piece is None:
            raise IllegalMoveError(f"There is no piece on {from_square.to_algebraic()}.")

        if piece.color != self.turn:
            raise NotYourTurnError(
                f"It is not {piece.color}'s turn. Waiting for {self.turn} to make a move first."
            )

    def _move_castling_rook(self, color: Color, king_from: Square, king_to: Square) -> None:
        """The rook ends up on the square the king passed over"""
        squares = castling_squares(color, king_from, king_to)
        self.board.move_piece(squares.rook_from, squares.rook_to)
        self.board.piece(squares.rook_to).has_moved = True

    def _sound_for(self, is_capture: bool) -> SoundEvent:
        if self.winner is not None:
            return SoundEvent.GAME_OVER
        if is_capture:
            return SoundEvent.CAPTURE
        return SoundEvent.MOVE

    def _select(self, square: Square) -> None:
        self.selected_square = square
        self.legal_destinations = self.calculate_legal_destinations(square.row, square.col)

    def _clear_selection(self) -> None:
        self.selected_square = None
        self.legal_destinations = set()

    def _selection(
        self, move: Optional[MoveResult] = None, promotion_pending: bool = False
    ) -> SelectionResult:
        return SelectionResult(
            selected=self.selected_square,
            legal_destinations=frozenset(self.legal_destinations),
            move=move,
            promotion_pending=promotion_pending,
        )

    def _emit_move(self, result: MoveResult) -> None:
        for callback in self.events.on_move:
            callback(result)

    def _emit_game_over(self, winner: Winner) -> None:
        for callback in self.events.on_game_over:
            callback(winner)

    def _emit_turn_change(self, color: Color) -> None:
        for callback in self.events.on_turn_change:
            callback(color)

    def _emit_reset(self) -> None:
        for callback in self.events.on_reset:
            callback()
