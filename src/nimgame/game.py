"""Core rules for single-pile Nim (take 1-3, emptying the pile wins)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

Side = str  # "Player" or "AI"

PLAYER: Side = "Player"
AI: Side = "AI"

INITIAL_PILE = 15
MAX_TAKE = 3


class InvalidMove(ValueError):
    """Raised when a move is not legal in the current position."""


@dataclass
class MoveOutcome:
    side: Side
    amount: int
    pile: int
    winner: Optional[Side] = None
    # True when the human move left a live pile and the AI must reply
    ai_should_move: bool = False


@dataclass
class GameStatus:
    pile: int
    turn: Side
    winner: Optional[Side] = None

    @property
    def message(self) -> str:
        if self.winner == PLAYER:
            # sic
            return "You wins!"
        if self.winner == AI:
            return "AI wins!"
        if self.turn == AI:
            return "AI is thinking..."
        return "Your turn!"


# ---------- Game ----------


@dataclass
class NimGame:
    pile: int = INITIAL_PILE
    current_player: Side = PLAYER
    winner: Optional[Side] = None
    history: List[Tuple[Side, int]] = field(default_factory=list)

    # ---- API used by UI & AI ----

    @property
    def is_over(self) -> bool:
        return self.winner is not None or self.pile <= 0

    def available_moves(self) -> List[int]:
        """Legal take amounts for the side to move, smallest first."""
        if self.is_over:
            return []
        return list(range(1, min(MAX_TAKE, self.pile) + 1))

    def apply_player_move(self, amount: int) -> MoveOutcome:
        """Take ``amount`` for the human; hands the turn to the AI if the pile survives."""
        self._check_move(PLAYER, amount)
        return self._take(PLAYER, amount)

    def apply_ai_move(self, amount: int) -> MoveOutcome:
        self._check_move(AI, amount)
        return self._take(AI, amount)

    def reset(self) -> None:
        self.pile = INITIAL_PILE
        self.current_player = PLAYER
        self.winner = None
        self.history.clear()

    def status(self) -> GameStatus:
        return GameStatus(
            pile=self.pile, turn=self.current_player, winner=self.winner
        )

    # ---- helpers ----

    def _check_move(self, side: Side, amount: int) -> None:
        if self.is_over:
            raise InvalidMove("Game already finished")
        if self.current_player != side:
            raise InvalidMove(f"It is not {side}'s turn")
        # bool is an int subclass and 2.0 == 2; neither is a take amount
        if (
            not isinstance(amount, int)
            or isinstance(amount, bool)
            or amount not in self.available_moves()
        ):
            raise InvalidMove(
                f"Take between 1 and {min(MAX_TAKE, self.pile)} objects"
            )

    def _take(self, side: Side, amount: int) -> MoveOutcome:
        self.pile -= amount
        self.history.append((side, amount))

        if self.pile <= 0:
            self.pile = 0
            self.winner = side
            # Nobody may move after the end; lock the human out
            self.current_player = AI
            return MoveOutcome(side=side, amount=amount, pile=0, winner=side)

        self.current_player = AI if side == PLAYER else PLAYER
        return MoveOutcome(
            side=side,
            amount=amount,
            pile=self.pile,
            ai_should_move=side == PLAYER,
        )
