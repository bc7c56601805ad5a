"""Exhaustive minimax move selection for single-pile Nim."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Tuple
import logging
import math

from .game import AI, MAX_TAKE, NimGame, Side

logger = logging.getLogger(__name__)

# Scores a child position: (pile, maximizing) -> +1 / -1
Evaluator = Callable[[int, bool], int]


class InvalidArgument(ValueError):
    """Raised when the search is asked about an impossible pile."""


def minimax(
    pile: int, maximizing: bool, evaluate: Optional[Evaluator] = None
) -> int:
    """Value of ``pile`` for the maximizer: +1 forced win, -1 forced loss.

    An empty pile means the previous mover took the last object and won, so
    the side now to move has lost. Children are scored with ``evaluate``,
    which defaults to this function itself: the whole tree is walked with no
    pruning and no caching.
    """
    if pile < 0:
        raise InvalidArgument(f"Pile cannot be negative (got {pile})")
    if pile == 0:
        return -1 if maximizing else 1

    evaluate = evaluate or minimax
    if maximizing:
        best = -math.inf
        for i in range(1, min(MAX_TAKE, pile) + 1):
            best = max(best, evaluate(pile - i, False))
    else:
        best = math.inf
        for i in range(1, min(MAX_TAKE, pile) + 1):
            best = min(best, evaluate(pile - i, True))
    return int(best)


def best_move(pile: int, evaluate: Optional[Evaluator] = None) -> int:
    """Optimal take for the side to move; ties go to the smallest amount."""
    if pile <= 0:
        raise InvalidArgument(f"No move exists for a pile of {pile}")

    evaluate = evaluate or minimax
    best_val = -math.inf
    move = 1
    for i in range(1, min(MAX_TAKE, pile) + 1):
        val = evaluate(pile - i, False)
        if val > best_val:
            best_val, move = val, i
    return move


@dataclass
class MinimaxAI:
    """Computer opponent driving ``NimGame`` through ``best_move``.

    With ``memoize`` set, positions are cached per instance keyed on
    ``(pile, maximizing)``; the result is identical, only faster on big piles.
    """

    player: Side = AI
    memoize: bool = False
    _cache: Dict[Tuple[int, bool], int] = field(default_factory=dict, repr=False)

    def choose(self, game: NimGame) -> int:
        if game.current_player != self.player:
            raise ValueError("It is not this AI player's turn")
        if game.is_over:
            raise ValueError("Game already finished")

        evaluate = self._cached_minimax if self.memoize else None
        move = best_move(game.pile, evaluate)
        logger.debug("AI takes %d from a pile of %d", move, game.pile)
        return move

    def _cached_minimax(self, pile: int, maximizing: bool) -> int:
        key = (pile, maximizing)
        hit = self._cache.get(key)
        if hit is None:
            hit = minimax(pile, maximizing, self._cached_minimax)
            self._cache[key] = hit
        return hit
