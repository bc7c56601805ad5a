"""Nim package exposing game rules, the minimax AI, and the web application."""

from .ai import MinimaxAI, best_move, minimax
from .game import NimGame
from .ui import app

__all__ = ["MinimaxAI", "NimGame", "app", "best_move", "minimax"]
