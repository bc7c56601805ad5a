"""Tests for the Nim minimax AI."""

import pytest

from nimgame.ai import InvalidArgument, MinimaxAI, best_move, minimax
from nimgame.game import AI, PLAYER, NimGame


@pytest.mark.parametrize("pile", range(1, 16))
def test_best_move_is_legal(pile):
    move = best_move(pile)
    assert 1 <= move <= 3
    assert move <= pile


@pytest.mark.parametrize("pile", range(1, 16))
def test_best_move_follows_modulo_four(pile):
    move = best_move(pile)
    if pile % 4:
        assert move == pile % 4
    else:
        value = minimax(pile - move, False)
        for k in range(1, min(3, pile) + 1):
            assert minimax(pile - k, False) == value
        # every move loses, so the smallest wins the tie
        assert move == 1


def test_minimax_terminal_values():
    assert minimax(0, True) == -1
    assert minimax(0, False) == 1


def test_opening_move_takes_three():
    assert best_move(15) == 3


@pytest.mark.parametrize("pile", [0, -3])
def test_best_move_rejects_empty_pile(pile):
    with pytest.raises(InvalidArgument):
        best_move(pile)


def test_minimax_rejects_negative_pile():
    with pytest.raises(InvalidArgument):
        minimax(-1, True)


def test_ai_takes_last_object():
    game = NimGame(pile=1, current_player=AI)
    ai = MinimaxAI()
    assert ai.choose(game) == 1


def test_ai_refuses_out_of_turn():
    with pytest.raises(ValueError):
        MinimaxAI().choose(NimGame())


def test_memoized_search_agrees():
    ai = MinimaxAI(memoize=True)
    for pile in range(1, 16):
        game = NimGame(pile=pile, current_player=AI)
        assert ai.choose(game) == best_move(pile)


def test_memoized_search_fills_cache_and_guards_negative_piles():
    ai = MinimaxAI(memoize=True)
    ai.choose(NimGame(pile=15, current_player=AI))
    assert ai._cache[(0, True)] == -1
    assert ai._cache[(4, True)] == -1
    with pytest.raises(InvalidArgument):
        ai._cached_minimax(-1, True)


def test_custom_evaluator_drives_best_move():
    # an evaluator that prefers leaving two objects behind
    def prefer_two_left(pile, maximizing):
        return 1 if pile == 2 else -1

    assert best_move(5, prefer_two_left) == 3


def test_optimal_first_mover_beats_ai():
    game = NimGame()
    ai = MinimaxAI()
    while not game.is_over:
        game.apply_player_move(game.pile % 4)
        if game.is_over:
            break
        game.apply_ai_move(ai.choose(game))
    assert game.winner == PLAYER


def test_ai_punishes_careless_player():
    game = NimGame()
    ai = MinimaxAI()
    while not game.is_over:
        game.apply_player_move(1)
        if game.is_over:
            break
        game.apply_ai_move(ai.choose(game))
    assert game.winner == AI
