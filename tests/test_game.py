"""Unit tests for Nim game rules."""

import pytest

from nimgame.game import AI, INITIAL_PILE, PLAYER, InvalidMove, NimGame


def test_initial_state():
    game = NimGame()
    status = game.status()
    assert (status.pile, status.turn, status.winner) == (15, PLAYER, None)
    assert status.message == "Your turn!"
    assert game.available_moves() == [1, 2, 3]


def test_player_move_hands_turn_to_ai():
    game = NimGame()
    outcome = game.apply_player_move(3)
    assert outcome.pile == 12
    assert outcome.ai_should_move is True
    assert game.current_player == AI
    assert game.status().message == "AI is thinking..."


def test_ai_move_returns_turn_to_player():
    game = NimGame()
    game.apply_player_move(3)
    outcome = game.apply_ai_move(1)
    assert outcome.pile == 11
    assert outcome.ai_should_move is False
    assert game.current_player == PLAYER
    assert game.history == [(PLAYER, 3), (AI, 1)]


def test_player_emptying_pile_wins():
    game = NimGame(pile=3)
    outcome = game.apply_player_move(3)
    assert outcome.winner == PLAYER
    assert outcome.ai_should_move is False
    status = game.status()
    assert status.pile == 0
    assert status.winner == PLAYER
    assert status.message == "You wins!"
    assert game.available_moves() == []


def test_ai_emptying_pile_wins():
    game = NimGame(pile=1, current_player=AI)
    game.apply_ai_move(1)
    assert game.winner == AI
    assert game.status().message == "AI wins!"


def test_oversized_move_leaves_state_unchanged():
    game = NimGame(pile=3)
    with pytest.raises(InvalidMove):
        game.apply_player_move(5)
    assert game.pile == 3
    assert game.current_player == PLAYER
    assert game.history == []


@pytest.mark.parametrize("amount", [0, -1, 4])
def test_out_of_range_amounts_rejected(amount):
    game = NimGame()
    with pytest.raises(InvalidMove):
        game.apply_player_move(amount)
    assert game.pile == INITIAL_PILE


@pytest.mark.parametrize("amount", [2.0, True, "2", None])
def test_non_integer_amounts_rejected(amount):
    game = NimGame()
    with pytest.raises(InvalidMove):
        game.apply_player_move(amount)
    assert game.pile == INITIAL_PILE
    assert isinstance(game.pile, int)
    assert game.current_player == PLAYER


def test_move_out_of_turn_rejected():
    game = NimGame()
    game.apply_player_move(1)
    with pytest.raises(InvalidMove):
        game.apply_player_move(1)
    game.apply_ai_move(1)
    with pytest.raises(InvalidMove):
        game.apply_ai_move(1)


def test_no_moves_after_game_over():
    game = NimGame(pile=2)
    game.apply_player_move(2)
    with pytest.raises(InvalidMove):
        game.apply_player_move(1)
    with pytest.raises(InvalidMove):
        game.apply_ai_move(1)
    assert game.winner == PLAYER


def test_reset_restores_initial_state():
    game = NimGame(pile=1, current_player=AI)
    game.apply_ai_move(1)
    game.reset()
    status = game.status()
    assert (status.pile, status.turn, status.winner) == (15, PLAYER, None)
    assert game.history == []
    game.reset()
    assert game.status() == status
