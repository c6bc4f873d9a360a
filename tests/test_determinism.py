from __future__ import annotations

import random

from engarde.engine.actions import Action
from engarde.engine.ai import AISpec, choose_action
from engarde.engine.match import (
    MatchConfig,
    change_first_player,
    end_turn,
    is_game_over,
    new_match,
    replay,
    reset_round,
    step,
)
from engarde.engine.serialize import snapshot
from engarde.engine.types import RoundEnd


def _play(seed: int, max_win: int, max_steps: int = 2000):
    state = new_match(MatchConfig(max_win=max_win), seed=seed)
    rng = random.Random(seed)
    actions: list[tuple[int, Action]] = []
    for _ in range(max_steps):
        player = state.board.current_player
        a = choose_action(state.board, state.player(player), AISpec(difficulty=0), rng)
        actions.append((player, a))
        res = step(state, player, a)
        assert res.ok, res.error

        b = state.board
        assert 1 <= b.pos(0) < b.pos(1) <= 23
        assert b.deck_size() + len(state.hand(0)) + len(state.hand(1)) + state.discarded == 25

        if isinstance(res.outcome, RoundEnd):
            if is_game_over(state):
                break
            reset_round(state)
            change_first_player(state)
        else:
            end_turn(state)
    return state, actions


def test_engine_determinism_replay() -> None:
    seed = 424242
    state1, actions = _play(seed, max_win=3)
    assert is_game_over(state1)

    state2 = replay(actions, seed=seed, config=MatchConfig(max_win=3))
    assert snapshot(state1) == snapshot(state2)


def test_random_play_keeps_invariants_across_seeds() -> None:
    for seed in range(20):
        state, _ = _play(seed, max_win=2)
        assert is_game_over(state)
        assert max(state.board.scores) == 2
        assert state.winner == state.board.scores.index(2)
