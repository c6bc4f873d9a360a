from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable

from .actions import Action, AttackAction, MovementAction
from .board import RIGHT_EDGE, Board, Player
from .deck import COPIES_PER_RANK, RANKS, create_deck
from .types import CONTINUE, Outcome, RoundEnd, RoundEndReason, RuleError, opponent

Event = dict[str, object]


@dataclass(frozen=True)
class MatchConfig:
    max_win: int = 100
    hand_size: int = 5
    cells: int = RIGHT_EDGE
    ranks: int = RANKS
    copies_per_rank: int = COPIES_PER_RANK

    @property
    def total_cards(self) -> int:
        return self.ranks * self.copies_per_rank


@dataclass
class StepResult:
    ok: bool
    outcome: Outcome | None = None
    error: RuleError | None = None
    events: list[Event] = field(default_factory=list)


@dataclass
class MatchState:
    config: MatchConfig
    seed: int | None
    rng: random.Random
    board: Board
    players: list[Player]
    first_player: int = 0
    winner: int | None = None
    round_number: int = 1
    round_result: RoundEnd | None = None
    discarded: int = 0
    action_log: list[tuple[int, Action]] = field(default_factory=list)
    event_log: list[Event] = field(default_factory=list)

    def player(self, player: int) -> Player:
        return self.players[player]

    def hand(self, player: int) -> list[int]:
        return self.players[player].hand


def _deal(
    cfg: MatchConfig, rng: random.Random, scores: list[int], first_player: int
) -> tuple[Board, list[Player]]:
    deck = create_deck(rng, cfg.ranks, cfg.copies_per_rank)
    hands: list[list[int]] = []
    for _ in range(2):
        hands.append(deck[-cfg.hand_size:])
        del deck[-cfg.hand_size:]
    board = Board.starting(deck, scores, first_player, cfg.cells)
    return board, [Player(id=0, hand=hands[0]), Player(id=1, hand=hands[1])]


def _round_started(state: MatchState) -> None:
    state.event_log.append(
        {"type": "ROUND_STARTED", "round": state.round_number, "first_player": state.first_player}
    )


def _check_invariants(state: MatchState) -> None:
    b = state.board
    assert 1 <= b.pos(0) < b.pos(1) <= b.cells, f"positions out of order: {b.positions}"
    held = len(state.hand(0)) + len(state.hand(1))
    assert len(b.deck) + held + state.discarded == state.config.total_cards, (
        f"card count mismatch: deck={len(b.deck)} hands={held} discarded={state.discarded}"
    )
    for p in state.players:
        assert len(p.hand) <= state.config.hand_size, f"player {p.id} holds {len(p.hand)} cards"


def _award_point(state: MatchState, player: int, reason: RoundEndReason) -> RoundEnd:
    state.board.scores[player] += 1
    if state.winner is None and state.board.scores[player] >= state.config.max_win:
        state.winner = player
        state.event_log.append({"type": "GAME_ENDED", "winner": player, "scores": list(state.board.scores)})
    return _end_round(state, RoundEnd(winner=player, reason=reason))


def _end_round(state: MatchState, result: RoundEnd) -> RoundEnd:
    state.round_result = result
    state.event_log.append(
        {
            "type": "ROUND_ENDED",
            "round": state.round_number,
            "winner": result.winner,
            "reason": result.reason,
            "scores": list(state.board.scores),
        }
    )
    return result


def _resolve_deck_exhausted(state: MatchState) -> RoundEnd:
    b = state.board
    distance = b.distance()
    have0 = state.player(0).count(distance)
    have1 = state.player(1).count(distance)
    if have0 != have1:
        return _award_point(state, 0 if have0 > have1 else 1, "deck_exhausted")
    # equal holdings: whoever is closer to the wall they face wins
    edge0 = b.edge_distance(0)
    edge1 = b.edge_distance(1)
    if edge0 == edge1:
        return _end_round(state, RoundEnd(winner=None, reason="deck_exhausted"))
    return _award_point(state, 0 if edge0 < edge1 else 1, "deck_exhausted")


def _replenish(state: MatchState, player: int) -> Outcome:
    ps = state.player(player)
    deck = state.board.deck
    while len(ps.hand) < state.config.hand_size:
        if not deck:
            return _resolve_deck_exhausted(state)
        card = deck.pop()
        ps.add_card(card)
        state.event_log.append({"type": "CARD_DRAWN", "player": player})
        if not deck:
            return _resolve_deck_exhausted(state)
    return CONTINUE


def _after_play(state: MatchState, player: int) -> Outcome:
    if not state.player(opponent(player)).can_act(state.board):
        return _award_point(state, player, "stalemate")
    return _replenish(state, player)


def _reject_out_of_turn(state: MatchState, player: int) -> StepResult | None:
    if state.round_result is not None:
        return StepResult(
            ok=False, error=RuleError(kind="ProtocolSequenceViolation", detail="The round is already over.")
        )
    if player != state.board.current_player:
        return StepResult(ok=False, error=RuleError(kind="ProtocolSequenceViolation", detail="Not your turn."))
    return None


def apply_movement(state: MatchState, player: int, action: MovementAction) -> StepResult:
    rejected = _reject_out_of_turn(state, player)
    if rejected:
        return rejected
    ps = state.player(player)
    if not ps.holds(action.card):
        return StepResult(ok=False, error=RuleError(kind="CardNotHeld", card=action.card))
    if not ps.can_move(state.board, action.card, action.direction):
        return StepResult(
            ok=False, error=RuleError(kind="IllegalMove", card=action.card, direction=action.direction)
        )

    start = len(state.event_log)
    ps.remove_card(action.card)
    state.discarded += 1
    state.board.move(player, action.card, action.direction)
    state.event_log.append(
        {
            "type": "MOVED",
            "player": player,
            "card": action.card,
            "direction": action.direction,
            "position": state.board.pos(player),
        }
    )
    outcome = _after_play(state, player)
    _check_invariants(state)
    return StepResult(ok=True, outcome=outcome, events=state.event_log[start:])


def apply_attack(state: MatchState, player: int, action: AttackAction) -> StepResult:
    rejected = _reject_out_of_turn(state, player)
    if rejected:
        return rejected
    attacker = state.player(player)
    defender = state.player(opponent(player))
    if not attacker.can_attack(state.board, action.card):
        return StepResult(ok=False, error=RuleError(kind="AttackOutOfRange", card=action.card))
    attacking = attacker.count(action.card)
    if action.count < 1 or attacking < action.count:
        return StepResult(
            ok=False, error=RuleError(kind="InsufficientCards", card=action.card, count=action.count)
        )

    start = len(state.event_log)
    defending = defender.count(action.card)
    state.event_log.append(
        {
            "type": "ATTACKED",
            "player": player,
            "card": action.card,
            "count": attacking,
            "defended": defending >= attacking,
        }
    )
    if defending < attacking:
        outcome: Outcome = _award_point(state, player, "attack")
    else:
        # every copy the attacker holds is committed and parried one for one
        for _ in range(attacking):
            defender.remove_card(action.card)
            attacker.remove_card(action.card)
        state.discarded += 2 * attacking
        outcome = _after_play(state, player)
    _check_invariants(state)
    return StepResult(ok=True, outcome=outcome, events=state.event_log[start:])


def step(state: MatchState, player: int, action: Action) -> StepResult:
    """Apply a single action for `player`.

    Mutates `state` in-place. A failed step leaves the state untouched.
    """
    state.action_log.append((player, action))
    if isinstance(action, MovementAction):
        return apply_movement(state, player, action)
    if isinstance(action, AttackAction):
        return apply_attack(state, player, action)
    return StepResult(ok=False, error=RuleError(kind="MalformedMessage", detail="Unknown action."))


def end_turn(state: MatchState) -> None:
    state.board.current_player = opponent(state.board.current_player)


def reset_round(state: MatchState) -> None:
    """Start the next round on a rebuilt board: new shuffled deck, fresh hands,
    positions back on the edges. Scores and the starting player carry over."""
    state.board, state.players = _deal(state.config, state.rng, state.board.scores, state.first_player)
    state.discarded = 0
    state.round_result = None
    state.round_number += 1
    _round_started(state)


def change_first_player(state: MatchState) -> None:
    state.first_player = opponent(state.first_player)
    state.board.current_player = state.first_player


def is_game_over(state: MatchState) -> bool:
    return state.winner is not None


def new_match(config: MatchConfig | None = None, seed: int | None = None) -> MatchState:
    cfg = config or MatchConfig()
    if cfg.max_win < 1:
        raise ValueError("max_win must be at least 1.")
    if cfg.total_cards < 2 * cfg.hand_size:
        raise ValueError(f"A deck of {cfg.total_cards} cards cannot deal two hands of {cfg.hand_size}.")

    rng = random.Random(seed)
    board, players = _deal(cfg, rng, [0, 0], first_player=0)
    state = MatchState(config=cfg, seed=seed, rng=rng, board=board, players=players)
    _round_started(state)
    return state


def replay(
    actions: Iterable[tuple[int, Action]],
    seed: int,
    config: MatchConfig | None = None,
) -> MatchState:
    """Rebuild a match from its seed and the (player, action) pairs it received.

    Rejected actions are replayed too; they leave no trace beyond the action log.
    """
    state = new_match(config=config, seed=seed)
    for player, action in actions:
        result = step(state, player, action)
        if not result.ok or result.outcome is None:
            continue
        if isinstance(result.outcome, RoundEnd):
            if is_game_over(state):
                break
            reset_round(state)
            change_first_player(state)
        else:
            end_turn(state)
    return state
