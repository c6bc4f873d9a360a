from __future__ import annotations


from .actions import Action, AttackAction, MovementAction
from .board import Player
from .match import MatchState


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, MovementAction):
        return {"type": "move", "card": a.card, "direction": a.direction}
    if isinstance(a, AttackAction):
        return {"type": "attack", "card": a.card, "count": a.count}
    # should be unreachable
    return {"type": "unknown"}


def _player_to_dict(p: Player) -> dict[str, object]:
    return {"id": p.id, "hand": sorted(p.hand)}


def snapshot(state: MatchState) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current match state."""
    b = state.board
    return {
        "seed": state.seed,
        "round": state.round_number,
        "first_player": state.first_player,
        "current_player": b.current_player,
        "winner": state.winner,
        "positions": list(b.positions),
        "scores": list(b.scores),
        "deck": list(b.deck),
        "discarded": state.discarded,
        "players": [_player_to_dict(p) for p in state.players],
        "action_log": [{"player": player, **action_to_dict(a)} for player, a in state.action_log],
        "event_log": [dict(e) for e in state.event_log],
    }
