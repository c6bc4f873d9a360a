from __future__ import annotations

import random
from dataclasses import dataclass

from .actions import Action, AttackAction, MovementAction
from .board import Board, Player


@dataclass(frozen=True)
class AISpec:
    """Simple AI tuning parameters.

    difficulty:
      0 = easy (often plays a random legal move)
      1 = normal
      2 = hard (never strays from its best move)
    """

    difficulty: int = 1


def legal_moves(board: Board, me: Player) -> list[MovementAction]:
    moves: list[MovementAction] = []
    for card in sorted(set(me.hand)):
        for direction in ("forward", "back"):
            if me.can_move(board, card, direction):
                moves.append(MovementAction(card=card, direction=direction))
    return moves


def _move_value(board: Board, me: Player, move: MovementAction) -> float:
    rest = list(me.hand)
    rest.remove(move.card)
    step = move.card if move.direction == "forward" else -move.card
    distance = board.distance() - step
    v = 0.0
    # out of reach of any single card
    if distance > 5:
        v += 2.0
    # copies kept back to parry an attack at the new distance
    v += 1.5 * rest.count(distance)
    if move.direction == "forward":
        v += 0.5
    # spending high cards early leaves small steps for the endgame
    v -= 0.1 * move.card
    return v


def _mistake_rate(spec: AISpec) -> float:
    if spec.difficulty <= 0:
        return 0.35
    if spec.difficulty == 1:
        return 0.05
    return 0.0


def choose_action(board: Board, me: Player, spec: AISpec | None = None, rng: random.Random | None = None) -> Action:
    """Pick a legal action for `me` using only what that player can see.

    Raises RuntimeError when the player has nothing legal to do, which the
    engine never lets happen at the start of a turn.
    """
    spec = spec or AISpec()
    rng = rng or random.Random(0)

    distance = board.distance()
    if me.can_attack(board, distance) and me.holds(distance):
        return AttackAction(card=distance, count=me.count(distance))

    moves = legal_moves(board, me)
    if not moves:
        raise RuntimeError(f"player {me.id} has no legal action")
    if rng.random() < _mistake_rate(spec):
        return rng.choice(moves)
    return max(moves, key=lambda m: _move_value(board, me, m))
