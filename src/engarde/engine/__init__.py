"""Headless rules engine for the En Garde duel.

IMPORTANT: This package must never do I/O; the server drives it.
"""

from .actions import AttackAction, MovementAction
from .board import Board, Player
from .match import (
    MatchConfig,
    MatchState,
    StepResult,
    apply_attack,
    apply_movement,
    change_first_player,
    end_turn,
    is_game_over,
    new_match,
    reset_round,
    step,
)
from .types import Continue, Direction, RoundEnd, RuleError, RuleErrorKind

__all__ = [
    "AttackAction",
    "Board",
    "Continue",
    "Direction",
    "MatchConfig",
    "MatchState",
    "MovementAction",
    "Player",
    "RoundEnd",
    "RuleError",
    "RuleErrorKind",
    "StepResult",
    "apply_attack",
    "apply_movement",
    "change_first_player",
    "end_turn",
    "is_game_over",
    "new_match",
    "reset_round",
    "step",
]
