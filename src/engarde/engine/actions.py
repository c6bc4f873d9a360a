from __future__ import annotations

from dataclasses import dataclass

from .types import Direction


@dataclass(frozen=True)
class MovementAction:
    card: int
    direction: Direction

    @staticmethod
    def forward(card: int) -> "MovementAction":
        return MovementAction(card=card, direction="forward")

    @staticmethod
    def back(card: int) -> "MovementAction":
        return MovementAction(card=card, direction="back")


@dataclass(frozen=True)
class AttackAction:
    card: int
    count: int


Action = MovementAction | AttackAction
