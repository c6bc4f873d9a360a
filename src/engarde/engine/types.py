from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Direction = Literal["forward", "back"]

RuleErrorKind = Literal[
    "CardNotHeld",
    "IllegalMove",
    "AttackOutOfRange",
    "InsufficientCards",
    "ProtocolSequenceViolation",
    "MalformedMessage",
]

RoundEndReason = Literal["attack", "stalemate", "deck_exhausted"]

PLAYERS: tuple[int, int] = (0, 1)


def opponent(player: int) -> int:
    return 1 - player


@dataclass(frozen=True)
class RuleError:
    """A rejected action. Reported to the offending participant; never mutates state."""

    kind: RuleErrorKind
    detail: str = ""
    card: int | None = None
    direction: Direction | None = None
    count: int | None = None

    @property
    def message(self) -> str:
        if self.kind == "CardNotHeld":
            return f"You do not hold a {self.card}."
        if self.kind == "IllegalMove":
            return f"Cannot move {self.direction} by {self.card}."
        if self.kind == "AttackOutOfRange":
            return f"An attack with {self.card} does not reach the opponent."
        if self.kind == "InsufficientCards":
            return f"You do not hold {self.count} cards of {self.card}."
        if self.detail:
            return self.detail
        return "The message could not be understood."


@dataclass(frozen=True)
class Continue:
    pass


@dataclass(frozen=True)
class RoundEnd:
    winner: int | None
    reason: RoundEndReason

    @property
    def is_draw(self) -> bool:
        return self.winner is None


Outcome = Continue | RoundEnd

CONTINUE = Continue()
