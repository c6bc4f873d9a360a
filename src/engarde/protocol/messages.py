from __future__ import annotations

from dataclasses import dataclass

from engarde.engine.actions import AttackAction, MovementAction
from engarde.engine.match import MatchState
from engarde.engine.types import Direction, RoundEnd, RuleError

# --- inbound ---------------------------------------------------------------


@dataclass(frozen=True)
class Declaration:
    """The active player is about to act. Carries nothing the engine uses."""

    evaluations: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class PlayerName:
    name: str


ClientMessage = Declaration | MovementAction | AttackAction


# --- outbound --------------------------------------------------------------


@dataclass(frozen=True)
class BoardSnapshot:
    pos0: int
    pos1: int
    score0: int
    score1: int
    deck_size: int
    current_player: int


@dataclass(frozen=True)
class HandSnapshot:
    cards: tuple[int, ...]


@dataclass(frozen=True)
class ActionPrompt:
    pass


@dataclass(frozen=True)
class MovementEcho:
    card: int
    direction: Direction


@dataclass(frozen=True)
class AttackEcho:
    card: int
    count: int


@dataclass(frozen=True)
class RoundResult:
    winner: int | None
    score0: int
    score1: int


@dataclass(frozen=True)
class GameResult:
    winner: int
    score0: int
    score1: int


@dataclass(frozen=True)
class ProtocolError:
    message: str


@dataclass(frozen=True)
class ConnectionStart:
    client_id: int


@dataclass(frozen=True)
class NameReceived:
    pass


ServerMessage = (
    BoardSnapshot
    | HandSnapshot
    | ActionPrompt
    | MovementEcho
    | AttackEcho
    | RoundResult
    | GameResult
    | ProtocolError
    | ConnectionStart
    | NameReceived
)


def board_snapshot(state: MatchState) -> BoardSnapshot:
    b = state.board
    return BoardSnapshot(
        pos0=b.pos(0),
        pos1=b.pos(1),
        score0=b.score(0),
        score1=b.score(1),
        deck_size=b.deck_size(),
        current_player=b.current_player,
    )


def hand_snapshot(state: MatchState, player: int) -> HandSnapshot:
    return HandSnapshot(cards=tuple(state.hand(player)))


def round_result(state: MatchState, result: RoundEnd) -> RoundResult:
    return RoundResult(winner=result.winner, score0=state.board.score(0), score1=state.board.score(1))


def game_result(state: MatchState) -> GameResult:
    assert state.winner is not None
    return GameResult(winner=state.winner, score0=state.board.score(0), score1=state.board.score(1))


def echo(action: MovementAction | AttackAction) -> MovementEcho | AttackEcho:
    if isinstance(action, MovementAction):
        return MovementEcho(card=action.card, direction=action.direction)
    return AttackEcho(card=action.card, count=action.count)


def protocol_error(error: RuleError) -> ProtocolError:
    return ProtocolError(message=error.message)
