"""Turn, round and game loops between two participants.

Validation failures are settled here: the offender is told what went wrong
and asked again. Only TransportError escapes, and it ends the match.
"""

from __future__ import annotations

import logging
from typing import Literal, Mapping

from engarde.engine.actions import AttackAction, MovementAction
from engarde.engine.match import (
    MatchState,
    change_first_player,
    end_turn,
    is_game_over,
    reset_round,
    step,
)
from engarde.engine.types import PLAYERS, Outcome, RoundEnd, RuleError, opponent
from engarde.protocol.codec import MessageParseError
from engarde.protocol.messages import (
    ActionPrompt,
    Declaration,
    ServerMessage,
    board_snapshot,
    echo,
    game_result,
    hand_snapshot,
    protocol_error,
    round_result,
)
from engarde.services.telemetry import TelemetryService

from .transport import Participant

logger = logging.getLogger(__name__)

TurnPhase = Literal["await_declaration", "await_action"]

Seats = Mapping[int, Participant]


def broadcast(seats: Seats, message: ServerMessage) -> None:
    for player in PLAYERS:
        seats[player].send(message)


def _reject(seat: Participant, player: int, error: RuleError) -> None:
    logger.info("player %d: %s (%s)", player, error.kind, error.message)
    seat.send(protocol_error(error))


def run_turn(state: MatchState, seats: Seats) -> Outcome:
    """Run the current player's turn until one action is accepted."""
    player = state.board.current_player
    seat = seats[player]
    phase: TurnPhase = "await_declaration"

    while True:
        if phase == "await_declaration":
            seat.send(hand_snapshot(state, player))
            seat.send(ActionPrompt())

        try:
            message = seat.receive()
        except MessageParseError as e:
            logger.warning("player %d sent a malformed message: %s", player, e)
            _reject(seat, player, RuleError(kind="MalformedMessage", detail="The message could not be understood."))
            phase = "await_declaration"
            continue

        if phase == "await_declaration":
            if isinstance(message, Declaration):
                phase = "await_action"
                continue
            _reject(
                seat,
                player,
                RuleError(kind="ProtocolSequenceViolation", detail="Send a declaration before acting."),
            )
            continue

        if isinstance(message, Declaration):
            _reject(
                seat,
                player,
                RuleError(kind="ProtocolSequenceViolation", detail="A declaration was already received."),
            )
            phase = "await_declaration"
            continue

        assert isinstance(message, (MovementAction, AttackAction))
        result = step(state, player, message)
        if not result.ok:
            assert result.error is not None
            _reject(seat, player, result.error)
            phase = "await_declaration"
            continue

        assert result.outcome is not None
        if not isinstance(result.outcome, RoundEnd):
            seats[opponent(player)].send(echo(message))
        return result.outcome


def run_round(state: MatchState, seats: Seats) -> RoundEnd:
    while True:
        broadcast(seats, board_snapshot(state))
        outcome = run_turn(state, seats)
        if isinstance(outcome, RoundEnd):
            broadcast(seats, round_result(state, outcome))
            return outcome
        end_turn(state)


def run_game(state: MatchState, seats: Seats, telemetry: TelemetryService | None = None) -> int:
    """Play rounds until someone reaches the win threshold; return the winner."""
    while True:
        result = run_round(state, seats)
        if result.winner is None:
            logger.info("round %d drawn (%s)", state.round_number, result.reason)
        else:
            logger.info(
                "round %d won by player %d (%s), score %d-%d",
                state.round_number,
                result.winner,
                result.reason,
                state.board.score(0),
                state.board.score(1),
            )
        if telemetry is not None:
            telemetry.round_ended(state, result)

        if is_game_over(state):
            break
        reset_round(state)
        change_first_player(state)

    assert state.winner is not None
    broadcast(seats, game_result(state))
    if telemetry is not None:
        telemetry.game_ended(state)
    return state.winner
