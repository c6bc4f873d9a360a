from __future__ import annotations

import json

import pytest

from engarde.engine.actions import AttackAction, MovementAction
from engarde.protocol.codec import (
    MessageParseError,
    decode_client_message,
    decode_player_name,
    dumps_message,
    encode_message,
)
from engarde.protocol.messages import (
    ActionPrompt,
    AttackEcho,
    BoardSnapshot,
    Declaration,
    GameResult,
    HandSnapshot,
    MovementEcho,
    ProtocolError,
    RoundResult,
)


def _line(**fields: object) -> str:
    return json.dumps({"From": "Client", "To": "Server", **fields})


def test_decode_evaluation_as_declaration() -> None:
    msg = decode_client_message(_line(Type="Evaluation", **{"1F": "0.5", "2B": None}))
    assert isinstance(msg, Declaration)
    assert msg.evaluations == (("1F", "0.5"),)


def test_decode_movement_with_string_numbers() -> None:
    msg = decode_client_message(_line(Type="Play", MessageID="101", PlayCard="3", Direction="F"))
    assert msg == MovementAction(card=3, direction="forward")

    msg = decode_client_message(_line(Type="Play", MessageID="101", PlayCard=2, Direction="Back"))
    assert msg == MovementAction(card=2, direction="back")


def test_decode_attack() -> None:
    msg = decode_client_message(_line(Type="Play", MessageID="102", PlayCard="4", NumOfCard=" 2 "))
    assert msg == AttackAction(card=4, count=2)


def test_decode_accepts_whole_number_floats() -> None:
    msg = decode_client_message(_line(Type="Play", MessageID="101", PlayCard=3.0, Direction="F"))
    assert msg == MovementAction(card=3, direction="forward")

    msg = decode_client_message(_line(Type="Play", MessageID="102", PlayCard=2, NumOfCard=1.0))
    assert msg == AttackAction(card=2, count=1)


@pytest.mark.parametrize(
    "line",
    [
        "not json",
        "[1, 2]",
        json.dumps({"From": "Client"}),
        _line(Type=7),
        _line(Type="Chat"),
        _line(Type="Play", MessageID="103", PlayCard="1"),
        _line(Type="Play", MessageID="101", PlayCard="6", Direction="F"),
        _line(Type="Play", MessageID="101", PlayCard="1", Direction="Sideways"),
        _line(Type="Play", MessageID="102", PlayCard="1"),
        _line(Type="Play", MessageID="101", PlayCard=2.5, Direction="F"),
        _line(Type="Play", MessageID="102", PlayCard=2, NumOfCard=1.5),
        json.dumps({"Type": "Evaluation"}),
    ],
)
def test_malformed_messages_raise(line: str) -> None:
    with pytest.raises(MessageParseError):
        decode_client_message(line)


def test_decode_player_name() -> None:
    assert decode_player_name(_line(Type="PlayerName", Name="alice")).name == "alice"
    with pytest.raises(MessageParseError):
        decode_player_name(_line(Type="PlayerName"))


def test_encode_board_snapshot_uses_string_numbers() -> None:
    out = encode_message(BoardSnapshot(pos0=1, pos1=23, score0=2, score1=0, deck_size=15, current_player=1))
    assert out == {
        "Type": "BoardInfo",
        "From": "Server",
        "To": "Client",
        "PlayerPosition_0": "1",
        "PlayerPosition_1": "23",
        "PlayerScore_0": "2",
        "PlayerScore_1": "0",
        "NumofDeck": "15",
        "CurrentPlayer": "1",
    }


def test_encode_short_hand_omits_missing_slots() -> None:
    out = encode_message(HandSnapshot(cards=(5, 1, 3)))
    assert out["Hand1"] == "5"
    assert out["Hand3"] == "3"
    assert "Hand4" not in out
    assert "Hand5" not in out


def test_encode_echoes_and_results() -> None:
    assert encode_message(MovementEcho(card=2, direction="back"))["Direction"] == "B"
    assert encode_message(MovementEcho(card=2, direction="forward"))["MessageID"] == "101"
    attack = encode_message(AttackEcho(card=4, count=2))
    assert (attack["Type"], attack["MessageID"], attack["NumOfCard"]) == ("Played", "102", "2")
    assert encode_message(RoundResult(winner=None, score0=1, score1=1))["RWinner"] == "-1"
    assert encode_message(RoundResult(winner=1, score0=1, score1=2))["RWinner"] == "1"
    assert encode_message(GameResult(winner=0, score0=3, score1=1))["Winner"] == "0"
    assert encode_message(ActionPrompt())["Type"] == "DoPlay"


def test_dumps_protocol_error() -> None:
    obj = json.loads(dumps_message(ProtocolError(message="Not your turn.")))
    assert obj == {"Type": "Error", "From": "Server", "To": "Client", "Message": "Not your turn.", "MessageID": "111"}
