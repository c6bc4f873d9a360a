"""JSON wire format shared with the existing duel clients.

Every object carries ``Type``, ``From`` and ``To``. Numbers travel as
strings in both directions; inbound numbers are also accepted as integers.
"""

from __future__ import annotations

import json
from functools import lru_cache
from typing import Mapping

from jsonschema import Draft202012Validator

from engarde.engine.actions import AttackAction, MovementAction
from engarde.engine.types import Direction
from engarde.paths import get_paths

from .messages import (
    ActionPrompt,
    AttackEcho,
    BoardSnapshot,
    ClientMessage,
    ConnectionStart,
    Declaration,
    GameResult,
    HandSnapshot,
    MovementEcho,
    NameReceived,
    PlayerName,
    ProtocolError,
    RoundResult,
    ServerMessage,
)

MOVEMENT_ID = "101"
ATTACK_ID = "102"
ERROR_ID = "111"

_DIRECTIONS: dict[str, Direction] = {
    "F": "forward",
    "Forward": "forward",
    "B": "back",
    "Back": "back",
}


class MessageParseError(RuntimeError):
    pass


@lru_cache(maxsize=None)
def _validator(name: str) -> Draft202012Validator:
    path = get_paths().schema_dir / f"{name}.schema.json"
    try:
        schema = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise MessageParseError(f"Missing schema file: {path}") from e
    return Draft202012Validator(schema)


def validate_message(instance: object, name: str) -> None:
    errors = sorted(_validator(name).iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"{name} message is invalid:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise MessageParseError("\n".join(lines))


def _load_object(line: str) -> dict[str, object]:
    try:
        obj = json.loads(line)
    except json.JSONDecodeError as e:
        raise MessageParseError(f"Invalid JSON: {e}") from e
    if not isinstance(obj, dict):
        raise MessageParseError("Message must be a JSON object")
    return obj


def _number(obj: Mapping[str, object], key: str) -> int:
    # schema admits integers (1 or 1.0) and digit strings
    value = obj[key]
    if isinstance(value, float):
        if not value.is_integer():
            raise MessageParseError(f"{key} must be a whole number")
        return int(value)
    try:
        return int(str(value).strip())
    except ValueError as e:
        raise MessageParseError(f"{key} is not a number: {value!r}") from e


def decode_client_message(line: str) -> ClientMessage:
    obj = _load_object(line)
    typ = obj.get("Type")
    if typ is None:
        raise MessageParseError("Message has no Type")
    if not isinstance(typ, str):
        raise MessageParseError("Type must be a string")

    if typ == "Evaluation":
        validate_message(obj, "evaluation")
        evals = tuple(
            (k, str(v)) for k, v in obj.items() if k not in ("Type", "From", "To") and v is not None
        )
        return Declaration(evaluations=evals)

    if typ == "Play":
        message_id = obj.get("MessageID")
        if not isinstance(message_id, str):
            raise MessageParseError("Play message needs a string MessageID")
        if message_id == MOVEMENT_ID:
            validate_message(obj, "play_movement")
            direction = _DIRECTIONS[str(obj["Direction"]).strip()]
            return MovementAction(card=_number(obj, "PlayCard"), direction=direction)
        if message_id == ATTACK_ID:
            validate_message(obj, "play_attack")
            return AttackAction(card=_number(obj, "PlayCard"), count=_number(obj, "NumOfCard"))
        raise MessageParseError(f"Unknown Play MessageID: {message_id}")

    raise MessageParseError(f"Unexpected message type: {typ}")


def decode_player_name(line: str) -> PlayerName:
    obj = _load_object(line)
    validate_message(obj, "player_name")
    return PlayerName(name=str(obj["Name"]))


def _envelope(typ: str) -> dict[str, object]:
    return {"Type": typ, "From": "Server", "To": "Client"}


def encode_message(msg: ServerMessage) -> dict[str, object]:
    if isinstance(msg, BoardSnapshot):
        return {
            **_envelope("BoardInfo"),
            "PlayerPosition_0": str(msg.pos0),
            "PlayerPosition_1": str(msg.pos1),
            "PlayerScore_0": str(msg.score0),
            "PlayerScore_1": str(msg.score1),
            "NumofDeck": str(msg.deck_size),
            "CurrentPlayer": str(msg.current_player),
        }
    if isinstance(msg, HandSnapshot):
        out = _envelope("HandInfo")
        for i, card in enumerate(msg.cards, start=1):
            out[f"Hand{i}"] = str(card)
        return out
    if isinstance(msg, ActionPrompt):
        return {**_envelope("DoPlay"), "MessageID": MOVEMENT_ID, "Message": "a"}
    if isinstance(msg, MovementEcho):
        return {
            **_envelope("Played"),
            "MessageID": MOVEMENT_ID,
            "PlayCard": str(msg.card),
            "Direction": "F" if msg.direction == "forward" else "B",
        }
    if isinstance(msg, AttackEcho):
        return {
            **_envelope("Played"),
            "MessageID": ATTACK_ID,
            "PlayCard": str(msg.card),
            "NumOfCard": str(msg.count),
        }
    if isinstance(msg, RoundResult):
        return {
            **_envelope("RoundEnd"),
            "RWinner": str(-1 if msg.winner is None else msg.winner),
            "Score0": str(msg.score0),
            "Score1": str(msg.score1),
            "Message": "a",
        }
    if isinstance(msg, GameResult):
        return {
            **_envelope("GameEnd"),
            "Winner": str(msg.winner),
            "Score0": str(msg.score0),
            "Score1": str(msg.score1),
            "Message": "a",
        }
    if isinstance(msg, ProtocolError):
        return {**_envelope("Error"), "Message": msg.message, "MessageID": ERROR_ID}
    if isinstance(msg, ConnectionStart):
        return {**_envelope("ConnectionStart"), "ClientID": str(msg.client_id)}
    if isinstance(msg, NameReceived):
        return _envelope("NameReceived")
    raise TypeError(f"Cannot encode {type(msg).__name__}")


def dumps_message(msg: ServerMessage) -> str:
    return json.dumps(encode_message(msg), ensure_ascii=False)
