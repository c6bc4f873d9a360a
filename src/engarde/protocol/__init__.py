"""Message kinds exchanged with duel clients and their JSON wire form."""

from .codec import MessageParseError, decode_client_message, decode_player_name, dumps_message, encode_message
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

__all__ = [
    "ActionPrompt",
    "AttackEcho",
    "BoardSnapshot",
    "ClientMessage",
    "ConnectionStart",
    "Declaration",
    "GameResult",
    "HandSnapshot",
    "MessageParseError",
    "MovementEcho",
    "NameReceived",
    "PlayerName",
    "ProtocolError",
    "RoundResult",
    "ServerMessage",
    "decode_client_message",
    "decode_player_name",
    "dumps_message",
    "encode_message",
]
