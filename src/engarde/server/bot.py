from __future__ import annotations

import random
from collections import deque

from engarde.engine.ai import AISpec, choose_action
from engarde.engine.board import Board, Player
from engarde.protocol.messages import (
    ActionPrompt,
    BoardSnapshot,
    ClientMessage,
    Declaration,
    HandSnapshot,
    ServerMessage,
)

from .transport import TransportError


class BotParticipant:
    """An in-process seat driven by the built-in AI.

    It only sees what a remote client would: board snapshots and its own hand.
    """

    def __init__(self, player: int, spec: AISpec | None = None, seed: int | None = None) -> None:
        self.player = player
        self.name = f"bot-{player}"
        self.spec = spec or AISpec()
        self._rng = random.Random(seed)
        self._board: BoardSnapshot | None = None
        self._hand: tuple[int, ...] = ()
        self._outbox: deque[ClientMessage] = deque()

    def send(self, message: ServerMessage) -> None:
        if isinstance(message, BoardSnapshot):
            self._board = message
        elif isinstance(message, HandSnapshot):
            self._hand = message.cards
        elif isinstance(message, ActionPrompt):
            self._outbox.clear()
            self._outbox.append(Declaration())
            self._outbox.append(self._decide())

    def _decide(self) -> ClientMessage:
        assert self._board is not None, "prompted before any board snapshot"
        b = self._board
        board = Board(positions=[b.pos0, b.pos1], scores=[b.score0, b.score1], deck=[], current_player=b.current_player)
        return choose_action(board, Player(id=self.player, hand=list(self._hand)), self.spec, self._rng)

    def receive(self) -> ClientMessage:
        if not self._outbox:
            raise TransportError(f"{self.name} has nothing to say")
        return self._outbox.popleft()

    def close(self) -> None:
        self._outbox.clear()
