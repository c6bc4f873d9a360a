from __future__ import annotations

import logging
import socket
import threading
from typing import Protocol

from engarde.protocol.codec import (
    MessageParseError,
    decode_client_message,
    decode_player_name,
    dumps_message,
)
from engarde.protocol.messages import ClientMessage, ConnectionStart, NameReceived, ServerMessage

logger = logging.getLogger(__name__)

LINE_END = b"\r\n"


class TransportError(RuntimeError):
    """The connection to a participant is gone. Fatal to the match."""


class Participant(Protocol):
    """One seat at the table as the session sees it.

    `receive` raises MessageParseError for a line that is not a valid client
    message (recoverable) and TransportError when the peer is gone (fatal).
    """

    def send(self, message: ServerMessage) -> None: ...

    def receive(self) -> ClientMessage: ...

    def close(self) -> None: ...


class SocketParticipant:
    """A remote client speaking one JSON object per CRLF-terminated line."""

    def __init__(self, sock: socket.socket, player: int) -> None:
        self.player = player
        self.name: str | None = None
        self._sock = sock
        self._reader = sock.makefile("rb")
        self._writer = sock.makefile("wb")

    def send(self, message: ServerMessage) -> None:
        data = dumps_message(message).encode("utf-8") + LINE_END
        try:
            self._writer.write(data)
            self._writer.flush()
        except OSError as e:
            raise TransportError(f"player {self.player}: send failed: {e}") from e

    def read_line(self) -> str:
        try:
            raw = self._reader.readline()
        except OSError as e:
            raise TransportError(f"player {self.player}: read failed: {e}") from e
        if not raw:
            raise TransportError(f"player {self.player}: connection closed")
        return raw.decode("utf-8", errors="replace").strip()

    def receive(self) -> ClientMessage:
        return decode_client_message(self.read_line())

    def handshake(self) -> str:
        """Tell the client its seat, take its name, acknowledge it."""
        self.send(ConnectionStart(client_id=self.player))
        line = self.read_line()
        try:
            self.name = decode_player_name(line).name
        except MessageParseError as e:
            # older clients send free-form names; the seat is what matters
            logger.warning("player %d sent an unexpected name message: %s", self.player, e)
            self.name = line
        self.send(NameReceived())
        logger.info("player %d joined as %r", self.player, self.name)
        return self.name

    def close(self) -> None:
        for f in (self._reader, self._writer):
            try:
                f.close()
            except OSError:
                pass
        self._sock.close()


def accept_participants(listener: socket.socket, seats: list[int]) -> dict[int, SocketParticipant]:
    """Accept one connection per seat, in seat order, and greet each on its own thread.

    A failed accept or handshake on any seat closes every joined connection
    and raises TransportError once all greetings have finished.
    """
    joined: dict[int, SocketParticipant] = {}
    failures: list[TransportError] = []
    threads: list[threading.Thread] = []

    def greet(participant: SocketParticipant) -> None:
        try:
            participant.handshake()
        except TransportError as e:
            failures.append(e)

    for seat in seats:
        try:
            conn, addr = listener.accept()
        except OSError as e:
            failures.append(TransportError(f"seat {seat}: accept failed: {e}"))
            break
        logger.info("seat %d connected from %s:%s", seat, *addr[:2])
        participant = SocketParticipant(conn, seat)
        joined[seat] = participant
        t = threading.Thread(target=greet, args=(participant,), name=f"handshake-{seat}", daemon=True)
        t.start()
        threads.append(t)

    for t in threads:
        t.join()
    if failures:
        for participant in joined.values():
            participant.close()
        raise failures[0]
    return joined
