from __future__ import annotations

import argparse
import logging
import socket
import sys
from dataclasses import dataclass
from pathlib import Path

from engarde.engine.match import MatchConfig, MatchState, new_match
from engarde.services.telemetry import TelemetryService

from .bot import BotParticipant
from .session import run_game
from .transport import Participant, TransportError, accept_participants

logger = logging.getLogger(__name__)

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 12052
DEFAULT_MAX_WIN = 100


@dataclass(frozen=True)
class ServerConfig:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    max_win: int = DEFAULT_MAX_WIN
    seed: int | None = None
    telemetry_path: Path | None = None
    bots: tuple[int, ...] = ()


def parse_args(argv: list[str] | None = None) -> ServerConfig:
    parser = argparse.ArgumentParser(prog="engarde-server", description="En Garde duel server")
    parser.add_argument(
        "max_win",
        nargs="?",
        type=int,
        default=DEFAULT_MAX_WIN,
        help="Round wins needed to take the game",
    )
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument("--seed", type=int, default=None, help="Shuffle seed, for reproducible games")
    parser.add_argument("--telemetry", type=Path, default=None, help="Append match results to this JSONL file")
    parser.add_argument(
        "--bot",
        type=int,
        choices=[0, 1],
        action="append",
        default=[],
        help="Fill this seat with the built-in AI (repeatable)",
    )
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return ServerConfig(
        host=args.host,
        port=args.port,
        max_win=args.max_win,
        seed=args.seed,
        telemetry_path=args.telemetry,
        bots=tuple(sorted(set(args.bot))),
    )


def _bot_seed(seed: int | None, player: int) -> int | None:
    # distinct mistake streams per seat, still reproducible from one seed
    return None if seed is None else seed + player


def _seat_participants(cfg: ServerConfig) -> dict[int, Participant]:
    seats: dict[int, Participant] = {p: BotParticipant(p, seed=_bot_seed(cfg.seed, p)) for p in cfg.bots}
    remote = [p for p in (0, 1) if p not in seats]
    if not remote:
        return seats
    try:
        listener = socket.create_server((cfg.host, cfg.port))
    except OSError as e:
        raise TransportError(f"cannot listen on {cfg.host}:{cfg.port}: {e}") from e
    with listener:
        logger.info("waiting for %d client(s) on %s:%d", len(remote), cfg.host, cfg.port)
        seats.update(accept_participants(listener, remote))
    return seats


def serve(cfg: ServerConfig, state: MatchState) -> int:
    telemetry = TelemetryService(cfg.telemetry_path) if cfg.telemetry_path else None
    seats = _seat_participants(cfg)
    try:
        winner = run_game(state, seats, telemetry)
    finally:
        for seat in seats.values():
            seat.close()
    logger.info("game over: player %d wins", winner)
    logger.info("p0: %d points, p1: %d points", state.board.score(0), state.board.score(1))
    return 0


def main(argv: list[str] | None = None) -> int:
    cfg = parse_args(argv)
    try:
        state = new_match(MatchConfig(max_win=cfg.max_win), seed=cfg.seed)
    except ValueError as e:
        logger.error("invalid configuration: %s", e)
        return 2
    try:
        return serve(cfg, state)
    except TransportError as e:
        logger.error("match aborted: %s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
