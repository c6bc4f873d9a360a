from __future__ import annotations

import json
import random
import socket

from engarde.server.main import _seat_participants, main, parse_args


def test_parse_args_defaults() -> None:
    cfg = parse_args([])
    assert cfg.max_win == 100
    assert cfg.port == 12052
    assert cfg.bots == ()


def test_parse_args_positional_max_win_and_bots() -> None:
    cfg = parse_args(["5", "--bot", "1", "--bot", "0", "--bot", "1", "--seed", "7"])
    assert cfg.max_win == 5
    assert cfg.bots == (0, 1)
    assert cfg.seed == 7


def test_bot_only_game_runs_to_completion(tmp_path) -> None:
    path = tmp_path / "results.jsonl"
    rc = main(["2", "--bot", "0", "--bot", "1", "--seed", "3", "--telemetry", str(path)])
    assert rc == 0
    last = json.loads(path.read_text(encoding="utf-8").splitlines()[-1])
    assert last["type"] == "game_ended"
    assert max(last["payload"]["scores"]) == 2


def test_invalid_max_win_is_rejected() -> None:
    assert main(["0", "--bot", "0", "--bot", "1"]) == 2


def test_bot_seats_get_distinct_seeds() -> None:
    seats = _seat_participants(parse_args(["3", "--bot", "0", "--bot", "1", "--seed", "11"]))
    assert [seats[p]._rng.random() for p in (0, 1)] == [random.Random(11).random(), random.Random(12).random()]

    unseeded = _seat_participants(parse_args(["--bot", "0", "--bot", "1"]))
    assert sorted(unseeded) == [0, 1]


def test_occupied_port_aborts_with_transport_exit_code() -> None:
    with socket.create_server(("127.0.0.1", 0)) as busy:
        port = busy.getsockname()[1]
        assert main(["1", "--bot", "0", "--host", "127.0.0.1", "--port", str(port)]) == 1
