from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping

from engarde.engine.match import MatchState
from engarde.engine.types import RoundEnd


@dataclass
class TelemetryService:
    """Append-only JSONL log of match results."""

    path: Path

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def round_ended(self, state: MatchState, result: RoundEnd) -> None:
        self.log(
            "round_ended",
            {
                "seed": state.seed,
                "round": state.round_number,
                "winner": result.winner,
                "reason": result.reason,
                "scores": list(state.board.scores),
            },
        )

    def game_ended(self, state: MatchState) -> None:
        self.log(
            "game_ended",
            {
                "seed": state.seed,
                "rounds": state.round_number,
                "winner": state.winner,
                "scores": list(state.board.scores),
            },
        )
