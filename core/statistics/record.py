"""Cumulative win/loss record."""

import json
from dataclasses import dataclass, asdict
from typing import Any

from core.hand import Outcome


@dataclass
class Statistics:
    """Wins and losses across every settled round. Pushes are not counted."""

    wins: int = 0
    losses: int = 0

    def record(self, outcome: Outcome) -> None:
        """Count a settled round."""
        if outcome.is_win:
            self.wins += 1
        elif outcome.is_loss:
            self.losses += 1

    @property
    def games_decided(self) -> int:
        """Return the number of rounds that ended in a win or a loss."""
        return self.wins + self.losses

    @property
    def win_rate(self) -> float:
        """Return wins as a fraction of decided rounds."""
        if self.games_decided == 0:
            return 0.0
        return self.wins / self.games_decided

    def to_json(self) -> str:
        """Serialize to a JSON record."""
        return json.dumps(asdict(self))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Statistics":
        """Build from a decoded record; missing or invalid fields become 0."""
        return cls(
            wins=_count(data.get("wins")),
            losses=_count(data.get("losses")),
        )

    @classmethod
    def from_json(cls, raw: str) -> "Statistics":
        """
        Deserialize a JSON record.

        Raises:
            ValueError: If the record is not a JSON object
        """
        data = json.loads(raw)
        if not isinstance(data, dict):
            raise ValueError(f"Statistics record must be a JSON object, got {type(data).__name__}")
        return cls.from_dict(data)


def _count(value: Any) -> int:
    # bool is an int subclass
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value
