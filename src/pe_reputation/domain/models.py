"""Domain models for pe_reputation: pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime

DEFAULT_SCORE = 500
MIN_SCORE = 0
MAX_SCORE = 1000


@dataclass
class ReputationRecord:
    identity: str
    total_trades: int = 0
    successful_trades: int = 0
    score: int = DEFAULT_SCORE
    updated_at: datetime | None = None

    @classmethod
    def default_for(cls, identity: str) -> "ReputationRecord":
        """A record that has never been materialised: (0, 0, 500)."""
        return cls(identity=identity)

    def as_tuple(self) -> tuple[int, int, int]:
        return self.total_trades, self.successful_trades, self.score
