"""Reputation arithmetic: bounded score updates per trade outcome.

| Outcome    | total_trades | successful_trades | score               |
|------------|--------------|-------------------|---------------------|
| successful | +1           | +1                | +10, capped at 1000 |
| failed     | +1           | unchanged         | -20, floored at 0   |
"""

from src.pe_reputation.domain.models import MAX_SCORE, MIN_SCORE, ReputationRecord

SUCCESS_REWARD = 10
FAILURE_PENALTY = 20


def clamp_score(score: int) -> int:
    return max(MIN_SCORE, min(MAX_SCORE, score))


def apply_outcome(record: ReputationRecord, successful: bool) -> ReputationRecord:
    """Return a new record with one more trade outcome applied."""
    delta = SUCCESS_REWARD if successful else -FAILURE_PENALTY
    return ReputationRecord(
        identity=record.identity,
        total_trades=record.total_trades + 1,
        successful_trades=record.successful_trades + (1 if successful else 0),
        score=clamp_score(record.score + delta),
        updated_at=record.updated_at,
    )
