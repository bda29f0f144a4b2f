"""Pydantic schemas for pe_reputation API."""

from pydantic import BaseModel

from src.pe_reputation.domain.models import ReputationRecord


class ReputationResponse(BaseModel):
    identity: str
    total_trades: int
    successful_trades: int
    score: int

    @classmethod
    def from_domain(cls, record: ReputationRecord) -> "ReputationResponse":
        return cls(
            identity=record.identity,
            total_trades=record.total_trades,
            successful_trades=record.successful_trades,
            score=record.score,
        )
