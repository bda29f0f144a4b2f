"""Repository Protocols for trades and their escrow entries."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pe_trade.domain.models import EscrowEntry, Trade


class TradeRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, trade_id: int) -> Trade | None: ...

    async def insert(self, db: AsyncSession, trade: Trade) -> Trade: ...

    async def mark_completed(self, db: AsyncSession, trade_id: int, completed_at: int) -> Trade: ...


class EscrowRepositoryProtocol(Protocol):
    async def get(self, db: AsyncSession, trade_id: int) -> EscrowEntry | None: ...

    async def insert(self, db: AsyncSession, entry: EscrowEntry) -> EscrowEntry: ...

    async def delete(self, db: AsyncSession, trade_id: int) -> None: ...
