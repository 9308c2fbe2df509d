"""TradeHigh model: a price peak observed after entry, owned by one trade."""

import uuid
from datetime import datetime

from sqlmodel import SQLModel, Field


class TradeHigh(SQLModel, table=True):
    __tablename__ = "trade_high"

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    trade_id: str = Field(foreign_key="trade.id", index=True)
    price: float
    high_datetime: datetime | None = None
    position: int = 0  # insertion order within the trade; exit ranking ties depend on it
