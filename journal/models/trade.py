"""Trade model: one logged option position."""

import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON
from sqlmodel import SQLModel, Field, Column


def _new_id() -> str:
    return str(uuid.uuid4())


class Trade(SQLModel, table=True):
    __tablename__ = "trade"

    id: str = Field(default_factory=_new_id, primary_key=True)
    trader: str = ""
    ticker: str = Field(index=True)  # stored uppercase
    average_entry: float = 0.0  # per-share premium paid
    strike_price: float = 0.0
    option_type: str = "call"  # "call" or "put"
    trade_datetime: datetime | None = Field(default=None, index=True)
    expire_datetime: datetime | None = None

    verified: bool = False
    excluded: bool = False  # hidden from statistics, still listed
    treat_as_loss: bool = False
    high_override_id: str | None = None  # trade_high.id pinned as the exit

    images: list[str] = Field(default_factory=list, sa_column=Column(JSON))

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
