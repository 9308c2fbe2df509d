"""Pydantic schemas for the trades API."""

from datetime import date, datetime, tzinfo

from pydantic import BaseModel, Field, field_validator, model_validator

from journal.services.domain import HighObservation, TradeSnapshot
from journal.services.classifier import classify
from journal.services.trade_filters import TradeQuery
from journal.utils.constants import DAY_NAMES, OPTION_TYPES, SORT_ORDERS, TRADE_TYPES, VERIFIED_FILTERS
from journal.utils.timeutils import calendar_days_between


def _clean_ticker(value: str) -> str:
    text = value.strip().upper()
    if not text:
        raise ValueError("must not be empty")
    return text


def _clean_option_type(value: str) -> str:
    text = value.strip().lower()
    if text not in OPTION_TYPES:
        allowed = ", ".join(OPTION_TYPES)
        raise ValueError(f"must be one of: {allowed}")
    return text


class TradeCreate(BaseModel):
    trader: str = Field(default="", max_length=120)
    ticker: str = Field(min_length=1, max_length=16)
    average_entry: float = Field(gt=0)
    strike_price: float = Field(default=0.0, ge=0)
    option_type: str = "call"
    trade_datetime: datetime
    expire_datetime: datetime | None = None
    verified: bool = False
    excluded: bool = False
    treat_as_loss: bool = False

    @field_validator("ticker")
    @classmethod
    def _validate_ticker(cls, value: str) -> str:
        return _clean_ticker(value)

    @field_validator("option_type")
    @classmethod
    def _validate_option_type(cls, value: str) -> str:
        return _clean_option_type(value)


class TradeUpdate(BaseModel):
    trader: str | None = Field(default=None, max_length=120)
    ticker: str | None = Field(default=None, min_length=1, max_length=16)
    average_entry: float | None = Field(default=None, gt=0)
    strike_price: float | None = Field(default=None, ge=0)
    option_type: str | None = None
    trade_datetime: datetime | None = None
    expire_datetime: datetime | None = None
    verified: bool | None = None
    excluded: bool | None = None
    treat_as_loss: bool | None = None
    high_override_id: str | None = None  # explicit null clears the override

    # Omitted fields are left alone; an explicit null is only meaningful for
    # the override and the two timestamps
    @field_validator(
        "trader", "ticker", "average_entry", "strike_price", "option_type",
        "verified", "excluded", "treat_as_loss",
    )
    @classmethod
    def _reject_null(cls, value):
        if value is None:
            raise ValueError("may not be null")
        return value

    @field_validator("ticker")
    @classmethod
    def _validate_optional_ticker(cls, value: str | None) -> str | None:
        return _clean_ticker(value) if value is not None else None

    @field_validator("option_type")
    @classmethod
    def _validate_optional_option_type(cls, value: str | None) -> str | None:
        return _clean_option_type(value) if value is not None else None

    @field_validator("high_override_id")
    @classmethod
    def _blank_override_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


class HighCreate(BaseModel):
    price: float = Field(ge=0)
    high_datetime: datetime


class HighRead(BaseModel):
    id: str
    price: float
    high_datetime: datetime | None
    days_passed: int | None = None

    @classmethod
    def from_high(cls, high: HighObservation, entry_at: datetime | None, tz: tzinfo) -> "HighRead":
        return cls(
            id=high.id,
            price=high.price,
            high_datetime=high.observed_at,
            days_passed=calendar_days_between(entry_at, high.observed_at, tz),
        )


class TradeRead(BaseModel):
    id: str
    trader: str
    ticker: str
    average_entry: float
    strike_price: float
    option_type: str
    trade_datetime: datetime | None
    expire_datetime: datetime | None
    verified: bool
    excluded: bool
    treat_as_loss: bool
    high_override_id: str | None
    images: list[str]
    option_price_highs: list[HighRead]
    trade_types: list[str]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_snapshot(cls, trade: TradeSnapshot, tz: tzinfo) -> "TradeRead":
        return cls(
            id=trade.id,
            trader=trade.trader,
            ticker=trade.ticker,
            average_entry=trade.average_entry,
            strike_price=trade.strike_price,
            option_type=trade.option_type,
            trade_datetime=trade.entry_at,
            expire_datetime=trade.expiry_at,
            verified=trade.verified,
            excluded=trade.excluded,
            treat_as_loss=trade.treat_as_loss,
            high_override_id=trade.high_override_id,
            images=list(trade.images),
            option_price_highs=[HighRead.from_high(h, trade.entry_at, tz) for h in trade.highs],
            trade_types=sorted(classify(trade, tz)),
            created_at=trade.created_at,
            updated_at=trade.updated_at,
        )


class TradeFilterRequest(BaseModel):
    start_date: date | None = None
    end_date: date | None = None
    verified: str = "all"
    tickers: list[str] = Field(default_factory=list)
    trade_types: list[str] = Field(default_factory=list)
    days_of_week: list[str] = Field(default_factory=list)
    sort: str = "newest"

    @field_validator("verified")
    @classmethod
    def _validate_verified(cls, value: str) -> str:
        if value not in VERIFIED_FILTERS:
            allowed = ", ".join(VERIFIED_FILTERS)
            raise ValueError(f"must be one of: {allowed}")
        return value

    @field_validator("sort")
    @classmethod
    def _validate_sort(cls, value: str) -> str:
        if value not in SORT_ORDERS:
            allowed = ", ".join(SORT_ORDERS)
            raise ValueError(f"must be one of: {allowed}")
        return value

    @field_validator("trade_types")
    @classmethod
    def _validate_trade_types(cls, value: list[str]) -> list[str]:
        unknown = [t for t in value if t not in TRADE_TYPES]
        if unknown:
            raise ValueError(f"unknown trade types: {', '.join(unknown)}")
        return value

    @field_validator("days_of_week")
    @classmethod
    def _validate_days(cls, value: list[str]) -> list[str]:
        known = {d.lower() for d in DAY_NAMES}
        unknown = [d for d in value if d.strip().lower() not in known]
        if unknown:
            raise ValueError(f"unknown days: {', '.join(unknown)}")
        return value

    @model_validator(mode="after")
    def _validate_range(self):
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("start_date must be on or before end_date")
        return self

    def to_query(self) -> TradeQuery:
        return TradeQuery(
            start_date=self.start_date,
            end_date=self.end_date,
            verified=self.verified,
            tickers=tuple(self.tickers),
            trade_types=tuple(self.trade_types),
            days_of_week=tuple(self.days_of_week),
            sort=self.sort,
        )


class ImageDelete(BaseModel):
    image_url: str = Field(min_length=1)
