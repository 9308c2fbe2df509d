"""Shared API dependencies."""

from datetime import tzinfo

from fastapi import Depends, HTTPException, status
from sqlmodel import Session

from journal.config import settings
from journal.database import get_session
from journal.services.domain import TradeSnapshot
from journal.services.repository import TradeRepository
from journal.utils.timeutils import resolve_timezone


def get_repository(session: Session = Depends(get_session)) -> TradeRepository:
    return TradeRepository(session)


def get_timezone() -> tzinfo:
    """Zone used for calendar-day questions (0DTE, weekdays, days passed)."""
    return resolve_timezone(settings.timezone)


def get_trade_or_404(trade_id: str, repo: TradeRepository = Depends(get_repository)) -> TradeSnapshot:
    trade = repo.find_by_id(trade_id)
    if trade is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Trade not found")
    return trade
