"""Dashboard API: P/L per trade and summary statistics."""

import logging
from datetime import tzinfo

from fastapi import APIRouter, Depends

from journal.api.deps import get_repository, get_timezone
from journal.schemas.dashboard import DashboardRequest, DashboardResponse, PLRead, SummaryRead
from journal.schemas.trade import TradeRead
from journal.services.dashboard_state import DashboardState, derive
from journal.services.repository import TradeRepository
from journal.services.trade_filters import available_filters

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.post("/summary", response_model=DashboardResponse)
def dashboard_summary(
    body: DashboardRequest,
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    """Recompute every statistic from a fresh snapshot of the journal."""
    state = DashboardState(
        trades=tuple(repo.get_all()),
        query=body.query.to_query(),
        options=body.options.to_options(),
    )
    view = derive(state, tz)
    logger.info(
        f"Summary over {len(view.visible_trades)} of {len(view.trades)} trades "
        f"(exit_policy={state.options.exit_policy})"
    )
    return DashboardResponse(
        trades=[TradeRead.from_snapshot(t, tz) for t in view.trades],
        summary=SummaryRead.from_summary(view.summary),
        pl={trade_id: PLRead.from_result(pl) for trade_id, pl in view.pl_by_trade_id.items()},
        available_filters=available_filters(view.trades, tz),
    )
