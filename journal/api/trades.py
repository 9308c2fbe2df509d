"""Trade journal API: CRUD, highs, images and the filtered listing."""

import logging
from datetime import tzinfo

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from journal.api.deps import get_repository, get_timezone, get_trade_or_404
from journal.config import settings
from journal.schemas.trade import (
    HighCreate,
    HighRead,
    ImageDelete,
    TradeCreate,
    TradeFilterRequest,
    TradeRead,
    TradeUpdate,
)
from journal.services.domain import TradeSnapshot
from journal.services.images import build_image_filename, delete_image_file, save_image
from journal.services.repository import TradeRepository
from journal.services.trade_filters import apply_query, available_filters, sort_trades
from journal.utils.constants import SORT_ORDERS

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/trades", tags=["trades"])


@router.get("", response_model=list[TradeRead])
def list_trades(
    sort: str = "newest",
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    if sort not in SORT_ORDERS:
        raise HTTPException(status_code=422, detail=f"sort must be one of: {', '.join(SORT_ORDERS)}")
    trades = sort_trades(repo.get_all(), sort)
    logger.debug(f"Listing {len(trades)} trades")
    return [TradeRead.from_snapshot(t, tz) for t in trades]


@router.post("", response_model=TradeRead, status_code=201)
def create_trade(
    data: TradeCreate,
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    trade = repo.create(data.model_dump())
    return TradeRead.from_snapshot(trade, tz)


@router.post("/filtered")
def filtered_trades(
    body: TradeFilterRequest,
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    """Apply the dashboard query server-side and report the facets left."""
    all_trades = repo.get_all()
    trades = apply_query(all_trades, body.to_query(), tz)
    logger.info(f"Filtered {len(all_trades)} trades down to {len(trades)}")
    return {
        "trades": [TradeRead.from_snapshot(t, tz) for t in trades],
        "available_filters": available_filters(trades, tz),
    }


@router.get("/{trade_id}", response_model=TradeRead)
def get_trade(trade: TradeSnapshot = Depends(get_trade_or_404), tz: tzinfo = Depends(get_timezone)):
    return TradeRead.from_snapshot(trade, tz)


@router.put("/{trade_id}", response_model=TradeRead)
def update_trade(
    data: TradeUpdate,
    trade: TradeSnapshot = Depends(get_trade_or_404),
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    patch = data.model_dump(exclude_unset=True)

    override_id = patch.get("high_override_id")
    if override_id is not None and trade.find_high(override_id) is None:
        raise HTTPException(status_code=422, detail="high_override_id must reference one of this trade's highs")

    updated = repo.update(trade.id, patch)
    logger.info(f"Updated trade {trade.id}: {sorted(patch)}")
    return TradeRead.from_snapshot(updated, tz)


@router.delete("/{trade_id}")
def delete_trade(trade_id: str, repo: TradeRepository = Depends(get_repository)):
    deleted = repo.delete(trade_id)
    if deleted is None:
        raise HTTPException(status_code=404, detail="Trade not found")
    for url in deleted.images:
        delete_image_file(settings.upload_dir, url)
    return {"message": "Trade deleted", "id": deleted.id}


# ---------------------------------------------------------------------------
# Highs
# ---------------------------------------------------------------------------

@router.post("/{trade_id}/highs", response_model=HighRead, status_code=201)
def add_high(
    data: HighCreate,
    trade: TradeSnapshot = Depends(get_trade_or_404),
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    high = repo.append_high(trade.id, data.price, data.high_datetime)
    return HighRead.from_high(high, trade.entry_at, tz)


@router.delete("/{trade_id}/highs/{high_id}")
def delete_high(
    high_id: str,
    trade: TradeSnapshot = Depends(get_trade_or_404),
    repo: TradeRepository = Depends(get_repository),
):
    removed = repo.delete_high(trade.id, high_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="High not found")
    return {"message": "High deleted", "id": removed.id}


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

@router.post("/{trade_id}/images", status_code=201)
async def upload_image(
    image: UploadFile = File(...),
    trade: TradeSnapshot = Depends(get_trade_or_404),
    repo: TradeRepository = Depends(get_repository),
    tz: tzinfo = Depends(get_timezone),
):
    content = await image.read()
    if not content:
        raise HTTPException(status_code=400, detail="No file uploaded")

    filename = build_image_filename(trade, image.filename or "", tz)
    url = save_image(settings.upload_dir, filename, content)
    repo.add_image(trade.id, url)
    logger.info(f"Uploaded image {filename} for trade {trade.id}")
    return {"url": url}


@router.delete("/{trade_id}/images")
def remove_image(
    body: ImageDelete,
    trade: TradeSnapshot = Depends(get_trade_or_404),
    repo: TradeRepository = Depends(get_repository),
):
    if body.image_url not in trade.images:
        raise HTTPException(status_code=404, detail="Image not found on this trade")
    repo.remove_image(trade.id, body.image_url)
    delete_image_file(settings.upload_dir, body.image_url)
    logger.info(f"Deleted image record from trade {trade.id}: {body.image_url}")
    return {"message": "Image deleted", "image_url": body.image_url}
