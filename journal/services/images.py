"""Trade screenshot storage on local disk."""

import logging
from datetime import datetime, tzinfo
from pathlib import Path

from journal.services.domain import TradeSnapshot
from journal.utils.timeutils import to_local

logger = logging.getLogger(__name__)

URL_PREFIX = "/uploads/"

_PATH_SEPARATORS = ("/", "\\")


def _filename_part(value) -> str:
    """Text safe to embed in a single path component (BRK/B -> BRK-B)."""
    text = str(value)
    for sep in _PATH_SEPARATORS:
        text = text.replace(sep, "-")
    return text


def build_image_filename(
    trade: TradeSnapshot,
    original_name: str,
    tz: tzinfo,
    uploaded_at: datetime | None = None,
) -> str:
    """Name an upload after the trade it documents.

    Format: 2025-01-06_0930AM_SPY_580.0_1-25_C_20250106153000.png
    """
    uploaded_at = to_local(uploaded_at or datetime.now(tz), tz)
    entry = to_local(trade.entry_at, tz) or uploaded_at

    entry_part = entry.strftime("%Y-%m-%d_%I%M%p")
    entry_price = str(trade.average_entry).replace(".", "-")
    side = "C" if trade.option_type.lower() == "call" else "P"
    stamp = uploaded_at.strftime("%Y%m%d%H%M%S")
    ext = _filename_part(Path(original_name or "").suffix)

    ticker = _filename_part(trade.ticker)
    strike = _filename_part(trade.strike_price)

    return f"{entry_part}_{ticker}_{strike}_{entry_price}_{side}_{stamp}{ext}"


def save_image(upload_dir: str | Path, filename: str, content: bytes) -> str:
    """Write the file and return the URL it is served under."""
    directory = Path(upload_dir)
    directory.mkdir(parents=True, exist_ok=True)
    (directory / filename).write_bytes(content)
    logger.info(f"Saved image {filename} ({len(content)} bytes)")
    return URL_PREFIX + filename


def delete_image_file(upload_dir: str | Path, image_url: str) -> bool:
    """Remove the file behind an upload URL. Returns False when nothing was deleted."""
    name = Path(image_url).name
    if not name:
        return False
    path = Path(upload_dir) / name
    try:
        path.unlink()
    except FileNotFoundError:
        logger.warning(f"Image file already gone: {path}")
        return False
    return True
