import logging
from datetime import timedelta
from fastapi import APIRouter, BackgroundTasks, HTTPException
from app.config import settings
from app.functions import listing_view_functions
from app.functions.listing_view_functions import get_view_store, is_valid_listing_id
from app.utils.errors import StorageUnavailable
from app.utils.timezone_utils import get_utc_now

router = APIRouter()
logger = logging.getLogger(__name__)

def _clamp(value, default, upper):
    if value is None:
        return default
    return min(upper, max(1, value))

@router.post("/{listing_id}/view")
async def record_listing_view(listing_id: str, background_tasks: BackgroundTasks):
    if not is_valid_listing_id(listing_id):
        raise HTTPException(status_code=400, detail="Invalid listing id")
    # Written after the response is sent; a failed write is only logged
    background_tasks.add_task(listing_view_functions.record_view_safely, listing_id)
    return {"success": True}

@router.get("/trending")
def get_trending_listings(limit: int = None, timeframe: int = None):
    limit = _clamp(limit, settings.TRENDING_DEFAULT_LIMIT, settings.TRENDING_MAX_LIMIT)
    if not timeframe or timeframe <= 0:
        timeframe = settings.TRENDING_DEFAULT_TIMEFRAME_HOURS
    timeframe = min(timeframe, settings.TRENDING_MAX_TIMEFRAME_HOURS)
    try:
        store = get_view_store()
        now = get_utc_now()
        trending = store.rank_trending(
            now - timedelta(hours=timeframe), now, limit
        )
    except StorageUnavailable as e:
        logger.warning(f"Trending listings unavailable: {e}")
        return {"success": True, "data": {"listings": [], "available": False}}
    listings = [
        {
            "listing_id": item.listing_id,
            "view_count": item.count,
            "last_viewed_at": item.last_viewed_at.isoformat(),
        }
        for item in trending
    ]
    return {"success": True, "data": {"listings": listings, "available": True}}

@router.get("/{listing_id}/views/recent")
def get_recent_listing_views(listing_id: str, limit: int = 10):
    if not is_valid_listing_id(listing_id):
        raise HTTPException(status_code=400, detail="Invalid listing id")
    limit = _clamp(limit, 10, settings.RECENT_VIEWS_MAX_LIMIT)
    try:
        viewed = get_view_store().recent_events_for_listing(listing_id, limit)
    except StorageUnavailable as e:
        logger.warning(f"Recent views unavailable for {listing_id}: {e}")
        raise HTTPException(status_code=503, detail="View history unavailable")
    return {
        "success": True,
        "data": {"listing_id": listing_id, "viewed_at": [ts.isoformat() for ts in viewed]},
    }
