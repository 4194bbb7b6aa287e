from datetime import timedelta
from app.functions.listing_view_functions import get_view_store
from app.utils.timezone_utils import get_utc_now

POPULAR_LISTINGS_LIMIT = 20
DASHBOARD_WINDOW_DAYS = 7

def get_view_metrics(now=None):
    """View counts and the most viewed listings of the last week for the admin dashboard."""
    store = get_view_store()
    now = now or get_utc_now()
    since = now - timedelta(days=DASHBOARD_WINDOW_DAYS)
    popular = store.rank_trending(since, now, POPULAR_LISTINGS_LIMIT)
    return {
        "total_views": store.count_views(),
        "views_last_7_days": store.count_views(since),
        "popular_listings": [
            {"listing_id": item.listing_id, "view_count": item.count}
            for item in popular
        ],
    }
