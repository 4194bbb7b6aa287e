import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, NamedTuple, Optional, Tuple

from bson import ObjectId
from pymongo.errors import PyMongoError

from app.config import settings
from app.db import get_db
from app.utils.errors import InvalidReference, StorageUnavailable, translate_storage_error
from app.utils.timezone_utils import get_utc_now, to_storage, from_storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexSpec:
    name: str
    keys: Tuple[Tuple[str, int], ...]


# (listingId, viewedAt desc) serves per-listing recency lookups,
# (viewedAt desc) bounds the trending window scan.
DEFAULT_INDEXES = (
    IndexSpec("listing_recent", (("listingId", 1), ("viewedAt", -1))),
    IndexSpec("recent", (("viewedAt", -1),)),
)


@dataclass(frozen=True)
class ViewStoreConfig:
    collection_name: str = "listing_views"
    indexes: Tuple[IndexSpec, ...] = field(default=DEFAULT_INDEXES)
    query_timeout_ms: int = 2000
    retention_days: int = 0

    @classmethod
    def from_settings(cls):
        return cls(
            collection_name=settings.LISTING_VIEWS_COLLECTION,
            query_timeout_ms=settings.VIEW_QUERY_TIMEOUT_MS,
            retention_days=settings.VIEW_RETENTION_DAYS,
        )


class TrendingListing(NamedTuple):
    listing_id: str
    count: int
    last_viewed_at: datetime


def parse_listing_id(listing_id) -> ObjectId:
    """Return ``listing_id`` as an ObjectId or raise InvalidReference."""
    if isinstance(listing_id, ObjectId):
        return listing_id
    if isinstance(listing_id, str) and len(listing_id) == 24 and ObjectId.is_valid(listing_id):
        return ObjectId(listing_id)
    raise InvalidReference(listing_id)


def is_valid_listing_id(listing_id) -> bool:
    try:
        parse_listing_id(listing_id)
    except InvalidReference:
        return False
    return True


class ViewEventStore:
    """Append-only log of listing views backed by a MongoDB collection.

    Documents look like ``{"_id": ObjectId, "listingId": ObjectId, "viewedAt": datetime}``.
    Events are never updated; they are inserted by ``record_view`` and only
    removed by the retention helpers.
    """

    def __init__(self, collection, config: Optional[ViewStoreConfig] = None):
        self.collection = collection
        self.config = config or ViewStoreConfig()

    def ensure_indexes(self):
        for spec in self.config.indexes:
            try:
                self.collection.create_index(list(spec.keys), name=spec.name)
            except PyMongoError as e:
                logger.debug("%s index create skipped: %s", spec.name, e)

    def record_view(self, listing_id, occurred_at: Optional[datetime] = None) -> bool:
        """Append one view event.

        Raises InvalidReference for a malformed id. Storage failures are
        logged and reported through the return value only, so a page view
        never fails because telemetry could not be written.
        """
        oid = parse_listing_id(listing_id)
        viewed_at = to_storage(occurred_at or get_utc_now())
        try:
            self.collection.insert_one({"listingId": oid, "viewedAt": viewed_at})
        except PyMongoError as e:
            logger.warning("Failed to record view for listing %s: %s", oid, e)
            return False
        return True

    def rank_trending(self, window_start: datetime, window_end: datetime, limit: int) -> List[TrendingListing]:
        """Most viewed listings with ``window_start <= viewedAt < window_end``.

        Ordered by view count, then by latest view, both descending.
        """
        if limit <= 0:
            return []
        start, end = to_storage(window_start), to_storage(window_end)
        if end <= start:
            return []
        pipeline = [
            {"$match": {"viewedAt": {"$gte": start, "$lt": end}}},
            {"$group": {
                "_id": "$listingId",
                "count": {"$sum": 1},
                "lastViewedAt": {"$max": "$viewedAt"},
            }},
            {"$sort": {"count": -1, "lastViewedAt": -1, "_id": 1}},
            {"$limit": limit},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline, maxTimeMS=self.config.query_timeout_ms))
        except PyMongoError as e:
            raise translate_storage_error(e) from e
        return [
            TrendingListing(str(d["_id"]), d["count"], from_storage(d["lastViewedAt"]))
            for d in docs
        ]

    def recent_events_for_listing(self, listing_id, limit: int) -> List[datetime]:
        oid = parse_listing_id(listing_id)
        if limit <= 0:
            return []
        pipeline = [
            {"$match": {"listingId": oid}},
            {"$sort": {"viewedAt": -1}},
            {"$limit": limit},
            {"$project": {"_id": 0, "viewedAt": 1}},
        ]
        try:
            docs = list(self.collection.aggregate(pipeline, maxTimeMS=self.config.query_timeout_ms))
        except PyMongoError as e:
            raise translate_storage_error(e) from e
        return [from_storage(d["viewedAt"]) for d in docs]

    def trending_listing_ids(self, limit: int, timeframe_hours: int = 24, now: Optional[datetime] = None) -> List[str]:
        now = now or get_utc_now()
        since = now - timedelta(hours=timeframe_hours)
        return [t.listing_id for t in self.rank_trending(since, now, limit)]

    def count_views(self, since: Optional[datetime] = None) -> int:
        try:
            query = {} if since is None else {"viewedAt": {"$gte": to_storage(since)}}
            return self.collection.count_documents(query, maxTimeMS=self.config.query_timeout_ms)
        except PyMongoError as e:
            raise translate_storage_error(e) from e

    def prune_before(self, cutoff: datetime) -> int:
        try:
            result = self.collection.delete_many({"viewedAt": {"$lt": to_storage(cutoff)}})
        except PyMongoError as e:
            raise translate_storage_error(e) from e
        return result.deleted_count

    def prune_expired(self, now: Optional[datetime] = None) -> int:
        if self.config.retention_days <= 0:
            return 0
        cutoff = (now or get_utc_now()) - timedelta(days=self.config.retention_days)
        deleted = self.prune_before(cutoff)
        logger.info("Pruned %d listing views older than %s", deleted, cutoff.isoformat())
        return deleted


_store: Optional[ViewEventStore] = None
_store_lock = threading.Lock()


def get_view_store() -> ViewEventStore:
    """Process-wide store; built and indexed once on first use."""
    global _store
    if _store is None:
        with _store_lock:
            if _store is None:
                config = ViewStoreConfig.from_settings()
                try:
                    collection = get_db()[config.collection_name]
                except PyMongoError as e:
                    raise translate_storage_error(e) from e
                store = ViewEventStore(collection, config)
                store.ensure_indexes()
                _store = store
    return _store


def set_view_store(store: Optional[ViewEventStore]):
    global _store
    with _store_lock:
        _store = store


def record_view_safely(listing_id, occurred_at: Optional[datetime] = None) -> bool:
    """Fire-and-forget entry point for the serving layer; never raises."""
    try:
        return get_view_store().record_view(listing_id, occurred_at)
    except InvalidReference as e:
        logger.warning("%s", e)
    except StorageUnavailable as e:
        logger.warning("View store unavailable: %s", e)
    return False


def prune_expired_views():
    """Scheduled retention sweep."""
    try:
        return get_view_store().prune_expired()
    except StorageUnavailable as e:
        logger.error(f"Listing view retention sweep failed: {e}")
        return 0
