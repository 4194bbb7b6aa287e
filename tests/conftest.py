from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from fastapi.testclient import TestClient
from pymongo.errors import ExecutionTimeout, ServerSelectionTimeoutError

from app.config import settings
from app.functions.listing_view_functions import ViewEventStore, ViewStoreConfig, set_view_store

LISTING_A = "65a1f0c2e4b0a1b2c3d4e5f6"
LISTING_B = "65a1f0c2e4b0a1b2c3d4e5f7"
LISTING_C = "65a1f0c2e4b0a1b2c3d4e5f8"

T0 = datetime(2024, 1, 1, tzinfo=timezone.utc)


def at(seconds):
    return T0 + timedelta(seconds=seconds)


class UnreachableCollection:
    """Collection double whose every operation fails like a dead server."""

    def __init__(self, exc=None):
        self.exc = exc or ServerSelectionTimeoutError("No servers found yet")

    def insert_one(self, *args, **kwargs):
        raise self.exc

    def aggregate(self, *args, **kwargs):
        raise self.exc

    def count_documents(self, *args, **kwargs):
        raise self.exc

    def estimated_document_count(self, *args, **kwargs):
        raise self.exc

    def delete_many(self, *args, **kwargs):
        raise self.exc

    def create_index(self, *args, **kwargs):
        raise self.exc


@pytest.fixture
def collection():
    return mongomock.MongoClient().db.listing_views


@pytest.fixture
def store(collection):
    view_store = ViewEventStore(collection, ViewStoreConfig())
    view_store.ensure_indexes()
    set_view_store(view_store)
    yield view_store
    set_view_store(None)


@pytest.fixture
def unreachable_store():
    view_store = ViewEventStore(UnreachableCollection())
    set_view_store(view_store)
    yield view_store
    set_view_store(None)


@pytest.fixture
def timed_out_store():
    view_store = ViewEventStore(UnreachableCollection(ExecutionTimeout("operation exceeded time limit")))
    set_view_store(view_store)
    yield view_store
    set_view_store(None)


@pytest.fixture
def secret_key(monkeypatch):
    monkeypatch.setattr(settings, "SECRET_KEY", "test-secret-key-for-listing-views")
    return settings.SECRET_KEY


@pytest.fixture
def client():
    from app.main import app
    return TestClient(app)
