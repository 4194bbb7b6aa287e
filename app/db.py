import threading
from pymongo import MongoClient
from app.config.settings import MONGO_URL, DB_NAME, MONGO_SERVER_SELECTION_TIMEOUT_MS

# One client per process; pymongo pools connections internally and is thread-safe.
_client = None
_lock = threading.Lock()


def get_client() -> MongoClient:
    global _client
    if _client is None:
        with _lock:
            if _client is None:
                _client = MongoClient(
                    MONGO_URL,
                    serverSelectionTimeoutMS=MONGO_SERVER_SELECTION_TIMEOUT_MS,
                )
    return _client


def get_db():
    return get_client()[DB_NAME]


def close_client() -> None:
    global _client
    with _lock:
        if _client is not None:
            _client.close()
            _client = None
