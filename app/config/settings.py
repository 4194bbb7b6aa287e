from dotenv import load_dotenv
import os

load_dotenv()

def _int(name: str, default: int) -> int:
	value = os.getenv(name)
	if value is None or not value.strip():
		return default
	try:
		return int(value.strip())
	except ValueError:
		return default

MONGO_URL = os.getenv("MONGO_URL", "mongodb://localhost:27017")
DB_NAME = os.getenv("DB_NAME", "job_portal")
SECRET_KEY = os.getenv("SECRET_KEY")
ALGORITHM = "HS256"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Bounds how long a single operation waits on an unreachable server
MONGO_SERVER_SELECTION_TIMEOUT_MS = _int("MONGO_SERVER_SELECTION_TIMEOUT_MS", 5000)

# Listing view tracking
LISTING_VIEWS_COLLECTION = os.getenv("LISTING_VIEWS_COLLECTION", "listing_views")
VIEW_QUERY_TIMEOUT_MS = _int("VIEW_QUERY_TIMEOUT_MS", 2000)
VIEW_RETENTION_DAYS = _int("VIEW_RETENTION_DAYS", 0)  # 0 keeps events forever

# Trending endpoint
TRENDING_DEFAULT_LIMIT = _int("TRENDING_DEFAULT_LIMIT", 5)
TRENDING_MAX_LIMIT = _int("TRENDING_MAX_LIMIT", 10)
TRENDING_DEFAULT_TIMEFRAME_HOURS = _int("TRENDING_DEFAULT_TIMEFRAME_HOURS", 168)
TRENDING_MAX_TIMEFRAME_HOURS = _int("TRENDING_MAX_TIMEFRAME_HOURS", 24 * 365)
RECENT_VIEWS_MAX_LIMIT = _int("RECENT_VIEWS_MAX_LIMIT", 50)
