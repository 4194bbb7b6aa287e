import logging
from fastapi import FastAPI
from app.routes import listings, admin
from fastapi.middleware.cors import CORSMiddleware
from apscheduler.schedulers.background import BackgroundScheduler
from app.config.settings import LOG_LEVEL, VIEW_RETENTION_DAYS
from app.db import close_client
from app.functions import listing_view_functions
from contextlib import asynccontextmanager

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

scheduler = BackgroundScheduler()

@asynccontextmanager
async def lifespan(app):
    # Builds the shared store and its indexes before the first request
    listing_view_functions.get_view_store()
    scheduler.start()
    yield
    scheduler.shutdown()
    close_client()

app = FastAPI(lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Events are kept forever unless a retention horizon is configured
if VIEW_RETENTION_DAYS > 0:
    scheduler.add_job(listing_view_functions.prune_expired_views, 'interval', days=1)

app.include_router(listings.router, prefix="/api/listings", tags=["Listings"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])

@app.get("/")
def root():
    return {"message": "Job Listings Backend Running"}
