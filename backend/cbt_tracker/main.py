# cbt tracker backend api
# fastapi app with async mongodb and jwt sessions: identity service and record store

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cbt_tracker.config import settings
from cbt_tracker.services.db import db
from cbt_tracker.routers import auth, entries, worksheets

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """startup: connect to mongodb. shutdown: close connection."""
    logger.info("Starting CBT Tracker backend...")
    await db.connect()
    logger.info("CBT Tracker backend ready")
    yield
    logger.info("Shutting down CBT Tracker backend...")
    await db.close()


app = FastAPI(
    title="CBT Tracker API",
    description="Backend API for the CBT Tracker journal: sessions, mood entries, worksheets",
    version="0.1.0",
    lifespan=lifespan,
)

# cors: allow frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL, "http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# register routers
app.include_router(auth.router)
app.include_router(entries.router)
app.include_router(worksheets.router)


@app.get("/health")
async def health_check():
    """basic health check endpoint"""
    return {"status": "ok", "service": "cbt-tracker-api"}
