# /app/main.py

import logging

# --- Core FastAPI Imports ---
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager

from .core.config import LOG_LEVEL, CREATE_TABLES_ON_STARTUP

# --- Application-specific Router Imports ---
from .routers import reports_router

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    if CREATE_TABLES_ON_STARTUP:
        from .db.base import Base
        from .db.database import engine
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables created.")
    yield


# --- FastAPI Application Instance Creation ---
app = FastAPI(
    title="School Reports API",
    description="Academic reporting and aggregation for the school administration backend.",
    version="1.0.0",
    lifespan=lifespan
)

# --- Middleware Configuration ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- API Router Inclusion ---
app.include_router(reports_router.router, prefix="/api/reports", tags=["Reports"])

# --- Root / Health Check Endpoint ---
@app.get("/", tags=["Health Check"])
async def read_root():
    """A simple health check endpoint to confirm the API is online."""
    return {"status": "School Reports API is running!", "version": app.version}
