"""
AgentHub - Main Application Entry Point
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from agenthub.config import settings
from agenthub.db import init_db
from agenthub.db.database import async_session_maker
from agenthub.api import threads_router, integrations_router, agents_router
from agenthub.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler - runs on startup and shutdown"""
    configure_logging()
    print(f"🧠 {settings.app_name} starting up ({settings.app_env})...")
    await init_db()
    print("✅ Database initialized")

    yield

    print(f"👋 {settings.app_name} shutting down")


app = FastAPI(
    title=settings.app_name,
    description="Multi-agent assistant backend: users, agents, integrations, threads and knowledge base",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(threads_router, prefix=settings.api_prefix)
app.include_router(integrations_router, prefix=settings.api_prefix)
app.include_router(agents_router, prefix=settings.api_prefix)


@app.get("/health")
async def health():
    """Health check with a database probe."""
    db_status = "connected"
    try:
        async with async_session_maker() as db:
            await db.execute(text("SELECT 1"))
    except Exception as e:
        logger.warning(f"Health check database probe failed: {e}")
        db_status = "error"

    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "version": "1.0.0",
        "environment": settings.app_env,
        "database": db_status,
        "embedding_model": settings.embedding_model,
    }
