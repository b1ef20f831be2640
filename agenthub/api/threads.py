"""
Threads API

GET /api/threads - list conversation threads for the dashboard
"""

import logging
from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db import get_db, ThreadStatus
from agenthub.queries.threads import list_threads
from agenthub.schemas import ThreadListResponse, ThreadSummary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/threads", tags=["Threads"])


@router.get("", response_model=ThreadListResponse)
async def get_threads(
    status: Optional[ThreadStatus] = None,
    db: AsyncSession = Depends(get_db),
):
    """List threads, most recent interaction first."""
    try:
        threads = await list_threads(db, status=status)
    except Exception:
        logger.exception("Failed to list threads")
        return JSONResponse({"error": "Failed to load conversations"}, status_code=500)

    return ThreadListResponse(threads=[
        ThreadSummary(
            id=thread.id,
            contact_name=thread.contact_name,
            contact_phone=thread.external_id,
            last_message=None,
            status=thread.status or ThreadStatus.PENDING,
            message_count=thread.message_count or 0,
            last_interaction_at=thread.last_interaction_at or datetime.utcnow(),
        )
        for thread in threads
    ])
