"""Read/write queries for conversation threads"""

from datetime import datetime
from typing import Dict, List, Optional

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import Thread, ThreadStatus


async def list_threads(
    db: AsyncSession,
    user_id: Optional[str] = None,
    status: Optional[ThreadStatus] = None,
    limit: Optional[int] = None,
    offset: int = 0,
) -> List[Thread]:
    """Threads, most recent interaction first.

    Ties on last_interaction_at are broken by id so one listing is stable.
    """
    query = select(Thread)
    if user_id:
        query = query.where(Thread.user_id == user_id)
    if status:
        query = query.where(Thread.status == ThreadStatus(status).value)
    query = query.order_by(Thread.last_interaction_at.desc(), Thread.id).offset(offset)
    if limit is not None:
        query = query.limit(limit)
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_thread(db: AsyncSession, thread_id: str) -> Optional[Thread]:
    result = await db.execute(select(Thread).where(Thread.id == thread_id))
    return result.scalar_one_or_none()


async def get_thread_by_external_id(db: AsyncSession, user_id: str, external_id: str) -> Optional[Thread]:
    result = await db.execute(
        select(Thread).where(Thread.user_id == user_id, Thread.external_id == external_id)
    )
    return result.scalar_one_or_none()


async def touch_thread(db: AsyncSession, thread_id: str, at: Optional[datetime] = None) -> int:
    """Record an interaction. last_interaction_at never moves backwards."""
    at = at or datetime.utcnow()
    result = await db.execute(
        update(Thread)
        .where(Thread.id == thread_id, Thread.last_interaction_at < at)
        .values(last_interaction_at=at, updated_at=datetime.utcnow())
    )
    await db.commit()
    return result.rowcount


async def count_threads_by_status(db: AsyncSession, user_id: str) -> Dict[str, int]:
    result = await db.execute(
        select(Thread.status, func.count(Thread.id))
        .where(Thread.user_id == user_id)
        .group_by(Thread.status)
    )
    counts = {status.value: 0 for status in ThreadStatus}
    for status, count in result.all():
        counts[status] = count
    counts["total"] = sum(counts.values())
    return counts


async def create_thread(
    db: AsyncSession,
    user_id: str,
    external_id: str,
    contact_name: Optional[str] = None,
    agent_id: Optional[str] = None,
    status: ThreadStatus = ThreadStatus.ACTIVE,
) -> Thread:
    thread = Thread(
        user_id=user_id,
        external_id=external_id,
        contact_name=contact_name,
        agent_id=agent_id,
        status=ThreadStatus(status).value,
    )
    db.add(thread)
    await db.commit()
    await db.refresh(thread)
    return thread
