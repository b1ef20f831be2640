"""Read/write queries for the knowledge base"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import KnowledgeBase


def _scope(query, agent_id: Optional[str], include_global: bool):
    if agent_id is None:
        return query.where(KnowledgeBase.agent_id.is_(None))
    if include_global:
        return query.where(or_(KnowledgeBase.agent_id == agent_id, KnowledgeBase.agent_id.is_(None)))
    return query.where(KnowledgeBase.agent_id == agent_id)


async def list_knowledge(
    db: AsyncSession,
    agent_id: Optional[str],
    include_global: bool = True,
    active_only: bool = False,
) -> List[KnowledgeBase]:
    """Knowledge visible to an agent, highest priority then newest first.

    agent_id=None lists only global entries.
    """
    query = _scope(select(KnowledgeBase), agent_id, include_global)
    if active_only:
        query = query.where(KnowledgeBase.is_active == True)
    query = query.order_by(
        KnowledgeBase.priority.desc(), KnowledgeBase.created_at.desc(), KnowledgeBase.id
    )
    result = await db.execute(query)
    return list(result.scalars().all())


async def get_knowledge(db: AsyncSession, knowledge_id: str) -> Optional[KnowledgeBase]:
    result = await db.execute(select(KnowledgeBase).where(KnowledgeBase.id == knowledge_id))
    return result.scalar_one_or_none()


async def get_knowledge_by_topic(db: AsyncSession, agent_id: Optional[str], topic: str) -> Optional[KnowledgeBase]:
    result = await db.execute(
        select(KnowledgeBase)
        .where(KnowledgeBase.agent_id == agent_id, func.lower(KnowledgeBase.topic) == topic.lower())
        .limit(1)
    )
    return result.scalar_one_or_none()


async def search_knowledge(
    db: AsyncSession,
    agent_id: str,
    term: str,
    limit: int = 5,
) -> List[KnowledgeBase]:
    """Keyword match on topic or content among active entries visible to the agent."""
    pattern = f"%{term.lower()}%"
    query = _scope(select(KnowledgeBase), agent_id, include_global=True).where(
        KnowledgeBase.is_active == True,
        or_(KnowledgeBase.topic.ilike(pattern), KnowledgeBase.content.ilike(pattern)),
    )
    result = await db.execute(
        query.order_by(KnowledgeBase.priority.desc(), KnowledgeBase.id).limit(limit)
    )
    return list(result.scalars().all())


async def count_knowledge(db: AsyncSession, agent_id: Optional[str]) -> int:
    query = _scope(select(func.count(KnowledgeBase.id)), agent_id, include_global=False)
    result = await db.execute(query)
    return result.scalar_one()


async def create_knowledge(
    db: AsyncSession,
    agent_id: Optional[str],
    topic: str,
    content: str,
    embedding: Optional[List[float]],
    content_type: str = "text",
    keywords: Optional[List[str]] = None,
    priority: int = 0,
    metadata: Optional[Dict[str, Any]] = None,
) -> KnowledgeBase:
    item = KnowledgeBase(
        agent_id=agent_id,
        topic=topic,
        content=content,
        content_type=content_type,
        embedding=embedding,
        keywords=keywords or [],
        priority=priority,
        metadata_json=metadata or {},
    )
    db.add(item)
    await db.commit()
    await db.refresh(item)
    return item


async def update_knowledge(db: AsyncSession, item: KnowledgeBase, **fields) -> KnowledgeBase:
    for key, value in fields.items():
        setattr(item, key, value)
    item.updated_at = datetime.utcnow()
    await db.commit()
    await db.refresh(item)
    return item


async def delete_knowledge(db: AsyncSession, knowledge_id: str, agent_id: Optional[str] = None) -> int:
    """Delete an entry, only within agent_id's knowledge when one is given."""
    query = delete(KnowledgeBase).where(KnowledgeBase.id == knowledge_id)
    if agent_id:
        query = query.where(KnowledgeBase.agent_id == agent_id)
    result = await db.execute(query)
    await db.commit()
    return result.rowcount
