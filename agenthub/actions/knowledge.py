"""Knowledge base server actions"""

import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.queries.knowledge import delete_knowledge
from agenthub.schemas import ActionResult, KnowledgeCreate
from agenthub.services.knowledge_service import KnowledgeService

logger = logging.getLogger(__name__)


async def add_knowledge_action(
    db: AsyncSession,
    agent_id: Optional[str],
    data: KnowledgeCreate,
    knowledge_service: Optional[KnowledgeService] = None,
) -> ActionResult:
    try:
        service = knowledge_service or KnowledgeService()
        await service.add_knowledge(db, agent_id, data)
    except Exception:
        await db.rollback()
        logger.exception(f"Failed to add knowledge '{data.topic}' for agent {agent_id}")
        return ActionResult(success=False, error="Failed to add knowledge")
    return ActionResult(success=True)


async def remove_knowledge_action(db: AsyncSession, knowledge_id: str, agent_id: Optional[str] = None) -> ActionResult:
    try:
        deleted = await delete_knowledge(db, knowledge_id, agent_id)
    except Exception:
        await db.rollback()
        logger.exception(f"Failed to remove knowledge {knowledge_id} (agent {agent_id})")
        return ActionResult(success=False, error="Failed to remove knowledge")
    if not deleted:
        logger.info(f"Knowledge {knowledge_id} not found for agent {agent_id}")
    return ActionResult(success=True)
