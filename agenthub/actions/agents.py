"""Agent server actions"""

import logging
from typing import Any, Dict, Union

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.queries.agents import update_agent
from agenthub.schemas import ActionResult, AgentUpdate

logger = logging.getLogger(__name__)


async def update_agent_action(
    db: AsyncSession,
    agent_id: str,
    data: Union[AgentUpdate, Dict[str, Any]],
) -> ActionResult:
    """Apply a partial update to an agent.

    Succeeds even when no agent matches; callers check the effect themselves.
    """
    try:
        update = data if isinstance(data, AgentUpdate) else AgentUpdate.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Rejected update for agent {agent_id}: {e}")
        return ActionResult(success=False, error="Invalid agent data")

    try:
        matched = await update_agent(db, agent_id, update.model_dump(exclude_unset=True))
    except Exception:
        await db.rollback()
        logger.exception(f"Failed to update agent {agent_id}")
        return ActionResult(success=False, error="Failed to update agent")

    if not matched:
        logger.info(f"Update for agent {agent_id} matched no rows")
    return ActionResult(success=True)
