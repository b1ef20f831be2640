"""Queries for agents"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import Agent
from agenthub.errors import AmbiguousGoogleIntegrationError


async def get_agent(db: AsyncSession, agent_id: str) -> Optional[Agent]:
    result = await db.execute(select(Agent).where(Agent.id == agent_id))
    return result.scalar_one_or_none()


async def list_agents(db: AsyncSession, user_id: Optional[str] = None) -> List[Agent]:
    query = select(Agent)
    if user_id:
        query = query.where(Agent.user_id == user_id)
    result = await db.execute(query.order_by(Agent.created_at.desc(), Agent.id))
    return list(result.scalars().all())


def normalize_google_integration(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Keep an agent on exactly one Google integration source.

    Pinning an integration turns off the main one; switching to the main one
    or clearing the pinned id (an explicit None) falls back to the main one.
    Turning the main one off without pinning an id is rejected.
    """
    fields = dict(fields)
    own = fields.get("google_integration_id")
    use_main = fields.get("use_main_google_integration")
    if own and use_main:
        raise AmbiguousGoogleIntegrationError(
            "An agent cannot use both its own Google integration and the main one"
        )
    if use_main is False and not own:
        raise AmbiguousGoogleIntegrationError(
            "An agent must pin a Google integration to stop using the main one"
        )
    if own:
        fields["use_main_google_integration"] = False
    elif use_main or "google_integration_id" in fields:
        fields["google_integration_id"] = None
        fields["use_main_google_integration"] = True
    return fields


async def update_agent(db: AsyncSession, agent_id: str, fields: Dict[str, Any]) -> int:
    """Apply a partial update. Returns the number of rows matched (may be zero)."""
    fields = normalize_google_integration(fields)
    if not fields:
        return 0
    fields["updated_at"] = datetime.utcnow()
    result = await db.execute(update(Agent).where(Agent.id == agent_id).values(**fields))
    await db.commit()
    return result.rowcount


async def get_default_agent(db: AsyncSession, user_id: str) -> Optional[Agent]:
    result = await db.execute(
        select(Agent)
        .where(Agent.user_id == user_id, Agent.is_default == True)
        .order_by(Agent.created_at, Agent.id)
        .limit(1)
    )
    return result.scalar_one_or_none()


async def create_agent(db: AsyncSession, user_id: str, name: str, **fields) -> Agent:
    agent = Agent(user_id=user_id, name=name, **normalize_google_integration(fields))
    db.add(agent)
    await db.commit()
    await db.refresh(agent)
    return agent
