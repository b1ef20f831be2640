"""
Agents & knowledge base API

GET    /api/agents
PATCH  /api/agents/{agent_id}
GET    /api/agents/{agent_id}/knowledge
POST   /api/agents/{agent_id}/knowledge
GET    /api/agents/{agent_id}/knowledge/search?q=
DELETE /api/agents/{agent_id}/knowledge/{knowledge_id}
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.actions.agents import update_agent_action
from agenthub.actions.knowledge import add_knowledge_action, remove_knowledge_action
from agenthub.context import RequestContext, get_request_context
from agenthub.db import get_db
from agenthub.queries.agents import get_agent, list_agents
from agenthub.queries.knowledge import get_knowledge, list_knowledge, search_knowledge
from agenthub.schemas import ActionResult, AgentResponse, AgentUpdate, KnowledgeCreate, KnowledgeResponse
from agenthub.services.knowledge_service import KnowledgeService, format_context_with_xml

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/agents", tags=["Agents"])


def get_knowledge_service() -> KnowledgeService:
    return KnowledgeService()


async def _require_agent(db: AsyncSession, agent_id: str):
    agent = await get_agent(db, agent_id)
    if agent is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Agent not found")
    return agent


def _action_response(result: ActionResult, success_status: int = 200):
    if not result.success:
        return JSONResponse(result.model_dump(), status_code=500)
    return JSONResponse(result.model_dump(exclude_none=True), status_code=success_status)


@router.get("", response_model=List[AgentResponse])
async def get_agents(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    agents = await list_agents(db, user_id=ctx.user_id)
    return [AgentResponse.model_validate(agent) for agent in agents]


@router.patch("/{agent_id}")
async def patch_agent(
    agent_id: str,
    data: AgentUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Partial update; unknown agent ids still return success."""
    return _action_response(await update_agent_action(db, agent_id, data))


# ============ Knowledge base ============

@router.get("/{agent_id}/knowledge", response_model=List[KnowledgeResponse])
async def get_agent_knowledge(
    agent_id: str,
    include_global: bool = True,
    db: AsyncSession = Depends(get_db),
):
    await _require_agent(db, agent_id)
    items = await list_knowledge(db, agent_id, include_global=include_global)
    return [KnowledgeResponse.from_row(item) for item in items]


@router.post("/{agent_id}/knowledge", status_code=status.HTTP_201_CREATED)
async def post_agent_knowledge(
    agent_id: str,
    data: KnowledgeCreate,
    db: AsyncSession = Depends(get_db),
    knowledge_service: KnowledgeService = Depends(get_knowledge_service),
):
    await _require_agent(db, agent_id)
    result = await add_knowledge_action(db, agent_id, data, knowledge_service=knowledge_service)
    return _action_response(result, success_status=status.HTTP_201_CREATED)


@router.get("/{agent_id}/knowledge/search")
async def search_agent_knowledge(
    agent_id: str,
    q: str = Query(..., min_length=1),
    limit: int = Query(5, ge=1, le=50),
    db: AsyncSession = Depends(get_db),
):
    """Keyword search over the agent's and global knowledge, with an XML context block."""
    items = await search_knowledge(db, agent_id, q, limit=limit)
    return {
        "results": [KnowledgeResponse.from_row(item).model_dump(by_alias=True, mode="json") for item in items],
        "context": format_context_with_xml([f"## {item.topic}\n{item.content}" for item in items]),
    }


@router.delete("/{agent_id}/knowledge/{knowledge_id}")
async def delete_agent_knowledge(
    agent_id: str,
    knowledge_id: str,
    db: AsyncSession = Depends(get_db),
):
    item = await get_knowledge(db, knowledge_id)
    if item is None or item.agent_id != agent_id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Knowledge entry not found")
    return _action_response(await remove_knowledge_action(db, knowledge_id, agent_id))
