#!/usr/bin/env python3
"""
Seed the database with a working starting point.

    seed_data [--mode minimal|full]

minimal: default user and a default agent.
full:    also a sample conversation thread and a global knowledge entry.

Every record is looked up first, so seeding twice creates nothing new.
"""

import asyncio
import sys
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.config import settings
from agenthub.db.database import script_engine, session_maker_for
from agenthub.logging_config import configure_logging
from agenthub.queries.agents import create_agent, get_default_agent
from agenthub.queries.knowledge import get_knowledge_by_topic
from agenthub.queries.threads import create_thread, get_thread_by_external_id
from agenthub.queries.users import upsert_user_by_email
from agenthub.schemas import KnowledgeCreate
from agenthub.scripts.common import build_parser, exit_code
from agenthub.services.knowledge_service import KnowledgeService

SEED_MODES = ("minimal", "full")

DEFAULT_AGENT = {
    "name": "Assistente",
    "display_name": "Assistente",
    "description": "Default agent created by seed_data",
    "system_prompt": "Você é um assistente prestativo. Responda de forma clara e objetiva.",
    "enabled_tools": [],
    "tone": "friendly",
    "language": "pt-BR",
    "is_active": True,
    "is_default": True,
    "use_main_google_integration": True,
}

SAMPLE_THREAD = {
    "external_id": "5511999999999",
    "contact_name": "Cliente Exemplo",
}

SAMPLE_KNOWLEDGE = KnowledgeCreate(
    topic="Horário de atendimento",
    content="Atendemos de segunda a sexta, das 9h às 18h. Aos sábados, das 9h às 13h.",
    priority=1,
    metadata={"source": "seed_data"},
)


@dataclass
class SeedResult:
    user_id: str
    agent_id: str
    created: List[str] = field(default_factory=list)


async def seed_data(
    mode: str = "minimal",
    engine: Optional[AsyncEngine] = None,
    knowledge_service: Optional[KnowledgeService] = None,
    database_url: Optional[str] = None,
) -> SeedResult:
    if mode not in SEED_MODES:
        raise ValueError(f"Unknown seed mode '{mode}', expected one of {', '.join(SEED_MODES)}")

    if engine is None:
        async with script_engine(database_url) as bind:
            return await seed_data(mode, bind, knowledge_service)

    async with session_maker_for(engine)() as db:
        user_id = await upsert_user_by_email(db, settings.default_user_email, settings.default_user_name)

        agent = await get_default_agent(db, user_id)
        created = []
        if agent is None:
            agent = await create_agent(db, user_id, **DEFAULT_AGENT)
            created.append(f"agent {agent.id}")

        result = SeedResult(user_id=user_id, agent_id=agent.id, created=created)
        if mode == "minimal":
            return result

        thread = await get_thread_by_external_id(db, user_id, SAMPLE_THREAD["external_id"])
        if thread is None:
            thread = await create_thread(db, user_id, agent_id=agent.id, **SAMPLE_THREAD)
            result.created.append(f"thread {thread.id}")

        if await get_knowledge_by_topic(db, None, SAMPLE_KNOWLEDGE.topic) is None:
            service = knowledge_service or KnowledgeService()
            item = await service.add_knowledge(db, None, SAMPLE_KNOWLEDGE)
            result.created.append(f"knowledge {item.id}")

        return result


def main(argv=None) -> int:
    parser = build_parser("Seed the database")
    parser.add_argument("--mode", choices=SEED_MODES, default="minimal")
    args = parser.parse_args(argv)
    configure_logging()

    print(f"🌱 Starting database seed ({args.mode})...")
    try:
        result = asyncio.run(seed_data(args.mode, database_url=args.database_url))
    except Exception as e:
        print(f"❌ Seeding failed: {e}")
        return exit_code(False, args.strict)

    for record in result.created:
        print(f"  ✅ Created {record}")
    if not result.created:
        print("ℹ️ Nothing to create, seed data already present")

    print(f"\n✅ Seeding complete!")
    print(f"   DEFAULT_USER_ID={result.user_id}")
    print(f"   Default agent: {result.agent_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
