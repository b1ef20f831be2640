"""
Shared fixtures for the AgentHub tests.

Each test gets its own in-memory SQLite database (aiosqlite) with the full
schema, and a fake embedder instead of the OpenAI client.
"""

import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["APP_ENV"] = "test"
os.environ["SCRIPTS_STRICT"] = "true"

import pytest
import pytest_asyncio

from agenthub.config import settings
from agenthub.db import init_db, drop_db
from agenthub.db.database import build_engine, session_maker_for
from agenthub.queries.agents import create_agent
from agenthub.queries.users import upsert_user_by_email
from agenthub.services.knowledge_service import KnowledgeService

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeEmbeddingService:
    """Records inputs and returns a fixed-size vector; fails on a marker word."""

    def __init__(self, fail_on=None, dimension=None):
        self.fail_on = fail_on
        self.dimension = dimension or settings.embedding_dimension
        self.calls = []

    def embed(self, text):
        self.calls.append(text)
        if self.fail_on and self.fail_on in text:
            raise RuntimeError("embedding API unavailable")
        return [0.1] * self.dimension


@pytest_asyncio.fixture
async def engine():
    """A fresh database for each test"""
    engine = build_engine(TEST_DATABASE_URL, pool_size=settings.script_pool_size, max_overflow=0)
    await init_db(engine)
    yield engine
    await drop_db(engine)
    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(engine):
    async with session_maker_for(engine)() as session:
        yield session


@pytest.fixture
def embedder():
    return FakeEmbeddingService()


@pytest.fixture
def knowledge_service(embedder):
    return KnowledgeService(embedding_service=embedder)


@pytest_asyncio.fixture
async def user_id(db_session):
    return await upsert_user_by_email(db_session, "owner@example.com", "Owner")


@pytest_asyncio.fixture
async def agent(db_session, user_id):
    return await create_agent(db_session, user_id, "Vendas", is_active=True, is_default=True)
