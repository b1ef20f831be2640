from agenthub.db.models import (
    Base, User, Agent, Integration, Thread, KnowledgeBase,
    ThreadStatus, IntegrationProvider, ContentType, EMBEDDING_DIMENSION,
)
from agenthub.db.database import (
    get_db, init_db, drop_db, async_session_maker, engine, script_engine, session_maker_for,
)

__all__ = [
    "Base",
    "User",
    "Agent",
    "Integration",
    "Thread",
    "KnowledgeBase",
    "ThreadStatus",
    "IntegrationProvider",
    "ContentType",
    "EMBEDDING_DIMENSION",
    # Database
    "get_db",
    "init_db",
    "drop_db",
    "async_session_maker",
    "engine",
    "script_engine",
    "session_maker_for",
]
