from agenthub.queries.threads import (
    list_threads, get_thread, get_thread_by_external_id, create_thread, touch_thread,
    count_threads_by_status,
)
from agenthub.queries.integrations import (
    get_active_integration, has_active_integration, deactivate_integration, upsert_integration,
)
from agenthub.queries.agents import (
    get_agent, get_default_agent, list_agents, create_agent, update_agent, normalize_google_integration,
)
from agenthub.queries.knowledge import (
    list_knowledge, get_knowledge, get_knowledge_by_topic, search_knowledge, count_knowledge,
    create_knowledge, update_knowledge, delete_knowledge,
)
from agenthub.queries.users import get_user_by_email, get_user_by_id, upsert_user_by_email

__all__ = [
    # Threads
    "list_threads",
    "get_thread",
    "get_thread_by_external_id",
    "create_thread",
    "touch_thread",
    "count_threads_by_status",
    # Integrations
    "get_active_integration",
    "has_active_integration",
    "deactivate_integration",
    "upsert_integration",
    # Agents
    "get_agent",
    "get_default_agent",
    "list_agents",
    "create_agent",
    "update_agent",
    "normalize_google_integration",
    # Knowledge base
    "list_knowledge",
    "get_knowledge",
    "get_knowledge_by_topic",
    "search_knowledge",
    "count_knowledge",
    "create_knowledge",
    "update_knowledge",
    "delete_knowledge",
    # Users
    "get_user_by_email",
    "get_user_by_id",
    "upsert_user_by_email",
]
