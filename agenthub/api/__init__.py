from agenthub.api.threads import router as threads_router
from agenthub.api.integrations import router as integrations_router
from agenthub.api.agents import router as agents_router

__all__ = [
    "threads_router",
    "integrations_router",
    "agents_router",
]
