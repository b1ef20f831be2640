"""Acting principal for a request.

Handlers receive a RequestContext instead of reading a module-level default
user, so multi-tenant callers can pass their own user id.
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Header

from agenthub.config import settings


@dataclass(frozen=True)
class RequestContext:
    user_id: str


def resolve_context(user_id: Optional[str] = None, default_user_id: Optional[str] = None) -> RequestContext:
    """Explicit user id wins, otherwise the configured default user."""
    return RequestContext(user_id=user_id or default_user_id or settings.default_user_id)


async def get_request_context(x_user_id: Optional[str] = Header(None)) -> RequestContext:
    """FastAPI dependency: X-User-Id header, falling back to DEFAULT_USER_ID."""
    return resolve_context(x_user_id)
