"""Queries for third-party integrations"""

from datetime import datetime
from typing import Any, Dict, Optional

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import Integration, IntegrationProvider


def _provider(provider) -> str:
    return IntegrationProvider(provider).value


async def get_active_integration(db: AsyncSession, user_id: str, provider) -> Optional[Integration]:
    result = await db.execute(
        select(Integration).where(
            Integration.user_id == user_id,
            Integration.provider == _provider(provider),
            Integration.is_active == True,
        )
    )
    return result.scalars().first()


async def has_active_integration(db: AsyncSession, user_id: str, provider) -> bool:
    """Existence check, not a deep status read."""
    result = await db.execute(
        select(Integration.id).where(
            Integration.user_id == user_id,
            Integration.provider == _provider(provider),
            Integration.is_active == True,
        ).limit(1)
    )
    return result.first() is not None


async def deactivate_integration(db: AsyncSession, user_id: str, provider) -> int:
    """Soft-disconnect: flag the row inactive and keep it for history.

    Returns the number of rows touched; zero is not an error.
    """
    result = await db.execute(
        update(Integration)
        .where(Integration.user_id == user_id, Integration.provider == _provider(provider))
        .values(is_active=False, updated_at=datetime.utcnow())
    )
    await db.commit()
    return result.rowcount


async def upsert_integration(
    db: AsyncSession,
    user_id: str,
    provider,
    credentials: Optional[str] = None,
    config: Optional[Dict[str, Any]] = None,
) -> Integration:
    """Connect (or reconnect) a provider; one row per (user, provider)."""
    result = await db.execute(
        select(Integration)
        .where(Integration.user_id == user_id, Integration.provider == _provider(provider))
        .execution_options(populate_existing=True)
    )
    integration = result.scalar_one_or_none()
    if integration is None:
        integration = Integration(user_id=user_id, provider=_provider(provider))
        db.add(integration)
    integration.credentials = credentials
    integration.config = config or {}
    integration.is_active = True
    await db.commit()
    await db.refresh(integration)
    return integration
