"""Integration server actions"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import IntegrationProvider
from agenthub.queries.integrations import deactivate_integration, has_active_integration
from agenthub.schemas import ActionResult, IntegrationsStatus

logger = logging.getLogger(__name__)


async def get_integrations_status_action(db: AsyncSession, user_id: str) -> IntegrationsStatus:
    """Connected flag per provider. Never raises, failures read as disconnected."""
    try:
        return IntegrationsStatus(
            google=await has_active_integration(db, user_id, IntegrationProvider.GOOGLE),
            whatsapp=await has_active_integration(db, user_id, IntegrationProvider.WHATSAPP),
        )
    except Exception:
        logger.exception(f"Failed to get integrations status for user {user_id}")
        return IntegrationsStatus(google=False, whatsapp=False)


async def disconnect_integration_action(
    db: AsyncSession,
    user_id: str,
    provider: IntegrationProvider,
) -> ActionResult:
    """Deactivate (never delete) the user's integration for a provider."""
    try:
        await deactivate_integration(db, user_id, provider)
    except Exception:
        await db.rollback()
        logger.exception(f"Failed to disconnect {provider} for user {user_id}")
        return ActionResult(success=False, error="Failed to disconnect integration")
    return ActionResult(success=True)
