"""
Integrations API

POST /api/integrations/google/disconnect - deactivate the Google integration
GET  /api/integrations/status            - connection status per provider
"""

import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.actions.integrations import disconnect_integration_action
from agenthub.context import RequestContext, get_request_context
from agenthub.db import get_db, IntegrationProvider
from agenthub.queries.integrations import get_active_integration
from agenthub.schemas import DisconnectResponse, IntegrationsStatusResponse, ProviderStatus

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/integrations", tags=["Integrations"])


def _credentials_email(credentials: Optional[str]) -> Optional[str]:
    if not credentials:
        return None
    try:
        return json.loads(credentials).get("email")
    except (ValueError, AttributeError):
        return None


@router.post("/google/disconnect", response_model=DisconnectResponse)
async def disconnect_google(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    """Deactivate the Google integration. The row is kept for history."""
    result = await disconnect_integration_action(db, ctx.user_id, IntegrationProvider.GOOGLE)
    if not result.success:
        return JSONResponse({"error": result.error}, status_code=500)
    return DisconnectResponse(success=True)


@router.get("/status", response_model=IntegrationsStatusResponse, response_model_by_alias=True)
async def integrations_status(
    ctx: RequestContext = Depends(get_request_context),
    db: AsyncSession = Depends(get_db),
):
    try:
        google = await get_active_integration(db, ctx.user_id, IntegrationProvider.GOOGLE)
        whatsapp = await get_active_integration(db, ctx.user_id, IntegrationProvider.WHATSAPP)
    except Exception:
        logger.exception(f"Failed to load integrations status for user {ctx.user_id}")
        return IntegrationsStatusResponse()

    return IntegrationsStatusResponse(
        user_id=ctx.user_id,
        google=ProviderStatus(
            connected=google is not None,
            email=_credentials_email(google.credentials) if google else None,
            id=google.id if google else None,
        ),
        whatsapp=ProviderStatus(
            connected=whatsapp is not None,
            id=whatsapp.id if whatsapp else None,
        ),
    )
