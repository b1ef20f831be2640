"""
Tests for integration status and disconnect
"""

import pytest

from agenthub.actions.integrations import disconnect_integration_action, get_integrations_status_action
from agenthub.db import IntegrationProvider
from agenthub.queries.integrations import get_active_integration, upsert_integration


@pytest.mark.asyncio
async def test_status_without_integrations(db_session, user_id):
    status = await get_integrations_status_action(db_session, user_id)
    assert status.model_dump() == {"google": False, "whatsapp": False}


@pytest.mark.asyncio
async def test_status_reports_active_integrations(db_session, user_id):
    await upsert_integration(db_session, user_id, IntegrationProvider.GOOGLE, credentials='{"email": "a@b.com"}')

    status = await get_integrations_status_action(db_session, user_id)
    assert status.google is True
    assert status.whatsapp is False


@pytest.mark.asyncio
async def test_disconnect_then_status_is_false(db_session, user_id):
    await upsert_integration(db_session, user_id, IntegrationProvider.GOOGLE)
    await upsert_integration(db_session, user_id, IntegrationProvider.WHATSAPP)

    result = await disconnect_integration_action(db_session, user_id, IntegrationProvider.GOOGLE)

    assert result.success is True
    status = await get_integrations_status_action(db_session, user_id)
    assert status.google is False
    assert status.whatsapp is True


@pytest.mark.asyncio
async def test_disconnect_keeps_row(db_session, user_id):
    integration = await upsert_integration(db_session, user_id, IntegrationProvider.GOOGLE)
    await disconnect_integration_action(db_session, user_id, IntegrationProvider.GOOGLE)

    await db_session.refresh(integration)
    assert integration.is_active is False
    assert await get_active_integration(db_session, user_id, IntegrationProvider.GOOGLE) is None


@pytest.mark.asyncio
async def test_disconnect_without_integration_succeeds(db_session, user_id):
    result = await disconnect_integration_action(db_session, user_id, "google")
    assert result.success is True


@pytest.mark.asyncio
async def test_reconnect_reactivates_same_row(db_session, user_id):
    first = await upsert_integration(db_session, user_id, IntegrationProvider.GOOGLE)
    await disconnect_integration_action(db_session, user_id, IntegrationProvider.GOOGLE)
    second = await upsert_integration(db_session, user_id, IntegrationProvider.GOOGLE)

    assert second.id == first.id
    assert second.is_active is True


@pytest.mark.asyncio
async def test_status_failure_reads_as_disconnected(db_session, user_id, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr("agenthub.actions.integrations.has_active_integration", broken)
    status = await get_integrations_status_action(db_session, user_id)
    assert status.google is False
    assert status.whatsapp is False


@pytest.mark.asyncio
async def test_disconnect_failure_returns_error(db_session, user_id, monkeypatch):
    async def broken(*args, **kwargs):
        raise RuntimeError("connection reset")

    monkeypatch.setattr("agenthub.actions.integrations.deactivate_integration", broken)
    result = await disconnect_integration_action(db_session, user_id, IntegrationProvider.GOOGLE)
    assert result.success is False
    assert result.error == "Failed to disconnect integration"
