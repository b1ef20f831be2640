"""
Tests for the idempotent migration steps and setup scripts
"""

import pytest
import pytest_asyncio
from sqlalchemy import inspect, text

from agenthub.db.database import build_engine
from agenthub.db.migrations import (
    MIGRATIONS, AddColumn, CreateIndex, EnableExtension, StepStatus, run_migration, schema_drift,
)
from agenthub.scripts.check_tables import check_tables
from agenthub.scripts.common import exit_code
from agenthub.scripts.migrate_agent_integration import migrate_agent_integration
from agenthub.scripts.migrate_tables import migrate_tables
from agenthub.scripts.setup_db import setup_db

LEGACY_SCHEMA = [
    "CREATE TABLE users (id VARCHAR(36) PRIMARY KEY, name VARCHAR(255), email VARCHAR(255) UNIQUE, "
    "created_at DATETIME, updated_at DATETIME)",
    "CREATE TABLE integrations (id VARCHAR(36) PRIMARY KEY, user_id VARCHAR(36), provider VARCHAR(20), "
    "credentials TEXT, config JSON, is_active BOOLEAN, last_used_at DATETIME, "
    "created_at DATETIME, updated_at DATETIME)",
    "CREATE TABLE agents (id VARCHAR(36) PRIMARY KEY, user_id VARCHAR(36), name VARCHAR(255), "
    "description TEXT, system_prompt TEXT, model_config JSON, enabled_tools JSON, company_profile TEXT, "
    "display_name VARCHAR(100), personality TEXT, tone VARCHAR(50), use_emojis BOOLEAN, "
    "language VARCHAR(10), is_active BOOLEAN, is_default BOOLEAN, created_at DATETIME, updated_at DATETIME)",
    "CREATE TABLE knowledge_base (id VARCHAR(36) PRIMARY KEY, agent_id VARCHAR(36), "
    "topic VARCHAR(255), content TEXT, created_at DATETIME, updated_at DATETIME)",
]


@pytest_asyncio.fixture
async def bare_engine():
    """An empty database"""
    engine = build_engine("sqlite+aiosqlite:///:memory:", pool_size=2, max_overflow=0)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def legacy_engine(bare_engine):
    """A database created by an older release: no search or Google columns"""
    async with bare_engine.begin() as conn:
        for statement in LEGACY_SCHEMA:
            await conn.execute(text(statement))
    return bare_engine


async def _columns(engine, table):
    async with engine.connect() as conn:
        return await conn.run_sync(lambda c: {col["name"] for col in inspect(c).get_columns(table)})


# ============ Steps ============

@pytest.mark.asyncio
async def test_setup_db_creates_all_tables(bare_engine):
    report = await setup_db(bare_engine)
    assert report.ok
    assert await schema_drift(bare_engine) == {}


@pytest.mark.asyncio
async def test_setup_db_twice_only_skips(bare_engine):
    """Re-running leaves the schema as it was and reports only skipped steps"""
    await setup_db(bare_engine)
    before = await _columns(bare_engine, "knowledge_base")

    report = await setup_db(bare_engine)

    assert report.ok
    assert report.applied == []
    assert len(report.skipped) == len(MIGRATIONS["setup_db"])
    assert await _columns(bare_engine, "knowledge_base") == before


@pytest.mark.asyncio
async def test_extension_skipped_off_postgres(bare_engine):
    report = await run_migration(bare_engine, [EnableExtension("vector")])
    assert report.results[0].status == StepStatus.SKIPPED


@pytest.mark.asyncio
async def test_migrate_tables_upgrades_legacy_table(legacy_engine):
    report = await migrate_tables(legacy_engine)

    assert report.ok
    assert len(report.applied) == len(MIGRATIONS["migrate_tables"])
    columns = await _columns(legacy_engine, "knowledge_base")
    assert {"content_type", "metadata", "keywords", "priority", "is_active"} <= columns

    async with legacy_engine.connect() as conn:
        indexes = await conn.run_sync(
            lambda c: {i["name"] for i in inspect(c).get_indexes("knowledge_base")}
        )
    assert {"knowledge_agent_id_idx", "knowledge_agent_topic_idx"} <= indexes

    again = await migrate_tables(legacy_engine)
    assert again.ok
    assert again.applied == []


@pytest.mark.asyncio
async def test_existing_rows_get_column_defaults(legacy_engine):
    async with legacy_engine.begin() as conn:
        await conn.execute(text(
            "INSERT INTO knowledge_base (id, agent_id, topic, content) VALUES ('k1', NULL, 'Preços', 'R$ 10')"
        ))
    await migrate_tables(legacy_engine)

    async with legacy_engine.connect() as conn:
        row = (await conn.execute(text(
            "SELECT content_type, priority, is_active FROM knowledge_base WHERE id = 'k1'"
        ))).one()
    assert row.content_type == "text"
    assert row.priority == 0
    assert row.is_active


@pytest.mark.asyncio
async def test_migrate_agent_integration(legacy_engine):
    report = await migrate_agent_integration(legacy_engine)
    assert report.ok
    assert {"google_integration_id", "use_main_google_integration"} <= await _columns(legacy_engine, "agents")

    again = await migrate_agent_integration(legacy_engine)
    assert [r.status for r in again.results] == [StepStatus.SKIPPED, StepStatus.SKIPPED]


@pytest.mark.asyncio
async def test_failed_step_keeps_earlier_steps(legacy_engine):
    """Steps are not rolled back as a group; the run stops at the failure"""
    steps = [
        AddColumn("agents", "use_main_google_integration", "BOOLEAN DEFAULT TRUE"),
        CreateIndex("missing_table_idx", "no_such_table", ["id"]),
        AddColumn("agents", "never_added", "TEXT"),
    ]
    report = await run_migration(legacy_engine, steps)

    assert not report.ok
    assert [r.status for r in report.results] == [StepStatus.APPLIED, StepStatus.FAILED]
    columns = await _columns(legacy_engine, "agents")
    assert "use_main_google_integration" in columns
    assert "never_added" not in columns


@pytest.mark.asyncio
async def test_best_effort_runs_remaining_steps(legacy_engine):
    steps = [
        CreateIndex("missing_table_idx", "no_such_table", ["id"]),
        AddColumn("agents", "use_main_google_integration", "BOOLEAN DEFAULT TRUE"),
    ]
    report = await run_migration(legacy_engine, steps, stop_on_error=False)

    assert [r.status for r in report.results] == [StepStatus.FAILED, StepStatus.APPLIED]
    assert report.failed[0].error


# ============ Drift & exit status ============

@pytest.mark.asyncio
async def test_check_tables_reports_drift(legacy_engine):
    drift = await check_tables(legacy_engine)

    assert drift["threads"] == ["*"]
    assert "embedding" in drift["knowledge_base"]
    assert "google_integration_id" in drift["agents"]
    assert "users" not in drift


def test_exit_code_strict_and_best_effort():
    assert exit_code(True, strict=True) == 0
    assert exit_code(False, strict=True) == 1
    assert exit_code(False, strict=False) == 0
