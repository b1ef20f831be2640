"""
Idempotent schema migration steps.

Each step checks whether its change is already present before applying it,
so every migration can be re-run safely. Steps run in their own transaction:
a failure on step N leaves steps 1..N-1 applied.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Sequence

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.models import Base, EMBEDDING_DIMENSION

logger = logging.getLogger(__name__)


class StepStatus(str, Enum):
    APPLIED = "applied"
    SKIPPED = "skipped"   # already present, or not supported by the dialect
    FAILED = "failed"


@dataclass
class StepResult:
    name: str
    status: StepStatus
    error: Optional[str] = None


@dataclass
class MigrationReport:
    results: List[StepResult] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def applied(self) -> List[StepResult]:
        return [r for r in self.results if r.status == StepStatus.APPLIED]

    @property
    def skipped(self) -> List[StepResult]:
        return [r for r in self.results if r.status == StepStatus.SKIPPED]

    @property
    def failed(self) -> List[StepResult]:
        return [r for r in self.results if r.status == StepStatus.FAILED]


class MigrationStep:
    """A single guarded schema change"""

    name: str = "step"

    def supports(self, dialect_name: str) -> bool:
        return True

    def is_applied(self, conn: Connection) -> bool:
        raise NotImplementedError

    def apply(self, conn: Connection) -> None:
        raise NotImplementedError

    def run(self, conn: Connection) -> StepStatus:
        if not self.supports(conn.dialect.name):
            logger.debug(f"{self.name}: not supported on {conn.dialect.name}, skipping")
            return StepStatus.SKIPPED
        if self.is_applied(conn):
            return StepStatus.SKIPPED
        self.apply(conn)
        return StepStatus.APPLIED


class EnableExtension(MigrationStep):
    """CREATE EXTENSION IF NOT EXISTS (PostgreSQL only)"""

    def __init__(self, extension: str):
        self.extension = extension
        self.name = f"enable extension {extension}"

    def supports(self, dialect_name: str) -> bool:
        return dialect_name == "postgresql"

    def is_applied(self, conn: Connection) -> bool:
        row = conn.execute(
            text("SELECT 1 FROM pg_extension WHERE extname = :name"),
            {"name": self.extension},
        ).first()
        return row is not None

    def apply(self, conn: Connection) -> None:
        conn.execute(text(f"CREATE EXTENSION IF NOT EXISTS {self.extension}"))


class CreateTables(MigrationStep):
    """Create mapped tables that do not exist yet"""

    def __init__(self, table_names: Optional[Sequence[str]] = None):
        self.table_names = list(table_names) if table_names else None
        self.name = "create tables" + (f" {', '.join(self.table_names)}" if self.table_names else "")

    def _tables(self):
        if self.table_names is None:
            return list(Base.metadata.sorted_tables)
        return [Base.metadata.tables[name] for name in self.table_names]

    def is_applied(self, conn: Connection) -> bool:
        inspector = inspect(conn)
        return all(inspector.has_table(table.name) for table in self._tables())

    def apply(self, conn: Connection) -> None:
        Base.metadata.create_all(conn, tables=self._tables(), checkfirst=True)


class AddColumn(MigrationStep):
    """ALTER TABLE ... ADD COLUMN, guarded by an existence check"""

    def __init__(self, table: str, column: str, ddl: str):
        self.table = table
        self.column = column
        self.ddl = ddl
        self.name = f"add column {table}.{column}"

    def is_applied(self, conn: Connection) -> bool:
        columns = {c["name"] for c in inspect(conn).get_columns(self.table)}
        return self.column in columns

    def apply(self, conn: Connection) -> None:
        quote = conn.dialect.identifier_preparer.quote
        conn.execute(text(f"ALTER TABLE {quote(self.table)} ADD COLUMN {quote(self.column)} {self.ddl}"))


class CreateIndex(MigrationStep):
    """CREATE INDEX IF NOT EXISTS, guarded by an existence check"""

    def __init__(self, index: str, table: str, columns: Sequence[str], unique: bool = False):
        self.index = index
        self.table = table
        self.columns = list(columns)
        self.unique = unique
        self.name = f"create index {index}"

    def is_applied(self, conn: Connection) -> bool:
        return self.index in {i["name"] for i in inspect(conn).get_indexes(self.table)}

    def apply(self, conn: Connection) -> None:
        quote = conn.dialect.identifier_preparer.quote
        cols = ", ".join(quote(c) for c in self.columns)
        unique = "UNIQUE " if self.unique else ""
        conn.execute(text(
            f"CREATE {unique}INDEX IF NOT EXISTS {quote(self.index)} ON {quote(self.table)} ({cols})"
        ))


async def run_migration(
    engine: AsyncEngine,
    steps: Sequence[MigrationStep],
    stop_on_error: bool = True,
) -> MigrationReport:
    """Run steps in order, each in its own transaction, and report per-step outcome."""
    report = MigrationReport()
    for step in steps:
        try:
            async with engine.begin() as conn:
                status = await conn.run_sync(step.run)
        except Exception as e:
            logger.error(f"Migration step '{step.name}' failed: {e}")
            report.results.append(StepResult(step.name, StepStatus.FAILED, str(e)))
            if stop_on_error:
                break
            continue
        logger.info(f"Migration step '{step.name}': {status.value}")
        report.results.append(StepResult(step.name, status))
    return report


def _schema_drift(conn: Connection) -> Dict[str, List[str]]:
    inspector = inspect(conn)
    drift: Dict[str, List[str]] = {}
    for table in Base.metadata.sorted_tables:
        if not inspector.has_table(table.name):
            drift[table.name] = ["*"]
            continue
        present = {c["name"] for c in inspector.get_columns(table.name)}
        missing = [c.name for c in table.columns if c.name not in present]
        if missing:
            drift[table.name] = missing
    return drift


async def schema_drift(engine: AsyncEngine) -> Dict[str, List[str]]:
    """Tables and columns declared by the models but missing from the database.

    A missing table is reported as ``{"table": ["*"]}``.
    """
    async with engine.connect() as conn:
        return await conn.run_sync(_schema_drift)


# ── Named migrations ─────────────────────────────────────────

SETUP_DB: List[MigrationStep] = [
    EnableExtension("vector"),
    CreateTables(),
]

ADD_EMBEDDING: List[MigrationStep] = [
    EnableExtension("vector"),
    AddColumn("knowledge_base", "embedding", f"vector({EMBEDDING_DIMENSION})"),
]

MIGRATE_TABLES: List[MigrationStep] = [
    AddColumn("knowledge_base", "content_type", "VARCHAR(20) DEFAULT 'text'"),
    AddColumn("knowledge_base", "metadata", "JSON DEFAULT '{}'"),
    AddColumn("knowledge_base", "keywords", "JSON DEFAULT '[]'"),
    AddColumn("knowledge_base", "priority", "INTEGER DEFAULT 0 NOT NULL"),
    AddColumn("knowledge_base", "is_active", "BOOLEAN DEFAULT TRUE NOT NULL"),
    CreateIndex("knowledge_agent_id_idx", "knowledge_base", ["agent_id"]),
    CreateIndex("knowledge_agent_topic_idx", "knowledge_base", ["agent_id", "topic"]),
]

MIGRATE_AGENT_INTEGRATION: List[MigrationStep] = [
    AddColumn(
        "agents", "google_integration_id",
        "VARCHAR(36) REFERENCES integrations(id) ON DELETE SET NULL",
    ),
    AddColumn("agents", "use_main_google_integration", "BOOLEAN DEFAULT TRUE"),
]

# Applied by init_db after create_all to catch up tables created by older releases
SCHEMA_UPGRADES: List[MigrationStep] = ADD_EMBEDDING + MIGRATE_TABLES + MIGRATE_AGENT_INTEGRATION

MIGRATIONS: Dict[str, List[MigrationStep]] = {
    "setup_db": SETUP_DB,
    "add_embedding": ADD_EMBEDDING,
    "migrate_tables": MIGRATE_TABLES,
    "migrate_agent_integration": MIGRATE_AGENT_INTEGRATION,
}
