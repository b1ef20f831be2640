"""
Bring an older knowledge_base table up to the current layout.

Adds content_type, metadata, keywords, priority and is_active when missing,
then the agent_id and (agent_id, topic) indexes. Safe to re-run.
"""

import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.migrations import MigrationReport
from agenthub.scripts.common import apply_named_migration, migration_main


async def migrate_tables(engine: Optional[AsyncEngine] = None) -> MigrationReport:
    return await apply_named_migration("migrate_tables", engine)


def main(argv=None) -> int:
    return migration_main("migrate_tables", "Add missing knowledge_base columns and indexes", argv)


if __name__ == "__main__":
    sys.exit(main())
