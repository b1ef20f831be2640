"""Add the knowledge_base.embedding vector column"""

import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.migrations import MigrationReport
from agenthub.scripts.common import apply_named_migration, migration_main


async def add_embedding(engine: Optional[AsyncEngine] = None) -> MigrationReport:
    return await apply_named_migration("add_embedding", engine)


def main(argv=None) -> int:
    return migration_main("add_embedding", "Add the knowledge_base.embedding vector column", argv)


if __name__ == "__main__":
    sys.exit(main())
