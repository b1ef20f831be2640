"""Enable the vector extension and create all tables"""

import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.migrations import MigrationReport
from agenthub.scripts.common import apply_named_migration, migration_main


async def setup_db(engine: Optional[AsyncEngine] = None) -> MigrationReport:
    return await apply_named_migration("setup_db", engine)


def main(argv=None) -> int:
    return migration_main("setup_db", "Enable the vector extension and create all tables", argv)


if __name__ == "__main__":
    sys.exit(main())
