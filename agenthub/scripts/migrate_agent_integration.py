"""
Add per-agent Google integration columns to agents.

google_integration_id references integrations(id) and is cleared when the
integration row is deleted; use_main_google_integration defaults to true.
"""

import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.migrations import MigrationReport
from agenthub.scripts.common import apply_named_migration, migration_main


async def migrate_agent_integration(engine: Optional[AsyncEngine] = None) -> MigrationReport:
    return await apply_named_migration("migrate_agent_integration", engine)


def main(argv=None) -> int:
    return migration_main(
        "migrate_agent_integration",
        "Add the per-agent Google integration columns",
        argv,
    )


if __name__ == "__main__":
    sys.exit(main())
