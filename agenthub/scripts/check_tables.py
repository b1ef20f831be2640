#!/usr/bin/env python3
"""Report tables and columns the models declare but the database lacks"""

import asyncio
import sys
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.db.database import script_engine
from agenthub.db.migrations import schema_drift
from agenthub.logging_config import configure_logging
from agenthub.scripts.common import build_parser, exit_code


async def check_tables(
    engine: Optional[AsyncEngine] = None,
    database_url: Optional[str] = None,
) -> Dict[str, List[str]]:
    if engine is not None:
        return await schema_drift(engine)
    async with script_engine(database_url) as bind:
        return await schema_drift(bind)


def main(argv=None) -> int:
    args = build_parser("Check the database schema against the models").parse_args(argv)
    configure_logging()

    print("🔍 Checking tables...")
    try:
        drift = asyncio.run(check_tables(database_url=args.database_url))
    except Exception as e:
        print(f"❌ Could not inspect database: {e}")
        return exit_code(False, args.strict)

    if not drift:
        print("✅ All tables and columns present")
        return 0

    for table, columns in drift.items():
        if columns == ["*"]:
            print(f"❌ {table}: table missing")
        else:
            print(f"⚠️ {table}: missing columns {', '.join(columns)}")
    print("💡 Run setup_db and the migrate_* scripts to fix")
    return exit_code(False, args.strict)


if __name__ == "__main__":
    sys.exit(main())
