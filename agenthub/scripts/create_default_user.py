#!/usr/bin/env python3
"""Create the default user (or find the existing one) and print its id.

Re-running is safe: the insert is keyed on email, so the same id comes back.
Copy the printed DEFAULT_USER_ID=... line into your .env.
"""

import asyncio
import sys
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from agenthub.config import settings
from agenthub.db.database import script_engine, session_maker_for
from agenthub.logging_config import configure_logging
from agenthub.queries.users import upsert_user_by_email
from agenthub.scripts.common import build_parser, exit_code


async def create_default_user(
    engine: Optional[AsyncEngine] = None,
    email: Optional[str] = None,
    name: Optional[str] = None,
    database_url: Optional[str] = None,
) -> str:
    email = email or settings.default_user_email
    name = name or settings.default_user_name

    if engine is None:
        async with script_engine(database_url) as bind:
            return await create_default_user(bind, email, name)

    async with session_maker_for(engine)() as db:
        return await upsert_user_by_email(db, email, name)


def main(argv=None) -> int:
    parser = build_parser("Create the default user and print DEFAULT_USER_ID")
    parser.add_argument("--email", default=None, help="Defaults to DEFAULT_USER_EMAIL")
    parser.add_argument("--name", default=None, help="Defaults to DEFAULT_USER_NAME")
    args = parser.parse_args(argv)
    configure_logging()

    print("👤 Creating default user...")
    try:
        user_id = asyncio.run(create_default_user(
            email=args.email, name=args.name, database_url=args.database_url,
        ))
    except Exception as e:
        print(f"❌ Could not create default user: {e}")
        return exit_code(False, args.strict)

    print(f"✅ Default user ready: {args.email or settings.default_user_email}")
    print(f"DEFAULT_USER_ID={user_id}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
