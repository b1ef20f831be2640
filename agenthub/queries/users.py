"""Queries for users"""

from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from agenthub.db.models import User


async def get_user_by_email(db: AsyncSession, email: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: str) -> Optional[User]:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def upsert_user_by_email(db: AsyncSession, email: str, name: str) -> str:
    """Insert the user, or return the existing one with that email.

    The conflict branch rewrites email with itself, so a re-run changes nothing
    and still returns the row id.
    """
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        insert = postgresql.insert
    elif dialect == "sqlite":
        insert = sqlite.insert
    else:
        raise NotImplementedError(f"Upsert not supported on {dialect}")

    now = datetime.utcnow()
    stmt = insert(User).values(name=name, email=email, created_at=now, updated_at=now)
    stmt = stmt.on_conflict_do_update(
        index_elements=["email"],
        set_={"email": stmt.excluded.email},
    ).returning(User.id)
    result = await db.execute(stmt)
    user_id = result.scalar_one()
    await db.commit()
    return user_id
