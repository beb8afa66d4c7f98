"""
INSERT ... ON CONFLICT DO NOTHING for the dialects that support it.

Used where a row may be created concurrently by two requests: the loser's
insert becomes a no-op instead of an IntegrityError.
"""
from typing import Any, Dict, Type

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.base import Base

_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def supports_insert_ignore(db: AsyncSession) -> bool:
    return db.get_bind().dialect.name in _INSERT_BY_DIALECT


async def insert_ignore(db: AsyncSession, model: Type[Base], values: Dict[str, Any]) -> bool:
    """Insert one row unless its key already exists. Returns True if inserted."""
    insert = _INSERT_BY_DIALECT[db.get_bind().dialect.name]
    statement = insert(model.__table__).values(**values).on_conflict_do_nothing()
    result = await db.execute(statement)
    return result.rowcount == 1
