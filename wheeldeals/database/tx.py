from __future__ import annotations

from contextlib import asynccontextmanager

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

# Connection execution option read by the SQLite "begin" hook (see session.py)
BEGIN_MODE_OPTION = "wheeldeals_begin_mode"


@asynccontextmanager
async def transactional(session: AsyncSession, *, write: bool = False):
    """
    Safe transactional context for SQLAlchemy 2.x autobegin.

    - If a transaction is already active, use SAVEPOINT (begin_nested)
    - Otherwise, start a new transaction; write=True opens it as
      BEGIN IMMEDIATE on SQLite (write lock taken at the first statement)
    """
    if session.in_transaction():
        async with session.begin_nested():
            yield
    else:
        async with session.begin():
            if write:
                await session.connection(execution_options={BEGIN_MODE_OPTION: "IMMEDIATE"})
            yield


def dialect_insert(session: AsyncSession, table):
    """
    INSERT construct with ON CONFLICT support for the session's backend.
    """
    if session.get_bind().dialect.name == "postgresql":
        return postgresql.insert(table)
    return sqlite.insert(table)
