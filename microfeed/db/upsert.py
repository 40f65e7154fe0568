"""
Dialect-aware insert-or-ignore for shared rows and junction pairs
"""
from typing import Sequence

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession

def insert_ignoring(session: AsyncSession, model, conflict_columns: Sequence[str]):
    """Build ``INSERT ... ON CONFLICT (conflict_columns) DO NOTHING`` for ``model``.

    Concurrent writers of the same unique key both succeed; the loser's row
    is silently skipped and the caller re-reads the winner's row.
    """
    dialect = session.bind.dialect.name

    if dialect == "postgresql":
        stmt = postgresql.insert(model)
    elif dialect == "sqlite":
        stmt = sqlite.insert(model)
    else:
        raise NotImplementedError(f"insert-or-ignore is not supported on {dialect}")

    return stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))
