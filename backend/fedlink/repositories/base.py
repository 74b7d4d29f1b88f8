"""Repository Base — shared commit, reload and dialect-aware upsert helpers.

Invariants:
    - commit() and flush() failures from integrity violations roll back and raise ConflictError
    - fetch() re-reads a row with populate_existing so eager relationships are fresh
    - stage() adds and flushes without committing; the caller owns the transaction
"""

import logging
from typing import Any, TypeVar

from sqlalchemy import select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from fedlink.core.errors import ResourceNotFoundError
from fedlink.infrastructure.database import conflict_from_integrity_error

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")


class Repository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def commit(self) -> None:
        """Commit the session; integrity violations become ConflictError.

        The rollback on conflict expires every row loaded in this session,
        including rows the caller still holds: read their ids before an
        operation that may conflict, or re-fetch afterwards.
        """
        try:
            await self.db.commit()
        except IntegrityError as e:
            await self.db.rollback()
            conflict = conflict_from_integrity_error(e)
            logger.warning(
                f"Integrity violation: {e.orig}",
                extra={"constraint": conflict.constraint},
            )
            raise conflict

    async def flush(self) -> None:
        """Flush pending rows (assigns ids and defaults). Same rollback rule as commit()."""
        try:
            await self.db.flush()
        except IntegrityError as e:
            await self.db.rollback()
            raise conflict_from_integrity_error(e)

    async def fetch(self, model: type[ModelT], row_id: int) -> ModelT | None:
        """Row by primary key, refreshed from storage, or None."""
        result = await self.db.execute(
            select(model).where(model.id == row_id)
            .execution_options(populate_existing=True),
        )
        return result.unique().scalar_one_or_none()

    async def fetch_or_404(self, model: type[ModelT], row_id: int, label: str) -> ModelT:
        row = await self.fetch(model, row_id)
        if row is None:
            raise ResourceNotFoundError(label, row_id)
        return row

    async def stage(self, row: Any) -> Any:
        """Add and flush without committing. Returns the row with its id assigned."""
        self.db.add(row)
        await self.flush()
        return row

    async def add(self, row: Any) -> Any:
        """Insert, commit and re-read with relationships loaded."""
        self.db.add(row)
        await self.commit()
        return await self.fetch(type(row), row.id)

    async def remove(self, row: Any) -> None:
        await self.db.delete(row)
        await self.commit()

    def dialect_insert(self, model: type):
        """INSERT construct supporting ON CONFLICT for the bound dialect."""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(model)
        if dialect == "sqlite":
            return sqlite.insert(model)
        raise NotImplementedError(f"Upsert not supported on {dialect}")


def apply_patch(row: Any, patch: dict) -> None:
    for key, value in patch.items():
        setattr(row, key, value)
