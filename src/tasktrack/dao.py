from __future__ import annotations
from typing import Any, Dict, List
import logging

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models.todo import TodoRow
from .models.todo_api import EDITABLE_FIELDS

logger = logging.getLogger(__name__)


class TodoDAO:
    """Statement helpers for the `todo` table.

    Each method issues exactly one SQL statement on the given session and
    leaves commit/rollback to the caller. Nothing here retries; driver and
    constraint errors propagate as SQLAlchemy exceptions.

    Operations:
      1. insert(): INSERT ... RETURNING the new row
      2. list_all(): SELECT every row, newest id first
      3. replace_fields(): UPDATE the five editable columns
      4. set_completion(): UPDATE is_completed only
      5. delete(): DELETE by id
    """

    async def insert(self, session: AsyncSession, values: Dict[str, Any]) -> TodoRow:
        """Insert one task and return it with its assigned id.

        ``is_completed`` is never sent; the store default applies.
        """
        stmt = (
            insert(TodoRow)
            .values(**{name: values.get(name) for name in EDITABLE_FIELDS})
            .returning(TodoRow)
        )
        result = await session.scalars(stmt)
        row = result.one()
        logger.debug(f"[TodoDAO] Inserted todo {row.id}")
        return row

    async def list_all(self, session: AsyncSession) -> List[TodoRow]:
        stmt = select(TodoRow).order_by(TodoRow.id.desc())
        result = await session.scalars(stmt)
        return list(result.all())

    async def replace_fields(self, session: AsyncSession, todo_id: int, values: Dict[str, Any]) -> int:
        """Overwrite title, description, priority, project and due_date.

        Returns the number of matched rows (0 when the id does not exist).
        """
        stmt = (
            update(TodoRow)
            .where(TodoRow.id == todo_id)
            .values(**{name: values.get(name) for name in EDITABLE_FIELDS})
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    async def set_completion(self, session: AsyncSession, todo_id: int, is_completed: bool) -> int:
        stmt = (
            update(TodoRow)
            .where(TodoRow.id == todo_id)
            .values(is_completed=is_completed)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)

    async def delete(self, session: AsyncSession, todo_id: int) -> int:
        stmt = (
            delete(TodoRow)
            .where(TodoRow.id == todo_id)
            .execution_options(synchronize_session=False)
        )
        result = await session.execute(stmt)
        return int(getattr(result, "rowcount", 0) or 0)
