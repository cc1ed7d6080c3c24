from __future__ import annotations
import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Any, AsyncIterator, Dict, List

from fastapi import APIRouter, Body, Depends, HTTPException, Path  # pyright: ignore[reportMissingImports]
from fastapi.exceptions import RequestValidationError  # pyright: ignore[reportMissingImports]
from pydantic import ValidationError  # pyright: ignore[reportMissingImports]
from prometheus_client import Counter, Histogram  # pyright: ignore[reportMissingImports]
from sqlalchemy.exc import (  # pyright: ignore[reportMissingImports]
    DataError,
    IntegrityError,
    InterfaceError,
    OperationalError,
    SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import AsyncSession  # pyright: ignore[reportMissingImports]

from ...dao import TodoDAO
from ...database import get_async_pg_session
from ...models import CompletionUpdate, TodoFields, TodoRead

router = APIRouter()
logger = logging.getLogger(__name__)

UPDATED_MESSAGE = "Todo was updated!"
DELETED_MESSAGE = "Todo was deleted!"

# Ids live in a 32-bit INTEGER column; anything outside cannot match a row.
MIN_TODO_ID = -(2**31)
MAX_TODO_ID = 2**31 - 1

# --- Observability ---
TODO_REQUESTS = Counter("tasktrack_todo_requests_total", "Todo operations attempted", ["operation"])
TODO_STORE_FAILURES = Counter("tasktrack_todo_store_failures_total", "Todo operations failed in the store", ["operation"])
TODO_LATENCY = Histogram("tasktrack_todo_request_latency_seconds", "Latency seconds", ["operation"])

_dao = TodoDAO()


def get_todo_dao() -> TodoDAO:
    return _dao


# --- Helpers ---
def _store_failure(exc: BaseException) -> HTTPException:
    """Map a store exception to the service's status-code convention."""
    if isinstance(exc, (IntegrityError, DataError)):
        return HTTPException(400, "Task rejected by store")
    if isinstance(exc, (OperationalError, InterfaceError, OSError)):
        return HTTPException(503, "Task store unavailable")
    return HTTPException(500, "Task store error")


@asynccontextmanager
async def _store_call(session: AsyncSession, operation: str) -> AsyncIterator[None]:
    """Count, time and translate failures of one store round trip."""
    TODO_REQUESTS.labels(operation).inc()
    started = perf_counter()
    try:
        yield
    except (SQLAlchemyError, OSError) as exc:
        TODO_STORE_FAILURES.labels(operation).inc()
        logger.error(f"{operation} failed: {exc}")
        await session.rollback()
        raise _store_failure(exc) from exc
    finally:
        TODO_LATENCY.labels(operation).observe(perf_counter() - started)


def _parse(model, payload: Dict[str, Any]):
    try:
        return model.model_validate(payload)
    except ValidationError as exc:
        raise RequestValidationError(exc.errors(include_url=False), body=payload)


# --- Operations ---
async def toggle_completion(
    session: AsyncSession, dao: TodoDAO, todo_id: int, update: CompletionUpdate
) -> int:
    """Set only the completion flag of one task."""
    async with _store_call(session, "toggle_completion"):
        matched = await dao.set_completion(session, todo_id, update.is_completed)
        await session.commit()
    logger.info(f"Todo {todo_id} completion set to {update.is_completed} (matched={matched})")
    return matched


async def replace_todo(
    session: AsyncSession, dao: TodoDAO, todo_id: int, fields: TodoFields
) -> int:
    """Overwrite the five editable fields; the completion flag is untouched."""
    async with _store_call(session, "replace_todo"):
        matched = await dao.replace_fields(session, todo_id, fields.to_values())
        await session.commit()
    logger.info(f"Todo {todo_id} replaced (matched={matched})")
    return matched


# --- Endpoints ---

@router.post("/todos", response_model=TodoRead)
async def create_todo(
    fields: TodoFields,
    session: AsyncSession = Depends(get_async_pg_session),
    dao: TodoDAO = Depends(get_todo_dao),
) -> TodoRead:
    async with _store_call(session, "create_todo"):
        row = await dao.insert(session, fields.to_values())
        await session.commit()
    logger.info(f"Todo {row.id} created")
    return TodoRead.model_validate(row)


@router.get("/todos", response_model=List[TodoRead])
async def list_todos(
    session: AsyncSession = Depends(get_async_pg_session),
    dao: TodoDAO = Depends(get_todo_dao),
) -> List[TodoRead]:
    async with _store_call(session, "list_todos"):
        rows = await dao.list_all(session)
    return [TodoRead.model_validate(r) for r in rows]


@router.put("/todos/{todo_id}", response_model=str)
async def update_todo(
    todo_id: int = Path(..., ge=MIN_TODO_ID, le=MAX_TODO_ID),
    payload: Dict[str, Any] = Body(...),
    session: AsyncSession = Depends(get_async_pg_session),
    dao: TodoDAO = Depends(get_todo_dao),
) -> str:
    """
    Update a task.

    A body holding only `is_completed` toggles completion. Any other body is
    a full replace of the editable fields, and `is_completed` in it is
    ignored; changing both needs two requests.
    """
    if set(payload) == {"is_completed"}:
        await toggle_completion(session, dao, todo_id, _parse(CompletionUpdate, payload))
    else:
        await replace_todo(session, dao, todo_id, _parse(TodoFields, payload))
    return UPDATED_MESSAGE


@router.delete("/todos/{todo_id}", response_model=str)
async def delete_todo(
    todo_id: int = Path(..., ge=MIN_TODO_ID, le=MAX_TODO_ID),
    session: AsyncSession = Depends(get_async_pg_session),
    dao: TodoDAO = Depends(get_todo_dao),
) -> str:
    async with _store_call(session, "delete_todo"):
        matched = await dao.delete(session, todo_id)
        await session.commit()
    logger.info(f"Todo {todo_id} deleted (matched={matched})")
    return DELETED_MESSAGE
