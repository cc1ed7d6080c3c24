"""
Single-screen task client: a list view and a create/edit form modal.

The screen never trusts a mutation response for display. Every successful
mutation is followed by a full refetch of the list. Failures differ by kind:

- a failed fetch raises a blocking alert through the ``alert`` callback;
- a failed mutation is only logged, and the screen stays exactly as it was
  (form still open, same draft, list untouched, no refetch).
"""

from __future__ import annotations

import enum
import logging
from datetime import date
from typing import Any, Callable, List, Optional

import httpx

from ..models.todo_api import TodoRead
from .api_client import TodoServiceClient
from .draft import FormMode, FormState

logger = logging.getLogger(__name__)

CONNECT_ERROR_TITLE = "Error"
CONNECT_ERROR_MESSAGE = "Could not connect to server. Ensure backend is running."

Alert = Callable[[str, str], None]

# Bad JSON and schema mismatches surface as ValueError (pydantic included).
_CLIENT_ERRORS = (httpx.HTTPError, ValueError)


class ScreenMode(enum.Enum):
    LIST = "list"
    FORM = "form"


class TodoScreen:
    def __init__(self,
                 client: TodoServiceClient,
                 alert: Alert,
                 today: Callable[[], date] = date.today):
        self.client = client
        self.alert = alert
        self.today = today
        self.todos: List[TodoRead] = []
        self.form: Optional[FormState] = None

    @property
    def mode(self) -> ScreenMode:
        return ScreenMode.FORM if self.form is not None else ScreenMode.LIST

    # ------------------------------------------------------------------
    # Fetch
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """App start: list view, initial fetch."""
        self.form = None
        await self.refresh()

    async def refresh(self) -> None:
        try:
            self.todos = await self.client.list_todos()
        except _CLIENT_ERRORS as e:
            logger.error(f"Connection Error: {e}")
            self.alert(CONNECT_ERROR_TITLE, CONNECT_ERROR_MESSAGE)

    # ------------------------------------------------------------------
    # Modal transitions (no network)
    # ------------------------------------------------------------------

    def open_create(self) -> FormState:
        self.form = FormState.for_create(self.today())
        return self.form

    def open_edit(self, todo: TodoRead) -> FormState:
        self.form = FormState.for_edit(todo, self.today())
        return self.form

    def edit_draft(self, **changes: Any) -> FormState:
        if self.form is None:
            raise RuntimeError("No form is open")
        self.form = self.form.with_draft(self.form.draft.with_changes(**changes))
        return self.form

    def close(self) -> None:
        """Discard the draft and return to the list; no network call."""
        self.form = None

    def find(self, todo_id: int) -> Optional[TodoRead]:
        return next((t for t in self.todos if t.id == todo_id), None)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def toggle(self, todo: TodoRead) -> bool:
        """Flip completion of a row. Only reachable from the list view."""
        if self.form is not None:
            logger.debug(f"Ignoring toggle of {todo.id} while the form is open")
            return False
        try:
            await self.client.set_completion(todo.id, not todo.is_completed)
        except _CLIENT_ERRORS as e:
            logger.error(f"Toggle of todo {todo.id} failed: {e}")
            return False
        await self.refresh()
        return True

    async def submit(self) -> bool:
        form = self.form
        if form is None:
            raise RuntimeError("No form is open")
        try:
            if form.mode is FormMode.CREATE:
                await self.client.create_todo(form.draft)
            else:
                await self.client.replace_todo(form.target_id, form.draft)
        except _CLIENT_ERRORS as e:
            logger.error(f"Saving todo failed: {e}")
            return False
        self.close()
        await self.refresh()
        return True

    async def delete(self) -> bool:
        form = self.form
        if form is None or form.mode is not FormMode.EDIT:
            raise RuntimeError("Delete is only available while editing a task")
        try:
            await self.client.delete_todo(form.target_id)
        except _CLIENT_ERRORS as e:
            logger.error(f"Deleting todo {form.target_id} failed: {e}")
            return False
        self.close()
        await self.refresh()
        return True
