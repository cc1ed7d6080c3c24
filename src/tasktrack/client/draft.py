"""Immutable form values for the create/edit modal.

A fresh :class:`FormState` is built every time the modal opens, so nothing
typed into a previous form can leak into the next one.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, Optional

from ..models.todo import DEFAULT_DESCRIPTION, DEFAULT_PRIORITY, DEFAULT_PROJECT, Priority
from ..models.todo_api import EDITABLE_FIELDS, TodoRead


class FormMode(enum.Enum):
    CREATE = "create"
    EDIT = "edit"


@dataclass(frozen=True)
class TodoDraft:
    """The five editable fields as typed into the form.

    ``due_date`` stays an ISO ``YYYY-MM-DD`` string, which is both what the
    form shows and what goes on the wire.
    """

    title: str = ""
    description: str = DEFAULT_DESCRIPTION
    priority: Priority = DEFAULT_PRIORITY
    project: str = DEFAULT_PROJECT
    due_date: Optional[str] = None

    @classmethod
    def blank(cls, today: date) -> "TodoDraft":
        return cls(due_date=today.isoformat())

    @classmethod
    def from_todo(cls, todo: TodoRead, today: date) -> "TodoDraft":
        due = todo.due_date or today
        return cls(
            title=todo.title,
            description=todo.description or DEFAULT_DESCRIPTION,
            priority=todo.priority,
            project=todo.project or DEFAULT_PROJECT,
            due_date=due.isoformat(),
        )

    def with_changes(self, **changes: Any) -> "TodoDraft":
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise ValueError(f"Not a form field: {', '.join(sorted(unknown))}")
        if "priority" in changes:
            changes["priority"] = Priority(changes["priority"])
        return replace(self, **changes)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "priority": self.priority.value,
            "project": self.project,
            "due_date": self.due_date,
        }


@dataclass(frozen=True)
class FormState:
    """What the open modal is doing, and to which task."""

    mode: FormMode
    draft: TodoDraft
    target_id: Optional[int] = None

    def __post_init__(self):
        if self.mode is FormMode.EDIT and self.target_id is None:
            raise ValueError("Edit form needs the id of the task being edited")
        if self.mode is FormMode.CREATE and self.target_id is not None:
            raise ValueError("Create form cannot target an existing task")

    @classmethod
    def for_create(cls, today: date) -> "FormState":
        return cls(FormMode.CREATE, TodoDraft.blank(today))

    @classmethod
    def for_edit(cls, todo: TodoRead, today: date) -> "FormState":
        return cls(FormMode.EDIT, TodoDraft.from_todo(todo, today), target_id=todo.id)

    def with_draft(self, draft: TodoDraft) -> "FormState":
        return replace(self, draft=draft)
