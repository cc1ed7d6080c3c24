"""
Pydantic wire models for the todo API.

These are separate from the SQLAlchemy table model. Coercion here is limited
to filling defaults for nullable fields; `title` is passed through so the
store's NOT NULL / CHECK constraints decide whether it is acceptable.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from .todo import DEFAULT_DESCRIPTION, DEFAULT_PRIORITY, DEFAULT_PROJECT, Priority

EDITABLE_FIELDS = ("title", "description", "priority", "project", "due_date")


class TodoFields(BaseModel):
    """The five user-supplied fields, used by create and full replace."""

    # is_completed (and anything else) is dropped here
    model_config = ConfigDict(extra="ignore")

    title: Optional[str] = None
    description: str = DEFAULT_DESCRIPTION
    priority: Priority = DEFAULT_PRIORITY
    project: str = DEFAULT_PROJECT
    due_date: Optional[date] = None

    @field_validator("description", "priority", "project", mode="before")
    @classmethod
    def _null_to_default(cls, v, info):
        if v is None:
            return cls.model_fields[info.field_name].default
        return v

    def to_values(self) -> Dict[str, Any]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}


class CompletionUpdate(BaseModel):
    """Completion-only toggle payload."""

    model_config = ConfigDict(extra="forbid")

    is_completed: bool


class TodoRead(BaseModel):
    id: int
    title: str
    description: str = DEFAULT_DESCRIPTION
    priority: Priority = DEFAULT_PRIORITY
    project: str = DEFAULT_PROJECT
    due_date: Optional[date] = None
    is_completed: bool = False

    model_config = ConfigDict(from_attributes=True)

    @field_validator("due_date", mode="before")
    @classmethod
    def _date_only(cls, v):
        # Some drivers hand back timestamps; keep the date part only.
        if isinstance(v, str) and "T" in v:
            return v.split("T", 1)[0]
        return v
