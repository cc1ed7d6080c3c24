from __future__ import annotations

import enum
from datetime import date
from typing import Optional

from sqlalchemy import (  # pyright: ignore[reportMissingImports]
    Boolean,
    CheckConstraint,
    Date,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column  # pyright: ignore[reportMissingImports]
from sqlalchemy.types import Enum as SQLAlchemyEnum  # pyright: ignore[reportMissingImports]


class Base(DeclarativeBase):
    """Declarative base for ORM models."""

    pass


class Priority(str, enum.Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


DEFAULT_PRIORITY = Priority.MEDIUM
DEFAULT_PROJECT = "General"
DEFAULT_DESCRIPTION = ""


class TodoRow(Base):
    """One persisted task. The table is the only source of truth."""

    __tablename__ = "todo"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Server-assigned id, never reused",
    )
    title: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
    )
    description: Mapped[str] = mapped_column(
        Text,
        nullable=False,
        server_default=DEFAULT_DESCRIPTION,
    )
    priority: Mapped[Priority] = mapped_column(
        SQLAlchemyEnum(
            Priority,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            create_constraint=True,
            length=16,
            name="todo_priority_enum",
        ),
        nullable=False,
        server_default=DEFAULT_PRIORITY.value,
    )
    project: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        server_default=DEFAULT_PROJECT,
    )
    due_date: Mapped[Optional[date]] = mapped_column(
        Date,
        nullable=True,
    )
    is_completed: Mapped[bool] = mapped_column(
        Boolean,
        nullable=False,
        server_default=text("false"),
    )

    # AUTOINCREMENT keeps SQLite from handing out the id of a deleted max row.
    __table_args__ = (
        CheckConstraint("trim(title) <> ''", name="ck_todo_title_nonblank"),
        {"sqlite_autoincrement": True},
    )
