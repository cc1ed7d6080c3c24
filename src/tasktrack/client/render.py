"""Plain-text rendering of the list view and the form modal."""
from __future__ import annotations

import textwrap
from datetime import date
from typing import List, Optional, Sequence

from ..models.todo_api import TodoRead
from .draft import FormMode, FormState

EMPTY_MESSAGE = "No tasks found. Add one!"
DESCRIPTION_WIDTH = 60
DESCRIPTION_LINES = 2


def _ordinal(day: int) -> str:
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_header_date(today: date) -> str:
    """e.g. 'Monday, October 19th'."""
    return f"{today.strftime('%A, %B')} {_ordinal(today.day)}"


def format_due(due: Optional[date]) -> str:
    """e.g. 'Jun 01'; '-' when there is no due date."""
    return due.strftime("%b %d") if due else "-"


def render_row(todo: TodoRead) -> List[str]:
    box = "[x]" if todo.is_completed else "[ ]"
    title = f"~{todo.title}~" if todo.is_completed else todo.title
    lines = [f"{box} #{todo.id} {title}"]
    if todo.description:
        wrapped = textwrap.wrap(todo.description, DESCRIPTION_WIDTH)
        if len(wrapped) > DESCRIPTION_LINES:
            wrapped = wrapped[:DESCRIPTION_LINES]
            wrapped[-1] = wrapped[-1][: DESCRIPTION_WIDTH - 3] + "..."
        lines.extend(f"    {line}" for line in wrapped)
    lines.append(f"    [{todo.priority.value}]  {format_due(todo.due_date)}  | {todo.project}")
    return lines


def render_list(todos: Sequence[TodoRead], today: date) -> str:
    lines = ["My Tasks", format_header_date(today), ""]
    if not todos:
        lines.append(EMPTY_MESSAGE)
    for todo in todos:
        lines.extend(render_row(todo))
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def render_form(form: FormState) -> str:
    editing = form.mode is FormMode.EDIT
    draft = form.draft
    lines = [
        "Edit Task" if editing else "New Task",
        "",
        f"Title:       {draft.title or '(What needs to be done?)'}",
        f"Description: {draft.description or '(Add details...)'}",
        f"Priority:    {draft.priority.value}",
        f"Project:     {draft.project}",
        f"Due date:    {draft.due_date or '-'}",
        "",
        "[Save Changes]" if editing else "[Create Task]",
    ]
    if editing:
        lines.append("[Delete Task]")
    return "\n".join(lines) + "\n"
