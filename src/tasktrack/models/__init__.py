"""
Database and wire models for tasktrack.

All imports are safe and don't trigger runtime dependencies.
"""

from .todo import TodoRow, Priority, Base as TodoBase
from .todo_api import TodoFields, CompletionUpdate, TodoRead

__all__ = ["TodoRow", "Priority", "TodoBase", "TodoFields", "CompletionUpdate", "TodoRead"]
