"""
Task client: HTTP access to the todo service plus the single-screen
list/form state machine that drives the console front-end.
"""

from .api_client import TodoServiceClient
from .config import ClientConfig
from .draft import FormMode, FormState, TodoDraft
from .screen import ScreenMode, TodoScreen

__all__ = [
    "TodoServiceClient",
    "ClientConfig",
    "FormMode",
    "FormState",
    "TodoDraft",
    "ScreenMode",
    "TodoScreen",
]
