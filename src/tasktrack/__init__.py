# src/tasktrack/__init__.py
"""
tasktrack
=========
A personal task tracker: one relational table, a four-route REST service
over it, and a single-screen client that lists tasks and edits them
through a form.

Import Guide:
-------------
Models:
    from tasktrack.models import TodoRow, TodoRead, TodoFields, Priority

Store:
    from tasktrack.dao import TodoDAO

Service:
    from tasktrack.main import app

Client:
    from tasktrack.client import TodoServiceClient, TodoScreen, TodoDraft
"""

__version__ = "1.0.0"
