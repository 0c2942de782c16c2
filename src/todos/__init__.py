"""
Owner-scoped Todos backend package.

Layers, leaf to root: record store (store.py), repository (repositories.py),
service (services.py) and the FastAPI router (routers/todos.py). The app
factory lives in main.py.
"""

from .errors import TodoException, TodoExceptionCode  # noqa: F401
