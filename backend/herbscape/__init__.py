"""
HerbScape Backend — Application Package Initializer
====================================================

What: Marks the `herbscape` directory as a Python package.
Who:  Used by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The catalog follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes (HTML pages + JSON)     │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Catalog components (page state)   │  ← search, scanner, remedy widget
    ├─────────────────────────────────────┤
    │     Services (data access layer)    │  ← herbs table, functions, auth, webhook
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Components own the per-client UI state (query, category, locale, dialogs,
    toasts) and call services; routes only pick the client's page, call a
    component operation and render the result.
"""

__version__ = "1.0.0"
