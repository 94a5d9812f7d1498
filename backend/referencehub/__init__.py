"""
ReferenceHub Backend — Application Package Initializer
======================================================

What: Marks the `referencehub` directory as a Python package.
Who:  Imported by uvicorn (`referencehub.main:app`), Alembic, and pytest.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │      Routes (HTML + JSON API)       │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (validation, search,     │  ← Business rules
    │   embed lookup, entry repository)   │
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │  Stores (SQL primary, in-process    │  ← Persistence with fallback
    │  fallback)                          │
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
