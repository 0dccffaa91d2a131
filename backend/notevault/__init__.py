"""
NoteVault Backend — Application Package Initializer
====================================================

What: Marks the `notevault` directory as a Python package.
Who:  Imported by uvicorn (`notevault.main:app`), Alembic, and pytest.

Architecture Note:
    The backend follows a layered layout:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │  Auth Gate (bearer token → identity)│  ← protected routes only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← hashing, tokens, ownership
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
