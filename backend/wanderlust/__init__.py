"""
Wanderlust Backend — Application Package Initializer
=====================================================

What: Marks the `wanderlust` directory as a Python package.
Why:  Enables module imports like `from wanderlust.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows a layered architecture:

    ┌─────────────────────────────────────┐
    │      Routes + Views (HTTP Layer)    │  ← Routing, redirects, HTML pages
    ├─────────────────────────────────────┤
    │   Validation + Services (Business)  │  ← Payload rules, listing/review CRUD
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch SQL; services never build HTTP responses.
"""

__version__ = "1.0.0"
