"""
Headlines Backend — Application Package Initializer
====================================================

What: Marks the `headlines` directory as a Python package.
Why:  Enables module imports like `from headlines.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered shape for every operation:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │   Services (Stores, Linkage, Scrape)│  ← Orchestration
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes never touch the ORM directly; services never touch HTTP objects.
    The Database object is built by the application factory and handed down,
    so each app instance (and each test) owns its own connection pool.
"""

__version__ = "1.0.0"
