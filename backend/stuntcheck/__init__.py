"""
StuntCheck Gateway — Application Package Initializer
====================================================

What: Marks the `stuntcheck` directory as a Python package.
Who:  Used by uvicorn (`stuntcheck.main:app`), Alembic and pytest.

Architecture Note:
    The gateway is a thin layered backend-for-frontend:

    ┌─────────────────────────────────────┐
    │   Middleware (request id, auth)     │  ← principal resolution
    ├─────────────────────────────────────┤
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← ownership, predict-then-persist
    ├─────────────────────────────────────┤
    │   Clients (identity, inference)     │  ← one outbound call each
    ├─────────────────────────────────────┤
    │   Models & Schemas / Database       │  ← SQLAlchemy ORM + Pydantic
    └─────────────────────────────────────┘

    Accounts live in the managed identity provider, records live in its
    PostgreSQL database, predictions are computed by a remote model server.
    Nothing is kept in process memory between requests.
"""

__version__ = "1.0.0"
