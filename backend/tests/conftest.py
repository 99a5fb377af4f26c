"""
StuntCheck Gateway — Test Configuration (conftest.py)
======================================================

What:  Shared pytest fixtures for the whole suite.
How:   Environment is set before any stuntcheck import so the settings
       singleton never points at a real database or identity provider.

Fixtures:
    ├── mock_db_session:   AsyncMock session for pure service unit tests
    ├── fake_identity:     in-memory identity provider (tokens → identities)
    ├── fake_inference:    in-memory model server
    ├── db_engine:         in-memory SQLite engine with every table created
    ├── test_client:       HTTPX AsyncClient on a fresh app wired to the fakes
    └── alice_headers / bob_headers: bearer headers of two distinct users
"""

import os

os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SUPABASE_URL"] = "https://identity.test"
os.environ["SUPABASE_ANON_KEY"] = "anon-key-not-real"
os.environ["INFERENCE_BASE_URL"] = "http://inference.test"
os.environ["LOG_LEVEL"] = "WARNING"

from typing import Any, Dict, List, Optional
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from stuntcheck.database import Base, get_db_session
from stuntcheck.exceptions import (
    AuthenticationError,
    IdentityProviderError,
    InferenceServiceError,
    InferenceUnavailableError,
)
from stuntcheck.schemas.auth import Identity, Session
from stuntcheck.services.inference_base import InferenceService
import stuntcheck.models  # noqa: F401

ALICE = Identity(id="user-alice", email="alice@example.com", name="Alice", metadata={"name": "Alice"})
BOB = Identity(id="user-bob", email="bob@example.com", name="Bob", metadata={"name": "Bob"})

SAMPLE_INFERENCE = {
    "status": "Stunted",
    "confidence": 0.91,
    "nutrition_recommendation": "Increase protein intake",
    "additional_info": {"z_score": -2.4},
}


# ══════════════════════════════════════════════════════════════════════════
# Fakes for the external collaborators
# ══════════════════════════════════════════════════════════════════════════

class FakeIdentityProvider:
    """Stands in for IdentityProviderClient; records every call."""

    def __init__(self):
        self.tokens: Dict[str, Identity] = {"token-alice": ALICE, "token-bob": BOB}
        self.passwords: Dict[str, str] = {"alice@example.com": "secret1"}
        self.calls: List[tuple] = []
        self.fail_with: Optional[Exception] = None

    async def get_user(self, access_token: str) -> Identity:
        self.calls.append(("get_user", access_token))
        if access_token not in self.tokens:
            raise AuthenticationError()
        return self.tokens[access_token]

    async def sign_up(self, email: str, password: str, metadata: Optional[dict] = None) -> Optional[Identity]:
        self.calls.append(("sign_up", email))
        if self.fail_with:
            raise self.fail_with
        if email in self.passwords:
            raise IdentityProviderError(message="User already registered", status_code=422)
        self.passwords[email] = password
        return Identity(
            id=f"user-{email.split('@')[0]}",
            email=email,
            name=(metadata or {}).get("name"),
            metadata=metadata or {},
        )

    async def sign_in(self, email: str, password: str):
        self.calls.append(("sign_in", email))
        if self.passwords.get(email) != password:
            raise IdentityProviderError(message="Invalid login credentials", status_code=400)
        user = next((u for u in self.tokens.values() if u.email == email), None)
        if user is None:
            user = Identity(id=f"user-{email.split('@')[0]}", email=email)
        return Session(access_token=f"token-{email.split('@')[0]}", expires_in=3600), user

    async def update_user(self, access_token: str, attributes: Dict[str, Any]) -> Identity:
        self.calls.append(("update_user", access_token, attributes))
        if self.fail_with:
            raise self.fail_with
        current = self.tokens[access_token]
        metadata = attributes.get("data", current.metadata)
        updated = Identity(
            id=current.id,
            email=attributes.get("email", current.email),
            name=metadata.get("name"),
            metadata=metadata,
        )
        self.tokens[access_token] = updated
        return updated


class FakeInferenceService(InferenceService):
    """In-memory model server. Set `error` to make every call fail."""

    def __init__(self):
        self.result: Any = dict(SAMPLE_INFERENCE)
        self.error: Optional[Exception] = None
        self.calls: List[Dict[str, Any]] = []
        self.reachable = True

    async def predict(self, features: Dict[str, Any]) -> Any:
        self.calls.append(features)
        if self.error:
            raise self.error
        return self.result

    async def status(self) -> Any:
        if not self.reachable:
            raise InferenceUnavailableError(context={"error": "Connection refused"})
        return {"message": "model ready"}


# ══════════════════════════════════════════════════════════════════════════
# Function-Scoped Fixtures
# ══════════════════════════════════════════════════════════════════════════

@pytest.fixture
def mock_db_session():
    """
    AsyncMock standing in for AsyncSession in service unit tests.

    Usage:
        mock_db_session.execute.return_value.scalar_one_or_none.return_value = child
    """
    session = AsyncMock()
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.delete = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def fake_identity():
    return FakeIdentityProvider()


@pytest.fixture
def fake_inference():
    return FakeInferenceService()


@pytest.fixture
def alice_headers():
    return {"Authorization": "Bearer token-alice"}


@pytest.fixture
def bob_headers():
    return {"Authorization": "Bearer token-bob"}


@pytest_asyncio.fixture
async def db_engine():
    """
    In-memory SQLite with every table created.

    StaticPool keeps the single connection (and its data) for the whole test.
    Foreign keys are switched on so the predictions → children reference is
    enforced like in PostgreSQL; explicit BEGIN makes SAVEPOINTs behave.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine.sync_engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def db_session_factory(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def test_client(db_session_factory, fake_identity, fake_inference):
    """
    HTTPX AsyncClient on a fresh app instance.

    The database dependency is overridden with the SQLite session factory and
    the identity provider / model server singletons are replaced by fakes.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
    """
    from stuntcheck.main import create_app

    app = create_app()

    async def _session():
        async with db_session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db_session] = _session

    with patch("stuntcheck.middleware.auth.identity_client", fake_identity), \
         patch("stuntcheck.services.account_service.identity_client", fake_identity), \
         patch("stuntcheck.services.prediction_service.inference_client", fake_inference), \
         patch("stuntcheck.routes.diagnostics.inference_client", fake_inference), \
         patch("stuntcheck.services.inference_client.inference_client", fake_inference):
        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client


@pytest.fixture
def inference_failure():
    return InferenceServiceError(context={"error_type": "ConnectError"})
