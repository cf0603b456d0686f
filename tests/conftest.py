"""Pytest configuration and fixtures."""

import os
from datetime import datetime

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient

from database import build_engine, build_session_factory, get_session, init_db
from services.cache import TTLCache
from services.code_pool_service import CodePool
from services.settlement_service import SettlementCoordinator

FIXED_NOW = datetime(2026, 10, 17, 8, 30, 0)


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so several sessions can share one database."""
    engine = build_engine(f"sqlite:///{tmp_path / 'settlement.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def policy_cache() -> TTLCache:
    return TTLCache(max_entries=10, ttl_seconds=60)


@pytest.fixture
def clock():
    """Mutable clock: set `clock.now` to move time."""

    class _Clock:
        now = FIXED_NOW

        def __call__(self) -> datetime:
            return self.now

    return _Clock()


@pytest.fixture
def coordinator(db, policy_cache, clock) -> SettlementCoordinator:
    return SettlementCoordinator(db, policy_cache=policy_cache, clock=clock)


@pytest.fixture
def pool(db, clock) -> CodePool:
    code_pool = CodePool(db, clock=clock)
    code_pool.seed()
    return code_pool


@pytest.fixture
def client(session_factory):
    """API client bound to the test database with auth bypassed."""
    from dependencies import verify_token
    from main import app

    def _session():
        session = session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_session] = _session
    app.dependency_overrides[verify_token] = lambda: {"id": 1, "role": "admin"}
    app.state.policy_cache = TTLCache(max_entries=10, ttl_seconds=60)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def confirmation() -> dict:
    """A successful confirmation without a vehicle."""
    return {
        "external_reference": "X1",
        "success": True,
        "amount": "40",
        "tenant_id": "sacco-001",
        "vehicle_id": None,
        "counterpart_id": None,
        "payer_reference": "254700000001",
        "receipt": "QJK1X2Y3Z4",
    }
