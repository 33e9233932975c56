"""
Pytest configuration file for backend testing.
"""
import os
import sys
from pathlib import Path

# Tests run against a private in-memory database
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("ENVIRONMENT", "test")

# Add the backend directory to Python path so imports work correctly
backend_dir = Path(__file__).parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from core.auth import create_access_token
from core.auth_context import CallerRole
from core.database import Base, SessionLocal, engine, get_db, init_db
from tests.factories import BaseFactory


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Fresh schema and session per test, bound to the factories."""
    init_db()
    session = SessionLocal()
    BaseFactory.bind_session(session)

    yield session

    session.close()
    BaseFactory.reset_session()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a test client sharing the test session."""
    from app.main import app

    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    # Startup checks are skipped: no context manager
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    """Build bearer headers for a caller id and role."""
    def _headers(caller_id: int, role: CallerRole = CallerRole.OWNER) -> dict:
        token = create_access_token(caller_id, role)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def admin_headers(auth_headers) -> dict:
    return auth_headers(9001, CallerRole.ADMIN)
