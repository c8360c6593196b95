"""
Pytest fixtures for the test suite.

Data-layer tests use an in-memory SQLite engine and a session that rolls back
after each test, so tests do not affect each other. API tests reuse the same
session through a ``get_db`` override.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import pytest
from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from outage_admin.session_auth import SessionTokenCodec


TEST_DB_URL = "sqlite:///:memory:"
TEST_SECRET = "test-secret"
REPO_ROOT = Path(__file__).resolve().parents[1]


@pytest.fixture
def engine():
    """Create a fresh in-memory SQLite engine for each test."""
    return create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        echo=False,
    )


@pytest.fixture
def tables(engine):
    """Create all ORM tables on the test engine."""
    from outage_admin.db.base import Base
    from outage_admin.models import org, outage, user  # noqa: F401  (register mappers)

    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def db_session(tables):
    """
    Provide a Session bound to the test DB; roll back after each test.
    """
    connection = tables.connect()
    transaction = connection.begin()
    TestSession = sessionmaker(
        bind=connection,
        autocommit=False,
        autoflush=False,
        class_=Session,
    )
    session = TestSession()
    yield session
    session.close()
    transaction.rollback()
    connection.close()


@dataclass
class Seed:
    center_a: object
    center_b: object
    branch_x: object
    branch_y: object
    branch_z: object
    users: dict


@pytest.fixture
def seed(db_session) -> Seed:
    """Two work centers, three branches and one user per role (password ``secret1``)."""
    from outage_admin.models.org import Branch, WorkCenter
    from outage_admin.models.user import User
    from outage_admin.security.passwords import hash_password

    center_a = WorkCenter(name="Center A")
    center_b = WorkCenter(name="Center B")
    db_session.add_all([center_a, center_b])
    db_session.flush()

    branch_x = Branch(work_center_id=center_a.id, full_name="Branch X Office", short_name="Branch X", phone_number="02-111")
    branch_y = Branch(work_center_id=center_a.id, full_name="Branch Y Office", short_name="Branch Y", phone_number="02-222")
    branch_z = Branch(work_center_id=center_b.id, full_name="Branch Z Office", short_name="Branch Z", phone_number=None)
    db_session.add_all([branch_x, branch_y, branch_z])
    db_session.flush()

    password_hash = hash_password("secret1", rounds=4)
    users = {}
    for n, role in enumerate(["ADMIN", "MANAGER", "SUPERVISOR", "USER", "VIEWER"], start=1):
        users[role] = User(
            employee_id=f"10000{n}",
            full_name=f"{role.title()} Person",
            role=role,
            work_center_id=center_a.id,
            branch_id=branch_x.id,
            password_hash=password_hash,
        )
    users["USER_B"] = User(
        employee_id="200001",
        full_name="Other Center User",
        role="USER",
        work_center_id=center_b.id,
        branch_id=branch_z.id,
        password_hash=password_hash,
    )
    db_session.add_all(users.values())
    db_session.commit()

    return Seed(center_a, center_b, branch_x, branch_y, branch_z, users)


@pytest.fixture
def codec() -> SessionTokenCodec:
    return SessionTokenCodec(TEST_SECRET, ttl_minutes=60)


@pytest.fixture
def client(db_session, codec):
    """TestClient over the real app with config loaded and ``get_db`` bound to ``db_session``."""
    from fastapi.testclient import TestClient

    from outage_admin.db.session import get_db
    from outage_admin.main import create_app
    from outage_admin.security.config import load_security_config

    app = create_app(init_database=False)
    app.state.security_config = load_security_config(REPO_ROOT / "config" / "security_config.yaml")
    app.state.session_codec = codec

    def _get_db(request: Request):
        authz = getattr(request.state, "authz", None)
        if authz is not None:
            db_session.info["authz"] = authz
        try:
            yield db_session
        finally:
            db_session.info.pop("authz", None)

    app.dependency_overrides[get_db] = _get_db
    # Not used as a context manager: lifespan (real DB init) stays off.
    return TestClient(app)


@pytest.fixture
def auth_headers(codec):
    """Build an Authorization header for a seeded user."""
    from outage_admin.security.auth import session_record_for

    def _headers(user) -> dict[str, str]:
        return {"Authorization": f"Bearer {codec.issue(session_record_for(user))}"}

    return _headers
