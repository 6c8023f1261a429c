"""
Pytest configuration and shared fixtures.

API tests run the app in-process against a throwaway SQLite file that is
recreated for every test.
"""

import os
import asyncio
import tempfile
from pathlib import Path

_TEST_DB_DIR = Path(tempfile.mkdtemp(prefix="dashboard-tests-"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TEST_DB_DIR / 'test.db'}"
os.environ["SECRET_KEY"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["ALLOW_SIGNUP"] = "true"
os.environ["BOOTSTRAP_SUPER_ADMIN_EMAIL"] = ""
os.environ["BOOTSTRAP_SUPER_ADMIN_PASSWORD"] = ""

from datetime import datetime  # noqa: E402
from typing import Optional  # noqa: E402
from uuid import UUID  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import update  # noqa: E402

from app.core.jwt import create_access_token  # noqa: E402
from app.core.permissions import Roles  # noqa: E402
from app.core.security import hash_password  # noqa: E402
from app.db.base import Base  # noqa: E402
from app.db.session import engine, get_async_session_context  # noqa: E402
from app.main import app  # noqa: E402
from app.models import Candidate, User  # noqa: E402


TEST_PASSWORD = "secret123"


def pytest_configure(config):
    config.addinivalue_line("markers", "unit: fast tests, no external deps")
    config.addinivalue_line("markers", "api: in-process API tests against a throwaway SQLite database")
    config.addinivalue_line("markers", "db: runs the Alembic migrations against a scratch database")


def pytest_collection_modifyitems(config, items):
    run_db = os.environ.get("RUN_DB_TESTS") == "1"

    skip_db = pytest.mark.skip(reason="db tests skipped by default; set RUN_DB_TESTS=1 to enable")

    for item in items:
        if "db" in item.keywords and not run_db:
            item.add_marker(skip_db)


async def _reset_schema():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)


@pytest.fixture
def db_schema():
    """Fresh, empty tables."""
    asyncio.run(_reset_schema())


@pytest.fixture
def client(db_schema):
    return TestClient(app)


def create_user(email: str, role: Optional[str], full_name: Optional[str] = None, is_active: bool = True) -> User:
    async def _create():
        async with get_async_session_context() as session:
            user = User(
                email=email.lower(),
                full_name=full_name or email.split("@")[0].title(),
                hashed_password=hash_password(TEST_PASSWORD),
                role=role,
                is_active=is_active,
            )
            session.add(user)
            await session.flush()
            return user

    return asyncio.run(_create())


def auth_headers(user: User) -> dict:
    token = create_access_token({"user_id": str(user.id), "email": user.email, "role": user.role})
    return {"Authorization": f"Bearer {token}"}


def set_candidate_times(candidate_id, created_at: Optional[datetime] = None, updated_at: Optional[datetime] = None):
    """Backdate a candidate for time-based statistics."""
    values = {}
    if created_at is not None:
        values["created_at"] = created_at
    if updated_at is not None:
        values["updated_at"] = updated_at

    async def _update():
        async with get_async_session_context() as session:
            await session.execute(update(Candidate).where(Candidate.id == UUID(str(candidate_id))).values(**values))

    asyncio.run(_update())


def candidate_payload(**overrides) -> dict:
    payload = {
        "full_name": "Asha Verma",
        "email": "asha.verma@example.com",
        "phone": "9876543210",
        "city": "Pune",
        "designation": "Backend Engineer",
        "company": "Acme",
        "position_name": "Senior Engineer",
        "client_name": "Globex",
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def super_admin(db_schema) -> User:
    return create_user("root@example.com", Roles.SUPER_ADMIN, full_name="Root Admin")


@pytest.fixture
def sub_admin(db_schema) -> User:
    return create_user("sam@example.com", Roles.SUB_ADMIN, full_name="Sam Sub")


@pytest.fixture
def other_sub_admin(db_schema) -> User:
    return create_user("olga@example.com", Roles.SUB_ADMIN, full_name="Olga Other")
