"""Shared fixtures: a throwaway SQLite database and user/client factories.

The database URLs and log directory are set before any application module is
imported, because `core.config` reads them at import time.
"""
import os
import tempfile
import uuid

_TMP_DIR = tempfile.mkdtemp(prefix="coaching-tests-")
_DB_URL = "sqlite:///" + os.path.join(_TMP_DIR, "test.db")
os.environ["WRITE_DATABASE_URL"] = _DB_URL
os.environ["READ_DATABASE_URL"] = _DB_URL
os.environ["LOG_DIR"] = _TMP_DIR
os.environ["SEED_FOODS"] = "true"

import pytest  # noqa: E402

from core.context import context_for_user  # noqa: E402
from database import init_db  # noqa: E402
from database.database import WriteSessionLocal  # noqa: E402
from schemas.user_schema import ClientCreateRequest, UserCreateRequest  # noqa: E402
from services import client_service  # noqa: E402


@pytest.fixture(scope="session", autouse=True)
def setup_db():
    """Create the schema and seed the default food catalogue once per run."""
    init_db()


@pytest.fixture
def db():
    session = WriteSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    """Factory returning the `RequestContext` of a freshly registered user."""
    def _make(role="client", name=None):
        tag = uuid.uuid4().hex[:10]
        user = client_service.create_user(db, UserCreateRequest(
            name=name or f"{role} {tag}", email=f"{role}-{tag}@example.com", role=role))
        return context_for_user(user)
    return _make


@pytest.fixture
def make_client(db, make_user):
    """Factory creating a client profile; returns (client_row, client_ctx)."""
    def _make(staff_ctx, **fields):
        client_ctx = make_user("client")
        client = client_service.create_client(db, staff_ctx, ClientCreateRequest(user_id=client_ctx.user_id, **fields))
        return client, client_ctx
    return _make
