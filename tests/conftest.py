"""Shared test fixtures for the RFP Manager test suite."""

import os
import tempfile
from pathlib import Path

# Settings are read at import time; point them at a scratch SQLite database
_TMP_DIR = Path(tempfile.mkdtemp(prefix="rfp_manager_tests_"))
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_TMP_DIR / 'test.db'}"
os.environ["DATA_DIR"] = str(_TMP_DIR)
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["LOG_TO_FILE"] = "false"
os.environ["API_ENV"] = "development"

import httpx
import pytest
import pytest_asyncio

from api.auth.jwt import create_access_token
from database.connection import init_db, drop_db, close_db
from schemas.rfp import ExtractedRFP
from services.rfp_store import RFPStore

TEST_USER = "user-0001"


@pytest_asyncio.fixture
async def db():
    """Fresh schema for each test."""
    await init_db()
    yield
    await drop_db()
    await close_db()


@pytest.fixture
def store(db):
    return RFPStore()


@pytest_asyncio.fixture
async def rfp(store):
    """A saved RFP with a reference id."""
    extracted = ExtractedRFP(
        title="Community Water Resilience Programme",
        issuer="UNOPS",
        reference_id="UNOPS/CFP/2025/017",
    )
    return await store.create_rfp(TEST_USER, extracted, "raw text")


@pytest.fixture
def auth_headers():
    token = create_access_token({"sub": TEST_USER})
    return {"Authorization": f"Bearer {token}"}


@pytest_asyncio.fixture
async def client(db):
    from api.main import app

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
