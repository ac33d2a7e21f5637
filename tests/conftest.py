from __future__ import annotations

import os
import shutil
import sys
from collections.abc import AsyncIterator
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from rolodex.core.config import get_settings  # noqa: E402

TEST_DB_PATH = ROOT / "test.db"
TEST_STORAGE_DIR = ROOT / "test_storage"
if TEST_DB_PATH.exists():
    TEST_DB_PATH.unlink()
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{TEST_DB_PATH}"
os.environ["STORAGE_DIR"] = str(TEST_STORAGE_DIR)
os.environ["STORAGE_SECRET"] = "test-secret"
os.environ["IMPORT_BATCH_SIZE"] = "2"
get_settings.cache_clear()

OWNER_HEADERS = {"X-User-Id": "user-1"}


async def _reset_database() -> None:
    from rolodex.core.db import engine
    from rolodex.models import Base

    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)


@pytest.fixture()
async def client() -> AsyncIterator[AsyncClient]:
    from rolodex.main import app

    await _reset_database()
    shutil.rmtree(TEST_STORAGE_DIR, ignore_errors=True)

    transport = ASGITransport(app=app)
    async with AsyncClient(
        transport=transport, base_url="http://testserver", headers=OWNER_HEADERS
    ) as client:
        yield client
    app.dependency_overrides.clear()


@pytest.fixture()
async def anonymous_client() -> AsyncIterator[AsyncClient]:
    from rolodex.main import app

    await _reset_database()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as client:
        yield client


@pytest.fixture()
def contact_payload() -> dict[str, str]:
    return {
        "first_name": "Ada",
        "last_name": "Lovelace",
        "company": "Analytical Engines",
        "position": "Mathematician",
        "location": "London",
        "email": "ada@example.com",
    }


@pytest.fixture(scope="session")
def anyio_backend() -> str:
    return "asyncio"
