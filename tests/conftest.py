import os
import tempfile
from pathlib import Path

# Must be set before studyhub.config is imported
_db_dir = tempfile.mkdtemp(prefix="studyhub-test-")
os.environ["STUDYHUB_DATABASE_URL"] = f"sqlite+aiosqlite:///{Path(_db_dir) / 'test.db'}"

import pytest_asyncio  # noqa: E402

from studyhub.database import engine, init_db  # noqa: E402


@pytest_asyncio.fixture
async def db_ready():
    """Create tables, and release pooled connections before the loop closes."""
    await init_db()
    yield
    await engine.dispose()
