import os
import uuid
from collections.abc import AsyncGenerator

import pytest

from doclens.config.settings import Settings
from doclens.database.connection import apply_schema, close_pool, get_connection, init_pool


def _test_settings() -> Settings:
    os.environ.setdefault("DB_DATABASE", "doclens_test")
    return Settings()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    return _test_settings()


@pytest.fixture
async def integration_pool(test_settings: Settings) -> AsyncGenerator[None, None]:
    try:
        await init_pool(test_settings, timeout=5)
    except Exception as e:
        pytest.skip(
            f"PostgreSQL test DB not available: {e}. "
            "Set DB_* env to point at a disposable database"
        )
    try:
        await apply_schema()
        yield
    finally:
        await close_pool()


@pytest.fixture
async def user_id(integration_pool: None) -> AsyncGenerator[str, None]:
    """A fresh owner id; everything it owns is removed after the test."""
    owner = f"it-{uuid.uuid4()}"
    yield owner
    async with get_connection() as conn:
        await conn.execute("DELETE FROM documents WHERE user_id = %s", (owner,))
        await conn.commit()
