"""Shared fixtures: a throwaway SQLite database per test."""

import asyncio

import pytest

from printtrack.config import Settings, configure
from printtrack.db import close_db, get_session, init_db


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a fresh database file."""
    test_settings = Settings(
        _env_file=None,
        data_dir=tmp_path,
        database_url=f"sqlite+aiosqlite:///{tmp_path}/printtrack.db",
        jwt_secret_key="test-secret-key",
    )
    configure(test_settings)
    yield test_settings
    configure(None)


@pytest.fixture
def run_db(settings):
    """Run ``fn(session)`` inside one committed session."""

    def _run(fn):
        async def _main():
            await init_db()
            try:
                async with get_session() as session:
                    return await fn(session)
            finally:
                await close_db()

        return asyncio.run(_main())

    return _run
