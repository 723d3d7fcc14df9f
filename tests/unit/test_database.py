"""Unit tests for database module."""

from unittest.mock import AsyncMock, patch

import pytest

from app.core.config import DatabaseConfig
from app.core.database import (
    create_async_engine,
    create_session_factory,
    get_session,
    reset_engine,
)


def _config() -> DatabaseConfig:
    return DatabaseConfig(
        host="localhost",
        port=5432,
        name="jobly_test",
        user="test_user",
    )


def test_create_async_engine():
    engine = create_async_engine(_config())
    assert engine.url.drivername == "postgresql+asyncpg"
    assert engine.url.database == "jobly_test"


def test_create_session_factory():
    factory = create_session_factory(create_async_engine(_config()))
    assert factory.kw["expire_on_commit"] is False


class _SessionContext:
    def __init__(self, session):
        self.session = session

    async def __aenter__(self):
        return self.session

    async def __aexit__(self, *exc):
        return False


@pytest.mark.asyncio
async def test_get_session_commits_on_success():
    session = AsyncMock()
    with patch("app.core.database.get_session_factory", return_value=lambda: _SessionContext(session)):
        session_gen = get_session()
        assert await session_gen.__anext__() is session
        with pytest.raises(StopAsyncIteration):
            await session_gen.__anext__()

    session.commit.assert_awaited_once()
    session.rollback.assert_not_awaited()


@pytest.mark.asyncio
async def test_get_session_rolls_back_on_error():
    session = AsyncMock()
    with patch("app.core.database.get_session_factory", return_value=lambda: _SessionContext(session)):
        session_gen = get_session()
        await session_gen.__anext__()
        with pytest.raises(RuntimeError):
            await session_gen.athrow(RuntimeError("boom"))

    session.rollback.assert_awaited_once()
    session.commit.assert_not_awaited()


@pytest.mark.asyncio
async def test_reset_engine():
    with patch("app.core.database._engine") as mock_engine:
        with patch("app.core.database._session_factory"):
            mock_engine.dispose = AsyncMock()
            await reset_engine()
            mock_engine.dispose.assert_called_once()
