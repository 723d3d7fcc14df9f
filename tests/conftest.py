"""Root conftest for tests."""

import os
from typing import Any

import pytest

if os.getenv("APP_ENV", "").strip().lower() == "prod":
    raise RuntimeError("Refusing to run tests with APP_ENV=prod")

os.environ["APP_ENV"] = "test"
os.environ["SECURITY_SKIP_JWT_VALIDATION"] = "false"
os.environ["AUTH_SECRET_KEY"] = "test-secret-key"
os.environ.setdefault("METRICS_TOKEN", "test-metrics-token")


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Auto-apply markers based on test directory structure."""
    dir_marker_map = {
        "unit": pytest.mark.unit,
        "smoke": pytest.mark.smoke,
        "integration": pytest.mark.integration,
    }
    for item in items:
        test_path = str(item.fspath)
        for dir_name, marker in dir_marker_map.items():
            if f"/{dir_name}/" in test_path or f"\\{dir_name}\\" in test_path:
                item.add_marker(marker)
                break


class FakeRow:
    def __init__(self, mapping: dict[str, Any]):
        self._mapping = mapping


class FakeResult:
    returns_rows = True

    def __init__(self, rows: list[dict[str, Any]]):
        self._rows = [FakeRow(dict(row)) for row in rows]

    def fetchall(self) -> list[FakeRow]:
        return self._rows


class FakeConnection:
    def __init__(self, session: "FakeSession"):
        self.session = session

    async def exec_driver_sql(self, sql: str, params: tuple = ()):
        return self.session.record(sql, params)


class FakeSession:
    """Stand-in for AsyncSession.

    Records every statement with its parameters and replays queued row sets
    in order; an empty queue yields no rows.
    """

    def __init__(self):
        self.results: list[list[dict[str, Any]]] = []
        self.calls: list[tuple[str, Any]] = []
        self.committed = False
        self.rolled_back = False

    def queue(self, *row_sets: list[dict[str, Any]]) -> None:
        self.results.extend(row_sets)

    def record(self, sql: str, params: Any) -> FakeResult:
        self.calls.append((sql, params))
        return FakeResult(self.results.pop(0) if self.results else [])

    @property
    def last_sql(self) -> str:
        return " ".join(self.calls[-1][0].split())

    @property
    def last_params(self) -> Any:
        return self.calls[-1][1]

    async def execute(self, statement, params=None):
        return self.record(str(statement), params)

    async def connection(self) -> FakeConnection:
        return FakeConnection(self)

    async def commit(self):
        self.committed = True

    async def rollback(self):
        self.rolled_back = True


@pytest.fixture
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def admin_token() -> str:
    from app.core.auth import create_access_token

    return create_access_token("admin", is_admin=True)


@pytest.fixture
def user_token() -> str:
    from app.core.auth import create_access_token

    return create_access_token("u1", is_admin=False)
