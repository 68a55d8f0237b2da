"""Unit test environment helpers."""

import pytest

_RUN_ENV_VARS = (
    "DB_TYPE",
    "DB_HOST",
    "DB_PORT",
    "DB_NAME",
    "DB_INSTANCE",
    "DB_CONNECTION_OPTIONS",
    "DB_SCHEMA",
    "DB_SCHEMAS",
    "DB_MULTI_SCHEMA",
    "DB_EXCLUDE_COLUMNS",
    "DAL_TRACE_QUERIES",
)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Run each test without DB_* settings and outside the repo (no stray .env)."""
    for name in _RUN_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    yield
