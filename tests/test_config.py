"""
Tests for settings loading
"""

import pytest

from agenthub.config import PLACEHOLDER_USER_ID, Settings, env_files, get_settings
from agenthub.context import resolve_context
from agenthub.errors import AgentHubError, ConfigurationError


def test_missing_database_url_raises(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    monkeypatch.chdir("/")  # no .env to fall back on
    get_settings.cache_clear()
    try:
        with pytest.raises(ConfigurationError) as exc_info:
            get_settings()
        assert "DATABASE_URL" in str(exc_info.value)
        assert isinstance(exc_info.value, AgentHubError)
    finally:
        get_settings.cache_clear()


def test_env_files_follow_app_env(monkeypatch):
    monkeypatch.setenv("APP_ENV", "production")
    assert env_files() == (".env", ".env.production")
    assert env_files("staging") == (".env", ".env.staging")


def test_defaults():
    s = Settings(database_url="sqlite+aiosqlite:///:memory:", _env_file=None)
    assert s.DATABASE_URL == "sqlite+aiosqlite:///:memory:"
    assert s.embedding_model == "text-embedding-3-small"
    assert s.embedding_dimension == 1536
    assert s.db_pool_size == 10
    assert s.db_max_overflow == 20
    assert s.script_pool_size == 2


def test_request_context_falls_back_to_default_user():
    assert resolve_context(default_user_id=PLACEHOLDER_USER_ID).user_id == PLACEHOLDER_USER_ID
    assert resolve_context("user-42", PLACEHOLDER_USER_ID).user_id == "user-42"


def test_script_database_url_override():
    from agenthub.scripts.common import build_parser

    parser = build_parser("test")
    args = parser.parse_args(["--database-url", "sqlite+aiosqlite://"])
    assert args.database_url == "sqlite+aiosqlite://"
    assert "DATABASE_URL must still be set" in " ".join(parser.format_help().split())
