"""Unit tests for gateway_session_store.cli.main.

Uses Click's test runner (CliRunner).  ``create_store`` is patched to hand
out one shared store so that separate invocations see the same data.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from gateway_session_store.cli.main import _load_config, cli
from gateway_session_store.config import StoreConfig
from gateway_session_store.storage.memory import InMemoryStore
from gateway_session_store.storage.redis import RedisStore

SESSION_ID = "c2Vzc2lvbg=="  # base64 of b"session"

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture()
def shared_store() -> Any:
    store = InMemoryStore()
    with patch("gateway_session_store.cli.main.create_store", return_value=store):
        yield store


@pytest.fixture()
def redis_store(fake_redis: Any) -> Any:
    store = RedisStore(fake_redis)
    with patch("gateway_session_store.cli.main.create_store", return_value=store):
        yield store


# ---------------------------------------------------------------------------
# Configuration resolution
# ---------------------------------------------------------------------------


class TestLoadConfig:
    def test_defaults_to_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SESSION_STORE_BACKEND", "memcached")
        assert _load_config(None, None, None).backend == "memcached"

    def test_options_override_file(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.yaml"
        path.write_text("backend: memcached\nhost: mc\n", encoding="utf-8")
        config = _load_config(str(path), "redis", "redis://r:6379/0")
        assert config.backend == "redis"
        assert config.url == "redis://r:6379/0"

    def test_file_only(self, tmp_path: Path) -> None:
        path = tmp_path / "cfg.yaml"
        path.write_text("session_store:\n  backend: redis\n  db: 5\n", encoding="utf-8")
        assert _load_config(str(path), None, None) == StoreConfig(backend="redis", db=5)


# ---------------------------------------------------------------------------
# version / backends
# ---------------------------------------------------------------------------


class TestInfoCommands:
    def test_version(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["version"])
        assert result.exit_code == 0
        assert "gateway-session-store" in result.output

    def test_backends(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["backends"])
        assert result.exit_code == 0
        for name in ("memcached", "redis", "memory"):
            assert name in result.output

    def test_bad_config_exits_2(self, runner: CliRunner) -> None:
        result = runner.invoke(cli, ["--backend", "memcached", "--url", "redis://x", "version"])
        assert result.exit_code == 2
        assert "Configuration error" in result.output


# ---------------------------------------------------------------------------
# put / get
# ---------------------------------------------------------------------------


class TestPutGet:
    def test_put_then_get_text(self, runner: CliRunner, shared_store: InMemoryStore) -> None:
        put = runner.invoke(cli, ["put", SESSION_ID, "hello world"])
        assert put.exit_code == 0, put.output
        assert "Session stored" in put.output

        got = runner.invoke(cli, ["get", SESSION_ID])
        assert got.exit_code == 0, got.output
        assert "hello world" in got.output

    def test_put_then_get_json(self, runner: CliRunner, shared_store: InMemoryStore) -> None:
        runner.invoke(cli, ["put", SESSION_ID, '{"uri": "/account"}', "--codec", "json"])
        got = runner.invoke(cli, ["get", SESSION_ID, "--codec", "json"])
        assert got.exit_code == 0, got.output
        assert "/account" in got.output

    def test_get_prints_unbalanced_brackets_verbatim(
        self, runner: CliRunner, shared_store: InMemoryStore
    ) -> None:
        runner.invoke(cli, ["put", SESSION_ID, "[/bold] closing tag"])
        got = runner.invoke(cli, ["get", SESSION_ID])
        assert got.exit_code == 0, got.output
        assert "[/bold] closing tag" in got.output

    def test_get_does_not_render_markup_in_value(
        self, runner: CliRunner, shared_store: InMemoryStore
    ) -> None:
        runner.invoke(cli, ["put", SESSION_ID, "[bold]x[/bold]"])
        got = runner.invoke(cli, ["get", SESSION_ID])
        assert got.exit_code == 0, got.output
        assert "[bold]x[/bold]" in got.output

    def test_get_missing_exits_1(self, runner: CliRunner, shared_store: InMemoryStore) -> None:
        result = runner.invoke(cli, ["get", SESSION_ID])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_get_undecodable_exits_1(self, runner: CliRunner, shared_store: InMemoryStore) -> None:
        runner.invoke(cli, ["put", SESSION_ID, "plain text"])
        result = runner.invoke(cli, ["get", SESSION_ID, "--codec", "json"])
        assert result.exit_code == 1
        assert "Undecodable" in result.output

    def test_duplicate_put_on_memory_exits_1(
        self, runner: CliRunner, shared_store: InMemoryStore
    ) -> None:
        runner.invoke(cli, ["put", SESSION_ID, "one"])
        result = runner.invoke(cli, ["put", SESSION_ID, "two"])
        assert result.exit_code == 1
        assert "Update failed" in result.output

    def test_put_overwrites_on_redis(self, runner: CliRunner, redis_store: RedisStore) -> None:
        runner.invoke(cli, ["put", SESSION_ID, "one"])
        runner.invoke(cli, ["put", SESSION_ID, "two"])
        result = runner.invoke(cli, ["get", SESSION_ID])
        assert result.exit_code == 0
        assert "two" in result.output

    def test_put_passes_ttl(
        self, runner: CliRunner, redis_store: RedisStore, fake_redis: Any
    ) -> None:
        result = runner.invoke(cli, ["put", SESSION_ID, "v", "--ttl", "120"])
        assert result.exit_code == 0, result.output
        ttl = fake_redis.setex_calls[0][1]
        assert 118 <= ttl <= 120

    def test_invalid_session_id_exits_2(
        self, runner: CliRunner, shared_store: InMemoryStore
    ) -> None:
        result = runner.invoke(cli, ["get", "***"])
        assert result.exit_code == 2
        assert "Invalid session id" in result.output

    def test_invalid_json_value_exits_2(
        self, runner: CliRunner, shared_store: InMemoryStore
    ) -> None:
        result = runner.invoke(cli, ["put", SESSION_ID, "{nope", "--codec", "json"])
        assert result.exit_code == 2
        assert len(shared_store) == 0
