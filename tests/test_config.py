"""Tests for bookchain.config loading and environment overrides."""

import configparser

import pytest

from bookchain.config import (
    ServerConfig,
    _load_from_ini,
    _parse_bool,
    _parse_list,
    get_config_status,
    load_config,
    print_config_summary,
)


@pytest.mark.unit
def test_defaults():
    cfg = ServerConfig()

    assert cfg.server.host == "0.0.0.0"
    assert cfg.server.port == 3000
    assert cfg.chain.enforce_monotonic_timestamps is False
    assert cfg.is_production is False


@pytest.mark.unit
def test_server_env_overrides(monkeypatch):
    monkeypatch.setenv("BOOKCHAIN_HOST", "127.0.0.1")
    monkeypatch.setenv("BOOKCHAIN_PORT", "3042")

    cfg = load_config()

    assert cfg.server.host == "127.0.0.1"
    assert cfg.server.port == 3042


@pytest.mark.unit
def test_security_env_overrides(monkeypatch):
    monkeypatch.setenv("BOOKCHAIN_PRODUCTION", "true")
    monkeypatch.setenv("BOOKCHAIN_CORS_ORIGINS", "https://a.example, https://b.example")

    cfg = load_config()

    assert cfg.is_production is True
    assert cfg.security.cors_origins == ["https://a.example", "https://b.example"]


@pytest.mark.unit
def test_logging_env_overrides(monkeypatch):
    monkeypatch.setenv("BOOKCHAIN_LOG_LEVEL", "debug")
    monkeypatch.setenv("BOOKCHAIN_LOG_FORMAT", "SIMPLE")

    cfg = load_config()

    assert cfg.logging.level == "DEBUG"
    assert cfg.logging.format == "simple"


@pytest.mark.unit
def test_unknown_log_format_env_is_ignored(monkeypatch):
    monkeypatch.setenv("BOOKCHAIN_LOG_FORMAT", "json")

    cfg = load_config()

    assert cfg.logging.format in ("simple", "detailed")


@pytest.mark.unit
def test_chain_env_override(monkeypatch):
    monkeypatch.setenv("BOOKCHAIN_ENFORCE_MONOTONIC_TIMESTAMPS", "yes")

    cfg = load_config()

    assert cfg.chain.enforce_monotonic_timestamps is True


@pytest.mark.unit
def test_ini_sections_load():
    parser = configparser.ConfigParser()
    parser.read_dict(
        {
            "server": {"host": "127.0.0.1", "port": "3007"},
            "security": {"production": "true", "docs_enabled": "enabled"},
            "logging": {"level": "warning", "format": "simple"},
            "chain": {"enforce_monotonic_timestamps": "on"},
        }
    )

    cfg = ServerConfig()
    _load_from_ini(parser, cfg)

    assert cfg.server.host == "127.0.0.1"
    assert cfg.server.port == 3007
    assert cfg.security.production is True
    assert cfg.security.docs_enabled == "enabled"
    assert cfg.logging.level == "WARNING"
    assert cfg.logging.format == "simple"
    assert cfg.chain.enforce_monotonic_timestamps is True


@pytest.mark.unit
def test_ini_invalid_docs_value_is_ignored():
    parser = configparser.ConfigParser()
    parser.read_dict({"security": {"docs_enabled": "sometimes"}})

    cfg = ServerConfig()
    _load_from_ini(parser, cfg)

    assert cfg.security.docs_enabled == "auto"


@pytest.mark.unit
@pytest.mark.parametrize(
    "docs_enabled,production,expected",
    [
        ("auto", False, True),
        ("auto", True, False),
        ("enabled", True, True),
        ("disabled", False, False),
    ],
)
def test_docs_should_be_enabled(docs_enabled, production, expected):
    cfg = ServerConfig()
    cfg.security.docs_enabled = docs_enabled
    cfg.security.production = production

    assert cfg.docs_should_be_enabled is expected


@pytest.mark.unit
@pytest.mark.parametrize("value", ["true", "Yes", "1", "ON", "enabled"])
def test_parse_bool_truthy(value):
    assert _parse_bool(value) is True


@pytest.mark.unit
@pytest.mark.parametrize("value", ["false", "no", "0", "off", ""])
def test_parse_bool_falsy(value):
    assert _parse_bool(value) is False


@pytest.mark.unit
def test_parse_list_strips_and_drops_empty():
    assert _parse_list(" a, b ,,c ") == ["a", "b", "c"]
    assert _parse_list("   ") == []


@pytest.mark.unit
def test_config_status_reports_chain_policy():
    status = get_config_status()

    assert "enforce_monotonic_timestamps" in status
    assert "config_file_path" in status


@pytest.mark.unit
def test_print_config_summary(capsys):
    print_config_summary()

    out = capsys.readouterr().out
    assert "SERVER CONFIGURATION" in out
    assert "Monotonic timestamps" in out


@pytest.mark.unit
def test_ini_unknown_option_is_ignored():
    parser = configparser.ConfigParser()
    parser.read_dict({"server": {"workers": "4"}, "unrelated": {"port": "9999"}})

    cfg = ServerConfig()
    _load_from_ini(parser, cfg)

    assert not hasattr(cfg.server, "workers")
    assert cfg.server.port == 3000


@pytest.mark.unit
def test_env_overrides_ini_value(monkeypatch):
    """The environment wins over the config file for the same option."""
    monkeypatch.setenv("BOOKCHAIN_PORT", "3099")

    cfg = load_config()

    assert cfg.server.port == 3099
