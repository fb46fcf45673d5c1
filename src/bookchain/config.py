"""
Settings for the bookchain server.

Every setting has a built-in default.  ``config/server.ini`` (or, when that
is absent, the bundled ``config/server.example.ini``) can change it, and a
``BOOKCHAIN_*`` environment variable beats both.  The result is resolved
once, when this module is first imported, into the ``config`` object that
``create_app`` and ``start_server`` read.

Usage:
    from bookchain.config import config

    if config.chain.enforce_monotonic_timestamps:
        ...

Environment variables:
    BOOKCHAIN_HOST                          -> server.host
    BOOKCHAIN_PORT                          -> server.port
    BOOKCHAIN_PRODUCTION                    -> security.production
    BOOKCHAIN_CORS_ORIGINS                  -> security.cors_origins
    BOOKCHAIN_LOG_LEVEL                     -> logging.level
    BOOKCHAIN_LOG_FORMAT                    -> logging.format
    BOOKCHAIN_ENFORCE_MONOTONIC_TIMESTAMPS  -> chain.enforce_monotonic_timestamps
"""

import configparser
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

# Repository checkout root: src/bookchain/config.py -> ../../..
PROJECT_ROOT = Path(__file__).parent.parent.parent

CONFIG_DIR = PROJECT_ROOT / "config"
CONFIG_FILE = CONFIG_DIR / "server.ini"
CONFIG_EXAMPLE = CONFIG_DIR / "server.example.ini"


# =============================================================================
# SETTINGS SECTIONS
# =============================================================================


@dataclass
class ServerSettings:
    """Where uvicorn binds.  The port is a starting point for discovery."""

    host: str = "0.0.0.0"  # nosec B104 - listen on all interfaces
    port: int = 3000


@dataclass
class SecuritySettings:
    """CORS policy and whether the OpenAPI docs are served."""

    production: bool = False
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:3000"])
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = field(default_factory=lambda: ["*"])
    cors_allow_headers: list[str] = field(default_factory=lambda: ["*"])
    docs_enabled: Literal["auto", "enabled", "disabled"] = "auto"


@dataclass
class LoggingSettings:
    level: str = "INFO"
    format: Literal["simple", "detailed"] = "detailed"


@dataclass
class ChainSettings:
    """Block acceptance policy."""

    # Off: a block stamped earlier than its predecessor is still accepted.
    enforce_monotonic_timestamps: bool = False


@dataclass
class ServerConfig:
    """All settings sections, one attribute per INI section."""

    server: ServerSettings = field(default_factory=ServerSettings)
    security: SecuritySettings = field(default_factory=SecuritySettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    chain: ChainSettings = field(default_factory=ChainSettings)

    @property
    def is_production(self) -> bool:
        return self.security.production

    @property
    def docs_should_be_enabled(self) -> bool:
        """Serve ``/docs`` and ``/openapi.json``?  ``auto`` means outside production."""
        if self.security.docs_enabled == "auto":
            return not self.is_production
        return self.security.docs_enabled == "enabled"


# =============================================================================
# VALUE CONVERSION
# =============================================================================

SECTIONS = ("server", "security", "logging", "chain")

# Options restricted to a fixed vocabulary; other values are ignored.
_CHOICES: dict[str, tuple[str, ...]] = {
    "docs_enabled": ("auto", "enabled", "disabled"),
    "format": ("simple", "detailed"),
}

_ENV_VARS: tuple[tuple[str, str, str], ...] = (
    ("BOOKCHAIN_HOST", "server", "host"),
    ("BOOKCHAIN_PORT", "server", "port"),
    ("BOOKCHAIN_PRODUCTION", "security", "production"),
    ("BOOKCHAIN_CORS_ORIGINS", "security", "cors_origins"),
    ("BOOKCHAIN_LOG_LEVEL", "logging", "level"),
    ("BOOKCHAIN_LOG_FORMAT", "logging", "format"),
    ("BOOKCHAIN_ENFORCE_MONOTONIC_TIMESTAMPS", "chain", "enforce_monotonic_timestamps"),
)


def _parse_bool(value: str) -> bool:
    return value.lower() in ("true", "yes", "1", "on", "enabled")


def _parse_list(value: str) -> list[str]:
    """Split a comma-separated value; blank items are dropped."""
    return [item.strip() for item in value.split(",") if item.strip()]


def _set_option(cfg: ServerConfig, section: str, option: str, raw: str) -> None:
    """
    Convert ``raw`` to the type of ``cfg.<section>.<option>`` and store it.

    The target type is taken from the field's current value, so INI files and
    environment variables go through the same conversion.  Unknown options
    and out-of-vocabulary choices leave the setting unchanged.

    Raises:
        ValueError: If an integer option is not a number.
    """
    settings = getattr(cfg, section)
    if not hasattr(settings, option):
        return
    current = getattr(settings, option)

    value: object
    if option in _CHOICES:
        value = raw.lower()
        if value not in _CHOICES[option]:
            return
    elif isinstance(current, bool):
        value = _parse_bool(raw)
    elif isinstance(current, int):
        value = int(raw)
    elif isinstance(current, list):
        value = _parse_list(raw)
    elif option == "level":
        value = raw.upper()
    else:
        value = raw

    setattr(settings, option, value)


# =============================================================================
# LOADING
# =============================================================================


def _load_from_ini(parser: configparser.ConfigParser, cfg: ServerConfig) -> None:
    """Copy every recognised option of the known sections into ``cfg``."""
    for section in SECTIONS:
        if not parser.has_section(section):
            continue
        for option, raw in parser.items(section):
            _set_option(cfg, section, option, raw)


def _apply_env_overrides(cfg: ServerConfig) -> None:
    """Apply non-empty ``BOOKCHAIN_*`` variables on top of ``cfg``."""
    for name, section, option in _ENV_VARS:
        if raw := os.getenv(name):
            _set_option(cfg, section, option, raw)


def _config_source() -> Path | None:
    if CONFIG_FILE.exists():
        return CONFIG_FILE
    if CONFIG_EXAMPLE.exists():
        return CONFIG_EXAMPLE
    return None


def load_config() -> ServerConfig:
    """
    Resolve settings: defaults, then the INI file, then the environment.

    Returns:
        A new ServerConfig; the module-level ``config`` is not touched.
    """
    cfg = ServerConfig()

    source = _config_source()
    if source is not None:
        parser = configparser.ConfigParser()
        parser.read(source)
        _load_from_ini(parser, cfg)

    _apply_env_overrides(cfg)
    return cfg


config = load_config()


# =============================================================================
# DIAGNOSTICS (bookchain config)
# =============================================================================


def get_config_status() -> dict:
    """Summarise where ``config`` came from and the settings that matter most."""
    source = _config_source()
    return {
        "config_file_exists": CONFIG_FILE.exists(),
        "config_file_path": str(CONFIG_FILE),
        "using_example": source == CONFIG_EXAMPLE,
        "production_mode": config.is_production,
        "cors_origins_count": len(config.security.cors_origins),
        "docs_enabled": config.docs_should_be_enabled,
        "enforce_monotonic_timestamps": config.chain.enforce_monotonic_timestamps,
    }


def print_config_summary() -> None:
    """Print the resolved settings for ``bookchain config``."""
    status = get_config_status()
    rule = "=" * 60
    print(f"\n{rule}\nSERVER CONFIGURATION\n{rule}")
    print(f"Config file: {status['config_file_path']}")
    print(f"File exists: {status['config_file_exists']}")
    if status["using_example"]:
        print("WARNING: Using example config (copy to server.ini for production)")
    print("-" * 60)
    print(f"Server:      {config.server.host}:{config.server.port}")
    print(f"Production:  {config.is_production}")
    print(f"CORS origins: {config.security.cors_origins}")
    print(f"Docs enabled: {config.docs_should_be_enabled}")
    print(f"Log level:   {config.logging.level}")
    print(f"Monotonic timestamps: {config.chain.enforce_monotonic_timestamps}")
    print(f"{rule}\n")
