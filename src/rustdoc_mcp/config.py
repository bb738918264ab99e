"""Configuration management for rustdoc-mcp.

Supports loading configuration from:
1. Default values
2. Config file (~/.rustdoc-mcp/config.yaml)
3. Environment variables

Configuration precedence: env vars > config file > defaults
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from .logging import get_logger

logger = get_logger("config")

DEFAULT_DATA_DIR = Path.home() / ".rustdoc-mcp"
DEFAULT_MAX_INPUT_BYTES = 256 * 1024 * 1024

# Config files are small; anything bigger is a mistake
MAX_CONFIG_FILE_BYTES = 1024 * 1024

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class ConfigError(Exception):
    """Configuration error."""

    pass


@dataclass
class DecodeConfig:
    """How rustdoc JSON documents are decoded."""

    strict: bool = False
    max_input_bytes: int = DEFAULT_MAX_INPUT_BYTES

    def validate(self) -> None:
        """Validate configuration.

        Raises ConfigError if validation fails.
        """
        if not isinstance(self.strict, bool):
            raise ConfigError(f"strict must be a boolean, got {self.strict!r}")

        if self.max_input_bytes < 1:
            raise ConfigError(
                f"max_input_bytes must be >= 1, got {self.max_input_bytes}"
            )


@dataclass
class ServerConfig:
    """MCP server configuration."""

    crate_path: Path | None = None

    def validate(self) -> None:
        if self.crate_path is not None and self.crate_path.suffix != ".json":
            logger.warning(
                "crate_path %s does not look like a rustdoc JSON file", self.crate_path
            )


@dataclass
class Config:
    """Main configuration container."""

    decode: DecodeConfig = field(default_factory=DecodeConfig)
    server: ServerConfig = field(default_factory=ServerConfig)

    def validate(self) -> None:
        """Validate all configuration."""
        self.decode.validate()
        self.server.validate()


def load_config(config_path: Path | None = None, data_dir: Path | None = None) -> Config:
    """
    Load configuration from file and environment.

    Args:
        config_path: Explicit path to config file (optional)
        data_dir: Data directory to look for config.yaml (optional)

    Returns:
        Validated Config object
    """
    config = Config()

    if config_path is None and data_dir is not None:
        config_path = data_dir / "config.yaml"

    if config_path and config_path.exists():
        try:
            config = _load_config_file(config_path)
            logger.debug("Loaded config from %s", config_path)
        except (ConfigError, OSError, ValueError, yaml.YAMLError) as e:
            logger.warning("Failed to load config from %s: %s", config_path, e)
            config = Config()

    config = _apply_env_overrides(config)

    config.validate()

    return config


def _parse_bool(value: object, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE_VALUES:
        return True
    if text in _FALSE_VALUES:
        return False
    raise ConfigError(f"'{name}' must be a boolean, got {value!r}")


def _load_config_file(config_path: Path) -> Config:
    """Load configuration from YAML file."""
    size = config_path.stat().st_size
    if size > MAX_CONFIG_FILE_BYTES:
        raise ConfigError(f"Config file too large: {size} > {MAX_CONFIG_FILE_BYTES}")

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    if not isinstance(data, dict):
        raise ConfigError("Config file must be a YAML mapping")

    allowed_keys = {"decode", "server"}
    unknown_keys = set(data.keys()) - allowed_keys
    if unknown_keys:
        logger.warning("Unknown config keys ignored: %s", unknown_keys)

    decode_data = data.get("decode") or {}
    if not isinstance(decode_data, dict):
        raise ConfigError("'decode' must be a mapping")

    decode = DecodeConfig(
        strict=_parse_bool(decode_data.get("strict", False), "decode.strict"),
        max_input_bytes=int(
            decode_data.get("max_input_bytes", DEFAULT_MAX_INPUT_BYTES)
        ),
    )

    server_data = data.get("server") or {}
    if not isinstance(server_data, dict):
        raise ConfigError("'server' must be a mapping")

    crate_path = server_data.get("crate_path")
    server = ServerConfig(
        crate_path=Path(crate_path).expanduser() if crate_path else None,
    )

    return Config(decode=decode, server=server)


def _apply_env_overrides(config: Config) -> Config:
    """Apply environment variable overrides to config."""
    env_strict = os.environ.get("RUSTDOC_MCP_STRICT")
    if env_strict:
        try:
            config.decode.strict = _parse_bool(env_strict, "RUSTDOC_MCP_STRICT")
        except ConfigError:
            logger.warning("Invalid RUSTDOC_MCP_STRICT: %s", env_strict)

    env_max = os.environ.get("RUSTDOC_MCP_MAX_INPUT_BYTES")
    if env_max:
        try:
            config.decode.max_input_bytes = int(env_max)
        except ValueError:
            logger.warning("Invalid RUSTDOC_MCP_MAX_INPUT_BYTES: %s", env_max)

    env_crate = os.environ.get("RUSTDOC_MCP_CRATE")
    if env_crate:
        config.server.crate_path = Path(env_crate).expanduser()
        logger.debug("Using crate from env: %s", env_crate)

    return config


def save_config(config: Config, config_path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration to save
        config_path: Path to write config file
    """
    crate_path = config.server.crate_path
    data = {
        "decode": {
            "strict": config.decode.strict,
            "max_input_bytes": config.decode.max_input_bytes,
        },
        "server": {
            "crate_path": str(crate_path) if crate_path is not None else None,
        },
    }

    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)

    logger.info("Saved config to %s", config_path)
