"""Tests for configuration functionality."""

from pathlib import Path

import pytest

from rustdoc_mcp.config import (
    DEFAULT_MAX_INPUT_BYTES,
    Config,
    ConfigError,
    DecodeConfig,
    ServerConfig,
    load_config,
    save_config,
)


class TestDecodeConfig:
    """Tests for DecodeConfig."""

    def test_default_values(self):
        """Should be tolerant with a 256 MiB input limit by default."""
        config = DecodeConfig()
        assert config.strict is False
        assert config.max_input_bytes == DEFAULT_MAX_INPUT_BYTES == 268435456

    def test_validate_invalid_max_input_bytes(self):
        """Should reject a non-positive size limit."""
        config = DecodeConfig(max_input_bytes=0)
        with pytest.raises(ConfigError, match="max_input_bytes"):
            config.validate()

    def test_validate_non_bool_strict(self):
        """Should reject a strict flag that is not a boolean."""
        config = DecodeConfig(strict="yes")
        with pytest.raises(ConfigError, match="strict"):
            config.validate()


class TestServerConfig:
    """Tests for ServerConfig."""

    def test_default_has_no_crate(self):
        """Should not point at a crate by default."""
        assert ServerConfig().crate_path is None

    def test_validate_odd_suffix(self):
        """Should warn but not fail for a non-JSON crate path."""
        ServerConfig(crate_path=Path("crate.txt")).validate()  # Should not raise


class TestLoadConfig:
    """Tests for config loading."""

    def test_load_defaults(self, temp_data_dir):
        """Should return defaults when no config file exists."""
        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is False
        assert config.server.crate_path is None

    def test_load_from_file(self, temp_data_dir):
        """Should load config from YAML file."""
        config_file = temp_data_dir / "config.yaml"
        config_file.write_text(
            "decode:\n"
            "  strict: true\n"
            "  max_input_bytes: 1024\n"
            "server:\n"
            "  crate_path: /tmp/demo.json\n"
        )

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is True
        assert config.decode.max_input_bytes == 1024
        assert config.server.crate_path == Path("/tmp/demo.json")

    def test_explicit_config_path(self, tmp_path):
        """Should prefer an explicit config path."""
        config_file = tmp_path / "custom.yaml"
        config_file.write_text("decode:\n  strict: yes\n")

        config = load_config(config_path=config_file)
        assert config.decode.strict is True

    def test_unknown_keys_ignored(self, temp_data_dir):
        """Should ignore unknown top-level keys."""
        config_file = temp_data_dir / "config.yaml"
        config_file.write_text("render:\n  width: 80\ndecode:\n  strict: true\n")

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is True

    def test_empty_file(self, temp_data_dir):
        """Should treat an empty file as defaults."""
        (temp_data_dir / "config.yaml").write_text("")

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.max_input_bytes == DEFAULT_MAX_INPUT_BYTES

    def test_invalid_file_falls_back_to_defaults(self, temp_data_dir):
        """Should fall back to defaults for a malformed file."""
        (temp_data_dir / "config.yaml").write_text("- just\n- a list\n")

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is False

    def test_bad_section_falls_back_to_defaults(self, temp_data_dir):
        """Should fall back to defaults when a section is not a mapping."""
        (temp_data_dir / "config.yaml").write_text("decode: strict\n")

        config = load_config(data_dir=temp_data_dir)
        assert config == Config()

    def test_oversized_file_rejected(self, temp_data_dir):
        """Should ignore config files larger than 1 MB."""
        config_file = temp_data_dir / "config.yaml"
        config_file.write_text("decode:\n  strict: true\n" + "#" * (1024 * 1024))

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is False

    def test_invalid_values_raise(self, temp_data_dir):
        """Should raise for values that parse but fail validation."""
        (temp_data_dir / "config.yaml").write_text("decode:\n  max_input_bytes: -5\n")

        with pytest.raises(ConfigError):
            load_config(data_dir=temp_data_dir)

    def test_env_override_strict(self, temp_data_dir, monkeypatch):
        """Should allow env var to enable strict mode."""
        monkeypatch.setenv("RUSTDOC_MCP_STRICT", "true")
        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is True

    def test_env_override_max_input_bytes(self, temp_data_dir, monkeypatch):
        """Should allow env var to override the size limit."""
        monkeypatch.setenv("RUSTDOC_MCP_MAX_INPUT_BYTES", "4096")
        config = load_config(data_dir=temp_data_dir)
        assert config.decode.max_input_bytes == 4096

    def test_env_override_crate(self, temp_data_dir, monkeypatch):
        """Should allow env var to pick the served crate."""
        monkeypatch.setenv("RUSTDOC_MCP_CRATE", "/data/demo.json")
        config = load_config(data_dir=temp_data_dir)
        assert config.server.crate_path == Path("/data/demo.json")

    def test_env_beats_file(self, temp_data_dir, monkeypatch):
        """Should let env vars override the config file."""
        (temp_data_dir / "config.yaml").write_text("decode:\n  strict: true\n")
        monkeypatch.setenv("RUSTDOC_MCP_STRICT", "0")

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is False

    def test_invalid_env_ignored(self, temp_data_dir, monkeypatch):
        """Should ignore malformed env values."""
        monkeypatch.setenv("RUSTDOC_MCP_STRICT", "sometimes")
        monkeypatch.setenv("RUSTDOC_MCP_MAX_INPUT_BYTES", "lots")

        config = load_config(data_dir=temp_data_dir)
        assert config.decode.strict is False
        assert config.decode.max_input_bytes == DEFAULT_MAX_INPUT_BYTES


class TestSaveConfig:
    """Tests for config saving."""

    def test_save_and_load(self, temp_data_dir):
        """Should round-trip config through save/load."""
        config = Config(
            decode=DecodeConfig(strict=True, max_input_bytes=2048),
            server=ServerConfig(crate_path=Path("/tmp/demo.json")),
        )

        config_file = temp_data_dir / "config.yaml"
        save_config(config, config_file)

        loaded = load_config(config_path=config_file)
        assert loaded == config

    def test_save_without_crate(self, tmp_path):
        """Should save a missing crate path as null."""
        config_file = tmp_path / "nested" / "config.yaml"
        save_config(Config(), config_file)

        assert config_file.exists()
        assert load_config(config_path=config_file) == Config()
