"""
Configuration Tests
fieldserde

Tests for fieldserde/config.py - YAML loading, environment substitution and
the settings singleton.
"""

import pytest
from pydantic import ValidationError

from fieldserde import CharField, ConfigError, ObjectField, Serializer
from fieldserde.config import (
    MAX_DEPTH_LIMIT,
    Config,
    SerializerSettings,
    configure,
    get_settings,
    load_settings,
)

# =============================================================================
# TEST: Config loader
# =============================================================================


class TestConfigLoader:
    """Tests for the YAML Config loader."""

    def test_load_yaml(self, tmp_path):
        (tmp_path / "app.yaml").write_text("serializer:\n  max_depth: 5\n")
        assert Config(str(tmp_path)).load("app") == {"serializer": {"max_depth": 5}}

    def test_load_yml_extension(self, tmp_path):
        (tmp_path / "app.yml").write_text("a: 1\n")
        assert Config(str(tmp_path)).load("app") == {"a": 1}

    def test_missing_file_returns_empty(self, tmp_path):
        assert Config(str(tmp_path)).load("nothing") == {}

    def test_env_substitution(self, tmp_path, monkeypatch):
        """${VAR} and ${VAR:default} are substituted before parsing."""
        monkeypatch.setenv("DEPTH", "7")
        monkeypatch.delenv("UNSET_LEVEL", raising=False)
        (tmp_path / "app.yaml").write_text(
            "serializer:\n  max_depth: ${DEPTH}\n  log_level: ${UNSET_LEVEL:WARNING}\n"
        )

        config = Config(str(tmp_path)).load("app")

        assert config["serializer"] == {"max_depth": 7, "log_level": "WARNING"}

    def test_dot_get(self, tmp_path):
        (tmp_path / "app.yaml").write_text("serializer:\n  max_depth: 3\n")
        config = Config(str(tmp_path))

        assert config.get("app.serializer.max_depth") == 3
        assert config.get("app.serializer.missing", "fallback") == "fallback"
        assert config.get("app.serializer.max_depth.deeper", "x") == "x"

    def test_malformed_yaml_raises(self, tmp_path):
        (tmp_path / "app.yaml").write_text("serializer: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            Config(str(tmp_path)).load("app")

        assert exc_info.value.path.endswith("app.yaml")

    def test_cache(self, tmp_path):
        """Loaded files are cached by name."""
        path = tmp_path / "app.yaml"
        path.write_text("a: 1\n")
        config = Config(str(tmp_path))
        first = config.load("app")
        path.write_text("a: 2\n")
        assert config.load("app") is first


# =============================================================================
# TEST: Settings
# =============================================================================


class TestSettings:
    """Tests for SerializerSettings and the global instance."""

    def test_defaults(self):
        settings = SerializerSettings()
        assert settings.max_depth == 32
        assert settings.log_level == "INFO"
        assert settings.json_log_dir is None
        assert settings.metrics_enabled is True

    def test_max_depth_must_be_positive(self):
        with pytest.raises(ValidationError):
            SerializerSettings(max_depth=0)

    def test_max_depth_has_upper_bound(self):
        SerializerSettings(max_depth=MAX_DEPTH_LIMIT)
        with pytest.raises(ValidationError):
            SerializerSettings(max_depth=MAX_DEPTH_LIMIT + 1)

    def test_log_level_normalised(self):
        assert SerializerSettings(log_level="debug").log_level == "DEBUG"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError, match="unknown log level"):
            SerializerSettings(log_level="VERBOSE")

    def test_shipped_config(self, config_dir):
        """The shipped config file loads with its defaults."""
        settings = load_settings(str(config_dir))
        assert settings.max_depth == 32
        assert settings.metrics_enabled is True

    def test_get_settings_defaults_without_env(self):
        assert get_settings() == SerializerSettings()

    def test_get_settings_reads_env_dir(self, tmp_path, monkeypatch):
        (tmp_path / "fieldserde.yaml").write_text("serializer:\n  max_depth: 4\n")
        monkeypatch.setenv("FIELDSERDE_CONFIG_DIR", str(tmp_path))

        assert get_settings().max_depth == 4

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()

    def test_configure_replaces_settings(self):
        custom = SerializerSettings(max_depth=3)
        configure(custom)
        assert get_settings() is custom

    def test_serializer_uses_global_settings(self):
        """Serializers built after configure() pick up the new depth limit."""
        configure(SerializerSettings(max_depth=1, metrics_enabled=False))
        node = Serializer({"name": CharField()})
        node.schema["child"] = ObjectField(node).optional()

        out = node.serialize({"name": "a", "child": {"name": "b", "child": {"name": "c"}}})

        assert out.errors == {"child.child": "Maximum nesting depth exceeded"}

    def test_invalid_setting_raises_config_error(self, tmp_path):
        (tmp_path / "fieldserde.yaml").write_text("serializer:\n  max_depth: 0\n")

        with pytest.raises(ConfigError, match="max_depth"):
            load_settings(str(tmp_path))

    def test_non_mapping_section_raises(self, tmp_path):
        (tmp_path / "fieldserde.yaml").write_text("serializer:\n  - 1\n  - 2\n")

        with pytest.raises(ConfigError, match="must be a mapping"):
            load_settings(str(tmp_path))

    def test_unknown_log_level_raises_config_error(self, tmp_path, monkeypatch):
        """A bad log level fails at load time, before any Serializer is built."""
        (tmp_path / "fieldserde.yaml").write_text("serializer:\n  log_level: VERBOSE\n")
        monkeypatch.setenv("FIELDSERDE_CONFIG_DIR", str(tmp_path))

        with pytest.raises(ConfigError, match="log_level") as exc_info:
            get_settings()

        assert exc_info.value.path.endswith("fieldserde.yaml")

    def test_max_depth_above_limit_raises_config_error(self, tmp_path):
        (tmp_path / "fieldserde.yaml").write_text(f"serializer:\n  max_depth: {MAX_DEPTH_LIMIT + 1}\n")

        with pytest.raises(ConfigError, match="max_depth"):
            load_settings(str(tmp_path))
