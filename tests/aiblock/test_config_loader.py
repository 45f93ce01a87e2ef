"""Tests for render config loading and environment settings."""

import pytest

from aiblock.loaders.config_loader import (
    ConfigLoader,
    clear_config_cache,
    load_render_config,
)
from aiblock.primitives.config import RenderConfig
from aiblock.primitives.errors import ConfigurationError
from aiblock.primitives.segments import WindowPolicy
from aiblock.settings import Settings, get_settings


def write_project_config(project, text):
    config_dir = project / ".aiblock"
    config_dir.mkdir(parents=True, exist_ok=True)
    (config_dir / "render.yaml").write_text(text)


class TestLoadRenderConfig:
    """Default, project and explicit configs."""

    def test_defaults_match_dataclass(self):
        """The shipped YAML matches RenderConfig defaults."""
        assert load_render_config() == RenderConfig()

    def test_project_override_deep_merges(self, tmp_path):
        """A project file overrides only the keys it sets."""
        write_project_config(
            tmp_path,
            "windows:\n  prompt:\n    policy: tail\n    lines: 3\n"
            "response:\n  hard_breaks: false\n",
        )
        config = load_render_config(tmp_path)
        assert config.prompt_window == WindowPolicy.tail(3)
        assert config.response_window == WindowPolicy.tail(10)
        assert config.hard_breaks is False
        assert config.container_name == "ai"

    def test_missing_project_file_uses_defaults(self, tmp_path):
        """No .aiblock directory: defaults."""
        assert load_render_config(tmp_path) == RenderConfig()

    def test_explicit_override_replaces_project(self, tmp_path):
        """An explicit file is used instead of the project file."""
        write_project_config(tmp_path, "container:\n  name: project\n")
        override = tmp_path / "custom.yaml"
        override.write_text("container:\n  name: chat\nposition_attribute: data-src\n")
        config = load_render_config(tmp_path, override)
        assert config.container_name == "chat"
        assert config.position_attr == "data-src"
        assert config.min_marker_len == 3

    def test_explicit_override_must_exist(self, tmp_path):
        """A missing explicit file is an error."""
        with pytest.raises(ConfigurationError, match="not found"):
            load_render_config(override_path=tmp_path / "nope.yaml")

    def test_explicit_override_directory(self, tmp_path):
        """A directory given as the explicit file is an error."""
        with pytest.raises(ConfigurationError, match="Cannot read"):
            load_render_config(override_path=tmp_path)

    def test_non_utf8_project_config(self, tmp_path):
        """Undecodable bytes raise ConfigurationError."""
        (tmp_path / ".aiblock").mkdir()
        (tmp_path / ".aiblock" / "render.yaml").write_bytes(b"container:\n  name: \xff\xfe\n")
        with pytest.raises(ConfigurationError, match="not valid UTF-8"):
            load_render_config(tmp_path)

    @pytest.mark.parametrize(
        "text,match",
        [
            ("windows: [unclosed\n", "Invalid YAML"),
            ("- a\n- b\n", "must contain a mapping"),
            ("windows:\n  prompt:\n    policy: sideways\n", "unknown policy"),
            ("container:\n  min_marker_length: 0\n", "at least 1"),
            ("container:\n  min_marker_length: lots\n", "integer"),
            ("windows: 3\n", "must be mappings"),
        ],
    )
    def test_invalid_project_config(self, tmp_path, text, match):
        """Bad files raise ConfigurationError."""
        write_project_config(tmp_path, text)
        with pytest.raises(ConfigurationError, match=match):
            load_render_config(tmp_path)

    def test_empty_file_is_defaults(self, tmp_path):
        """An empty override changes nothing."""
        write_project_config(tmp_path, "")
        assert load_render_config(tmp_path) == RenderConfig()

    def test_cache(self, tmp_path):
        """Loads are cached until the cache is cleared."""
        write_project_config(tmp_path, "container:\n  name: one\n")
        assert load_render_config(tmp_path).container_name == "one"

        write_project_config(tmp_path, "container:\n  name: two\n")
        assert load_render_config(tmp_path).container_name == "one"

        clear_config_cache()
        assert load_render_config(tmp_path).container_name == "two"

    def test_round_trip(self):
        """to_dict output loads back to the same config."""
        config = RenderConfig(
            container_name="chat",
            prompt_window=WindowPolicy.head_tail(1, 2),
            hard_breaks=False,
        )
        assert RenderConfig.from_dict(config.to_dict()) == config


class TestConfigLoader:
    """ConfigLoader internals."""

    def test_merge(self):
        """Dicts merge recursively, other values replace."""
        loader = ConfigLoader()
        base = {"a": {"x": 1, "y": 2}, "b": [1], "c": 1}
        merged = loader._merge(base, {"a": {"y": 3}, "b": [2], "d": 4})
        assert merged == {"a": {"x": 1, "y": 3}, "b": [2], "c": 1, "d": 4}
        assert base["a"] == {"x": 1, "y": 2}

    def test_load_returns_raw_mapping(self):
        """load returns the merged YAML data."""
        data = ConfigLoader().load()
        assert data["container"]["name"] == "ai"
        assert data["windows"]["region"] == {"policy": "head_tail", "first": 4, "last": 8}


class TestSettings:
    """AIBLOCK_* environment settings."""

    def test_defaults(self):
        """Nothing set: warning level, no config file."""
        settings = Settings()
        assert settings.log_level == "WARNING"
        assert settings.config_file is None

    def test_from_environment(self, monkeypatch):
        """Prefixed variables are read."""
        monkeypatch.setenv("AIBLOCK_LOG_LEVEL", "debug")
        monkeypatch.setenv("AIBLOCK_CONFIG_FILE", "/tmp/render.yaml")
        settings = get_settings()
        assert settings.log_level == "debug"
        assert settings.config_file == "/tmp/render.yaml"

    def test_from_env_file(self, tmp_path):
        """A .env file in the working directory is read."""
        (tmp_path / ".env").write_text("AIBLOCK_LOG_LEVEL=INFO\n")
        assert Settings().log_level == "INFO"

    def test_cached(self):
        """get_settings returns one instance."""
        assert get_settings() is get_settings()
