"""
Tests for twlauncher.yaml parsing and precedence.
"""

from pathlib import Path

import pytest

from twlauncher.config import (
    CONFIG_ENV_VAR,
    LauncherConfig,
    load_config,
    parse_config,
    parse_config_data,
)
from twlauncher.core.download import DOWNLOAD_URL
from twlauncher.core.exceptions import ConfigError
from twlauncher.core.releases import LATEST_VERSION_URL


class TestLauncherConfig:
    """Test LauncherConfig defaults."""

    def test_defaults(self):
        config = LauncherConfig()

        assert config.version == "latest"
        assert config.timeout == 30.0
        assert config.deadline == 180.0
        assert config.download_url == DOWNLOAD_URL
        assert config.latest_version_url == LATEST_VERSION_URL
        assert config.cache_dir is None

    def test_with_version(self):
        config = LauncherConfig(version="v3.4.0")

        assert config.with_version(None) is config
        assert config.with_version("v4.0.0").version == "v4.0.0"
        assert config.version == "v3.4.0"


class TestParseConfigData:
    """Test parse_config_data()."""

    def test_full(self, tmp_path):
        config = parse_config_data(
            {
                "version": "v4.0.7",
                "timeout": 10,
                "deadline": 60.5,
                "download_url": "https://mirror.example.com/dl",
                "latest_version_url": "https://mirror.example.com/latest",
                "cache_dir": str(tmp_path),
            }
        )

        assert config.version == "v4.0.7"
        assert config.timeout == 10.0
        assert config.deadline == 60.5
        assert config.download_url == "https://mirror.example.com/dl"
        assert config.latest_version_url == "https://mirror.example.com/latest"
        assert config.cache_dir == tmp_path

    def test_numeric_version(self):
        assert parse_config_data({"version": 4.1}).version == "4.1"

    def test_cache_dir_expands_user(self):
        config = parse_config_data({"cache_dir": "~/tw-cache"})
        assert config.cache_dir == Path("~/tw-cache").expanduser()

    def test_unknown_key_warns(self, caplog):
        with caplog.at_level("WARNING"):
            config = parse_config_data({"verison": "v4.0.0"})

        assert config == LauncherConfig()
        assert "Ignoring unknown configuration key: verison" in caplog.text

    @pytest.mark.parametrize(
        "data,message",
        [
            ({"version": ""}, "'version' must be a non-empty string"),
            ({"version": ["v4"]}, "'version' must be a non-empty string"),
            ({"timeout": "fast"}, "'timeout' must be a number"),
            ({"timeout": True}, "'timeout' must be a number"),
            ({"deadline": 0}, "'deadline' must be positive"),
            ({"timeout": -5}, "'timeout' must be positive"),
        ],
    )
    def test_invalid_values(self, data, message):
        with pytest.raises(ConfigError, match=message):
            parse_config_data(data)

    def test_not_a_mapping(self):
        with pytest.raises(ConfigError, match="mapping"):
            parse_config_data(["version", "v4.0.0"])


class TestParseConfig:
    """Test parse_config()."""

    def test_file(self, tmp_path):
        path = tmp_path / "twlauncher.yaml"
        path.write_text("version: v3.4.17\ntimeout: 5\n")

        config = parse_config(path)

        assert config.version == "v3.4.17"
        assert config.timeout == 5.0

    def test_empty_file(self, tmp_path):
        path = tmp_path / "twlauncher.yaml"
        path.write_text("")
        assert parse_config(path) == LauncherConfig()

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            parse_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "twlauncher.yaml"
        path.write_text("version: [unclosed\n")

        with pytest.raises(ConfigError, match="Invalid YAML"):
            parse_config(path)


class TestLoadConfig:
    """Test load_config() lookup order."""

    def test_defaults_without_file(self, tmp_path):
        assert load_config(project_root=tmp_path, env={}) == LauncherConfig()

    def test_project_file(self, tmp_path):
        (tmp_path / "twlauncher.yaml").write_text("version: v4.0.1\n")
        assert load_config(project_root=tmp_path, env={}).version == "v4.0.1"

    def test_env_var_wins(self, tmp_path):
        (tmp_path / "twlauncher.yaml").write_text("version: v4.0.1\n")
        explicit = tmp_path / "other.yaml"
        explicit.write_text("version: v3.0.0\n")

        config = load_config(project_root=tmp_path, env={CONFIG_ENV_VAR: str(explicit)})

        assert config.version == "v3.0.0"

    def test_env_var_missing_file(self, tmp_path):
        env = {CONFIG_ENV_VAR: str(tmp_path / "missing.yaml")}

        with pytest.raises(ConfigError):
            load_config(project_root=tmp_path, env=env)

    def test_uses_cwd(self, isolated_env, tmp_path):
        (tmp_path / "twlauncher.yaml").write_text("deadline: 15\n")
        assert load_config(env={}).deadline == 15.0
