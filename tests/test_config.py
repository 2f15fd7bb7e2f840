"""Tests for YAML configuration loading."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from launchagent.config import LaunchConfig, PlistFormat, load_config


class TestLaunchConfig:
    """Tests for config defaults."""

    def test_defaults(self) -> None:
        """Defaults point at the stock macOS tools."""
        config = LaunchConfig()
        assert config.launchctl == "/bin/launchctl"
        assert config.grep == "/usr/bin/grep"
        assert config.cut == "/usr/bin/cut"
        assert config.agents_dir is None
        assert config.plist_format == PlistFormat.XML
        assert config.native_status is False
        assert config.chunk_size == 8192


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "absent.yaml") == LaunchConfig()

    def test_loads_values(self, tmp_path: Path) -> None:
        """Values from the YAML file override defaults."""
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "launchctl": "/opt/bin/launchctl",
            "plist_format": "binary",
            "native_status": True,
            "agents_dir": str(tmp_path / "agents"),
        }))

        config = load_config(path)

        assert config.launchctl == "/opt/bin/launchctl"
        assert config.plist_format == PlistFormat.BINARY
        assert config.native_status is True
        assert config.agents_dir == tmp_path / "agents"

    def test_expands_home_in_agents_dir(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("agents_dir: ~/Library/LaunchAgents\n")
        config = load_config(path)
        assert "~" not in str(config.agents_dir)

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == LaunchConfig()

    def test_invalid_yaml_falls_back(self, tmp_path: Path, caplog) -> None:
        """Broken YAML logs a warning and uses defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("launchctl: [unclosed\n")

        with caplog.at_level(logging.WARNING, logger="launchagent.config"):
            config = load_config(path)

        assert config == LaunchConfig()
        assert "Failed to load config" in caplog.text

    def test_invalid_value_falls_back(self, tmp_path: Path) -> None:
        """Out-of-range values are rejected as a whole."""
        path = tmp_path / "config.yaml"
        path.write_text("chunk_size: 0\n")
        assert load_config(path).chunk_size == 8192

    def test_non_mapping_falls_back(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("- just\n- a list\n")
        assert load_config(path) == LaunchConfig()
