"""Tests for todolist.config module."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from todolist.config import (
    CONFIG_FILE,
    LOG_FILE,
    TODO_DIR,
    IdentityConfig,
    LoggingConfig,
    OutputConfig,
    TodoConfig,
)


class TestIdentityConfig:
    """Tests for IdentityConfig model."""

    def test_defaults(self) -> None:
        """Test the anonymous principal is the default identity."""
        config = IdentityConfig()
        assert config.principal == "2vxsx-fae"

    def test_custom_principal(self) -> None:
        config = IdentityConfig(principal="alice")
        assert config.principal == "alice"


class TestOutputConfig:
    """Tests for OutputConfig model."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = OutputConfig()
        assert config.format == "table"

    def test_json(self) -> None:
        config = OutputConfig(format="json")
        assert config.format == "json"

    def test_invalid_format(self) -> None:
        """Test that unknown formats are rejected."""
        with pytest.raises(Exception):
            OutputConfig(format="yaml")  # type: ignore[arg-type]


class TestLoggingConfig:
    """Tests for LoggingConfig model."""

    def test_defaults(self) -> None:
        """Test default values."""
        config = LoggingConfig()
        assert config.level == "WARNING"
        assert config.file is None

    def test_invalid_level(self) -> None:
        with pytest.raises(Exception):
            LoggingConfig(level="LOUD")  # type: ignore[arg-type]


class TestTodoConfig:
    """Tests for TodoConfig model."""

    def test_defaults(self) -> None:
        """Test default configuration."""
        config = TodoConfig()
        assert isinstance(config.identity, IdentityConfig)
        assert isinstance(config.output, OutputConfig)
        assert isinstance(config.logging, LoggingConfig)

    def test_load_missing_file(self, temp_project: Path) -> None:
        """Test loading returns defaults when file doesn't exist."""
        config = TodoConfig.load(temp_project / ".todolist/config.json")
        assert config.identity.principal == "2vxsx-fae"
        assert config.output.format == "table"

    def test_load_existing_file(self, temp_todo_dir: Path, sample_config_data: dict) -> None:
        """Test loading from existing file."""
        config_path = temp_todo_dir / "config.json"
        with open(config_path, "w") as f:
            json.dump(sample_config_data, f)

        config = TodoConfig.load(config_path)
        assert config.identity.principal == "alice"
        assert config.output.format == "json"
        assert config.logging.level == "INFO"
        assert config.logging.file == ".todolist/todolist.log"

    def test_load_default_path(self, temp_todo_dir: Path, sample_config_data: dict) -> None:
        """Test loading from default .todolist/config.json path."""
        config_path = temp_todo_dir / "config.json"
        with open(config_path, "w") as f:
            json.dump(sample_config_data, f)

        config = TodoConfig.load()
        assert config.identity.principal == "alice"

    def test_load_partial_file(self, temp_todo_dir: Path) -> None:
        """Test missing sections fall back to defaults."""
        (temp_todo_dir / "config.json").write_text('{"identity": {"principal": "bob"}}')

        config = TodoConfig.load()
        assert config.identity.principal == "bob"
        assert config.output.format == "table"

    def test_save_creates_directory(self, temp_project: Path) -> None:
        """Test save creates parent directory if needed."""
        config = TodoConfig(identity=IdentityConfig(principal="carol"))
        config_path = temp_project / ".todolist" / "config.json"
        config.save(config_path)

        assert config_path.exists()
        with open(config_path) as f:
            data = json.load(f)
        assert data["identity"]["principal"] == "carol"
        assert "file" not in data["logging"]

    def test_save_default_path(self, temp_project: Path) -> None:
        """Test save to default path."""
        TodoConfig().save()

        assert Path(".todolist/config.json").exists()

    def test_round_trip(self, temp_todo_dir: Path) -> None:
        """Test save and load round-trip preserves data."""
        original = TodoConfig(
            identity=IdentityConfig(principal="dave"),
            output=OutputConfig(format="json"),
            logging=LoggingConfig(level="DEBUG", file="out.log"),
        )

        config_path = temp_todo_dir / "config.json"
        original.save(config_path)
        loaded = TodoConfig.load(config_path)

        assert loaded == original


class TestModulePaths:
    """Tests for module-level path constants."""

    def test_todo_dir(self) -> None:
        assert TODO_DIR == Path(".todolist")

    def test_config_file(self) -> None:
        assert CONFIG_FILE == Path(".todolist/config.json")

    def test_log_file(self) -> None:
        assert LOG_FILE == Path(".todolist/todolist.log")
