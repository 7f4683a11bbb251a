"""Configuration models for todolist."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

from todolist.models import ANONYMOUS_PRINCIPAL


class IdentityConfig(BaseModel):
    """Which caller the command line acts as."""

    principal: str = ANONYMOUS_PRINCIPAL


class OutputConfig(BaseModel):
    """Configuration for output modes."""

    format: Literal["table", "json"] = "table"


class LoggingConfig(BaseModel):
    """Configuration for log output."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    file: str | None = None


class TodoConfig(BaseModel):
    """Main configuration for todolist."""

    identity: IdentityConfig = Field(default_factory=IdentityConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def load(cls, path: Path | None = None) -> TodoConfig:
        """Load configuration from file or return defaults."""
        if path is None:
            path = CONFIG_FILE

        if not path.exists():
            return cls()

        with open(path) as f:
            data = json.load(f)

        return cls.model_validate(data)

    def save(self, path: Path | None = None) -> None:
        """Save configuration to file."""
        if path is None:
            path = CONFIG_FILE

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(self.model_dump(exclude_none=True), f, indent=2)


# Default config directory
TODO_DIR = Path(".todolist")
CONFIG_FILE = TODO_DIR / "config.json"
LOG_FILE = TODO_DIR / "todolist.log"
