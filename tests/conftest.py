"""Shared fixtures for todolist tests."""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from todolist.models import Principal
from todolist.service import TodoService
from todolist.store import TaskStore


@pytest.fixture(autouse=True)
def restore_root_logging() -> Generator[None, None, None]:
    """Drop handlers setup_logging installed on the root logger during a test."""
    root = logging.getLogger()
    before = list(root.handlers)
    level = root.level
    yield
    for h in list(root.handlers):
        if h not in before and (isinstance(h, RichHandler) or type(h) is logging.FileHandler):
            root.removeHandler(h)
            h.close()
    root.setLevel(level)


@pytest.fixture
def temp_project(tmp_path: Path) -> Generator[Path, None, None]:
    """Create a temporary project directory and change to it."""
    original_dir = os.getcwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_dir)


@pytest.fixture
def temp_todo_dir(temp_project: Path) -> Path:
    """Create a temporary .todolist directory."""
    todo_dir = temp_project / ".todolist"
    todo_dir.mkdir()
    return todo_dir


@pytest.fixture
def sample_config_data() -> dict:
    """Sample configuration data."""
    return {
        "identity": {"principal": "alice"},
        "output": {"format": "json"},
        "logging": {"level": "INFO", "file": ".todolist/todolist.log"},
    }


@pytest.fixture
def store() -> TaskStore:
    """A fresh, initialized task store."""
    s = TaskStore()
    s.initialize()
    return s


@pytest.fixture
def service(store: TaskStore) -> TodoService:
    """A service over the store fixture, acting as alice by default."""
    return TodoService(store=store, identity=lambda: Principal("alice"))
