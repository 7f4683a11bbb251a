"""todolist - per-caller task lists behind a small callable service."""

__version__ = "0.1.0"
