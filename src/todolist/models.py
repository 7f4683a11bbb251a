"""Data models for todolist."""

from __future__ import annotations

from collections.abc import Hashable
from typing import Any, NewType

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_serializer

Principal = NewType("Principal", Hashable)
"""Opaque caller identity. Only ever compared and hashed, never parsed."""

ANONYMOUS_PRINCIPAL = Principal("2vxsx-fae")
"""Identity used when the environment has nobody more specific."""

MAX_TASK_ID = 2**64 - 1

HIGH_PRIORITY = "High Priority"
NORMAL_PRIORITY = "Normal Priority"


def importance_label(important: bool) -> str:
    """Return the display label for an importance flag."""
    return HIGH_PRIORITY if important else NORMAL_PRIORITY


class Task(BaseModel):
    """A single task owned by one caller.

    Tasks are frozen: the store swaps in an updated copy when a flag
    changes, so a task handed out to a caller is a snapshot.
    """

    model_config = ConfigDict(frozen=True)

    id: int = Field(ge=0, le=MAX_TASK_ID)
    description: str
    completed: bool = False
    important: bool = False
    due_date: int | None = None
    """Due date as seconds since the Unix epoch (UTC)."""
    owner: Principal

    @field_serializer("owner")
    def _serialize_owner(self, owner: Any) -> str:
        return owner if isinstance(owner, str) else str(owner)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def importance_level(self) -> str:
        """Label derived from ``important``."""
        return importance_label(self.important)

    def with_completion_toggled(self) -> Task:
        """Return a copy with ``completed`` flipped."""
        return self.model_copy(update={"completed": not self.completed})

    def with_importance_toggled(self) -> Task:
        """Return a copy with ``important`` flipped."""
        return self.model_copy(update={"important": not self.important})
