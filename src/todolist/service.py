"""Callable service around the task store.

This is the hosting side: it resolves who is calling, looks methods up by
name, validates their arguments and turns results into plain data (dicts,
lists, bools and None) that any transport can encode.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal, get_args

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from todolist.dates import MAX_DUE_DATE
from todolist.models import ANONYMOUS_PRINCIPAL, MAX_TASK_ID, Principal, Task
from todolist.store import TaskStore

logger = logging.getLogger(__name__)

IdentityResolver = Callable[[], Principal]


class ServiceError(Exception):
    """Base class for errors raised while dispatching a call."""


class UnknownMethodError(ServiceError):
    """Raised when no method with the requested name exists."""

    def __init__(self, method: str) -> None:
        super().__init__(f"Unknown method: {method}")
        self.method = method


class InvalidArgumentsError(ServiceError):
    """Raised when call arguments do not match the method's parameters."""

    def __init__(self, method: str, detail: str) -> None:
        super().__init__(f"Invalid arguments for {method}: {detail}")
        self.method = method
        self.detail = detail


class NoArgs(BaseModel):
    """Parameters of methods that take none."""

    model_config = ConfigDict(extra="forbid", strict=True)


class AddTaskArgs(BaseModel):
    """Parameters of ``add_task``."""

    model_config = ConfigDict(extra="forbid", strict=True)

    description: str
    due_date: int | None = Field(default=None, ge=0, le=MAX_DUE_DATE)
    important: bool = False


class TaskIdArgs(BaseModel):
    """Parameters of the methods that address one task."""

    model_config = ConfigDict(extra="forbid", strict=True)

    task_id: int = Field(ge=0, le=MAX_TASK_ID)


@dataclass(frozen=True)
class Method:
    """One callable method.

    ``name`` is also the name of the TaskStore method it forwards to, and
    the fields of ``params`` are passed to it as keyword arguments.
    """

    name: str
    kind: Literal["query", "update"]
    params: type[BaseModel]
    returns: str
    doc: str


METHODS: tuple[Method, ...] = (
    Method("add_task", "update", AddTaskArgs, "Task", "Add a new task"),
    Method("get_task", "query", TaskIdArgs, "Task | None", "Get a specific task by ID"),
    Method(
        "toggle_task_completion",
        "update",
        TaskIdArgs,
        "bool",
        "Toggle task completion status",
    ),
    Method("toggle_task_importance", "update", TaskIdArgs, "bool", "Toggle task importance"),
    Method("get_tasks", "query", NoArgs, "list[Task]", "Get all tasks for the current user"),
    Method("get_important_tasks", "query", NoArgs, "list[Task]", "Get all important tasks"),
    Method("get_completed_tasks", "query", NoArgs, "list[Task]", "Get all completed tasks"),
    Method("delete_task", "update", TaskIdArgs, "bool", "Delete a task"),
)


class TodoService:
    """Dispatch named calls to a TaskStore on behalf of a caller."""

    def __init__(
        self,
        store: TaskStore | None = None,
        identity: IdentityResolver | None = None,
    ) -> None:
        self.store = store if store is not None else TaskStore()
        self._identity = identity
        self._methods = {method.name: method for method in METHODS}
        self.init()

    def init(self) -> None:
        """Startup hook: wipe the store."""
        self.store.initialize()

    def resolve_caller(self, caller: Principal | str | None = None) -> Principal:
        """Pick the caller identity for a call.

        An explicit ``caller`` wins, then the identity resolver, then the
        anonymous principal.
        """
        if caller is not None:
            return Principal(caller)
        if self._identity is not None:
            return self._identity()
        return ANONYMOUS_PRINCIPAL

    def call(
        self,
        method: str,
        args: list[Any] | dict[str, Any] | None = None,
        *,
        caller: Principal | str | None = None,
    ) -> Any:
        """Invoke ``method`` and return its result as plain data.

        ``args`` may be positional (a list in parameter order) or named
        (a dict). Raises UnknownMethodError or InvalidArgumentsError.
        """
        entry = self._methods.get(method)
        if entry is None:
            logger.warning("Call to unknown method %r", method)
            raise UnknownMethodError(method)

        params = self._bind(entry, args)
        who = self.resolve_caller(caller)
        logger.debug("Dispatch %s kind=%s caller=%s", entry.name, entry.kind, who)

        handler = getattr(self.store, entry.name)
        result = handler(who, **dict(params))
        return to_plain(result)

    def interface(self) -> list[dict[str, Any]]:
        """Describe every callable method."""
        described = []
        for method in METHODS:
            described.append(
                {
                    "name": method.name,
                    "kind": method.kind,
                    "params": [
                        {
                            "name": name,
                            "type": _type_name(field.annotation),
                            "required": field.is_required(),
                        }
                        for name, field in method.params.model_fields.items()
                    ],
                    "returns": method.returns,
                    "doc": method.doc,
                }
            )
        return described

    def _bind(self, entry: Method, args: list[Any] | dict[str, Any] | None) -> BaseModel:
        """Validate ``args`` against the method's parameter model."""
        if args is None:
            args = {}

        if isinstance(args, (list, tuple)):
            names = list(entry.params.model_fields)
            if len(args) > len(names):
                logger.warning("Too many arguments for %s: %d", entry.name, len(args))
                raise InvalidArgumentsError(
                    entry.name,
                    f"expected at most {len(names)} positional arguments, got {len(args)}",
                )
            args = dict(zip(names, args))
        elif not isinstance(args, dict):
            raise InvalidArgumentsError(entry.name, "arguments must be a list or an object")

        try:
            return entry.params.model_validate(args)
        except ValidationError as e:
            logger.warning("Invalid arguments for %s: %s", entry.name, e)
            raise InvalidArgumentsError(entry.name, _summarise(e)) from e


def to_plain(value: Any) -> Any:
    """Convert store results to JSON-ready data."""
    if isinstance(value, Task):
        return value.model_dump()
    if isinstance(value, list):
        return [to_plain(item) for item in value]
    return value


def _type_name(annotation: Any) -> str:
    args = get_args(annotation)
    if type(None) in args:
        inner = " | ".join(_type_name(a) for a in args if a is not type(None))
        return f"{inner} | None"
    return getattr(annotation, "__name__", str(annotation))


def _summarise(error: ValidationError) -> str:
    parts = []
    for err in error.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "args"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)
