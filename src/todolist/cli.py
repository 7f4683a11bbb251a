"""CLI interface for todolist."""

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import click
from pydantic import BaseModel, TypeAdapter, ValidationError
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from todolist import __version__
from todolist.config import CONFIG_FILE, LOG_FILE, TODO_DIR, LoggingConfig, TodoConfig
from todolist.dates import format_due_date, parse_due_date
from todolist.logging_setup import setup_logging
from todolist.models import Principal
from todolist.service import ServiceError, TodoService

console = Console()

LIST_VIEWS = {
    "all": "get_tasks",
    "important": "get_important_tasks",
    "completed": "get_completed_tasks",
}


@click.group(invoke_without_command=True)
@click.version_option(version=__version__, prog_name="todolist")
@click.option("--as", "principal", metavar="PRINCIPAL", help="Act as this caller identity")
@click.option("--json", "as_json", is_flag=True, help="Print results as JSON")
@click.pass_context
def main(ctx: click.Context, principal: str | None, as_json: bool) -> None:
    """todolist - per-caller task lists.

    Every task belongs to the caller that created it; nobody else can see,
    change or delete it. State lives in memory for the life of one process.

    \b
    Examples:
      todolist methods                       # What can be called
      todolist shell                         # Interactive session
      todolist --as alice run calls.json     # Replay a batch of calls
      todolist call add_task '["buy milk", null, true]'
    """
    ctx.ensure_object(dict)
    config = TodoConfig.load()

    if principal:
        config.identity.principal = principal
    if as_json:
        config.output.format = "json"

    ctx.obj["config"] = config
    setup_logging(config.logging.level, config.logging.file)

    # If no subcommand, show help
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
def init(force: bool) -> None:
    """Write a default configuration file."""
    if CONFIG_FILE.exists() and not force:
        console.print(
            "[yellow]todolist already initialized.[/yellow] Use --force to overwrite the config."
        )
        return

    TODO_DIR.mkdir(parents=True, exist_ok=True)
    TodoConfig(logging=LoggingConfig(file=str(LOG_FILE))).save()

    console.print(
        Panel.fit(
            "[green]Configuration saved![/green]\n\n"
            f"Config: [cyan]{CONFIG_FILE}[/cyan]\n"
            f"Log: [cyan]{LOG_FILE}[/cyan]\n\n"
            "Next steps:\n"
            "  1. Pick an identity: edit [cyan]identity.principal[/cyan]\n"
            "  2. Start a session: [cyan]todolist shell[/cyan]",
            title="todolist",
        )
    )


@main.command()
@click.pass_context
def status(ctx: click.Context) -> None:
    """Show the effective configuration."""
    config: TodoConfig = ctx.obj["config"]

    table = Table(title="Configuration", show_header=True)
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="white")
    config_source = str(CONFIG_FILE) if CONFIG_FILE.exists() else "[dim]defaults[/dim]"
    table.add_row("Config file", config_source)
    table.add_row("Identity", escape(config.identity.principal))
    table.add_row("Output", config.output.format)
    table.add_row("Log level", config.logging.level)
    table.add_row("Log file", config.logging.file or "[dim]none[/dim]")

    console.print(table)


@main.command()
@click.pass_context
def methods(ctx: click.Context) -> None:
    """List the callable methods."""
    config: TodoConfig = ctx.obj["config"]
    _print_interface(TodoService().interface(), config.output.format)


@main.command()
@click.argument("method")
@click.argument("args", required=False)
@click.pass_context
def call(ctx: click.Context, method: str, args: str | None) -> None:
    """Make a single call against a fresh store.

    ARGS is a JSON list (positional) or object (named). The store starts
    empty, so this is mostly useful for checking result shapes.
    """
    config: TodoConfig = ctx.obj["config"]

    parsed: Any = None
    if args:
        try:
            parsed = json.loads(args)
        except json.JSONDecodeError as e:
            raise click.BadParameter(f"not valid JSON ({e.msg})", param_hint="ARGS") from e

    service = _make_service(config)
    try:
        result = service.call(method, parsed)
    except ServiceError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        ctx.exit(1)

    _print_result(result, config.output.format)


class ScriptCall(BaseModel):
    """One step of a `todolist run` script."""

    method: str
    args: list[Any] | dict[str, Any] | None = None
    caller: str | None = None


@main.command()
@click.argument("script", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def run(ctx: click.Context, script: Path) -> None:
    """Replay a JSON list of calls against one store.

    \b
    Each entry looks like:
      {"method": "add_task", "args": ["buy milk", null, true], "caller": "alice"}
    "caller" defaults to the configured identity.
    """
    config: TodoConfig = ctx.obj["config"]

    try:
        steps = TypeAdapter(list[ScriptCall]).validate_json(script.read_text())
    except ValidationError as e:
        console.print(f"[red]Invalid script:[/red] {escape(str(script))}")
        for err in e.errors():
            loc = ".".join(str(p) for p in err["loc"])
            console.print(f"  {escape(loc)}: {escape(err['msg'])}")
        ctx.exit(1)

    service = _make_service(config)
    results: list[dict[str, Any]] = []

    for i, step in enumerate(steps, 1):
        caller = service.resolve_caller(step.caller)
        try:
            result = service.call(step.method, step.args, caller=caller)
        except ServiceError as e:
            if config.output.format == "json":
                click.echo(json.dumps(results, indent=2))
            console.print(f"[red]Step {i} failed:[/red] {escape(str(e))}")
            ctx.exit(1)

        results.append({"method": step.method, "caller": caller, "result": result})
        if config.output.format != "json":
            console.print(f"[bold]{i}.[/bold] [cyan]{escape(caller)}[/cyan] {escape(step.method)}")
            _print_result(result, "table")

    if config.output.format == "json":
        click.echo(json.dumps(results, indent=2))
    else:
        console.print()
        console.print(f"[green]{len(steps)} call(s) completed.[/green]")


# ---- interactive shell ----


@dataclass
class ShellSession:
    """State of one interactive session.

    The service resolves identity from ``principal``, so `as` switches
    caller for every call that follows.
    """

    principal: Principal
    output: str = "table"
    service: TodoService = field(init=False)

    def __post_init__(self) -> None:
        self.service = TodoService(identity=lambda: self.principal)


@main.command()
@click.pass_context
def shell(ctx: click.Context) -> None:
    """Interactive session against one in-memory store."""
    config: TodoConfig = ctx.obj["config"]
    session = ShellSession(
        principal=Principal(config.identity.principal),
        output=config.output.format,
    )

    console.print(
        Panel.fit(
            "Type [cyan]help[/cyan] for commands, [cyan]quit[/cyan] to leave.",
            title=f"todolist {__version__}",
        )
    )

    while True:
        try:
            line = click.prompt(
                session.principal, prompt_suffix="> ", default="", show_default=False
            )
        except click.Abort:
            break

        try:
            argv = shlex.split(line)
        except ValueError as e:
            console.print(f"[red]{escape(str(e))}[/red]")
            continue

        if not argv:
            continue
        if argv[0] in ("quit", "exit"):
            break

        run_shell_command(session, argv)

    console.print("[dim]Bye.[/dim]")


def run_shell_command(session: ShellSession, argv: list[str]) -> None:
    """Run one shell line, reporting errors instead of raising them."""
    try:
        shell_commands.main(args=argv, prog_name="", obj=session, standalone_mode=False)
    except click.ClickException as e:
        console.print(f"[red]{escape(e.format_message())}[/red]")
    except ServiceError as e:
        console.print(f"[red]{escape(str(e))}[/red]")


@click.group()
def shell_commands() -> None:
    """Shell commands."""


@shell_commands.command("add")
@click.argument("description", nargs=-1, required=True)
@click.option("--due", "-d", help="Due date (YYYY-MM-DD, DD.MM.YYYY or a timestamp)")
@click.option("--important", "-i", is_flag=True, help="Mark as important")
@click.pass_obj
def shell_add(
    session: ShellSession, description: tuple[str, ...], due: str | None, important: bool
) -> None:
    """Add a task."""
    try:
        due_date = parse_due_date(due)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--due") from e

    task = session.service.call(
        "add_task",
        {"description": " ".join(description), "due_date": due_date, "important": important},
    )
    if session.output == "json":
        _print_result(task, "json")
        return
    console.print(f"[green]Added task #{task['id']}:[/green] {escape(task['description'])}")


@shell_commands.command("list")
@click.argument("view", type=click.Choice(list(LIST_VIEWS)), default="all")
@click.pass_obj
def shell_list(session: ShellSession, view: str) -> None:
    """List tasks (all, important or completed)."""
    tasks = session.service.call(LIST_VIEWS[view])
    if session.output == "json":
        _print_result(tasks, "json")
        return
    _print_tasks(tasks, title=f"{view.capitalize()} tasks")


@shell_commands.command("show")
@click.argument("task_id", type=int)
@click.pass_obj
def shell_show(session: ShellSession, task_id: int) -> None:
    """Show one task."""
    _print_result(session.service.call("get_task", [task_id]), session.output)


@shell_commands.command("done")
@click.argument("task_id", type=int)
@click.pass_obj
def shell_done(session: ShellSession, task_id: int) -> None:
    """Toggle completion of a task."""
    found = session.service.call("toggle_task_completion", [task_id])
    _report_toggle(found, task_id, "Toggled completion of")


@shell_commands.command("star")
@click.argument("task_id", type=int)
@click.pass_obj
def shell_star(session: ShellSession, task_id: int) -> None:
    """Toggle importance of a task."""
    found = session.service.call("toggle_task_importance", [task_id])
    _report_toggle(found, task_id, "Toggled importance of")


@shell_commands.command("rm")
@click.argument("task_id", type=int)
@click.pass_obj
def shell_rm(session: ShellSession, task_id: int) -> None:
    """Delete a task."""
    found = session.service.call("delete_task", [task_id])
    _report_toggle(found, task_id, "Deleted")


@shell_commands.command("as")
@click.argument("principal")
@click.pass_obj
def shell_as(session: ShellSession, principal: str) -> None:
    """Switch caller identity."""
    session.principal = Principal(principal)
    console.print(f"Now acting as [cyan]{escape(principal)}[/cyan]")


@shell_commands.command("whoami")
@click.pass_obj
def shell_whoami(session: ShellSession) -> None:
    """Show the current caller identity."""
    store = session.service.store
    console.print(
        f"[cyan]{escape(session.principal)}[/cyan] "
        f"[dim]({store.count_tasks(session.principal)} task(s), next id {store.next_id})[/dim]"
    )


@shell_commands.command("reset")
@click.pass_obj
def shell_reset(session: ShellSession) -> None:
    """Wipe every caller's tasks and restart ids at 0."""
    session.service.init()
    console.print("[yellow]Store reset.[/yellow]")


@shell_commands.command("methods")
@click.pass_obj
def shell_methods(session: ShellSession) -> None:
    """List the callable methods."""
    _print_interface(session.service.interface(), session.output)


@shell_commands.command("help")
def shell_help() -> None:
    """Show this help."""
    table = Table(show_header=False, box=None)
    table.add_column("Command", style="cyan")
    table.add_column("Description")
    for name, command in sorted(shell_commands.commands.items()):
        table.add_row(name, command.get_short_help_str())
    table.add_row("quit", "Leave the shell")
    console.print(table)


# ---- rendering ----


def _make_service(config: TodoConfig) -> TodoService:
    principal = Principal(config.identity.principal)
    return TodoService(identity=lambda: principal)


def _report_toggle(found: bool, task_id: int, verb: str) -> None:
    if found:
        console.print(f"[green]{verb} task #{task_id}[/green]")
    else:
        console.print(f"[yellow]No task #{task_id}[/yellow]")


def _print_result(result: Any, output: str) -> None:
    """Print a call result as JSON or in a readable form."""
    if output == "json":
        click.echo(json.dumps(result, indent=2))
    elif result is None:
        console.print("[dim]not found[/dim]")
    elif isinstance(result, bool):
        console.print("[green]true[/green]" if result else "[yellow]false[/yellow]")
    elif isinstance(result, dict):
        _print_tasks([result], title=f"Task #{result['id']}")
    elif isinstance(result, list):
        _print_tasks(result)
    else:
        console.print(escape(str(result)))


def _print_tasks(tasks: list[dict[str, Any]], title: str = "Tasks") -> None:
    if not tasks:
        console.print("[dim]No tasks.[/dim]")
        return

    table = Table(title=title, show_header=True)
    table.add_column("ID", style="cyan", justify="right")
    table.add_column("Done")
    table.add_column("Description", style="white")
    table.add_column("Due")
    table.add_column("Priority")

    for task in tasks:
        done = "[green]✓[/green]" if task["completed"] else "[dim]○[/dim]"
        priority = task["importance_level"]
        if task["important"]:
            priority = f"[yellow]★ {priority}[/yellow]"
        table.add_row(
            str(task["id"]),
            done,
            Text(task["description"]),
            format_due_date(task["due_date"]),
            priority,
        )

    console.print(table)


def _print_interface(described: list[dict[str, Any]], output: str) -> None:
    if output == "json":
        click.echo(json.dumps(described, indent=2))
        return

    table = Table(title="Methods", show_header=True)
    table.add_column("Name", style="cyan")
    table.add_column("Kind")
    table.add_column("Params")
    table.add_column("Returns")
    table.add_column("Description", style="dim")

    for method in described:
        params = ", ".join(
            f"{p['name']}: {p['type']}" + ("" if p["required"] else "?") for p in method["params"]
        )
        table.add_row(
            method["name"],
            method["kind"],
            escape(params),
            escape(method["returns"]),
            method["doc"],
        )

    console.print(table)
