"""Command-line interface for Famly."""

from __future__ import annotations

import json
from datetime import date
from typing import List, NoReturn, Optional, Tuple

import typer

from famly.auth import IdentityProvider, SessionStorage, create_identity_provider
from famly.config import get_settings
from famly.data import expenses as expense_data
from famly.data import families as family_data
from famly.data import invites as invite_data
from famly.errors import FamlyError
from famly.models import FamilyRole, TaskNode, UserProfile
from famly.permissions import CREATE_CONTENT, INVITE_MEMBERS, require
from famly.store import RemoteStore, create_store
from famly.tenancy import FamilyContext
from famly.views import tasks as task_views
from famly.views.finance import format_amount, summarize_expenses
from famly.views.state import TaskBoard

app = typer.Typer(help="Famly household organizer commands.")

FAMILY_OPTION = typer.Option(None, "--family", "-f", help="Family id (defaults to the first membership).")


def _fail(message: str) -> NoReturn:
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)


def _provider() -> Tuple[RemoteStore, IdentityProvider]:
    settings = get_settings()
    session = SessionStorage().load()
    store = create_store(settings, access_token=session.access_token if session else None)
    return store, create_identity_provider(store, settings)


def _signed_in() -> Tuple[RemoteStore, UserProfile]:
    store, provider = _provider()
    user = provider.get_current_user()
    if user is None:
        _fail("Not signed in. Run `famly login` first.")
    return store, user


def _context(family_id: Optional[str]) -> Tuple[RemoteStore, FamilyContext]:
    store, user = _signed_in()
    context = FamilyContext(user=user, memberships=family_data.get_families_for_user(store, user.id))
    if family_id:
        try:
            context.select(family_id)
        except FamlyError as exc:
            _fail(str(exc))
    if not context.has_family:
        _fail("You are not part of a family yet. Run `famly create-family` or `famly join`.")
    return store, context


def _echo_json(payload: object, pretty: bool) -> None:
    typer.echo(json.dumps(payload, indent=2 if pretty else None, sort_keys=pretty))


def _render_tree(nodes: List[TaskNode], overdue: set[str], next_id: Optional[str], depth: int = 0) -> None:
    for node in nodes:
        task = node.task
        markers = []
        if task.id in overdue:
            markers.append("overdue")
        if task.id == next_id:
            markers.append("next up")
        due = f" due {task.due_date.isoformat()}" if task.due_date else ""
        suffix = f" ({', '.join(markers)})" if markers else ""
        typer.echo(f"{'  ' * depth}[{task.status.value}] {task.title}{due}{suffix}  #{task.id}")
        _render_tree(node.subtasks, overdue, next_id, depth + 1)


@app.command()
def signup(
    email: str = typer.Argument(..., help="Account email."),
    name: str = typer.Option("", "--name", help="Full name shown to family members."),
    password: str = typer.Option(..., prompt=True, hide_input=True, confirmation_prompt=True),
) -> None:
    """Create an account and sign in."""

    _, provider = _provider()
    try:
        session = provider.sign_up(email, password, name)
    except FamlyError as exc:
        _fail(str(exc))
    if session is None:
        typer.echo("Check your inbox to confirm the account, then run `famly login`.")
        return
    typer.echo(f"Signed up as {session.user.email}.")


@app.command()
def login(
    email: str = typer.Argument(..., help="Account email."),
    password: str = typer.Option(..., prompt=True, hide_input=True),
) -> None:
    """Sign in and remember the session."""

    _, provider = _provider()
    try:
        session = provider.sign_in(email, password)
    except FamlyError as exc:
        _fail(str(exc))
    typer.echo(f"Signed in as {session.user.email}.")


@app.command()
def logout() -> None:
    """Forget the stored session."""

    _, provider = _provider()
    try:
        provider.sign_out()
    except FamlyError as exc:
        typer.secho(f"Warning: remote sign-out failed: {exc}", fg=typer.colors.YELLOW)
    typer.echo("Signed out.")


@app.command()
def whoami() -> None:
    """Show the signed-in user."""

    _, user = _signed_in()
    typer.echo(f"{user.full_name or user.email} <{user.email}> id={user.id}")


@app.command()
def families(pretty: bool = typer.Option(False, "--pretty", help="Pretty-print output JSON.")) -> None:
    """List the families you belong to."""

    store, user = _signed_in()
    memberships = family_data.get_families_for_user(store, user.id)
    _echo_json([membership.to_view() for membership in memberships], pretty)


@app.command("create-family")
def create_family(name: str = typer.Argument(..., help="Family name.")) -> None:
    """Create a family with you as its owner."""

    store, user = _signed_in()
    try:
        family, membership = family_data.create_family(store, name, user.id)
    except FamlyError as exc:
        _fail(str(exc))
    typer.echo(f"Created family {family.name} ({family.id}); you are {membership.role.value}.")


@app.command()
def tasks(
    status: str = typer.Option(task_views.ALL, "--status", help="ALL, TODO, DOING or DONE."),
    search: str = typer.Option("", "--search", help="Case-insensitive title search."),
    family: Optional[str] = FAMILY_OPTION,
) -> None:
    """Show the task tree with next-up and overdue markers."""

    store, context = _context(family)
    try:
        status_filter = task_views.parse_status_filter(status)
    except ValueError:
        _fail(f"Unknown status {status!r}.")
    board = TaskBoard(store, context.family_id, context.user.id)
    result = board.refresh()
    if not result.ok:
        _fail(result.reason)

    nodes = board.view(status_filter, search)
    if not nodes:
        typer.echo("No tasks.")
        return
    today = date.today()
    overdue = {task.id for task in board.tasks if task_views.is_overdue(task, today)}
    upcoming = board.next_up()
    _render_tree(nodes, overdue, upcoming.id if upcoming else None)
    typer.echo(f"{task_views.completed_count(board.tasks)}/{len(board.tasks)} done")


@app.command("add-task")
def add_task(
    title: str = typer.Argument(..., help="Task title."),
    due: Optional[str] = typer.Option(None, "--due", help="Due date (YYYY-MM-DD)."),
    parent: Optional[str] = typer.Option(None, "--parent", help="Parent task id for a sub-task."),
    family: Optional[str] = FAMILY_OPTION,
) -> None:
    """Add a task (or a sub-task with --parent)."""

    store, context = _context(family)
    try:
        require(context.role, CREATE_CONTENT)
        due_date = date.fromisoformat(due) if due else None
    except (FamlyError, ValueError) as exc:
        _fail(str(exc))
    result = TaskBoard(store, context.family_id, context.user.id).add(
        title, due_date=due_date, parent_id=parent
    )
    if not result.ok:
        _fail(result.reason)
    typer.echo(f"Added task {result.value.title} ({result.value.id}).")


@app.command()
def expenses(family: Optional[str] = FAMILY_OPTION) -> None:
    """Show spending per category."""

    store, context = _context(family)
    symbol = get_settings().currency_symbol
    summary = summarize_expenses(expense_data.get_expenses(store, context.family_id))
    for entry in summary.by_category:
        typer.echo(f"{entry.category:<15} {format_amount(entry.amount, symbol):>12} {entry.share_percent:5.1f}%")
    typer.echo(f"{'Total':<15} {format_amount(summary.total, symbol):>12}")


@app.command()
def invite(
    email: str = typer.Argument(..., help="Email of the person to invite."),
    role: FamilyRole = typer.Option(FamilyRole.MEMBER, "--role", case_sensitive=False),
    family: Optional[str] = FAMILY_OPTION,
) -> None:
    """Create an invite code for the active family."""

    store, context = _context(family)
    try:
        require(context.role, INVITE_MEMBERS)
        created = invite_data.create_invite(store, context.family_id, email, role, context.user.id)
    except FamlyError as exc:
        _fail(str(exc))
    typer.echo(f"Invite code for {created.email}: {created.invite_code}")


@app.command()
def join(code: str = typer.Argument(..., help="Invite code.")) -> None:
    """Join a family with an invite code."""

    store, user = _signed_in()
    try:
        membership = invite_data.redeem_invite(store, code, user.id)
    except FamlyError as exc:
        _fail(str(exc))
    typer.echo(f"Joined family {membership.family_id} as {membership.role.value}.")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port"),
    reload: bool = typer.Option(False, "--reload"),
    duration: Optional[float] = typer.Option(None, "--duration", help="Stop after N seconds."),
) -> None:
    """Run the HTTP API with uvicorn."""

    from famly.server.run import serve as run_server

    run_server(host, port, reload=reload, duration=duration)


def main(argv: Optional[list[str]] = None) -> None:
    """Entry point for the `famly` console script."""
    app(prog_name="famly", args=argv)


if __name__ == "__main__":
    main()
