"""Nerv CLI — run the server and handle admin chores.

Usage:
    nerv serve --port 3001                  # Run the API with uvicorn
    nerv init-db                             # Create tables
    nerv delete-user a@x.com                 # Remove an account and everything it owns
    nerv assignments                         # List your assignments via the API (NERV_TOKEN)
"""

from __future__ import annotations

import asyncio
import concurrent.futures
import os
import sys
from typing import Optional

import click
import httpx

from nerv import __version__

# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

DEFAULT_API_URL = "http://localhost:3001"


def _api_url() -> str:
    return os.environ.get("NERV_API_URL", DEFAULT_API_URL).rstrip("/")


def _client(token: str) -> httpx.AsyncClient:
    """Build an async HTTP client pointed at the Nerv backend."""
    return httpx.AsyncClient(
        base_url=_api_url(),
        headers={"Authorization": f"Bearer {token}"},
        timeout=30.0,
    )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _run(coro):
    """Run an async coroutine from a synchronous Click handler.

    Handles nested event loops (e.g. when invoked via Click CliRunner
    inside an existing async context like tests) by offloading to a thread.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)
    else:
        with concurrent.futures.ThreadPoolExecutor(max_workers=1) as pool:
            return pool.submit(asyncio.run, coro).result()


def _load_settings():
    from nerv.config import Settings

    try:
        return Settings()
    except ValueError as e:
        click.secho(f"Error: {e}", fg="red", err=True)
        sys.exit(1)


def _print_table(rows: list[dict], columns: list[tuple[str, str, int]]):
    """Print a simple ASCII table.

    columns: list of (header, dict_key, width)
    """
    header = "  ".join(h.ljust(w) for h, _, w in columns)
    click.secho(header, bold=True)
    click.echo("-" * len(header))
    for row in rows:
        line = "  ".join(str(row.get(k) or "—")[:w].ljust(w) for _, k, w in columns)
        click.echo(line)


def _status_color(status: str) -> str:
    colors = {
        "pending": "yellow",
        "in-progress": "cyan",
        "completed": "green",
        "archived": "white",
    }
    return colors.get(status, "white")


# ---------------------------------------------------------------------------
# CLI group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(version=__version__, prog_name="nerv")
def main():
    """Nerv — academic organizer backend."""


# ---------------------------------------------------------------------------
# nerv serve
# ---------------------------------------------------------------------------


@main.command()
@click.option("--host", default=None, help="Bind address (default NERV_HOST)")
@click.option("--port", type=int, default=None, help="Port (default NERV_PORT)")
@click.option("--reload", is_flag=True, help="Restart on code changes")
def serve(host: Optional[str], port: Optional[int], reload: bool):
    """Run the API server."""
    import uvicorn

    settings = _load_settings()
    uvicorn.run(
        "nerv.main:create_app",
        factory=True,
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
    )


# ---------------------------------------------------------------------------
# nerv init-db
# ---------------------------------------------------------------------------


@main.command("init-db")
def init_db():
    """Create database tables (idempotent)."""
    _run(_init_db_impl(_load_settings()))


async def _init_db_impl(settings):
    from nerv.db.engine import Database

    db = Database(settings.database_url)
    try:
        await db.create_all()
    finally:
        await db.dispose()
    click.secho("Database ready.", fg="green")


# ---------------------------------------------------------------------------
# nerv delete-user
# ---------------------------------------------------------------------------


@main.command("delete-user")
@click.argument("email")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
def delete_user(email: str, yes: bool):
    """Delete an account. Its courses, assignments and notes are removed too."""
    if not yes:
        click.confirm(
            f"Delete {email} and everything it owns?", abort=True
        )
    deleted = _run(_delete_user_impl(_load_settings(), email))
    if not deleted:
        click.secho(f"No user with email {email}", fg="red", err=True)
        sys.exit(1)
    click.secho(f"Deleted {email}", fg="green")


async def _delete_user_impl(settings, email: str) -> bool:
    from nerv.db.engine import Database
    from nerv.services.user_service import UserService

    db = Database(settings.database_url)
    try:
        await db.create_all()
        async with db.session_factory() as session:
            svc = UserService(session)
            user = await svc.get_by_email(email)
            if user is None:
                return False
            return await svc.delete_user(user.id)
    finally:
        await db.dispose()


# ---------------------------------------------------------------------------
# nerv assignments
# ---------------------------------------------------------------------------


@main.command()
@click.option("--token", envvar="NERV_TOKEN", required=True, help="Bearer token (or NERV_TOKEN)")
@click.option("--status", "status_filter", help="Only show this status")
def assignments(token: str, status_filter: Optional[str]):
    """List your assignments, soonest due first."""
    status_code, rows = _run(_fetch_assignments(token))
    if status_code in (401, 403):
        click.secho("Not authorized — log in again for a fresh token.", fg="red", err=True)
        sys.exit(1)
    _show_assignments(rows, status_filter)


async def _fetch_assignments(token: str) -> tuple[int, list[dict]]:
    async with _client(token) as c:
        r = await c.get("/assignments")
        if r.status_code in (401, 403):
            return r.status_code, []
        r.raise_for_status()
        return r.status_code, r.json()


def _show_assignments(rows: list[dict], status_filter: Optional[str]):
    if status_filter:
        rows = [a for a in rows if a["status"] == status_filter]
    if not rows:
        click.echo("No assignments found.")
        return

    for a in rows:
        a["status"] = click.style(a["status"], fg=_status_color(a["status"]))
        a["dueDate"] = a["dueDate"][:16].replace("T", " ")
    _print_table(
        rows,
        [
            ("DUE", "dueDate", 16),
            ("TITLE", "title", 32),
            ("COURSE", "courseTitle", 16),
            ("STATUS", "status", 20),
        ],
    )


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    main()
