"""CLI tests — admin commands against a throwaway SQLite file."""

import asyncio

import httpx
import pytest
from click.testing import CliRunner

import nerv.cli.main as cli_module
from nerv import __version__
from nerv.cli.main import main
from nerv.db.engine import Database
from nerv.services.course_service import CourseService
from nerv.services.user_service import UserService


@pytest.fixture()
def db_url(tmp_path, monkeypatch):
    url = f"sqlite+aiosqlite:///{tmp_path / 'nerv.sqlite'}"
    monkeypatch.setenv("NERV_ENVIRONMENT", "test")
    monkeypatch.setenv("NERV_DATABASE_URL", url)
    return url


async def _seed(url: str, email: str) -> str:
    db = Database(url)
    try:
        await db.create_all()
        async with db.session_factory() as session:
            user = await UserService(session).create_user(email, "$2b$04$hash")
            await CourseService(session).create(user.id, title="Math")
            return user.id
    finally:
        await db.dispose()


async def _lookup(url: str, email: str):
    db = Database(url)
    try:
        async with db.session_factory() as session:
            return await UserService(session).get_by_email(email)
    finally:
        await db.dispose()


def test_version():
    result = CliRunner().invoke(main, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


def test_init_db_creates_file(db_url, tmp_path):
    result = CliRunner().invoke(main, ["init-db"])
    assert result.exit_code == 0, result.output
    assert "Database ready" in result.output
    assert (tmp_path / "nerv.sqlite").exists()

    # Idempotent
    result = CliRunner().invoke(main, ["init-db"])
    assert result.exit_code == 0


def test_delete_user(db_url):
    asyncio.run(_seed(db_url, "gone@example.com"))

    result = CliRunner().invoke(main, ["delete-user", "gone@example.com", "--yes"])
    assert result.exit_code == 0, result.output
    assert "Deleted gone@example.com" in result.output
    assert asyncio.run(_lookup(db_url, "gone@example.com")) is None


def test_delete_user_asks_first(db_url):
    asyncio.run(_seed(db_url, "kept@example.com"))

    result = CliRunner().invoke(main, ["delete-user", "kept@example.com"], input="n\n")
    assert result.exit_code == 1
    assert asyncio.run(_lookup(db_url, "kept@example.com")) is not None


def test_delete_unknown_user(db_url):
    result = CliRunner().invoke(main, ["delete-user", "nobody@example.com", "--yes"])
    assert result.exit_code == 1


def test_missing_signing_key_is_reported(tmp_path, monkeypatch):
    monkeypatch.setenv("NERV_ENVIRONMENT", "production")
    monkeypatch.delenv("NERV_JWT_SECRET", raising=False)
    monkeypatch.setenv("NERV_DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'x.sqlite'}")

    result = CliRunner().invoke(main, ["init-db"])
    assert result.exit_code == 1
    assert "NERV_JWT_SECRET" in result.output


# ═══════════════════════════════════════════════════════════
# nerv assignments
# ═══════════════════════════════════════════════════════════

ASSIGNMENTS = [
    {
        "id": "a1",
        "title": "Essay",
        "dueDate": "2030-03-01T17:00:00Z",
        "courseTitle": "History",
        "status": "pending",
    },
    {
        "id": "a2",
        "title": "Problem set",
        "dueDate": "2030-03-05T09:00:00Z",
        "courseTitle": None,
        "status": "completed",
    },
]


@pytest.fixture()
def api(monkeypatch):
    """Route the CLI's HTTP client to an in-process handler.

    Returns a dict: set "status" to change the response code; "seen"
    collects the requests that arrived.
    """
    state = {"status": 200, "seen": []}

    def handler(request: httpx.Request) -> httpx.Response:
        state["seen"].append(request)
        if state["status"] != 200:
            return httpx.Response(state["status"], json={"detail": "nope"})
        return httpx.Response(200, json=[dict(a) for a in ASSIGNMENTS])

    def fake_client(token: str) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url="http://nerv.test",
            headers={"Authorization": f"Bearer {token}"},
            transport=httpx.MockTransport(handler),
        )

    monkeypatch.setattr(cli_module, "_client", fake_client)
    return state


def test_assignments_lists_table(api):
    result = CliRunner().invoke(main, ["assignments", "--token", "tok-123"])
    assert result.exit_code == 0, result.output
    assert "TITLE" in result.output
    assert "Essay" in result.output
    assert "Problem set" in result.output
    assert "2030-03-01 17:00" in result.output

    (request,) = api["seen"]
    assert request.url.path == "/assignments"
    assert request.headers["Authorization"] == "Bearer tok-123"


def test_assignments_token_from_env(api, monkeypatch):
    monkeypatch.setenv("NERV_TOKEN", "env-token")
    result = CliRunner().invoke(main, ["assignments"])
    assert result.exit_code == 0, result.output
    assert api["seen"][0].headers["Authorization"] == "Bearer env-token"


def test_assignments_status_filter(api):
    result = CliRunner().invoke(main, ["assignments", "--token", "t", "--status", "completed"])
    assert result.exit_code == 0, result.output
    assert "Problem set" in result.output
    assert "Essay" not in result.output


def test_assignments_filter_with_no_match(api):
    result = CliRunner().invoke(main, ["assignments", "--token", "t", "--status", "archived"])
    assert result.exit_code == 0
    assert "No assignments found." in result.output


@pytest.mark.parametrize("status", [401, 403])
def test_assignments_rejected_token(api, status):
    api["status"] = status
    result = CliRunner().invoke(main, ["assignments", "--token", "stale"])
    assert result.exit_code == 1
    assert "Not authorized" in result.output
