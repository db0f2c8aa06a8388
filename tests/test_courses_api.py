"""Course API tests — CRUD through HTTP and isolation between users."""

import pytest

from conftest import bearer


async def _create(client, auth, title="Math"):
    r = await client.post("/courses", json={"title": title}, headers=bearer(auth))
    assert r.status_code == 201, r.text
    return r.json()


@pytest.mark.asyncio
async def test_create_course(client, alice):
    course = await _create(client, alice, "Math")
    assert course["title"] == "Math"
    assert course["userId"] == alice["user"]["id"]
    assert set(course) == {"id", "userId", "title", "createdAt"}


@pytest.mark.asyncio
async def test_courses_require_auth(client):
    r = await client.post("/courses", json={"title": "Math"})
    assert r.status_code == 401
    r = await client.get("/courses")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_list_courses_in_creation_order(client, alice):
    for title in ("Math", "Biology", "History"):
        await _create(client, alice, title)

    r = await client.get("/courses", headers=bearer(alice))
    assert r.status_code == 200
    assert [c["title"] for c in r.json()] == ["Math", "Biology", "History"]


@pytest.mark.asyncio
async def test_list_is_empty_for_new_user(client, alice):
    r = await client.get("/courses", headers=bearer(alice))
    assert r.status_code == 200
    assert r.json() == []


@pytest.mark.asyncio
async def test_other_user_cannot_see_course(client, alice, bob):
    """A creates "Math"; B's list excludes it and B's GET by id is a 404."""
    course = await _create(client, alice, "Math")

    r = await client.get("/courses", headers=bearer(bob))
    assert r.status_code == 200
    assert r.json() == []

    r = await client.get(f"/courses/{course['id']}", headers=bearer(bob))
    assert r.status_code == 404
    assert r.json()["detail"] == "Course not found"

    r = await client.get(f"/courses/{course['id']}", headers=bearer(alice))
    assert r.status_code == 200
    assert r.json() == course


@pytest.mark.asyncio
async def test_other_user_cannot_modify_course(client, alice, bob):
    course = await _create(client, alice, "Math")

    r = await client.patch(f"/courses/{course['id']}", json={"title": "Hacked"}, headers=bearer(bob))
    assert r.status_code == 404
    r = await client.delete(f"/courses/{course['id']}", headers=bearer(bob))
    assert r.status_code == 404

    r = await client.get(f"/courses/{course['id']}", headers=bearer(alice))
    assert r.json()["title"] == "Math"


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["put", "patch"])
async def test_update_course(client, alice, method):
    course = await _create(client, alice, "Math")

    r = await getattr(client, method)(
        f"/courses/{course['id']}", json={"title": "Linear Algebra"}, headers=bearer(alice)
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Linear Algebra"
    assert r.json()["id"] == course["id"]
    assert r.json()["createdAt"] == course["createdAt"]


@pytest.mark.asyncio
async def test_update_rejects_null_title(client, alice):
    course = await _create(client, alice, "Math")
    r = await client.patch(f"/courses/{course['id']}", json={"title": None}, headers=bearer(alice))
    assert r.status_code == 400


@pytest.mark.asyncio
async def test_update_ignores_owner_in_body(client, alice, bob):
    course = await _create(client, alice, "Math")
    r = await client.patch(
        f"/courses/{course['id']}",
        json={"userId": bob["user"]["id"]},
        headers=bearer(alice),
    )
    assert r.status_code == 200
    assert r.json()["userId"] == alice["user"]["id"]


@pytest.mark.asyncio
async def test_delete_course(client, alice):
    course = await _create(client, alice, "Math")

    r = await client.delete(f"/courses/{course['id']}", headers=bearer(alice))
    assert r.status_code == 204
    assert r.content == b""

    r = await client.get(f"/courses/{course['id']}", headers=bearer(alice))
    assert r.status_code == 404
    r = await client.delete(f"/courses/{course['id']}", headers=bearer(alice))
    assert r.status_code == 404


@pytest.mark.asyncio
@pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": "   "}, {"title": "x" * 256}])
async def test_create_course_validation(client, alice, body):
    r = await client.post("/courses", json=body, headers=bearer(alice))
    assert r.status_code == 400
    assert "title" in r.json()["detail"]


@pytest.mark.asyncio
async def test_unknown_course_id(client, alice):
    r = await client.get("/courses/no-such-id", headers=bearer(alice))
    assert r.status_code == 404


@pytest.mark.asyncio
async def test_database_failure_is_generic_500(client, alice, db_session):
    """A still-valid token for a removed account fails the owner foreign key.

    The client sees a generic message; the database error stays in the log.
    """
    from nerv.services.user_service import UserService

    assert await UserService(db_session).delete_user(alice["user"]["id"])

    r = await client.post("/courses", json={"title": "Math"}, headers=bearer(alice))
    assert r.status_code == 500
    assert r.json() == {"detail": "Database operation failed"}
    assert "FOREIGN KEY" not in r.text
    assert "INSERT" not in r.text
