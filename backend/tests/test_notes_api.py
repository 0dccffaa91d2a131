"""
NoteVault Backend — Notes API Integration Tests
=================================================

What:  End-to-end tests for the auth gate and owner-scoped /notes CRUD.
How:   HTTPX AsyncClient against a fresh app on in-memory SQLite; users are
       registered and logged in through the public API.

What we test:
    ✅ missing / garbage / foreign / expired tokens → 401 with a Bearer challenge
    ✅ create, list (newest first), get, update, delete
    ✅ partial updates leave omitted fields untouched
    ✅ another user's notes are invisible and immutable (404, never 403)
    ✅ malformed note IDs → 422
    ✅ request ID echo and the health probe
"""

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from notevault.services.token_service import TokenService

from conftest import bearer


async def _create(client, headers, title="A", content="x"):
    response = await client.post("/notes", json={"title": title, "content": content}, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestAuthGate:
    """Every /notes route refuses requests without a valid bearer token."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "method,path",
        [
            ("GET", "/notes"),
            ("POST", "/notes"),
            ("GET", f"/notes/{uuid.uuid4()}"),
            ("PUT", f"/notes/{uuid.uuid4()}"),
            ("DELETE", f"/notes/{uuid.uuid4()}"),
        ],
    )
    async def test_missing_token(self, test_client, method, path):
        response = await test_client.request(method, path, json={"title": "A"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_non_bearer_scheme(self, test_client):
        response = await test_client.get("/notes", headers={"Authorization": "Basic YWxpY2U6cHcx"})

        assert response.status_code == 401
        assert response.json()["error"] == "unauthenticated"

    @pytest.mark.asyncio
    async def test_garbage_token(self, test_client):
        response = await test_client.get("/notes", headers=bearer("not.a.token"))

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_token"
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_token_signed_with_other_secret(self, test_client):
        forged = TokenService(secret="some-other-secret-of-sufficient-length-99").issue(uuid.uuid4())

        response = await test_client.get("/notes", headers=bearer(forged.token))

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_expired_token(self, app, test_client):
        issued_at = datetime.now(timezone.utc) - timedelta(hours=2)
        expired = app.state.token_service.issue(uuid.uuid4(), now=issued_at)

        response = await test_client.get("/notes", headers=bearer(expired.token))

        assert response.status_code == 401
        assert response.json()["error"] == "invalid_token"

    @pytest.mark.asyncio
    async def test_rejected_request_writes_nothing(self, test_client, auth_headers):
        await test_client.post("/notes", json={"title": "sneaky"}, headers=bearer("garbage"))

        response = await test_client.get("/notes", headers=auth_headers)

        assert response.json() == []


class TestNotesCrud:

    @pytest.mark.asyncio
    async def test_create_note(self, test_client, auth_headers):
        response = await test_client.post(
            "/notes", json={"title": "A", "content": "x"}, headers=auth_headers
        )

        assert response.status_code == 201
        body = response.json()
        assert body["title"] == "A"
        assert body["content"] == "x"
        uuid.UUID(body["id"])
        uuid.UUID(body["owner_id"])

    @pytest.mark.asyncio
    async def test_create_note_with_empty_body(self, test_client, auth_headers):
        response = await test_client.post("/notes", json={}, headers=auth_headers)

        assert response.status_code == 201
        assert response.json()["title"] == ""
        assert response.json()["content"] == ""

    @pytest.mark.asyncio
    async def test_owner_comes_from_token_not_body(self, test_client, auth_headers):
        me = (await _create(test_client, auth_headers))["owner_id"]

        response = await test_client.post(
            "/notes",
            json={"title": "B", "content": "y", "owner_id": str(uuid.uuid4())},
            headers=auth_headers,
        )

        assert response.json()["owner_id"] == me

    @pytest.mark.asyncio
    async def test_list_notes_newest_first(self, test_client, auth_headers):
        for title in ("first", "second", "third"):
            await _create(test_client, auth_headers, title=title)

        response = await test_client.get("/notes", headers=auth_headers)

        assert response.status_code == 200
        assert [n["title"] for n in response.json()] == ["third", "second", "first"]
        assert response.headers["X-Total-Count"] == "3"

    @pytest.mark.asyncio
    async def test_list_notes_empty(self, test_client, auth_headers):
        response = await test_client.get("/notes", headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.asyncio
    async def test_get_note(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers)

        response = await test_client.get(f"/notes/{note['id']}", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["id"] == note["id"]
        assert response.headers["Cache-Control"] == "private, no-cache"

    @pytest.mark.asyncio
    async def test_update_note(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers)

        response = await test_client.put(
            f"/notes/{note['id']}", json={"title": "A2", "content": "x2"}, headers=auth_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["title"] == "A2"
        assert body["content"] == "x2"
        assert body["id"] == note["id"]

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_field(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers, title="A", content="x")

        response = await test_client.put(
            f"/notes/{note['id']}", json={"content": "only content"}, headers=auth_headers
        )

        assert response.json()["title"] == "A"
        assert response.json()["content"] == "only content"

    @pytest.mark.asyncio
    async def test_update_can_clear_field(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers, title="A", content="x")

        response = await test_client.put(
            f"/notes/{note['id']}", json={"title": ""}, headers=auth_headers
        )

        assert response.json()["title"] == ""
        assert response.json()["content"] == "x"

    @pytest.mark.asyncio
    async def test_delete_note_returns_prior_state(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers, title="gone", content="bye")

        response = await test_client.delete(f"/notes/{note['id']}", headers=auth_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Note deleted successfully"
        assert body["deleted_note"]["id"] == note["id"]
        assert body["deleted_note"]["title"] == "gone"

        again = await test_client.get(f"/notes/{note['id']}", headers=auth_headers)
        assert again.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_twice(self, test_client, auth_headers):
        note = await _create(test_client, auth_headers)
        await test_client.delete(f"/notes/{note['id']}", headers=auth_headers)

        response = await test_client.delete(f"/notes/{note['id']}", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"

    @pytest.mark.asyncio
    async def test_unknown_note(self, test_client, auth_headers):
        response = await test_client.get(f"/notes/{uuid.uuid4()}", headers=auth_headers)

        assert response.status_code == 404

    @pytest.mark.asyncio
    @pytest.mark.parametrize("method", ["GET", "PUT", "DELETE"])
    async def test_malformed_note_id(self, test_client, auth_headers, method):
        response = await test_client.request(
            method, "/notes/not-a-uuid", json={"title": "A"}, headers=auth_headers
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_title_too_long(self, test_client, auth_headers):
        response = await test_client.post(
            "/notes", json={"title": "t" * 256}, headers=auth_headers
        )

        assert response.status_code == 422


class TestNoteIsolation:
    """Notes of one user are invisible and immutable to every other user."""

    @pytest.mark.asyncio
    async def test_other_user_cannot_see_list(self, test_client, auth_headers, second_auth_headers):
        await _create(test_client, auth_headers, title="private")

        response = await test_client.get("/notes", headers=second_auth_headers)

        assert response.json() == []

    @pytest.mark.asyncio
    async def test_other_user_gets_404_everywhere(self, test_client, auth_headers, second_auth_headers):
        note = await _create(test_client, auth_headers, title="A", content="x")
        path = f"/notes/{note['id']}"

        got = await test_client.get(path, headers=second_auth_headers)
        put = await test_client.put(path, json={"title": "hijack"}, headers=second_auth_headers)
        deleted = await test_client.delete(path, headers=second_auth_headers)

        assert got.status_code == put.status_code == deleted.status_code == 404

        # Foreign and nonexistent notes answer identically
        missing = await test_client.get(f"/notes/{uuid.uuid4()}", headers=second_auth_headers)
        assert got.json()["error"] == missing.json()["error"]

        # Owner still sees the untouched note
        mine = await test_client.get(path, headers=auth_headers)
        assert mine.status_code == 200
        assert mine.json()["title"] == "A"
        assert mine.json()["content"] == "x"

    @pytest.mark.asyncio
    async def test_two_users_scenario(self, test_client, auth_headers, second_auth_headers):
        """alice writes, bob probes, alice edits and deletes."""
        note = await _create(test_client, auth_headers, title="A", content="x")
        path = f"/notes/{note['id']}"

        listing = await test_client.get("/notes", headers=auth_headers)
        assert [n["id"] for n in listing.json()] == [note["id"]]

        assert (await test_client.get(path, headers=second_auth_headers)).status_code == 404

        updated = await test_client.put(path, json={"title": "A2"}, headers=auth_headers)
        assert updated.status_code == 200
        assert updated.json()["title"] == "A2"

        assert (await test_client.delete(path, headers=auth_headers)).status_code == 200
        assert (await test_client.get("/notes", headers=auth_headers)).json() == []


class TestOperational:

    @pytest.mark.asyncio
    async def test_request_id_generated(self, test_client):
        response = await test_client.get("/")

        assert len(response.headers["X-Request-ID"]) == 8

    @pytest.mark.asyncio
    async def test_request_id_echoed(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "trace-123"})

        assert response.headers["X-Request-ID"] == "trace-123"

    @pytest.mark.asyncio
    async def test_unsafe_request_id_replaced(self, test_client):
        response = await test_client.get("/", headers={"X-Request-ID": "bad id with spaces"})

        assert response.headers["X-Request-ID"] != "bad id with spaces"

    @pytest.mark.asyncio
    async def test_error_body_carries_request_id(self, test_client):
        response = await test_client.get("/notes", headers={"X-Request-ID": "req-42"})

        assert response.json()["request_id"] == "req-42"

    @pytest.mark.asyncio
    async def test_health(self, test_client):
        response = await test_client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["database"] == "connected"
