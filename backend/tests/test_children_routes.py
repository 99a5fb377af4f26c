"""
StuntCheck Gateway — Children Endpoint Tests
==============================================

What:  /api/children through the full app (middleware, handlers, SQLite).

What we test:
    ✅ The owner always comes from the bearer token, never from the body
    ✅ Another user's child answers exactly like a missing one (404)
    ✅ Empty partial updates are rejected before the store is touched
    ✅ Delete is final: a second GET/DELETE is 404
    ✅ 401 without a verified token
"""

import uuid

import pytest


async def _create(client, headers, **body):
    payload = {"name": "Ana", "gender": "female", "age": 24}
    payload.update(body)
    response = await client.post("/api/children", json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["child"]


class TestCreateChild:

    @pytest.mark.asyncio
    async def test_create_sets_owner_from_token(self, test_client, alice_headers):
        response = await test_client.post(
            "/api/children",
            json={"name": "Ana", "gender": "female", "age": 24, "user_id": "user-bob"},
            headers=alice_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Child added"
        assert body["child"]["user_id"] == "user-alice"
        assert body["child"]["name"] == "Ana"
        assert body["child"]["gender"] == "female"
        uuid.UUID(body["child"]["id"])

    @pytest.mark.asyncio
    async def test_create_accepts_legacy_and_local_gender_labels(self, test_client, alice_headers):
        response = await test_client.post(
            "/api/children",
            json={"name": "Budi", "sex": "Laki-laki", "age": 10},
            headers=alice_headers,
        )
        assert response.status_code == 201
        assert response.json()["child"]["gender"] == "male"

    @pytest.mark.asyncio
    async def test_create_rejects_negative_age(self, test_client, alice_headers):
        response = await test_client.post(
            "/api/children",
            json={"name": "Ana", "gender": "female", "age": -1},
            headers=alice_headers,
        )
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    @pytest.mark.asyncio
    async def test_create_requires_token(self, test_client):
        response = await test_client.post(
            "/api/children", json={"name": "Ana", "gender": "female", "age": 24}
        )
        assert response.status_code == 401
        assert response.json()["error"] == "unauthorized"

    @pytest.mark.asyncio
    async def test_unknown_token_is_unauthorized(self, test_client):
        response = await test_client.get(
            "/api/children", headers={"Authorization": "Bearer forged"}
        )
        assert response.status_code == 401


class TestListChildren:

    @pytest.mark.asyncio
    async def test_lists_only_my_children_newest_first(self, test_client, alice_headers, bob_headers):
        first = await _create(test_client, alice_headers, name="First")
        second = await _create(test_client, alice_headers, name="Second")
        await _create(test_client, bob_headers, name="Bob's child")

        response = await test_client.get("/api/children", headers=alice_headers)

        assert response.status_code == 200
        assert response.headers["X-Total-Count"] == "2"
        ids = [c["id"] for c in response.json()["children"]]
        assert ids == [second["id"], first["id"]]

    @pytest.mark.asyncio
    async def test_empty_list(self, test_client, bob_headers):
        response = await test_client.get("/api/children", headers=bob_headers)
        assert response.status_code == 200
        assert response.json() == {"children": []}


class TestOwnership:

    @pytest.mark.asyncio
    async def test_foreign_child_is_indistinguishable_from_missing(
        self, test_client, alice_headers, bob_headers
    ):
        child = await _create(test_client, alice_headers)

        foreign = await test_client.get(f"/api/children/{child['id']}", headers=bob_headers)
        missing = await test_client.get(f"/api/children/{uuid.uuid4()}", headers=bob_headers)

        assert foreign.status_code == missing.status_code == 404
        foreign_body = foreign.json()
        missing_body = missing.json()
        foreign_body.pop("request_id")
        missing_body.pop("request_id")
        assert foreign_body == missing_body

    @pytest.mark.asyncio
    async def test_foreign_update_and_delete_leave_record_untouched(
        self, test_client, alice_headers, bob_headers
    ):
        child = await _create(test_client, alice_headers)

        update = await test_client.put(
            f"/api/children/{child['id']}", json={"name": "Hijacked"}, headers=bob_headers
        )
        delete = await test_client.delete(f"/api/children/{child['id']}", headers=bob_headers)
        mine = await test_client.get(f"/api/children/{child['id']}", headers=alice_headers)

        assert update.status_code == 404
        assert delete.status_code == 404
        assert mine.status_code == 200
        assert mine.json()["name"] == "Ana"


class TestUpdateChild:

    @pytest.mark.asyncio
    async def test_partial_update_changes_only_given_fields(self, test_client, alice_headers):
        child = await _create(test_client, alice_headers)

        response = await test_client.put(
            f"/api/children/{child['id']}", json={"age": 30}, headers=alice_headers
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Child updated"
        assert body["child"]["age"] == 30
        assert body["child"]["name"] == "Ana"
        assert body["child"]["gender"] == "female"

    @pytest.mark.asyncio
    async def test_repeating_same_update_gives_same_state(self, test_client, alice_headers):
        child = await _create(test_client, alice_headers)
        url = f"/api/children/{child['id']}"

        first = await test_client.put(url, json={"name": "Budi", "age": 30}, headers=alice_headers)
        second = await test_client.put(url, json={"name": "Budi", "age": 30}, headers=alice_headers)
        fetched = await test_client.get(url, headers=alice_headers)

        assert first.status_code == second.status_code == 200
        assert first.json()["child"] == second.json()["child"]
        assert fetched.json() == second.json()["child"]
        assert fetched.json()["name"] == "Budi"
        assert fetched.json()["age"] == 30
        assert fetched.json()["gender"] == "female"

    @pytest.mark.asyncio
    async def test_empty_update_is_rejected(self, test_client, alice_headers):
        child = await _create(test_client, alice_headers)

        response = await test_client.put(
            f"/api/children/{child['id']}", json={}, headers=alice_headers
        )

        assert response.status_code == 400
        assert response.json()["message"] == "At least one field is required"

    @pytest.mark.asyncio
    async def test_empty_update_on_missing_child_is_still_400(self, test_client, alice_headers):
        response = await test_client.put(
            f"/api/children/{uuid.uuid4()}", json={}, headers=alice_headers
        )
        assert response.status_code == 400


class TestDeleteChild:

    @pytest.mark.asyncio
    async def test_delete_then_gone(self, test_client, alice_headers):
        child = await _create(test_client, alice_headers)

        deleted = await test_client.delete(f"/api/children/{child['id']}", headers=alice_headers)
        again = await test_client.delete(f"/api/children/{child['id']}", headers=alice_headers)
        fetched = await test_client.get(f"/api/children/{child['id']}", headers=alice_headers)

        assert deleted.status_code == 200
        assert deleted.json() == {"message": "Child deleted"}
        assert again.status_code == 404
        assert fetched.status_code == 404

    @pytest.mark.asyncio
    async def test_malformed_id_is_a_validation_error(self, test_client, alice_headers):
        response = await test_client.get("/api/children/not-a-uuid", headers=alice_headers)
        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"
