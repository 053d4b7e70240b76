"""
Users API contract tests
Exercises every endpoint through the in-process TestClient
"""

import uuid
import pytest

USERS = "/api/v1/users"


def _create(client, data):
    response = client.post(USERS, json=data)
    assert response.status_code == 200, f"Create failed: {response.status_code} {response.text}"
    return response.json()


class TestHealth:

    def test_health_reports_backend_mode(self, client):
        response = client.get("/")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["backend"]["permissive_update"] is True
        assert body["backend"]["permissive_delete"] is True

    def test_health_reports_strict_mode(self, strict_client):
        body = strict_client.get("/").json()

        assert body["backend"]["permissive_update"] is False
        assert body["backend"]["permissive_delete"] is False


class TestInsertUser:

    def test_insert_with_id_echoes_user(self, client, user_factory):
        data, user_id = user_factory.generate_user()

        body = _create(client, data)

        assert body == data
        assert list(body.keys()) == ["userId", "username", "firstName", "lastName"]

    def test_insert_without_id_is_assigned_one(self, client, user_factory):
        data, _ = user_factory.generate_user(with_id=False)
        del data["userId"]

        body = _create(client, data)

        assert uuid.UUID(body["userId"])
        assert body["username"] == data["username"]

    def test_insert_with_null_id_is_assigned_one(self, client, user_factory):
        data, _ = user_factory.generate_user(with_id=False)

        body = _create(client, data)

        assert body["userId"]

    def test_insert_duplicate_id_conflicts(self, client, user_factory):
        data, _ = user_factory.generate_user()
        _create(client, data)

        response = client.post(USERS, json=data)

        assert response.status_code == 409
        assert response.json()["error"] == "HTTP 409"

    @pytest.mark.parametrize("missing_field", ["username", "firstName", "lastName"])
    def test_insert_missing_field_is_rejected(self, client, user_factory, missing_field):
        data, _ = user_factory.generate_user()
        del data[missing_field]

        response = client.post(USERS, json=data)

        assert response.status_code == 422
        body = response.json()
        assert body["error"] == "Validation Error"
        assert any(missing_field in detail["field"] for detail in body["detail"])

    def test_error_responses_carry_trace_id(self, client, user_factory):
        data, _ = user_factory.generate_user()
        del data["username"]

        response = client.post(USERS, json=data)

        assert response.headers.get("x-trace-id")
        assert response.json()["trace_id"] == response.headers["x-trace-id"]


class TestGetUser:

    def test_get_created_user_has_non_empty_fields(self, client, user_factory):
        data, user_id = user_factory.generate_user()
        _create(client, data)

        response = client.get(f"{USERS}/{user_id}")

        assert response.status_code == 200
        body = response.json()
        for field in ("userId", "firstName", "lastName", "username"):
            assert body[field], f"{field} should not be empty"

    def test_get_unknown_user_is_404(self, client):
        response = client.get(f"{USERS}/{uuid.uuid4()}")

        assert response.status_code == 404
        assert response.json()["message"] == "User not found"

    def test_get_with_malformed_id_is_422(self, client):
        response = client.get(f"{USERS}/not-a-uuid")

        assert response.status_code == 422


class TestGetUsers:

    def test_list_returns_array_of_complete_users(self, client, user_factory):
        for data in user_factory.generate_users(3):
            _create(client, data)

        response = client.get(USERS, params={"page": 0, "size": 10})

        assert response.status_code == 200
        body = response.json()
        assert isinstance(body, list)
        assert len(body) == 3
        for user in body:
            for field in ("userId", "firstName", "lastName", "username"):
                assert user[field], f"{field} should not be empty"

    def test_list_pagination(self, client, user_factory):
        users = user_factory.generate_users(25)
        for data in users:
            _create(client, data)

        page0 = client.get(USERS, params={"page": 0, "size": 10}).json()
        page2 = client.get(USERS, params={"page": 2, "size": 10}).json()

        assert len(page0) == 10
        assert len(page2) == 5
        assert page0[0]["username"] == users[0]["username"]
        assert page2[-1]["username"] == users[-1]["username"]

    def test_list_uses_default_page_size(self, client, user_factory):
        for data in user_factory.generate_users(25):
            _create(client, data)

        body = client.get(USERS).json()

        assert len(body) == 20

    def test_list_empty_store(self, client):
        response = client.get(USERS, params={"page": 0, "size": 10})

        assert response.status_code == 200
        assert response.json() == []

    @pytest.mark.parametrize("params", [
        {"page": -1, "size": 10},
        {"page": 0, "size": 0},
        {"page": 0, "size": 101},
        {"page": "first", "size": 10},
    ])
    def test_list_rejects_bad_pagination(self, client, params):
        response = client.get(USERS, params=params)

        assert response.status_code == 422


class TestUpdateUser:

    def test_update_existing_user(self, client, user_factory):
        data, user_id = user_factory.generate_user()
        _create(client, data)
        changed = dict(data, username="foobar_changed", firstName="Foo_changed", lastName="Bar_changed")

        response = client.put(f"{USERS}/{user_id}", json=changed)

        assert response.status_code == 200
        assert response.json() == changed
        assert client.get(f"{USERS}/{user_id}").json() == changed

    def test_update_path_id_wins_over_body_id(self, client, user_factory):
        data, user_id = user_factory.generate_user()
        _create(client, data)

        response = client.put(f"{USERS}/{user_id}", json=dict(data, userId=str(uuid.uuid4())))

        assert response.status_code == 200
        assert response.json()["userId"] == user_id

    def test_permissive_update_of_unknown_id_succeeds(self, client, user_factory):
        data, user_id = user_factory.generate_user()

        response = client.put(f"{USERS}/{user_id}", json=data)

        assert response.status_code == 200
        assert response.json() == data

    def test_strict_update_of_unknown_id_is_404(self, strict_client, user_factory):
        data, user_id = user_factory.generate_user()

        response = strict_client.put(f"{USERS}/{user_id}", json=data)

        assert response.status_code == 404

    def test_update_missing_field_is_rejected(self, client, user_factory):
        data, user_id = user_factory.generate_user()
        _create(client, data)
        del data["lastName"]

        response = client.put(f"{USERS}/{user_id}", json=data)

        assert response.status_code == 422


class TestDeleteUser:

    def test_delete_existing_user_returns_it(self, client, user_factory):
        data, user_id = user_factory.generate_user()
        _create(client, data)

        response = client.delete(f"{USERS}/{user_id}")

        assert response.status_code == 200
        assert response.json() == data
        assert client.get(f"{USERS}/{user_id}").status_code == 404

    def test_permissive_delete_of_unknown_id_succeeds(self, client):
        unknown_id = str(uuid.uuid4())

        response = client.delete(f"{USERS}/{unknown_id}")

        assert response.status_code == 200
        assert response.json() == {
            "userId": unknown_id,
            "username": None,
            "firstName": None,
            "lastName": None
        }

    def test_strict_delete_of_unknown_id_is_404(self, strict_client):
        response = strict_client.delete(f"{USERS}/{uuid.uuid4()}")

        assert response.status_code == 404


class TestErrorEnvelope:

    def test_unknown_route_uses_error_envelope(self, client):
        response = client.get("/api/v2/nothing")

        assert response.status_code == 404
        body = response.json()
        assert body["error"] == "HTTP 404"
        assert body["message"] == "Not Found"
        assert body["trace_id"] == response.headers["x-trace-id"]
        assert "timestamp" in body

    def test_unsupported_method_uses_error_envelope(self, client):
        response = client.patch(f"{USERS}/{uuid.uuid4()}", json={})

        assert response.status_code == 405
        body = response.json()
        assert body["error"] == "HTTP 405"
        assert body["message"] == "Method Not Allowed"
        assert "PUT" in response.headers["allow"]


class TestCors:

    def test_wildcard_origin_does_not_allow_credentials(self, client):
        response = client.get("/", headers={"Origin": "https://somewhere.test"})

        assert response.headers["access-control-allow-origin"] == "*"
        assert "access-control-allow-credentials" not in response.headers

    def test_explicit_origins_allow_credentials(self, users_service, monkeypatch):
        from fastapi.testclient import TestClient
        from app import create_app

        monkeypatch.setattr("app.ALLOWED_ORIGINS", ["https://docs.test"])
        with TestClient(create_app(users_service)) as explicit_client:
            response = explicit_client.get("/", headers={"Origin": "https://docs.test"})

        assert response.headers["access-control-allow-origin"] == "https://docs.test"
        assert response.headers["access-control-allow-credentials"] == "true"
