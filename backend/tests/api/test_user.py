"""Tests for the user profile endpoints."""

from tests.conftest import create_test_token, login_headers


class TestGetProfile:

    def test_returns_current_user(self, client, data_store):
        user = data_store.users[1]
        response = client.get("/api/user/profile", headers=login_headers(client, user.email))

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["id"] == user.id
        assert data["phoneNumber"] == user.phone_number

    def test_token_for_unknown_user(self, client, auth_headers):
        """A valid token whose user is not in the dataset gets a 404."""
        response = client.get("/api/user/profile", headers=auth_headers)

        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"


class TestUpdateProfile:

    def test_updates_fields(self, client, data_store):
        user = data_store.users[0]
        response = client.put(
            "/api/user/update",
            json={"firstName": "Updated"},
            headers=login_headers(client, user.email),
        )

        assert response.status_code == 200
        assert response.json()["data"]["firstName"] == "Updated"
        assert response.json()["data"]["lastName"] == user.last_name
        assert data_store.find_user_by_id(user.id).first_name == "Updated"

    def test_requires_auth(self, client):
        assert client.put("/api/user/update", json={"firstName": "X"}).status_code == 401

    def test_only_own_profile(self, client, data_store):
        """The token subject decides whose profile changes."""
        owner, other = data_store.users[0], data_store.users[1]
        token = create_test_token(user_id=owner.id, email=owner.email)

        client.put(
            "/api/user/update",
            json={"lastName": "Changed"},
            headers={"Authorization": f"Bearer {token}"},
        )

        assert data_store.find_user_by_id(owner.id).last_name == "Changed"
        assert data_store.find_user_by_id(other.id).last_name == other.last_name
