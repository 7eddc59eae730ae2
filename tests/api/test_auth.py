"""
Tests for the authentication endpoints.

These test the HTTP layer: status codes, response format,
and error handling. Business logic is tested in
tests/services.
"""


class TestRegister:

    def test_register_returns_201(self, client):
        response = client.post("/auth/register", json={
            "email": "alice@example.com",
            "password": "password123",
        })
        assert response.status_code == 201
        assert response.json()["user_id"]

    def test_duplicate_email_returns_409(self, client):
        payload = {"email": "alice@example.com", "password": "password123"}
        client.post("/auth/register", json=payload)
        response = client.post("/auth/register", json={
            "email": "ALICE@example.com",
            "password": "password123",
        })
        assert response.status_code == 409
        assert response.json() == {"error": "Email already registered", "code": "CONFLICT"}

    def test_short_password_returns_400(self, client):
        response = client.post("/auth/register", json={
            "email": "alice@example.com",
            "password": "short",
        })
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    def test_invalid_email_returns_400(self, client):
        response = client.post("/auth/register", json={
            "email": "not-an-email",
            "password": "password123",
        })
        assert response.status_code == 400


class TestLogin:

    def test_login_returns_tokens(self, client):
        client.post("/auth/register", json={
            "email": "alice@example.com", "password": "password123",
        })
        response = client.post("/auth/login", json={
            "email": "alice@example.com", "password": "password123",
        })
        assert response.status_code == 200
        data = response.json()
        assert data["access_token"]
        assert data["refresh_token"]
        assert data["token_type"] == "bearer"
        assert data["expires_in"] == 900

    def test_bad_credentials_return_401(self, client):
        client.post("/auth/register", json={
            "email": "alice@example.com", "password": "password123",
        })
        response = client.post("/auth/login", json={
            "email": "alice@example.com", "password": "wrong-password",
        })
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid email or password"


class TestRefreshAndLogout:

    def test_refresh_returns_new_access_token(self, client, register_and_login):
        session = register_and_login()
        response = client.post("/auth/refresh", json={
            "refresh_token": session["refresh_token"],
        })
        assert response.status_code == 200
        new_headers = {"Authorization": f"Bearer {response.json()['access_token']}"}
        assert client.get("/accounts", headers=new_headers).status_code == 200

    def test_access_token_cannot_refresh(self, client, register_and_login):
        session = register_and_login()
        access_token = session["headers"]["Authorization"].split(" ")[1]
        response = client.post("/auth/refresh", json={"refresh_token": access_token})
        assert response.status_code == 401

    def test_refresh_token_cannot_access_api(self, client, register_and_login):
        session = register_and_login()
        headers = {"Authorization": f"Bearer {session['refresh_token']}"}
        response = client.get("/accounts", headers=headers)
        assert response.status_code == 401
        assert response.json()["error"] == "Cannot use refresh token for API access"

    def test_logout_revokes_all_sessions(self, client, register_and_login):
        first = register_and_login()
        second = client.post("/auth/login", json={
            "email": "alice@example.com", "password": "password123",
        }).json()

        response = client.post("/auth/logout", headers=first["headers"])
        assert response.status_code == 200
        assert response.json()["tokens_revoked"] == 2

        for refresh_token in (first["refresh_token"], second["refresh_token"]):
            response = client.post("/auth/refresh", json={"refresh_token": refresh_token})
            assert response.status_code == 401
            assert response.json()["error"] == "Refresh token has been revoked"

    def test_logout_requires_authentication(self, client):
        assert client.post("/auth/logout").status_code == 401

    def test_malformed_bearer_token(self, client):
        response = client.get("/accounts", headers={"Authorization": "Bearer garbage"})
        assert response.status_code == 401
        assert response.json()["error"] == "Invalid token"
