"""Tests for registration, login and token handling."""

from datetime import timedelta

from jose import jwt

from conftest import PASSWORD, auth_header, make_user
from storefront.config import settings
from storefront.models.user import User
from storefront.utils.hash import hash_password, verify_password
from storefront.utils.token import create_access_token, decode_access_token

REGISTRATION = {
    "username": "newshopper",
    "email": "newshopper@shophub.com",
    "password": "hunter22",
    "firstName": "New",
    "lastName": "Shopper",
}


class TestRegister:
    def test_register(self, client):
        response = client.post("/auth/register", json=REGISTRATION)

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["user"]["email"] == "newshopper@shophub.com"
        assert data["user"]["role"] == "user"
        assert "password" not in data["user"]
        claims = decode_access_token(data["token"])
        assert claims["sub"] == str(data["user"]["id"])
        assert claims["role"] == "user"

    def test_duplicate_email(self, client, user):
        response = client.post("/auth/register", json={**REGISTRATION, "email": user.email})
        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_invalid_email(self, client):
        response = client.post("/auth/register", json={**REGISTRATION, "email": "nope"})
        assert response.status_code == 400


class TestLogin:
    def test_login(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})
        assert response.status_code == 200
        token = response.json()["data"]["token"]

        me = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert me.json()["data"]["username"] == "regularuser"

    def test_wrong_password(self, client, user):
        response = client.post("/auth/login", json={"email": user.email, "password": "wrong"})
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Invalid email or password"}

    def test_unknown_email(self, client):
        response = client.post("/auth/login", json={"email": "ghost@shophub.com", "password": PASSWORD})
        assert response.status_code == 401

    def test_disabled_account(self, client, session):
        disabled = make_user(session, "disabled", is_active=False)
        response = client.post("/auth/login", json={"email": disabled.email, "password": PASSWORD})
        assert response.status_code == 403


class TestTokens:
    def test_disabled_user_token_refused(self, client, session):
        disabled = make_user(session, "disabled", is_active=False)
        response = client.get("/auth/me", headers=auth_header(disabled))
        assert response.status_code == 403

    def test_expired_token(self, client, user):
        token = create_access_token(user, expires_delta=timedelta(minutes=-1))
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client):
        response = client.get("/auth/me", headers=auth_header(User(id=4242, role="user")))
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, account no longer exists"

    def test_missing_token(self, client):
        response = client.get("/auth/me")
        assert response.status_code == 401
        assert response.json() == {"success": False, "message": "Not authorized, no token"}

    def test_garbage_token(self, client):
        response = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, token failed"

    def test_token_without_numeric_subject(self, client):
        token = jwt.encode({"sub": "admin"}, settings.secret_key, algorithm=settings.algorithm)
        response = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["message"] == "Not authorized, token failed"

    def test_role_is_read_from_database(self, client, user):
        forged = auth_header(User(id=user.id, role="admin"))
        response = client.get("/orders/admin/all", headers=forged)
        assert response.status_code == 403


class TestPasswordHashing:
    def test_round_trip(self):
        hashed = hash_password("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("other", hashed)

    def test_non_bcrypt_value(self):
        assert verify_password("x", "plaintext") is False
