"""Tests for host accounts: hashing, tokens, registration, login and profile."""

from datetime import timedelta

import pytest
from fastapi import HTTPException

from staybill.models.user import User
from staybill.schemas.user import UserCreate
from staybill.services.auth import (
    authenticate_user,
    create_access_token,
    create_user,
    decode_token,
    get_password_hash,
    get_user_by_email,
    get_user_by_username,
    verify_password,
)


@pytest.fixture
def host(test_db):
    """A host account stored directly in the database."""
    user = User(
        username="marina",
        email="marina@example.com",
        hashed_password=get_password_hash("beachhouse1"),
    )
    test_db.add(user)
    test_db.commit()
    test_db.refresh(user)
    return user


# =============================================================================
# Unit Tests: Passwords and Tokens
# =============================================================================


class TestPasswordHashing:
    """Tests for bcrypt password hashing."""

    def test_hash_is_bcrypt(self):
        """Hashes use the bcrypt format."""
        assert get_password_hash("password123").startswith("$2")

    def test_hash_is_salted(self):
        """The same password hashes differently each time."""
        assert get_password_hash("password123") != get_password_hash("password123")

    @pytest.mark.parametrize(
        "attempt, expected", [("s3cret-pass", True), ("wrong", False), ("", False)]
    )
    def test_verify(self, attempt, expected):
        """Only the original password verifies."""
        hashed = get_password_hash("s3cret-pass")
        assert verify_password(attempt, hashed) is expected

    def test_verify_malformed_hash(self):
        """A corrupt stored hash never verifies."""
        assert verify_password("password123", "not-a-hash") is False


class TestJWTTokens:
    """Tests for access tokens."""

    def test_round_trip(self):
        """The subject survives encoding."""
        token = create_access_token({"sub": "marina"}, expires_delta=timedelta(minutes=5))
        assert decode_token(token).username == "marina"

    def test_expired_token(self):
        """Expired tokens are rejected."""
        token = create_access_token({"sub": "marina"}, expires_delta=timedelta(minutes=-1))
        with pytest.raises(HTTPException) as exc_info:
            decode_token(token)
        assert exc_info.value.status_code == 401

    def test_garbage_token(self):
        """Garbage is rejected with 401."""
        with pytest.raises(HTTPException) as exc_info:
            decode_token("invalid.token.here")
        assert exc_info.value.detail == "Could not validate credentials"

    def test_missing_subject(self):
        """Tokens without a subject are rejected."""
        with pytest.raises(HTTPException):
            decode_token(create_access_token({"other": "data"}))


# =============================================================================
# Unit Tests: User Database Operations
# =============================================================================


class TestUserDatabaseOperations:
    """Tests for account lookup and creation."""

    def test_lookups(self, test_db, host):
        """Users are found by username and by email."""
        assert get_user_by_username(test_db, "marina").id == host.id
        assert get_user_by_email(test_db, "marina@example.com").id == host.id
        assert get_user_by_username(test_db, "nobody") is None

    def test_authenticate(self, test_db, host):
        """Only matching credentials authenticate."""
        assert authenticate_user(test_db, "marina", "beachhouse1").id == host.id
        assert authenticate_user(test_db, "marina", "wrong") is None
        assert authenticate_user(test_db, "nobody", "beachhouse1") is None

    def test_inactive_user_cannot_authenticate(self, test_db, host):
        """Deactivated accounts cannot log in."""
        host.is_active = False
        test_db.commit()
        assert authenticate_user(test_db, "marina", "beachhouse1") is None

    def test_create_user(self, test_db):
        """New accounts are active and store only the hash."""
        user = create_user(
            test_db,
            UserCreate(
                username="joao",
                email="joao@example.com",
                password="password123",
                full_name="João Silva",
            ),
        )
        assert user.is_active is True
        assert user.full_name == "João Silva"
        assert user.hashed_password != "password123"

    @pytest.mark.parametrize(
        "username, email, detail",
        [
            ("marina", "other@example.com", "Username already registered"),
            ("other", "marina@example.com", "Email already registered"),
        ],
    )
    def test_create_user_duplicates(self, test_db, host, username, email, detail):
        """Usernames and emails are unique."""
        with pytest.raises(HTTPException) as exc_info:
            create_user(test_db, UserCreate(username=username, email=email, password="password123"))
        assert exc_info.value.status_code == 400
        assert exc_info.value.detail == detail


# =============================================================================
# Integration Tests: Register and Login Endpoints
# =============================================================================


class TestRegisterEndpoint:
    """Tests for POST /api/auth/register."""

    def test_register_success(self, client):
        """Registration returns the account without secrets."""
        response = client.post(
            "/api/auth/register",
            json={"username": "newhost", "email": "newhost@example.com", "password": "password123"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["username"] == "newhost"
        assert data["payment_key"] is None
        assert "password" not in data
        assert "hashed_password" not in data

    def test_register_duplicate(self, client, host):
        """Duplicate usernames are a 400."""
        response = client.post(
            "/api/auth/register",
            json={"username": "marina", "email": "x@example.com", "password": "password123"},
        )
        assert response.status_code == 400

    @pytest.mark.parametrize(
        "payload",
        [
            {"username": "newhost", "email": "not-an-email", "password": "password123"},
            {"username": "newhost", "email": "newhost@example.com", "password": "short"},
            {"username": "nh", "email": "newhost@example.com", "password": "password123"},
            {"email": "newhost@example.com", "password": "password123"},
            {"username": "newhost", "email": "newhost@example.com", "password": "é" * 40},
        ],
    )
    def test_register_validation(self, client, payload):
        """Malformed registrations are a 422."""
        assert client.post("/api/auth/register", json=payload).status_code == 422


class TestLoginEndpoint:
    """Tests for POST /api/auth/login."""

    def test_login_success(self, client, host):
        """A valid login returns a decodable bearer token."""
        response = client.post(
            "/api/auth/login", json={"username": "marina", "password": "beachhouse1"}
        )
        assert response.status_code == 200
        data = response.json()
        assert data["token_type"] == "bearer"
        assert decode_token(data["access_token"]).username == "marina"

    def test_login_wrong_password(self, client, host):
        """Bad credentials are a 401."""
        response = client.post("/api/auth/login", json={"username": "marina", "password": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Incorrect username or password"


# =============================================================================
# Integration Tests: Profile
# =============================================================================


class TestProfileEndpoint:
    """Tests for /api/users/me."""

    def test_requires_token(self, client):
        """Anonymous requests are rejected."""
        assert client.get("/api/users/me").status_code == 401

    def test_unknown_user_token(self, client):
        """A valid token for a deleted account is rejected."""
        headers = {"Authorization": f"Bearer {create_access_token({'sub': 'ghost'})}"}
        assert client.get("/api/users/me", headers=headers).status_code == 401

    def test_read_profile(self, client, auth_headers):
        """The profile of the logged-in host is returned."""
        response = client.get("/api/users/me", headers=auth_headers)
        assert response.status_code == 200
        assert response.json()["username"] == "host"

    def test_update_payment_key(self, client, auth_headers):
        """The default payment key can be set and cleared."""
        response = client.patch(
            "/api/users/me",
            json={"payment_key": " host@pix.example ", "phone_number": "11 98888-7777"},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["payment_key"] == "host@pix.example"
        assert response.json()["phone_number"] == "11 98888-7777"

        response = client.patch("/api/users/me", json={"payment_key": ""}, headers=auth_headers)
        assert response.json()["payment_key"] is None
        assert response.json()["phone_number"] == "11 98888-7777"
