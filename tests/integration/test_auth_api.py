"""Integration tests for authentication and account endpoints via TestClient."""

import jwt
from protean import current_domain

from storefront import config
from storefront.api.security import issue_token
from storefront.identity.user import User


class TestRegisterAndLogin:
    def test_register_returns_token(self, client):
        response = client.post(
            "/auth/register",
            json={"email": "New@Example.com", "password": "Secret123!", "first_name": "New", "last_name": "User"},
        )
        assert response.status_code == 201
        data = response.json()
        assert data["token_type"] == "bearer"
        assert data["email"] == "new@example.com"
        assert data["roles"] == ["Customer"]

        claims = jwt.decode(data["access_token"], config.JWT_SECRET, algorithms=[config.JWT_ALGORITHM])
        assert claims["sub"] == data["user_id"]
        assert claims["roles"] == ["Customer"]

    def test_register_duplicate_email(self, client, customer):
        response = client.post(
            "/auth/register",
            json={"email": "jane@example.com", "password": "Secret123!", "first_name": "J", "last_name": "D"},
        )
        assert response.status_code == 400
        assert "User.DuplicateEmail" in response.json()["error"]

    def test_register_missing_field(self, client):
        response = client.post("/auth/register", json={"email": "x@example.com"})
        assert response.status_code == 422

    def test_login(self, client, customer):
        response = client.post("/auth/login", json={"email": "jane@example.com", "password": "Secret123!"})
        assert response.status_code == 200
        assert response.json()["user_id"] == str(customer.id)

    def test_login_wrong_password(self, client, customer):
        response = client.post("/auth/login", json={"email": "jane@example.com", "password": "nope-nope"})
        assert response.status_code == 400
        assert response.json()["error"] == {"Auth.InvalidCredentials": ["Invalid email or password."]}


class TestPasswordRecoveryEndpoints:
    def test_forgot_password_same_answer_for_unknown_email(self, client, customer, mailer):
        known = client.post("/auth/forgot-password", json={"email": "jane@example.com"})
        unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()
        assert len(mailer.messages_to("jane@example.com")) == 1
        assert mailer.messages_to("nobody@example.com") == []

    def test_forgot_password_same_answer_when_mail_is_down(self, client, customer, mailer):
        mailer.configure(should_succeed=False)

        known = client.post("/auth/forgot-password", json={"email": "jane@example.com"})
        unknown = client.post("/auth/forgot-password", json={"email": "nobody@example.com"})

        assert known.status_code == unknown.status_code == 200
        assert known.json() == unknown.json()

    def test_reset_password_with_bad_token(self, client, customer):
        response = client.post(
            "/auth/reset-password",
            json={"email": "jane@example.com", "token": "forged", "new_password": "NewSecret456!"},
        )
        assert response.status_code == 400
        assert "Auth.InvalidToken" in response.json()["error"]


class TestBearerTokens:
    def test_missing_token(self, client):
        response = client.get("/users/me")
        assert response.status_code == 401

    def test_garbage_token(self, client):
        response = client.get("/users/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_expired_token(self, client, customer):
        token = issue_token(customer, expires_minutes=-5)
        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token expired"

    def test_token_signed_with_other_secret(self, client, customer):
        token = jwt.encode({"sub": str(customer.id)}, "some-other-secret", algorithm="HS256")
        response = client.get("/users/me", headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401

    def test_token_for_deleted_user(self, client, customer, customer_headers):
        repo = current_domain.repository_for(User)
        repo._dao.delete(repo.get(customer.id))

        response = client.get("/users/me", headers=customer_headers)
        assert response.status_code == 401


class TestProfileEndpoints:
    def test_get_profile(self, client, customer_headers):
        response = client.get("/users/me", headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["email"] == "jane@example.com"

    def test_update_profile(self, client, customer_headers):
        response = client.put("/users/me", json={"first_name": "Janet", "last_name": "Smith"}, headers=customer_headers)
        assert response.status_code == 200
        assert response.json()["first_name"] == "Janet"

    def test_change_password(self, client, customer_headers):
        response = client.put(
            "/users/me/password",
            json={"current_password": "Secret123!", "new_password": "NewSecret456!"},
            headers=customer_headers,
        )
        assert response.status_code == 200

        login = client.post("/auth/login", json={"email": "jane@example.com", "password": "NewSecret456!"})
        assert login.status_code == 200


class TestUserAdministration:
    def test_admin_creates_user(self, client, admin_headers):
        response = client.post(
            "/users",
            json={
                "email": "ops@example.com",
                "password": "Secret123!",
                "first_name": "Olive",
                "last_name": "Ops",
                "roles": ["Admin", "Customer"],
            },
            headers=admin_headers,
        )
        assert response.status_code == 201
        user = current_domain.repository_for(User).get(response.json()["user_id"])
        assert user.is_admin

    def test_customer_cannot_create_users(self, client, customer_headers):
        response = client.post(
            "/users",
            json={"email": "ops@example.com", "password": "Secret123!", "first_name": "O", "last_name": "O"},
            headers=customer_headers,
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Admin only"
