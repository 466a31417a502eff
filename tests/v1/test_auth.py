# mypy: ignore-errors
# tests/v1/test_auth.py
"""Tests for registration, login and the current-user endpoint."""

import pytest
from fastapi import status

from tests.factories import TEST_PASSWORD

REGISTER_URL = "/api/v1/auth/register"
LOGIN_URL = "/api/v1/auth/login"
ME_URL = "/api/v1/auth/me"


def _register_payload(**overrides):
    payload = {
        "email": "Carol@Example.com",
        "username": "Carol_1",
        "displayName": "Carol",
        "password": "hunter22",
    }
    payload.update(overrides)
    return payload


def test_register_success(client) -> None:
    """Registration returns a token and the normalized public profile."""
    response = client.post(REGISTER_URL, json=_register_payload())

    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["token"]
    user = data["user"]
    assert user["email"] == "carol@example.com"
    assert user["username"] == "carol_1"
    assert user["displayName"] == "Carol"
    assert "password" not in user
    assert "passwordHash" not in user


def test_register_token_authenticates(client) -> None:
    token = client.post(REGISTER_URL, json=_register_payload()).json()["token"]

    response = client.get(ME_URL, headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == status.HTTP_200_OK
    assert response.json()["user"]["username"] == "carol_1"


def test_register_duplicate_email(client, test_user) -> None:
    response = client.post(REGISTER_URL, json=_register_payload(email=test_user.email.upper()))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Email is already registered"}


def test_register_duplicate_username_is_case_insensitive(client, test_user) -> None:
    response = client.post(REGISTER_URL, json=_register_payload(username="ALICE"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"error": "Username is already taken"}


def test_register_short_password(client) -> None:
    response = client.post(REGISTER_URL, json=_register_payload(password="123"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "password" in response.json()["error"]


def test_register_missing_field(client) -> None:
    payload = _register_payload()
    del payload["displayName"]

    response = client.post(REGISTER_URL, json=payload)

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert set(response.json()) == {"error"}


def test_register_invalid_username(client) -> None:
    response = client.post(REGISTER_URL, json=_register_payload(username="1abc"))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "Username must start with a letter" in response.json()["error"]


def test_login_with_username(client, test_user) -> None:
    response = client.post(
        LOGIN_URL,
        json={"emailOrUsername": "Alice", "password": TEST_PASSWORD},
    )

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["token"]
    assert data["user"]["id"] == test_user.id


def test_login_with_email(client, test_user) -> None:
    response = client.post(
        LOGIN_URL,
        json={"emailOrUsername": test_user.email, "password": TEST_PASSWORD},
    )

    assert response.status_code == status.HTTP_200_OK


def test_login_wrong_password(client, test_user) -> None:
    response = client.post(
        LOGIN_URL,
        json={"emailOrUsername": "alice", "password": "wrong-password"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid email/username or password"}


def test_login_unknown_user_gives_same_error(client) -> None:
    response = client.post(
        LOGIN_URL,
        json={"emailOrUsername": "nobody", "password": "whatever"},
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Invalid email/username or password"}


def test_me_requires_token(client) -> None:
    response = client.get(ME_URL)

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Please log in"}


def test_me_with_invalid_token(client) -> None:
    response = client.get(ME_URL, headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert response.json() == {"error": "Please log in"}


def test_me_returns_profile(client, test_user, auth_token) -> None:
    response = client.get(ME_URL, headers=auth_token)

    assert response.status_code == status.HTTP_200_OK
    user = response.json()["user"]
    assert user["id"] == test_user.id
    assert user["email"] == test_user.email
    assert user["bio"] == ""


@pytest.mark.parametrize(
    "email",
    ["a@b..com", "a@-bad-.com", "a..b@example.com", ".a@example.com"],
)
def test_register_malformed_email(client, email) -> None:
    response = client.post(REGISTER_URL, json=_register_payload(email=email))

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"].startswith("email:")
