"""Invite-code login, owner signup and token resolution."""

import uuid
from datetime import datetime, timezone

from jose import jwt

from octoops.api.v1.auth import create_access_token
from octoops.models.user import member_avatar
from octoops.services.users import role_from_invite_code


def test_role_from_invite_code():
    assert role_from_invite_code("TEAM-QA-2024") == "qa"
    assert role_from_invite_code("squad-qa-west") == "qa"
    assert role_from_invite_code("DEV-123") == "member"
    assert role_from_invite_code("") == "member"
    assert role_from_invite_code(None) == "member"


async def test_login_with_qa_code_creates_qa_account(client):
    response = await client.post("/api/auth/login", json={"inviteCode": "octo-QA-7"})

    assert response.status_code == 200
    body = response.json()
    assert body["user"]["role"] == "qa"
    assert body["user"]["email"] == "qa@octoops.dev"
    assert body["user"]["name"] == "QA Specialist"
    assert body["user"]["avatar"] == "👩‍🎨"
    assert body["tokenType"] == "bearer"
    assert body["accessToken"]
    assert body["expiresIn"] == 24 * 60 * 60


async def test_login_without_code_is_member(client):
    response = await client.post("/api/auth/login", json={})

    assert response.status_code == 200
    user = response.json()["user"]
    assert user["role"] == "member"
    assert user["email"] == "member@octoops.dev"
    assert user["name"] == "Team Developer"


async def test_repeated_login_returns_same_account(client):
    first = await client.post("/api/auth/login", json={"inviteCode": "qa-1"})
    second = await client.post("/api/auth/login", json={"inviteCode": "QA-2"})

    assert first.json()["user"]["id"] == second.json()["user"]["id"]


async def test_token_resolves_to_logged_in_user(client):
    login = await client.post("/api/auth/login", json={"inviteCode": "qa"})
    token = login.json()["accessToken"]

    response = await client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["id"] == login.json()["user"]["id"]


async def test_me_requires_token(client):
    response = await client.get("/api/auth/me")

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


async def test_me_rejects_garbage_token(client):
    response = await client.get("/api/auth/me", headers={"Authorization": "Bearer nope"})

    assert response.status_code == 401
    assert response.json() == {"error": "Not authenticated"}


async def test_signup_creates_owner(client):
    response = await client.post(
        "/api/auth/signup",
        json={"name": "Ada", "email": "ada@acme.com", "projectName": "Engine"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["role"] == "owner"
    assert body["user"]["avatar"] == "👩‍💼"
    assert body["user"]["status"] == "active"
    assert body["projectName"] == "Engine"


async def test_signup_rejects_existing_email(client, owner):
    response = await client.post(
        "/api/auth/signup",
        json={"name": "Someone Else", "email": owner["email"]},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "User already exists"}


async def test_signup_validates_email(client):
    response = await client.post("/api/auth/signup", json={"name": "Ada", "email": "nope"})

    assert response.status_code == 400
    assert response.json()["error"].startswith("email:")


def test_member_avatar():
    assert member_avatar("qa") == "👩‍🎨"
    assert member_avatar("member") == "👨‍💻"
    assert member_avatar("owner") == "👨‍💻"


def test_access_token_claims(settings):
    user_id = uuid.uuid4()

    token, expires_in = create_access_token(user_id)

    claims = jwt.decode(
        token,
        settings.jwt_secret_key.get_secret_value(),
        algorithms=[settings.jwt_algorithm],
    )
    assert claims["sub"] == str(user_id)
    assert claims["type"] == "access"
    assert expires_in == settings.jwt_access_token_expire_minutes * 60
    remaining = claims["exp"] - datetime.now(timezone.utc).timestamp()
    assert expires_in - 60 <= remaining <= expires_in
