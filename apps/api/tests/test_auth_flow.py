import threading

import pytest
from datetime import timedelta
from sqlalchemy import select

from config import settings
from database import utcnow
from main import app
from models.password_reset import PasswordReset
from models.user import User
from services import passwords
from services.passwords import hash_password
from services.session_token import create_session_token, decode_session_token


SYNC_SECRET = "frontend-sync-secret-0123456789"


def _bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


async def _register(client, email="ada@example.com", password="secret123", name="Ada"):
    return await client.post("/auth/register", json={"name": name, "email": email, "password": password})


@pytest.mark.asyncio
async def test_register_returns_session_usable_for_me(portal_client):
    client, _ = portal_client
    response = await _register(client, email="Ada@Example.com")
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["user"]["email"] == "ada@example.com"
    assert data["user"]["role"] == "user"

    me = await client.get("/auth/me", headers=_bearer(data["session_token"]))
    assert me.status_code == 200
    assert me.json()["data"]["name"] == "Ada"


@pytest.mark.asyncio
async def test_register_rejects_duplicates_and_short_passwords(portal_client):
    client, _ = portal_client
    assert (await _register(client)).status_code == 201

    duplicate = await _register(client)
    assert duplicate.status_code == 409
    assert duplicate.json() == {"success": False, "error": "User with this email already exists"}

    short = await _register(client, email="bob@example.com", password="123")
    assert short.status_code == 400

    missing = await client.post("/auth/register", json={"email": "carl@example.com"})
    assert missing.status_code == 400
    assert missing.json()["success"] is False


@pytest.mark.asyncio
async def test_register_grants_admin_role_to_configured_emails(portal_client, monkeypatch):
    client, _ = portal_client
    monkeypatch.setattr(settings, "ADMIN_EMAILS", ["Instructor@Example.com"])
    response = await _register(client, email="instructor@example.com")
    data = response.json()["data"]
    assert data["user"]["role"] == "admin"
    assert decode_session_token(data["session_token"])["role"] == "admin"


@pytest.mark.asyncio
async def test_login_checks_password(portal_client):
    client, _ = portal_client
    await _register(client)

    ok = await client.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert ok.status_code == 200
    assert ok.json()["data"]["session_token"]

    bad = await client.post("/auth/login", json={"email": "ada@example.com", "password": "wrong-pass"})
    assert bad.status_code == 401
    assert bad.json()["error"] == "Invalid email or password"


@pytest.mark.asyncio
async def test_me_requires_bearer_token(portal_client):
    client, _ = portal_client
    response = await client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["success"] is False

    forged = await client.get("/auth/me", headers=_bearer("not-a-jwt"))
    assert forged.status_code == 401


@pytest.mark.asyncio
async def test_oauth_sync_requires_configured_secret(portal_client, monkeypatch):
    client, _ = portal_client
    payload = {"provider": "github", "provider_id": "gh-42", "email": "octo@example.com", "name": "Octo"}

    monkeypatch.setattr(settings, "AUTH_SYNC_SECRET", "")
    disabled = await client.post("/auth/sync/oauth", json=payload)
    assert disabled.status_code == 503

    monkeypatch.setattr(settings, "AUTH_SYNC_SECRET", SYNC_SECRET)
    wrong = await client.post("/auth/sync/oauth", json=payload, headers={"X-Auth-Sync-Secret": "nope"})
    assert wrong.status_code == 401

    first = await client.post("/auth/sync/oauth", json=payload, headers={"X-Auth-Sync-Secret": SYNC_SECRET})
    assert first.status_code == 200
    user = first.json()["data"]["user"]
    assert user["provider"] == "github"

    payload["name"] = "Octo Cat"
    second = await client.post("/auth/sync/oauth", json=payload, headers={"X-Auth-Sync-Secret": SYNC_SECRET})
    assert second.json()["data"]["user"]["id"] == user["id"]
    assert second.json()["data"]["user"]["name"] == "Octo Cat"


@pytest.mark.asyncio
async def test_forgot_password_does_not_reveal_unknown_emails(portal_client):
    client, session_maker = portal_client
    response = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
    assert response.status_code == 200
    assert response.json()["success"] is True

    async with session_maker() as session:
        result = await session.execute(select(PasswordReset))
        assert result.scalars().all() == []


@pytest.mark.asyncio
async def test_forgot_password_rejects_oauth_accounts(portal_client):
    client, session_maker = portal_client
    async with session_maker() as session:
        session.add(User(id="oauth-user", email="g@example.com", name="G", provider="google", provider_id="g-1"))
        await session.commit()

    response = await client.post("/auth/forgot-password", json={"email": "g@example.com"})
    assert response.status_code == 400
    assert "google" in response.json()["error"]


@pytest.mark.asyncio
async def test_password_reset_round_trip(portal_client):
    client, session_maker = portal_client
    await _register(client)

    first = await client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    assert first.status_code == 200
    again = await client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    assert again.status_code == 429

    async with session_maker() as session:
        reset = (await session.execute(select(PasswordReset))).scalar_one()
        token = reset.token

    short = await client.post("/auth/reset-password", json={"token": token, "password": "abc"})
    assert short.status_code == 400

    done = await client.post("/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert done.status_code == 200

    reused = await client.post("/auth/reset-password", json={"token": token, "password": "another-pass"})
    assert reused.status_code == 400
    assert reused.json()["error"] == "Invalid or expired reset token"

    old_login = await client.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert old_login.status_code == 401
    new_login = await client.post("/auth/login", json={"email": "ada@example.com", "password": "brand-new-pass"})
    assert new_login.status_code == 200


@pytest.mark.asyncio
async def test_expired_reset_token_is_rejected(portal_client):
    client, session_maker = portal_client
    async with session_maker() as session:
        session.add(User(id="u-exp", email="exp@example.com", name="Exp", password_hash=hash_password("secret123")))
        session.add(
            PasswordReset(
                email="exp@example.com",
                token="expired-token",
                user_id="u-exp",
                expires_at=utcnow() - timedelta(minutes=1),
            )
        )
        await session.commit()

    response = await client.post("/auth/reset-password", json={"token": "expired-token", "password": "secret456"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_logout_acknowledges_session(portal_client):
    client, _ = portal_client
    token = create_session_token("someone", "someone@example.com")["token"]
    response = await client.post("/auth/logout", headers=_bearer(token))
    assert response.status_code == 200
    assert response.json()["data"]["logged_out"] is True


@pytest.mark.asyncio
async def test_forgot_password_is_rate_limited_without_redis(portal_client, monkeypatch):
    client, _ = portal_client

    async def redis_down(*args, **kwargs):
        raise ConnectionError("redis unavailable")

    monkeypatch.setattr("routers.rate_limit._consume_redis_quota", redis_down)
    monkeypatch.setattr(app.state, "disable_rate_limits", False)

    for _ in range(5):
        ok = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
        assert ok.status_code == 200

    limited = await client.post("/auth/forgot-password", json={"email": "ghost@example.com"})
    assert limited.status_code == 429
    assert limited.headers["Retry-After"]
    assert limited.json() == {"success": False, "error": "Too many requests. Try again later."}


@pytest.mark.asyncio
async def test_password_hashing_runs_off_the_event_loop(portal_client, monkeypatch):
    client, session_maker = portal_client
    loop_thread = threading.get_ident()
    seen = []

    def recording(name, func):
        def wrapper(*args):
            seen.append((name, threading.get_ident()))
            return func(*args)
        return wrapper

    monkeypatch.setattr("services.accounts.hash_password", recording("register", passwords.hash_password))
    monkeypatch.setattr("services.accounts.verify_password", recording("login", passwords.verify_password))
    monkeypatch.setattr("services.password_reset.hash_password", recording("reset", passwords.hash_password))

    assert (await _register(client)).status_code == 201
    login = await client.post("/auth/login", json={"email": "ada@example.com", "password": "secret123"})
    assert login.status_code == 200

    await client.post("/auth/forgot-password", json={"email": "ada@example.com"})
    async with session_maker() as session:
        token = (await session.execute(select(PasswordReset))).scalar_one().token
    done = await client.post("/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert done.status_code == 200

    assert [name for name, _ in seen] == ["register", "login", "reset"]
    assert all(thread_id != loop_thread for _, thread_id in seen)
