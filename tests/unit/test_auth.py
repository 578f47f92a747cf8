"""Test mock and remote authentication."""
import asyncio
import time
from datetime import timedelta
from unittest.mock import Mock

import jwt
import pytest

from case_manager import auth as auth_module
from case_manager import config
from case_manager.auth import (
    AuthService,
    MockAuthBackend,
    RemoteAuthBackend,
    hash_password,
    verify_password,
)
from case_manager.context import build_context, no_delay
from case_manager.errors import ApiError, AuthenticationError, RateLimitExceeded, ValidationError
from case_manager.http_client import ApiClient


class MovableClock:
    """Clock that tests can move forward."""

    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def auth(context):
    """AuthService over the demo user directory (cheap bcrypt cost)."""
    return AuthService(MockAuthBackend(context, rounds=4))


@pytest.fixture
def clock(fixed_clock):
    return MovableClock(fixed_clock())


@pytest.fixture
def timed_auth(clock):
    context = build_context(clock=clock, delay=no_delay)
    return AuthService(MockAuthBackend(context, rounds=4))


def test_password_hash_round_trip():
    password_hash = hash_password("s3cret-pass", rounds=4)

    assert password_hash != "s3cret-pass"
    assert verify_password("s3cret-pass", password_hash)
    assert not verify_password("wrong", password_hash)


def test_demo_users_are_stored_hashed(context):
    MockAuthBackend(context, rounds=4)

    users = context.store("user").all()

    assert [user["email"] for user in users] == ["demo@example.com", "test@example.com"]
    assert [user["id"] for user in users] == [1, 2]
    assert all(user["passwordHash"].startswith("$2") for user in users)


@pytest.mark.asyncio
async def test_login_returns_token_and_public_user(auth):
    result = await auth.login("Demo@Example.com", "password")

    assert result["success"] is True
    assert result["token"].count(".") == 2
    assert result["user"] == {
        "userId": 1, "email": "demo@example.com", "name": "Demo User", "role": "admin"
    }
    assert "passwordHash" not in result["user"]


@pytest.mark.asyncio
@pytest.mark.parametrize("email,password", [
    ("demo@example.com", "wrong-password"),
    ("ghost@example.com", "password"),
    ("", "password"),
    ("demo@example.com", ""),
])
async def test_login_rejects_bad_credentials(auth, email, password):
    with pytest.raises(AuthenticationError):
        await auth.login(email, password)


@pytest.mark.asyncio
async def test_register_creates_user_and_session(auth, context):
    result = await auth.register("New Person", "new@example.com", "longenough")

    assert result["user"]["userId"] == 3
    assert result["user"]["role"] == "user"
    assert len(context.store("user")) == 3

    login = await auth.login("new@example.com", "longenough")
    assert login["user"]["userId"] == 3


@pytest.mark.asyncio
@pytest.mark.parametrize("name,email,password,message", [
    ("", "a@example.com", "longenough", "required"),
    ("A", "not-an-email", "longenough", "not valid"),
    ("A", "a@example.com", "short", "at least"),
    ("A", "test@example.com", "longenough", "already exists"),
])
async def test_register_validation(auth, name, email, password, message):
    with pytest.raises(ValidationError, match=message):
        await auth.register(name, email, password)


@pytest.mark.asyncio
async def test_logout_revokes_token(auth):
    session = await auth.login("test@example.com", "test123")
    assert (await auth.verify_token(session["token"]))["userId"] == 2

    assert await auth.logout(session["token"]) == {"success": True}

    with pytest.raises(AuthenticationError):
        await auth.verify_token(session["token"])


@pytest.mark.asyncio
async def test_logout_without_token_succeeds(auth):
    assert await auth.logout() == {"success": True}


@pytest.mark.asyncio
async def test_forgot_password_does_not_reveal_accounts(auth):
    known = await auth.forgot_password("demo@example.com")
    unknown = await auth.forgot_password("nobody@example.com")

    assert known == unknown
    assert known["success"] is True


@pytest.mark.asyncio
async def test_forgot_password_rejects_malformed_email(auth):
    with pytest.raises(ValidationError):
        await auth.forgot_password("nope")


@pytest.mark.asyncio
async def test_token_is_signed_jwt_with_user_claims(auth):
    session = await auth.login("demo@example.com", "password")

    claims = jwt.decode(
        session["token"],
        config.JWT_SECRET,
        algorithms=[config.JWT_ALGORITHM],
        audience=config.JWT_AUDIENCE,
        options={"verify_exp": False, "verify_iat": False},
    )

    assert claims["userId"] == 1
    assert claims["role"] == "admin"
    assert claims["iss"] == config.JWT_ISSUER
    assert claims["exp"] - claims["iat"] == 24 * 3600
    assert "passwordHash" not in claims


@pytest.mark.asyncio
@pytest.mark.parametrize("token", ["", "not-a-token", "a.b.c"])
async def test_verify_rejects_unknown_token(auth, token):
    with pytest.raises(AuthenticationError, match="Invalid or expired token"):
        await auth.verify_token(token)


@pytest.mark.asyncio
async def test_verify_rejects_token_signed_with_another_secret(auth):
    forged = jwt.encode(
        {"userId": 1, "jti": "x", "iat": 0, "exp": 2**31,
         "iss": config.JWT_ISSUER, "aud": config.JWT_AUDIENCE},
        "some-other-secret-that-is-long-enough",
        algorithm="HS256",
    )

    with pytest.raises(AuthenticationError):
        await auth.verify_token(forged)


@pytest.mark.asyncio
async def test_verify_rejects_token_of_deleted_user(auth, context):
    session = await auth.login("test@example.com", "test123")
    users = context.store("user")

    users.remove(users.index_of(2))

    with pytest.raises(AuthenticationError):
        await auth.verify_token(session["token"])


class TestTokenLifetime:

    @pytest.mark.asyncio
    async def test_token_expires_after_ttl(self, timed_auth, clock):
        session = await timed_auth.login("demo@example.com", "password")

        clock.advance(hours=23, minutes=59)
        assert (await timed_auth.verify_token(session["token"]))["userId"] == 1

        clock.advance(minutes=1)
        with pytest.raises(AuthenticationError, match="expired"):
            await timed_auth.verify_token(session["token"])

    @pytest.mark.asyncio
    async def test_refresh_issues_new_token_and_revokes_old(self, timed_auth, clock):
        session = await timed_auth.login("demo@example.com", "password")
        clock.advance(hours=20)

        refreshed = await timed_auth.refresh_token(session["token"])

        assert refreshed["user"]["userId"] == 1
        with pytest.raises(AuthenticationError):
            await timed_auth.verify_token(session["token"])

        # A full lifetime from the refresh, not from the original login
        clock.advance(hours=23)
        assert (await timed_auth.verify_token(refreshed["token"]))["userId"] == 1

    @pytest.mark.asyncio
    async def test_expired_token_cannot_be_refreshed(self, timed_auth, clock):
        session = await timed_auth.login("demo@example.com", "password")
        clock.advance(hours=25)

        with pytest.raises(AuthenticationError):
            await timed_auth.refresh_token(session["token"])


class TestLoginThrottling:

    async def _fail(self, service, times, email="demo@example.com"):
        for _ in range(times):
            with pytest.raises(AuthenticationError, match="Invalid credentials"):
                await service.login(email, "wrong-password")

    @pytest.mark.asyncio
    async def test_locks_out_after_max_attempts(self, timed_auth):
        await self._fail(timed_auth, config.LOGIN_MAX_ATTEMPTS)

        with pytest.raises(RateLimitExceeded) as exc_info:
            await timed_auth.login("demo@example.com", "password")

        assert exc_info.value.retry_after == config.LOGIN_WINDOW_SECONDS

    @pytest.mark.asyncio
    async def test_lockout_is_per_email(self, timed_auth):
        await self._fail(timed_auth, config.LOGIN_MAX_ATTEMPTS)

        session = await timed_auth.login("test@example.com", "test123")

        assert session["user"]["userId"] == 2

    @pytest.mark.asyncio
    async def test_window_slides_open_again(self, timed_auth, clock):
        await self._fail(timed_auth, config.LOGIN_MAX_ATTEMPTS)

        clock.advance(seconds=config.LOGIN_WINDOW_SECONDS + 1)

        assert (await timed_auth.login("demo@example.com", "password"))["success"] is True

    @pytest.mark.asyncio
    async def test_successful_login_clears_failures(self, timed_auth):
        await self._fail(timed_auth, config.LOGIN_MAX_ATTEMPTS - 1)
        await timed_auth.login("demo@example.com", "password")

        await self._fail(timed_auth, config.LOGIN_MAX_ATTEMPTS)


class TestHashingOffTheEventLoop:
    """bcrypt runs in a worker thread, so other coroutines keep running."""

    @staticmethod
    async def _ticks_during(coro):
        ticks = 0

        async def ticker():
            nonlocal ticks
            while True:
                await asyncio.sleep(0.01)
                ticks += 1

        task = asyncio.create_task(ticker())
        try:
            result = await coro
        finally:
            task.cancel()
        return ticks, result

    @pytest.mark.asyncio
    async def test_login(self, auth, monkeypatch):
        def slow_verify(password, password_hash):
            time.sleep(0.2)
            return verify_password(password, password_hash)

        monkeypatch.setattr(auth_module, "verify_password", slow_verify)

        ticks, session = await self._ticks_during(auth.login("demo@example.com", "password"))

        assert session["success"] is True
        assert ticks >= 5

    @pytest.mark.asyncio
    async def test_register(self, auth, monkeypatch):
        def slow_hash(password, rounds=12):
            time.sleep(0.2)
            return hash_password(password, rounds)

        monkeypatch.setattr(auth_module, "hash_password", slow_hash)

        ticks, session = await self._ticks_during(
            auth.register("New Person", "new@example.com", "longenough")
        )

        assert session["user"]["userId"] == 3
        assert ticks >= 5

    @pytest.mark.asyncio
    async def test_concurrent_registrations_of_one_email(self, auth, context):
        results = await asyncio.gather(
            auth.register("First", "same@example.com", "longenough"),
            auth.register("Second", "same@example.com", "longenough"),
            return_exceptions=True,
        )

        assert sum(isinstance(result, ValidationError) for result in results) == 1
        assert len(context.store("user")) == 3


class TestRemoteAuth:

    @pytest.fixture
    def client(self):
        return Mock(spec=ApiClient)

    @pytest.fixture
    def remote(self, client):
        return AuthService(RemoteAuthBackend(client))

    @pytest.mark.asyncio
    async def test_login_posts_credentials(self, remote, client):
        client.request.return_value = {"token": "server-token"}

        result = await remote.login("demo@example.com", "password")

        client.request.assert_called_once_with(
            "/auth/login", "POST", {"email": "demo@example.com", "password": "password"}, None
        )
        assert result == {"token": "server-token"}

    @pytest.mark.asyncio
    async def test_logout_sends_bearer_token(self, remote, client):
        client.request.return_value = {"success": True}

        await remote.logout("abc")

        client.request.assert_called_once_with(
            "/auth/logout", "POST", None, {"Authorization": "Bearer abc"}
        )

    @pytest.mark.asyncio
    async def test_register_and_forgot_password_endpoints(self, remote, client):
        client.request.return_value = {"success": True}

        await remote.register("A", "a@example.com", "longenough")
        await remote.forgot_password("a@example.com")

        endpoints = [call.args[0] for call in client.request.call_args_list]
        assert endpoints == ["/auth/register", "/auth/forgot-password"]

    @pytest.mark.asyncio
    async def test_401_becomes_authentication_error(self, remote, client):
        client.request.side_effect = ApiError("Invalid credentials", 401)

        with pytest.raises(AuthenticationError, match="Invalid credentials"):
            await remote.login("demo@example.com", "bad")

    @pytest.mark.asyncio
    async def test_other_errors_propagate(self, remote, client):
        client.request.side_effect = ApiError("API Error: Bad Gateway", 502)

        with pytest.raises(ApiError):
            await remote.forgot_password("a@example.com")

    @pytest.mark.asyncio
    async def test_refresh_sends_bearer_token(self, remote, client):
        client.request.return_value = {"success": True, "token": "fresh"}

        result = await remote.refresh_token("old")

        client.request.assert_called_once_with(
            "/auth/refresh", "POST", None, {"Authorization": "Bearer old"}
        )
        assert result["token"] == "fresh"

    @pytest.mark.asyncio
    async def test_429_becomes_rate_limit_error(self, remote, client):
        client.request.side_effect = ApiError("Too many login attempts", 429, {"retryAfter": 60})

        with pytest.raises(RateLimitExceeded) as exc_info:
            await remote.login("demo@example.com", "bad")

        assert exc_info.value.retry_after == 60
