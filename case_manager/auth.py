"""Authentication: login, registration, logout, token refresh and password reset.

Mock mode keeps a small user directory in the context (bcrypt-hashed
passwords, expiring JWT sessions, throttled logins). Live mode forwards to
/auth/* endpoints.
"""
import asyncio
import re
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Iterable, Optional, Set, Tuple

import bcrypt
import jwt

from case_manager import config
from case_manager.context import AppContext
from case_manager.entities import iso_timestamp
from case_manager.errors import ApiError, AuthenticationError, RateLimitExceeded, ValidationError
from case_manager.http_client import ApiClient
from case_manager.logging_config import get_logger
from case_manager.models import User
from case_manager.rate_limiter import AttemptLimiter
from case_manager.seed_data import DEMO_USERS

logger = get_logger(__name__)

EMAIL_PATTERN = re.compile(
    r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
)

USER_ENTITY = "user"


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash password using bcrypt."""
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, password_hash: str) -> bool:
    """Verify password against hash."""
    return bcrypt.checkpw(password.encode(), password_hash.encode())


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def validate_registration(name: str, email: str, password: str) -> None:
    """
    Check registration input.

    Raises:
        ValidationError: On a missing field, bad email or short password
    """
    if not (name or "").strip() or not email or not password:
        raise ValidationError("All fields are required")
    if not EMAIL_PATTERN.match(email):
        raise ValidationError(f"Email '{email}' is not valid")
    if len(password) < config.MIN_PASSWORD_LENGTH:
        raise ValidationError(
            f"Password must be at least {config.MIN_PASSWORD_LENGTH} characters"
        )


def public_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """The user fields safe to hand to callers (no password hash)."""
    return {
        "userId": user["id"],
        "email": user["email"],
        "name": user["name"],
        "role": user.get("role", "user"),
    }


def issue_token(user: Dict[str, Any], now: datetime, ttl_hours: Optional[float] = None) -> str:
    """Signed JWT carrying the public user fields, valid for ``ttl_hours``."""
    ttl = ttl_hours if ttl_hours is not None else config.TOKEN_TTL_HOURS
    issued_at = int(now.timestamp())
    payload = {
        **public_user(user),
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + int(ttl * 3600),
        "iss": config.JWT_ISSUER,
        "aud": config.JWT_AUDIENCE,
    }
    return jwt.encode(payload, config.JWT_SECRET, algorithm=config.JWT_ALGORITHM)


def decode_token(token: str, now: datetime) -> Dict[str, Any]:
    """
    Verify signature, issuer and audience, then expiry against ``now``.

    Raises:
        AuthenticationError: If the token is malformed, forged or expired
    """
    try:
        claims = jwt.decode(
            token,
            config.JWT_SECRET,
            algorithms=[config.JWT_ALGORITHM],
            audience=config.JWT_AUDIENCE,
            issuer=config.JWT_ISSUER,
            # Expiry is checked against the injected clock below, not wall time
            options={"verify_exp": False, "verify_iat": False, "require": ["exp", "iat", "jti"]},
        )
    except jwt.PyJWTError as e:
        raise AuthenticationError("Invalid or expired token") from e
    if claims["exp"] <= now.timestamp():
        raise AuthenticationError("Invalid or expired token")
    return claims


class AuthBackend(ABC):
    """Async auth contract shared by the mock and remote implementations."""

    @abstractmethod
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def logout(self, token: Optional[str] = None) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def forgot_password(self, email: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def verify_token(self, token: str) -> Dict[str, Any]:
        ...

    @abstractmethod
    async def refresh_token(self, token: str) -> Dict[str, Any]:
        ...


class MockAuthBackend(AuthBackend):
    """
    In-memory user directory.

    Users live in the context's "user" store and get ids from the shared
    allocator. Sessions are JWTs that expire after config.TOKEN_TTL_HOURS of
    context-clock time; logout and refresh revoke a token by its ``jti``.
    Failed logins are throttled per email.
    """

    def __init__(
        self,
        context: AppContext,
        rounds: Optional[int] = None,
        demo_users: Optional[Iterable[Tuple[str, str, str, str]]] = DEMO_USERS,
    ):
        """
        Initialize mock auth backend.

        Args:
            context: Application context holding the user store and clock
            rounds: bcrypt cost factor (default: config.BCRYPT_ROUNDS)
            demo_users: (name, email, password, role) tuples added when the
                        user store is empty; None to start empty
        """
        self.context = context
        self.rounds = rounds if rounds is not None else config.BCRYPT_ROUNDS
        self.users = context.store(USER_ENTITY)
        self.revoked: Set[str] = set()
        self.limiter = AttemptLimiter(
            config.LOGIN_MAX_ATTEMPTS,
            config.LOGIN_WINDOW_SECONDS,
            clock=lambda: context.clock().timestamp(),
        )

        if len(self.users) == 0:
            for name, email, password, role in demo_users or ():
                self._add_user(name, email, hash_password(password, self.rounds), role)

    def _find_by_email(self, email: str) -> Optional[Dict[str, Any]]:
        wanted = normalize_email(email)
        for user in self.users.all():
            if user["email"] == wanted:
                return user
        return None

    def _add_user(self, name: str, email: str, password_hash: str, role: str = "user") -> Dict[str, Any]:
        allocator = self.context.allocator
        existing = None if allocator.is_seeded(USER_ENTITY) else self.users.all()
        user = User(
            id=allocator.allocate(USER_ENTITY, existing=existing),
            name=name.strip(),
            email=normalize_email(email),
            role=role,
            passwordHash=password_hash,
            createdAt=iso_timestamp(self.context.clock()),
        )
        return self.users.append(user.to_record())

    def _open_session(self, user: Dict[str, Any]) -> Dict[str, Any]:
        token = issue_token(user, self.context.clock())
        return {"success": True, "token": token, "user": public_user(user)}

    def _claims(self, token: str) -> Dict[str, Any]:
        claims = decode_token(token, self.context.clock())
        if claims["jti"] in self.revoked:
            raise AuthenticationError("Invalid or expired token")
        return claims

    def _session_user(self, token: str) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        claims = self._claims(token)
        user = self.users.get(claims.get("userId"))
        if user is None:
            raise AuthenticationError("Invalid or expired token")
        return claims, user

    async def login(self, email, password):
        await self.context.delay()
        key = normalize_email(email)
        if not key or not password:
            raise AuthenticationError("Email and password are required")

        try:
            self.limiter.check(key)
        except RateLimitExceeded:
            logger.warning("login_throttled", email=key)
            raise

        user = self._find_by_email(key)
        # bcrypt is CPU-bound; keep it off the event loop
        valid = user is not None and await asyncio.to_thread(
            verify_password, password, user["passwordHash"]
        )
        if not valid:
            logger.warning("login_failed", email=key, remaining=self.limiter.remaining(key))
            raise AuthenticationError("Invalid credentials")

        self.limiter.reset(key)
        logger.info("login_succeeded", user_id=user["id"])
        return self._open_session(user)

    async def register(self, name, email, password):
        await self.context.delay()
        validate_registration(name, normalize_email(email), password)
        if self._find_by_email(email) is not None:
            raise ValidationError("User already exists")

        password_hash = await asyncio.to_thread(hash_password, password, self.rounds)
        # Another registration may have claimed the email while hashing
        if self._find_by_email(email) is not None:
            raise ValidationError("User already exists")

        user = self._add_user(name, email, password_hash)
        logger.info("user_registered", user_id=user["id"])
        return self._open_session(user)

    async def logout(self, token=None):
        await self.context.delay()
        if token:
            try:
                claims = decode_token(token, self.context.clock())
            except AuthenticationError:
                logger.info("logout_with_invalid_token")
            else:
                self.revoked.add(claims["jti"])
        return {"success": True}

    async def forgot_password(self, email):
        await self.context.delay()
        if not EMAIL_PATTERN.match(normalize_email(email)):
            raise ValidationError(f"Email '{email}' is not valid")
        # Same answer whether or not the account exists
        return {
            "success": True,
            "message": "If an account exists for this email, a reset link has been sent",
        }

    async def verify_token(self, token):
        _, user = self._session_user(token)
        return public_user(user)

    async def refresh_token(self, token):
        await self.context.delay()
        claims, user = self._session_user(token)
        self.revoked.add(claims["jti"])
        logger.info("token_refreshed", user_id=user["id"])
        return self._open_session(user)


class RemoteAuthBackend(AuthBackend):
    """Forwards to the server's /auth endpoints; 401 and 429 map to auth errors."""

    def __init__(self, client: ApiClient):
        self.client = client

    async def _call(
        self,
        endpoint: str,
        method: str = "POST",
        body: Optional[Dict[str, Any]] = None,
        token: Optional[str] = None,
    ) -> Any:
        headers = {"Authorization": f"Bearer {token}"} if token else None
        try:
            return await asyncio.to_thread(self.client.request, endpoint, method, body, headers)
        except ApiError as e:
            if e.status_code == 401:
                raise AuthenticationError(str(e)) from e
            if e.status_code == 429:
                retry_after = e.body.get("retryAfter", 0) if isinstance(e.body, dict) else 0
                raise RateLimitExceeded(str(e), retry_after=retry_after) from e
            raise

    async def login(self, email, password):
        return await self._call("/auth/login", body={"email": email, "password": password})

    async def register(self, name, email, password):
        return await self._call(
            "/auth/register",
            body={"name": name, "email": email, "password": password},
        )

    async def logout(self, token=None):
        return await self._call("/auth/logout", token=token)

    async def forgot_password(self, email):
        return await self._call("/auth/forgot-password", body={"email": email})

    async def verify_token(self, token):
        return await self._call("/auth/me", "GET", token=token)

    async def refresh_token(self, token):
        return await self._call("/auth/refresh", token=token)


class AuthService:
    """Thin dispatcher over one AuthBackend."""

    def __init__(self, backend: AuthBackend):
        self.backend = backend

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        return await self.backend.login(email, password)

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        return await self.backend.register(name, email, password)

    async def logout(self, token: Optional[str] = None) -> Dict[str, Any]:
        return await self.backend.logout(token)

    async def forgot_password(self, email: str) -> Dict[str, Any]:
        return await self.backend.forgot_password(email)

    async def verify_token(self, token: str) -> Dict[str, Any]:
        return await self.backend.verify_token(token)

    async def refresh_token(self, token: str) -> Dict[str, Any]:
        """Exchange a valid token for a fresh one; the old token is revoked."""
        return await self.backend.refresh_token(token)
