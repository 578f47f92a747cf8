"""Configuration for the case manager persistence layer.

All tunables centralized here - set them in the environment (or a .env file)
without touching code. Values are resolved once, at import time.
"""
import os
from dotenv import load_dotenv

load_dotenv()


def _env_flag(name: str, default: bool) -> bool:
    """Read a boolean flag; only an explicit opposite value flips the default."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    if default:
        return raw.strip().lower() != "false"
    return raw.strip().lower() == "true"


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return float(raw)


# API Configuration
API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:5000/api")
REQUEST_TIMEOUT_SECONDS = _env_float("REQUEST_TIMEOUT_SECONDS", 15.0)

# Mock mode is on unless USE_MOCK_API=false
USE_MOCK_API = _env_flag("USE_MOCK_API", True)
MOCK_DELAY_SECONDS = _env_float("MOCK_DELAY_SECONDS", 0.5)

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Mock API server
MOCK_API_HOST = os.getenv("MOCK_API_HOST", "127.0.0.1")
MOCK_API_PORT = int(os.getenv("MOCK_API_PORT", "5000"))

# Demo data conventions
CASE_NUMBER_PREFIX = "CASE-2024"
MIN_PASSWORD_LENGTH = 6
BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

# Mock auth tokens (HS256 JWTs signed locally; demo secret only)
JWT_SECRET = os.getenv("JWT_SECRET", "demo-secret-key-not-for-production")
JWT_ALGORITHM = "HS256"
JWT_ISSUER = "ai-case-manager-demo"
JWT_AUDIENCE = "demo-client"
TOKEN_TTL_HOURS = _env_float("TOKEN_TTL_HOURS", 24.0)

# Failed-login throttling: attempts per window, per email
LOGIN_MAX_ATTEMPTS = int(os.getenv("LOGIN_MAX_ATTEMPTS", "5"))
LOGIN_WINDOW_SECONDS = int(os.getenv("LOGIN_WINDOW_SECONDS", str(15 * 60)))


def is_mock_mode() -> bool:
    """Return the process-wide mode switch (True = in-memory mock backend)."""
    return USE_MOCK_API
