import os
import yaml

ROOT_PATH = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
CONFIG_FILE_PATH = os.environ.get("IAM_CONFIG_FILE", os.path.join(ROOT_PATH, "env.yaml"))

if os.path.exists(CONFIG_FILE_PATH):
    with open(CONFIG_FILE_PATH, "r") as r_file:
        data = yaml.safe_load(r_file) or dict()
else:
    data = dict()


class ApplicationConfig:
    DB_URI = data.get("DB_URI", "sqlite+aiosqlite:///./kitchen_iam.db")
    API_PORT = data.get("API_PORT", 8000)
    API_HOST = data.get("API_HOST", "0.0.0.0")
    CORS_ORIGINS = data.get("CORS_ORIGINS", [])
    CORS_ALLOW_CREDENTIALS = data.get("CORS_ALLOW_CREDENTIALS", True)
    LOG_LEVEL = data.get("LOG_LEVEL", "INFO")
    ENABLE_LOGGING_MIDDLEWARE = bool(data.get("ENABLE_LOGGING_MIDDLEWARE", 1))
    ENVIRONMENT = data.get("ENVIRONMENT", "development")
    ADMIN_API_KEY = data.get("ADMIN_API_KEY", "test-admin-key-12345")

    # Token signing - the two secrets must differ
    ACCESS_TOKEN_SECRET = data.get(
        "ACCESS_TOKEN_SECRET", "dev-access-secret-change-in-production-0001"
    )
    REFRESH_TOKEN_SECRET = data.get(
        "REFRESH_TOKEN_SECRET", "dev-refresh-secret-change-in-production-0002"
    )
    TOKEN_ISSUER = data.get("TOKEN_ISSUER", "kitchzero")
    TOKEN_AUDIENCE = data.get("TOKEN_AUDIENCE", "kitchzero-app")
    ACCESS_TOKEN_TTL_SECONDS = int(data.get("ACCESS_TOKEN_TTL_SECONDS", 15 * 60))
    REFRESH_TOKEN_TTL_SECONDS = int(data.get("REFRESH_TOKEN_TTL_SECONDS", 7 * 24 * 60 * 60))
    SESSION_TTL_SECONDS = int(data.get("SESSION_TTL_SECONDS", 7 * 24 * 60 * 60))

    # Login security
    BCRYPT_ROUNDS = int(data.get("BCRYPT_ROUNDS", 12))
    LOCKOUT_THRESHOLD = int(data.get("LOCKOUT_THRESHOLD", 5))
    LOCKOUT_WINDOW_SECONDS = int(data.get("LOCKOUT_WINDOW_SECONDS", 15 * 60))
    LOGIN_ATTEMPT_RETENTION_DAYS = int(data.get("LOGIN_ATTEMPT_RETENTION_DAYS", 30))

    # Rate limiting: {endpoint_class: {"requests": int, "window_seconds": int}}
    RATE_LIMITS = data.get("RATE_LIMITS", {})
    TRUSTED_PROXY_HEADERS = data.get(
        "TRUSTED_PROXY_HEADERS", ["x-forwarded-for", "x-real-ip", "x-client-ip"]
    )

    # Periodic cleanup of sessions, login attempts and rate limit counters
    ENABLE_CLEANUP_JOB = bool(data.get("ENABLE_CLEANUP_JOB", 0))
    CLEANUP_INTERVAL_SECONDS = int(data.get("CLEANUP_INTERVAL_SECONDS", 6 * 60 * 60))


def is_production(config=ApplicationConfig) -> bool:
    return str(config.ENVIRONMENT).lower() == "production"


def validate_config(config=ApplicationConfig) -> None:
    """
    Reject unsafe token configuration at startup.

    Raises:
        ValueError: a secret is shorter than 32 characters, or the access and
            refresh secrets are identical
    """
    for name in ("ACCESS_TOKEN_SECRET", "REFRESH_TOKEN_SECRET"):
        secret = getattr(config, name)
        if not secret or len(secret) < 32:
            raise ValueError(f"{name} must be at least 32 characters")

    if config.ACCESS_TOKEN_SECRET == config.REFRESH_TOKEN_SECRET:
        raise ValueError("ACCESS_TOKEN_SECRET and REFRESH_TOKEN_SECRET must differ")
