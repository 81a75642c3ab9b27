import os

from dotenv import load_dotenv


load_dotenv()


def _get_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _get_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]

APP_ENV = os.getenv("APP_ENV", "development")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///./codegallery.db")

CORS_ORIGINS = _get_list(os.getenv("CORS_ORIGINS"), ["http://localhost:3000"])

JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "change-me")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_MINUTES = int(os.getenv("JWT_EXPIRES_MINUTES", "60"))

# Featured projects are recomputed at most once per window.
FEATURED_CACHE_SECONDS = int(os.getenv("FEATURED_CACHE_SECONDS", "3600"))
FEATURED_PROJECTS_LIMIT = 4

# Lets a logged-in user promote themselves to admin (demo deployments only).
ALLOW_SELF_PROMOTION = _get_bool(os.getenv("ALLOW_SELF_PROMOTION"), default=False)

DEFAULT_AVATAR_URL = os.getenv("DEFAULT_AVATAR_URL", "/images/defaults/defaultprofile.png")

def validate_runtime_config() -> None:
    if APP_ENV.lower() == "production" and JWT_SECRET_KEY == "change-me":
        raise RuntimeError("JWT_SECRET_KEY must be set in production.")
    if APP_ENV.lower() == "production" and ALLOW_SELF_PROMOTION:
        raise RuntimeError("ALLOW_SELF_PROMOTION must be disabled in production.")
