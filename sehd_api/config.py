from pydantic import BaseModel, Field
import os
from pathlib import Path
from typing import List, Literal, Optional

from dotenv import load_dotenv


_ROOT_DIR = Path(__file__).resolve().parents[1]
load_dotenv(_ROOT_DIR / ".env")
load_dotenv()  # fallback to current working directory


DEFAULT_JWT_KEY = "sehd-development-signing-key-change-me-0123456789"
DEFAULT_CORS_ORIGINS = [
    "http://localhost:3000",
    "http://localhost:5173",
    "https://localhost:5173",
    "http://localhost:5174",
    "https://localhost:5174",
]


def _normalize_env(value: Optional[str], default: str) -> str:
    if value is None:
        return default
    cleaned = value.strip().lower()
    return cleaned or default


def _resolve_expiry_days() -> int:
    raw = os.getenv("JWT_EXPIRY_DAYS")
    if raw is None or not raw.strip():
        return 7
    try:
        days = int(raw)
    except ValueError:
        return 7
    return days if days > 0 else 7


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    normalized = raw.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _env_list(name: str, default: List[str]) -> List[str]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return list(default)
    return [item.strip() for item in raw.split(",") if item.strip()]


def _resolve_password_scheme() -> str:
    scheme = _normalize_env(os.getenv("PASSWORD_SCHEME"), "legacy")
    return scheme if scheme in {"legacy", "bcrypt"} else "legacy"


class Settings(BaseModel):
    app_name: str = "SEHD Admissions API"
    version: str = "1.0.0"
    environment: str = _normalize_env(os.getenv("APP_ENV") or os.getenv("ENVIRONMENT"), "dev")
    debug: bool = _env_bool("DEBUG", True)
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./sehd.db")
    sql_echo: bool = _env_bool("SQL_ECHO", False)
    jwt_key: str = os.getenv("JWT_KEY", DEFAULT_JWT_KEY)
    jwt_issuer: str = os.getenv("JWT_ISSUER", "SEHD.API")
    jwt_audience: str = os.getenv("JWT_AUDIENCE", "SEHD.Client")
    jwt_expiry_days: int = _resolve_expiry_days()
    jwt_algorithm: str = "HS256"
    password_salt: str = os.getenv("PASSWORD_SALT", "sehd_salt")
    password_scheme: Literal["legacy", "bcrypt"] = _resolve_password_scheme()
    cors_origins: List[str] = Field(default_factory=lambda: _env_list("CORS_ORIGINS", DEFAULT_CORS_ORIGINS))
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
    seed_demo_data: bool = _env_bool("SEED_DEMO_DATA", True)

    @property
    def is_production(self) -> bool:
        return self.environment in {"prod", "production"}

    def validate_for_startup(self) -> None:
        if self.is_production and self.jwt_key == DEFAULT_JWT_KEY:
            raise RuntimeError("JWT_KEY must be set to a non-default value in production")


settings = Settings()
