from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUTHY = ("1", "true", "yes", "on")
_FALSY = ("0", "false", "no", "off")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getbool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in _TRUTHY:
        return True
    if raw in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    database_url: str | None
    seed_sample_course: bool = True
    jwt_issuer: str = "learnpath-service"
    jwt_audience: str = "learnpath-service"
    jwt_public_key: str | None = None

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_test(self) -> bool:
        return self.app_env == "test"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()
    port_raw = _getenv("PORT", "8000")

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    try:
        port = int(port_raw)
    except ValueError:
        raise ValueError(f"PORT must be an integer (got {port_raw!r})") from None

    database_url = _getenv("DATABASE_URL", "") or None

    jwt_issuer = _getenv("JWT_ISSUER", "learnpath-service")
    jwt_audience = _getenv("JWT_AUDIENCE", "learnpath-service")
    if not jwt_issuer:
        raise ValueError("JWT_ISSUER must not be empty")
    if not jwt_audience:
        raise ValueError("JWT_AUDIENCE must not be empty")

    jwt_public_key = _getenv("JWT_PUBLIC_KEY", "") or None
    if jwt_public_key and not jwt_public_key.startswith("-----BEGIN PUBLIC KEY-----"):
        raise ValueError("JWT_PUBLIC_KEY must be a PEM-encoded public key")

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getbool("LOG_JSON", False),
        port=port,
        database_url=database_url,
        # Sample content is a dev convenience; prod reads real courses.
        seed_sample_course=_getbool("SEED_SAMPLE_COURSE", app_env_raw != "prod"),
        jwt_issuer=jwt_issuer,
        jwt_audience=jwt_audience,
        jwt_public_key=jwt_public_key,
    )


SETTINGS = load_settings()
