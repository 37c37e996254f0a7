from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Literal

AppEnv = Literal["dev", "test", "prod"]
LogLevel = Literal["debug", "info", "warning", "error"]

_TRUE = ("1", "true", "yes", "on")
_FALSE = ("0", "false", "no", "off")


def _getenv(name: str, default: str) -> str:
    return os.environ.get(name, default).strip()


def _getenv_bool(name: str, default: bool) -> bool:
    raw = _getenv(name, "true" if default else "false").lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean (got {raw!r})")


def _getenv_pem(name: str) -> str | None:
    # Single-line env values carry PEM newlines as a literal "\n".
    raw = _getenv(name, "")
    return raw.replace("\\n", "\n") or None


def _getenv_int(name: str, default: int) -> int:
    raw = _getenv(name, str(default))
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer (got {raw!r})") from None


@dataclass(frozen=True)
class Settings:
    app_env: AppEnv
    log_level: LogLevel
    log_json: bool
    port: int
    ledger_owner: str
    max_progress_entries: int
    count_overwrites: bool
    jwt_public_key_pem: str | None = None
    jwt_private_key_pem: str | None = None

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"

    @property
    def is_prod(self) -> bool:
        return self.app_env == "prod"


def load_settings() -> Settings:
    app_env_raw = _getenv("APP_ENV", "dev").lower()
    log_level_raw = _getenv("LOG_LEVEL", "info").lower()

    if app_env_raw not in ("dev", "test", "prod"):
        raise ValueError(f"APP_ENV must be dev|test|prod (got {app_env_raw!r})")

    if log_level_raw not in ("debug", "info", "warning", "error"):
        raise ValueError(
            f"LOG_LEVEL must be debug|info|warning|error (got {log_level_raw!r})"
        )

    port = _getenv_int("PORT", 8000)

    ledger_owner = _getenv("LEDGER_OWNER", "ledger-admin")
    if not ledger_owner:
        raise ValueError("LEDGER_OWNER must be non-empty")

    max_progress_entries = _getenv_int("MAX_PROGRESS_ENTRIES", 10000)
    if max_progress_entries <= 0:
        raise ValueError(
            f"MAX_PROGRESS_ENTRIES must be positive (got {max_progress_entries})"
        )

    return Settings(  # type: ignore[arg-type]
        app_env=app_env_raw,
        log_level=log_level_raw,
        log_json=_getenv_bool("LOG_JSON", False),
        port=port,
        ledger_owner=ledger_owner,
        max_progress_entries=max_progress_entries,
        count_overwrites=_getenv_bool("COUNT_OVERWRITES", True),
        jwt_public_key_pem=_getenv_pem("JWT_PUBLIC_KEY_PEM"),
        jwt_private_key_pem=_getenv_pem("JWT_PRIVATE_KEY_PEM"),
    )


# Module-level singleton so imports are cheap
SETTINGS = load_settings()
