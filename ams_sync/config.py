from __future__ import annotations

import os
from dataclasses import dataclass

AUTH_SCHEMES = ("bearer", "basic")


def env(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name)
    return v if v is not None else default


@dataclass(frozen=True)
class Settings:
    username: str
    password: str
    base_url: str = "https://api.ams.aamanet.org"
    auth_scheme: str = "bearer"
    log_level: str = "INFO"

    page_size: int = 10
    timeout_sec: float = 900.0

    # Starting bookmark for the CLI when none is given (days back from now)
    lookback_days: int = 30


def load_settings() -> Settings:
    username = env("AMS_USERNAME") or ""
    password = env("AMS_PASSWORD") or ""
    if not username or not password:
        raise RuntimeError("Missing AMS_USERNAME / AMS_PASSWORD.")

    scheme = (env("AMS_AUTH_SCHEME", "bearer") or "bearer").strip().lower()
    if scheme not in AUTH_SCHEMES:
        raise RuntimeError(f"Unsupported AMS_AUTH_SCHEME: {scheme}. Use one of: {', '.join(AUTH_SCHEMES)}")

    return Settings(
        username=username,
        password=password,
        base_url=(env("AMS_BASE_URL", "https://api.ams.aamanet.org") or "https://api.ams.aamanet.org").rstrip("/"),
        auth_scheme=scheme,
        log_level=env("LOG_LEVEL", "INFO") or "INFO",
        page_size=int(env("AMS_PAGE_SIZE", "10") or "10"),
        timeout_sec=float(env("AMS_TIMEOUT_SEC", "900") or "900"),
        lookback_days=int(env("AMS_LOOKBACK_DAYS", "30") or "30"),
    )
