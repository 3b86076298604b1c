"""Server settings read from the environment (and a local .env file)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from dotenv import load_dotenv

load_dotenv()


def _parse_accounts(raw: str) -> dict[str, str]:
    """Parse "email:password,email:password" into a dict."""
    accounts = {}
    for entry in raw.split(","):
        email, sep, password = entry.strip().partition(":")
        if sep and email and password:
            accounts[email.strip()] = password
    return accounts


@dataclass
class Settings:
    cors_origins: list[str] = field(default_factory=list)
    admin_accounts: dict[str, str] = field(default_factory=dict)
    data_dir: str | None = None
    log_level: str = "INFO"


def load_settings() -> Settings:
    cors_origins = os.getenv("CORS_ORIGINS", "http://localhost:5173,http://localhost:5174")
    return Settings(
        cors_origins=[o.strip() for o in cors_origins.split(",") if o.strip()],
        admin_accounts=_parse_accounts(os.getenv("ADMIN_ACCOUNTS", "")),
        data_dir=os.getenv("DATA_DIR") or None,
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


settings = load_settings()
