from __future__ import annotations

import os
from dataclasses import dataclass

from outage_watch.core.constants import PORTAL_AJAX_PATH, PORTAL_PAGE_URL, TELEGRAM_API_BASE


@dataclass(frozen=True)
class Settings:
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    street: str = ""
    house: str = ""

    provider_kind: str = "portal_browser"
    portal_page_url: str = PORTAL_PAGE_URL
    portal_ajax_path: str = PORTAL_AJAX_PATH
    portal_timeout_seconds: int = 60
    browser_headless: bool = True

    telegram_bot_token: str = ""
    telegram_chat_id: str = ""
    telegram_api_base: str = TELEGRAM_API_BASE
    telegram_timeout_seconds: int = 20

    database_path: str = "./data/outage_watch.db"
    retention_days: int = 30

    enable_scheduler: bool = True
    poll_interval_minutes: int = 15
    poll_align_clock: bool = True


def _as_bool(raw: str | None, default: bool) -> bool:
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _as_int(raw: str | None, default: int) -> int:
    if raw is None:
        return default
    return int(raw)


def load_settings() -> Settings:
    return Settings(
        app_host=os.getenv("APP_HOST", "0.0.0.0"),
        app_port=_as_int(os.getenv("APP_PORT"), 8000),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        street=os.getenv("OUTAGE_STREET", ""),
        house=os.getenv("OUTAGE_HOUSE", ""),
        provider_kind=os.getenv("PROVIDER_KIND", "portal_browser"),
        portal_page_url=os.getenv("PORTAL_PAGE_URL", PORTAL_PAGE_URL),
        portal_ajax_path=os.getenv("PORTAL_AJAX_PATH", PORTAL_AJAX_PATH),
        portal_timeout_seconds=_as_int(os.getenv("PORTAL_TIMEOUT_SECONDS"), 60),
        browser_headless=_as_bool(os.getenv("BROWSER_HEADLESS"), True),
        telegram_bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
        telegram_chat_id=os.getenv("TELEGRAM_CHAT_ID", ""),
        telegram_api_base=os.getenv("TELEGRAM_API_BASE", TELEGRAM_API_BASE),
        telegram_timeout_seconds=_as_int(os.getenv("TELEGRAM_TIMEOUT_SECONDS"), 20),
        database_path=os.getenv("DATABASE_PATH", "./data/outage_watch.db"),
        retention_days=_as_int(os.getenv("RETENTION_DAYS"), 30),
        enable_scheduler=_as_bool(os.getenv("ENABLE_SCHEDULER"), True),
        poll_interval_minutes=_as_int(os.getenv("POLL_INTERVAL_MINUTES"), 15),
        poll_align_clock=_as_bool(os.getenv("POLL_ALIGN_CLOCK"), True),
    )
