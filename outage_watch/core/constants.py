from __future__ import annotations

from typing import Final

NOT_SCHEDULED_TERMS: Final[tuple[str, ...]] = (
    "екстрен",
    "аварій",
)

PORTAL_PAGE_URL: Final[str] = "https://www.dtek-kem.com.ua/ua/shutdowns"
PORTAL_AJAX_PATH: Final[str] = "/ua/ajax"
PORTAL_AJAX_METHOD: Final[str] = "getHomeNum"
PORTAL_TIMEZONE: Final[str] = "Europe/Kyiv"

TELEGRAM_API_BASE: Final[str] = "https://api.telegram.org"
TELEGRAM_PARSE_MODE: Final[str] = "HTML"
