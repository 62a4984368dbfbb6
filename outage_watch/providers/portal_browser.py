from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from playwright.async_api import Error as PlaywrightError
from playwright.async_api import async_playwright

from outage_watch.core.constants import PORTAL_AJAX_METHOD, PORTAL_AJAX_PATH, PORTAL_TIMEZONE
from outage_watch.core.errors import FetchFailure

_CSRF_SELECTOR = 'meta[name="csrf-token"]'

_AJAX_SCRIPT = """
async ({ url, token, fields }) => {
  const body = new URLSearchParams()
  for (const [name, value] of fields) {
    body.append(name, value)
  }
  const response = await fetch(url, {
    method: "POST",
    headers: {
      "x-requested-with": "XMLHttpRequest",
      "x-csrf-token": token,
    },
    body,
  })
  return await response.json()
}
"""


def update_fact_stamp(now: datetime | None = None, timezone_name: str = PORTAL_TIMEZONE) -> str:
    moment = now or datetime.now(tz=ZoneInfo(timezone_name))
    return moment.astimezone(ZoneInfo(timezone_name)).strftime("%d.%m.%Y, %H:%M:%S")


def build_form_fields(street: str, update_fact: str) -> list[tuple[str, str]]:
    return [
        ("method", PORTAL_AJAX_METHOD),
        ("data[0][name]", "street"),
        ("data[0][value]", street),
        ("data[1][name]", "updateFact"),
        ("data[1][value]", update_fact),
    ]


@dataclass
class PortalBrowserProvider:
    page_url: str
    street: str
    ajax_path: str = PORTAL_AJAX_PATH
    timeout_seconds: int = 60
    headless: bool = True

    async def fetch_status(self) -> dict[str, Any]:
        if not self.page_url:
            raise FetchFailure("PORTAL_PAGE_URL is empty")
        if not self.street:
            raise FetchFailure("OUTAGE_STREET is empty")

        logger = logging.getLogger("outage_watch.portal")
        logger.info("Getting outage info for %s", self.street)
        timeout_ms = self.timeout_seconds * 1000

        try:
            async with async_playwright() as playwright:
                browser = await playwright.chromium.launch(headless=self.headless)
                try:
                    page = await browser.new_page()
                    await page.goto(self.page_url, wait_until="load", timeout=timeout_ms)

                    token_tag = await page.wait_for_selector(
                        _CSRF_SELECTOR, state="attached", timeout=timeout_ms
                    )
                    token = await token_tag.get_attribute("content") if token_tag else None
                    if not token:
                        raise FetchFailure("Portal page has no csrf token")

                    payload = await page.evaluate(
                        _AJAX_SCRIPT,
                        {
                            "url": self.ajax_path,
                            "token": token,
                            "fields": build_form_fields(self.street, update_fact_stamp()),
                        },
                    )
                finally:
                    await browser.close()
        except PlaywrightError as exc:
            raise FetchFailure(f"Getting outage info failed: {exc}") from exc

        if not isinstance(payload, dict):
            raise FetchFailure(f"Portal returned {type(payload).__name__} instead of an object")

        logger.info("Getting outage info finished")
        return payload
