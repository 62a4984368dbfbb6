from __future__ import annotations

from outage_watch.config import Settings
from outage_watch.core.errors import OutageWatchError
from outage_watch.providers.base import StatusProvider
from outage_watch.providers.portal_browser import PortalBrowserProvider


class UnknownProviderError(OutageWatchError):
    pass


def build_provider(settings: Settings) -> StatusProvider:
    if settings.provider_kind == "portal_browser":
        return PortalBrowserProvider(
            page_url=settings.portal_page_url,
            street=settings.street,
            ajax_path=settings.portal_ajax_path,
            timeout_seconds=settings.portal_timeout_seconds,
            headless=settings.browser_headless,
        )

    raise UnknownProviderError(f"Unsupported provider kind: {settings.provider_kind}")
