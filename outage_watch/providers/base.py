from __future__ import annotations

from typing import Any, Protocol


class StatusProvider(Protocol):
    async def fetch_status(self) -> dict[str, Any]:
        """Fetch the raw outage status payload for the configured street."""
