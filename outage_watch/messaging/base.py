from __future__ import annotations

from typing import Any, Protocol


class MessagingTransport(Protocol):
    async def send(self, chat_id: str, text: str) -> dict[str, Any]:
        """Post a new message; returns ``{ok, result: {message_id, date}}``."""

    async def edit(self, chat_id: str, message_id: str | int, text: str) -> dict[str, Any]:
        """Replace the text of an existing message; same response shape as ``send``."""
