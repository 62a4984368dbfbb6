from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

import httpx

from outage_watch.core.constants import TELEGRAM_API_BASE, TELEGRAM_PARSE_MODE
from outage_watch.core.errors import CredentialMissingError, NotificationTransportFailure

_NOT_MODIFIED = "message is not modified"


def _is_not_modified(payload: dict[str, Any]) -> bool:
    return not payload.get("ok") and _NOT_MODIFIED in str(payload.get("description", "")).lower()


@dataclass
class TelegramTransport:
    bot_token: str
    api_base: str = TELEGRAM_API_BASE
    timeout_seconds: int = 20

    def __post_init__(self) -> None:
        if not self.bot_token:
            raise CredentialMissingError("TELEGRAM_BOT_TOKEN is empty")
        self._logger = logging.getLogger("outage_watch.telegram")

    def _method_url(self, method: str) -> str:
        return f"{self.api_base.rstrip('/')}/bot{self.bot_token}/{method}"

    async def _call(self, method: str, body: dict[str, Any]) -> dict[str, Any]:
        timeout = httpx.Timeout(self.timeout_seconds)
        try:
            async with httpx.AsyncClient(timeout=timeout) as client:
                response = await client.post(self._method_url(method), json=body)
                payload = response.json()
        except httpx.HTTPError as exc:
            raise NotificationTransportFailure(f"Telegram {method} failed: {exc}") from exc
        except ValueError as exc:
            raise NotificationTransportFailure(
                f"Telegram {method} returned a non-JSON body"
            ) from exc

        if not isinstance(payload, dict):
            raise NotificationTransportFailure(f"Telegram {method} returned {type(payload).__name__}")

        if not payload.get("ok") and not _is_not_modified(payload):
            self._logger.warning(
                "Telegram %s rejected: %s", method, payload.get("description", "no description")
            )
        return payload

    async def send(self, chat_id: str, text: str) -> dict[str, Any]:
        return await self._call(
            "sendMessage",
            {"chat_id": chat_id, "text": text, "parse_mode": TELEGRAM_PARSE_MODE},
        )

    async def edit(self, chat_id: str, message_id: str | int, text: str) -> dict[str, Any]:
        payload = await self._call(
            "editMessageText",
            {
                "chat_id": chat_id,
                "message_id": message_id,
                "text": text,
                "parse_mode": TELEGRAM_PARSE_MODE,
            },
        )
        if _is_not_modified(payload):
            # Identical text means the live message is already current.
            return {
                "ok": True,
                "result": {
                    "message_id": message_id,
                    "date": int(datetime.now(tz=timezone.utc).timestamp()),
                },
            }
        return payload


def build_transport(bot_token: str, chat_id: str, *, api_base: str, timeout_seconds: int) -> TelegramTransport:
    if not chat_id:
        raise CredentialMissingError("TELEGRAM_CHAT_ID is empty")
    return TelegramTransport(bot_token=bot_token, api_base=api_base, timeout_seconds=timeout_seconds)
