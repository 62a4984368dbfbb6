from __future__ import annotations

from typing import Any

from outage_watch.core.errors import NotificationTransportFailure
from outage_watch.core.models import NotificationState

STREET = "вул. Хрещатик"
HOUSE = "22"


def house_entry(
    sub_type: str = "",
    start_date: str = "",
    end_date: str = "",
    type: str = "",
) -> dict[str, str]:
    return {"sub_type": sub_type, "start_date": start_date, "end_date": end_date, "type": type}


def portal_payload(entry: dict[str, str] | None = None, house: str = HOUSE) -> dict[str, Any]:
    return {
        "data": {
            house: entry if entry is not None else house_entry(),
            "24": house_entry(),
        },
        "updateTimestamp": "14:05 18.10.2026",
    }


def scheduled_payload(end_date: str = "2024-01-01 18:00") -> dict[str, Any]:
    return portal_payload(
        house_entry(
            sub_type="планові ремонтні роботи",
            start_date="2024-01-01 09:00",
            end_date=end_date,
            type="2",
        )
    )


class InMemoryStateStore:
    def __init__(self, state: NotificationState | None = None) -> None:
        self.state = state
        self.deletes = 0

    def load(self) -> NotificationState | None:
        return self.state

    def save(self, state: NotificationState) -> None:
        self.state = state

    def delete(self) -> None:
        self.deletes += 1
        self.state = None


class FakeTransport:
    def __init__(
        self,
        *,
        ok: bool = True,
        message_id: int = 101,
        date: int = 1704099600,
        error: Exception | None = None,
    ) -> None:
        self.ok = ok
        self.message_id = message_id
        self.date = date
        self.error = error
        self.calls: list[tuple[str, tuple]] = []

    def _respond(self, message_id: int) -> dict[str, Any]:
        if self.error is not None:
            raise self.error
        if not self.ok:
            return {"ok": False, "error_code": 400, "description": "Bad Request"}
        return {"ok": True, "result": {"message_id": message_id, "date": self.date}}

    async def send(self, chat_id: str, text: str) -> dict[str, Any]:
        self.calls.append(("send", (chat_id, text)))
        return self._respond(self.message_id)

    async def edit(self, chat_id: str, message_id: str | int, text: str) -> dict[str, Any]:
        self.calls.append(("edit", (chat_id, message_id, text)))
        return self._respond(int(message_id))

    def methods(self) -> list[str]:
        return [name for name, _ in self.calls]


class FakeProvider:
    def __init__(self, payload: Any = None, error: Exception | None = None) -> None:
        self.payload = payload
        self.error = error
        self.calls = 0

    async def fetch_status(self) -> Any:
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.payload


def transport_failure() -> NotificationTransportFailure:
    return NotificationTransportFailure("connection reset")
