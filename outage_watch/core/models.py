from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class CoordinatorState(str, Enum):
    NO_NOTIFICATION = "no_notification"
    NOTIFICATION_LIVE = "notification_live"


class NotifyOutcome(str, Enum):
    SENT = "sent"
    EDITED = "edited"
    FAILED = "failed"


@dataclass(frozen=True)
class HouseStatus:
    subtype: str = ""
    start_date: str = ""
    end_date: str = ""
    type: str = ""


@dataclass(frozen=True)
class StatusPayload:
    house: HouseStatus
    update_timestamp: str = ""


@dataclass(frozen=True)
class OutageDecision:
    active: bool
    scheduled: bool


@dataclass(frozen=True)
class NotificationState:
    message_id: str | int
    issued_date: str
    outage_end_date: str

    def to_dict(self) -> dict:
        return {
            "messageId": self.message_id,
            "issuedDate": self.issued_date,
            "outageEndDate": self.outage_end_date,
        }
