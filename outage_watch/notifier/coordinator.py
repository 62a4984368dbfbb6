from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any

from outage_watch.core.errors import NotificationTransportFailure
from outage_watch.core.models import CoordinatorState, NotificationState, NotifyOutcome
from outage_watch.messaging.base import MessagingTransport
from outage_watch.observability.metrics import Metrics
from outage_watch.storage.repository import NotificationStateStore


class NotificationCoordinator:
    """Keeps at most one live notification per outage.

    A prior record whose ``outage_end_date`` equals the new one is edited in
    place; anything else gets a fresh message. End dates are compared as
    opaque strings exactly as the portal reports them. Any failed or
    unacknowledged transport call drops the record, so the next cycle starts
    from ``NO_NOTIFICATION``.
    """

    def __init__(
        self,
        *,
        store: NotificationStateStore,
        transport: MessagingTransport,
        chat_id: str,
        metrics: Metrics | None = None,
    ) -> None:
        self.store = store
        self.transport = transport
        self.chat_id = chat_id
        self.metrics = metrics
        self._logger = logging.getLogger("outage_watch.notifier")

    @property
    def state(self) -> CoordinatorState:
        if self.store.load() is None:
            return CoordinatorState.NO_NOTIFICATION
        return CoordinatorState.NOTIFICATION_LIVE

    async def notify(self, text: str, outage_end_date: str) -> NotifyOutcome:
        prior = self.store.load()
        edit_target = prior if prior is not None and prior.outage_end_date == outage_end_date else None
        action = "edit" if edit_target is not None else "send"

        try:
            if edit_target is not None:
                response = await self.transport.edit(self.chat_id, edit_target.message_id, text)
            else:
                response = await self.transport.send(self.chat_id, text)
            result = _acknowledged_result(response)
        except Exception as exc:
            # Any unconfirmed delivery invalidates the stored message.
            self.store.delete()
            self._logger.warning("Notification not %s, state cleared: %s", _past(action), exc)
            self._mark(action, NotifyOutcome.FAILED)
            return NotifyOutcome.FAILED

        issued_date = str(result.get("date", ""))
        if edit_target is not None:
            self.store.save(replace(edit_target, issued_date=issued_date))
            outcome = NotifyOutcome.EDITED
        else:
            self.store.save(
                NotificationState(
                    message_id=result["message_id"],
                    issued_date=issued_date,
                    outage_end_date=outage_end_date,
                )
            )
            outcome = NotifyOutcome.SENT

        self._logger.info("Notification %s", _past(action))
        self._mark(action, outcome)
        return outcome

    def _mark(self, action: str, outcome: NotifyOutcome) -> None:
        if self.metrics is not None:
            self.metrics.mark_notification(action, outcome.value)


def _past(action: str) -> str:
    return "updated" if action == "edit" else "sent"


def _acknowledged_result(response: Any) -> dict[str, Any]:
    if not isinstance(response, dict) or not response.get("ok"):
        raise NotificationTransportFailure("transport did not acknowledge the message")

    result = response.get("result")
    if not isinstance(result, dict) or "message_id" not in result:
        raise NotificationTransportFailure("acknowledged response carries no message_id")
    return result
