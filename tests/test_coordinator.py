from __future__ import annotations

import pytest

from outage_watch.core.models import CoordinatorState, NotificationState, NotifyOutcome
from outage_watch.notifier.coordinator import NotificationCoordinator
from outage_watch.observability.metrics import Metrics
from tests.helpers import FakeTransport, InMemoryStateStore, transport_failure

CHAT_ID = "-100500"


def _prior(end_date: str = "2024-01-01 18:00") -> NotificationState:
    return NotificationState(message_id=77, issued_date="1704090000", outage_end_date=end_date)


def _coordinator(store: InMemoryStateStore, transport: FakeTransport, metrics: Metrics | None = None):
    return NotificationCoordinator(store=store, transport=transport, chat_id=CHAT_ID, metrics=metrics)


@pytest.mark.asyncio
async def test_first_outage_is_sent_once_and_persisted() -> None:
    store = InMemoryStateStore()
    transport = FakeTransport(message_id=101, date=1704099600)
    coordinator = _coordinator(store, transport)
    assert coordinator.state is CoordinatorState.NO_NOTIFICATION

    outcome = await coordinator.notify("text", "2024-01-01 18:00")

    assert outcome is NotifyOutcome.SENT
    assert transport.methods() == ["send"]
    assert transport.calls[0][1] == (CHAT_ID, "text")
    assert store.state == NotificationState(
        message_id=101, issued_date="1704099600", outage_end_date="2024-01-01 18:00"
    )
    assert coordinator.state is CoordinatorState.NOTIFICATION_LIVE


@pytest.mark.asyncio
async def test_same_end_date_edits_prior_message() -> None:
    store = InMemoryStateStore(_prior())
    transport = FakeTransport(date=1704103200)

    outcome = await _coordinator(store, transport).notify("updated", "2024-01-01 18:00")

    assert outcome is NotifyOutcome.EDITED
    assert transport.methods() == ["edit"]
    assert transport.calls[0][1] == (CHAT_ID, 77, "updated")
    assert store.state == NotificationState(
        message_id=77, issued_date="1704103200", outage_end_date="2024-01-01 18:00"
    )


@pytest.mark.asyncio
async def test_changed_end_date_sends_new_message() -> None:
    store = InMemoryStateStore(_prior("2024-01-01 18:00"))
    transport = FakeTransport(message_id=102)

    outcome = await _coordinator(store, transport).notify("moved", "2024-01-01 20:00")

    assert outcome is NotifyOutcome.SENT
    assert transport.methods() == ["send"]
    assert store.state is not None
    assert store.state.message_id == 102
    assert store.state.outage_end_date == "2024-01-01 20:00"


@pytest.mark.asyncio
@pytest.mark.parametrize("prior", [None, _prior()])
async def test_unacknowledged_response_clears_state(prior) -> None:
    store = InMemoryStateStore(prior)
    transport = FakeTransport(ok=False)

    outcome = await _coordinator(store, transport).notify("text", "2024-01-01 18:00")

    assert outcome is NotifyOutcome.FAILED
    assert store.state is None
    assert store.deletes == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("prior", [None, _prior()])
async def test_transport_error_clears_state_without_raising(prior) -> None:
    store = InMemoryStateStore(prior)
    transport = FakeTransport(error=transport_failure())

    outcome = await _coordinator(store, transport).notify("text", "2024-01-01 18:00")

    assert outcome is NotifyOutcome.FAILED
    assert store.state is None
    assert len(transport.calls) == 1


@pytest.mark.asyncio
async def test_notifications_are_counted() -> None:
    metrics = Metrics()
    transport = FakeTransport()
    coordinator = _coordinator(InMemoryStateStore(), transport, metrics)

    await coordinator.notify("text", "2024-01-01 18:00")
    await coordinator.notify("text", "2024-01-01 18:00")

    sample = metrics.registry.get_sample_value
    assert sample("outage_watch_notifications_total", {"action": "send", "outcome": "sent"}) == 1.0
    assert sample("outage_watch_notifications_total", {"action": "edit", "outcome": "edited"}) == 1.0


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [TimeoutError("hang"), OSError("broken pipe")])
async def test_unexpected_transport_error_clears_state_without_raising(error) -> None:
    store = InMemoryStateStore(_prior())
    transport = FakeTransport(error=error)

    outcome = await _coordinator(store, transport).notify("text", "2024-01-01 18:00")

    assert outcome is NotifyOutcome.FAILED
    assert store.state is None
    assert transport.methods() == ["edit"]
