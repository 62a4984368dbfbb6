from __future__ import annotations

from datetime import datetime, timezone

from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)


class Metrics:
    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self.check_runs_total = Counter(
            "outage_watch_check_runs_total",
            "Total outage check runs by status",
            labelnames=("status",),
            registry=self.registry,
        )
        self.check_duration_seconds = Histogram(
            "outage_watch_check_duration_seconds",
            "Duration of outage check runs in seconds",
            registry=self.registry,
        )
        self.notifications_total = Counter(
            "outage_watch_notifications_total",
            "Notification attempts by action and outcome",
            labelnames=("action", "outcome"),
            registry=self.registry,
        )
        self.outage_active = Gauge(
            "outage_watch_outage_active",
            "1 when the last check saw an outage for the watched address",
            registry=self.registry,
        )
        self.last_success_epoch = Gauge(
            "outage_watch_last_success_epoch_seconds",
            "Unix timestamp of last check run that reached the portal",
            registry=self.registry,
        )

    def mark_check_status(self, status: str) -> None:
        self.check_runs_total.labels(status=status).inc()

    def mark_notification(self, action: str, outcome: str) -> None:
        self.notifications_total.labels(action=action, outcome=outcome).inc()

    def mark_fetch_success(self, active: bool, fetched_at_utc: datetime) -> None:
        self.outage_active.set(1 if active else 0)
        self.last_success_epoch.set(fetched_at_utc.astimezone(timezone.utc).timestamp())

    def render(self) -> tuple[bytes, str]:
        return generate_latest(self.registry), CONTENT_TYPE_LATEST
