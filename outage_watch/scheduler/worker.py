from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from time import perf_counter

from outage_watch.config import Settings
from outage_watch.core.composer import compose_from_status
from outage_watch.core.errors import (
    CredentialMissingError,
    FetchFailure,
    MissingDataError,
    OutageWatchError,
)
from outage_watch.core.evaluator import evaluate_active, evaluate_scheduled, extract_status
from outage_watch.core.models import NotifyOutcome
from outage_watch.messaging.base import MessagingTransport
from outage_watch.messaging.telegram import build_transport
from outage_watch.notifier.coordinator import NotificationCoordinator
from outage_watch.observability.metrics import Metrics
from outage_watch.providers.base import StatusProvider
from outage_watch.storage.repository import CheckRunResult, StateRepository

_OUTCOME_STATUS = {
    NotifyOutcome.SENT: "sent",
    NotifyOutcome.EDITED: "edited",
    NotifyOutcome.FAILED: "notify_failed",
}


class CheckWorker:
    def __init__(
        self,
        *,
        settings: Settings,
        provider: StatusProvider,
        repository: StateRepository,
        metrics: Metrics,
        transport: MessagingTransport | None = None,
    ) -> None:
        self.settings = settings
        self.provider = provider
        self.repository = repository
        self.metrics = metrics
        self.transport = transport

        self._task: asyncio.Task[None] | None = None
        self._stop_event = asyncio.Event()
        self._logger = logging.getLogger("outage_watch.check")

        self.last_run_status: str = "never"
        self.last_run_started_at: datetime | None = None
        self.last_run_finished_at: datetime | None = None
        self.last_error: str | None = None

    async def start(self) -> None:
        if self._task is not None:
            return
        self._stop_event.clear()
        self._task = asyncio.create_task(self._run_loop(), name="check-worker")

    async def stop(self) -> None:
        if self._task is None:
            return

        self._stop_event.set()
        await self._task
        self._task = None

    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def _build_coordinator(self) -> NotificationCoordinator:
        transport = self.transport
        if transport is None:
            transport = build_transport(
                self.settings.telegram_bot_token,
                self.settings.telegram_chat_id,
                api_base=self.settings.telegram_api_base,
                timeout_seconds=self.settings.telegram_timeout_seconds,
            )
        elif not self.settings.telegram_chat_id:
            raise CredentialMissingError("TELEGRAM_CHAT_ID is empty")

        return NotificationCoordinator(
            store=self.repository,
            transport=transport,
            chat_id=self.settings.telegram_chat_id,
            metrics=self.metrics,
        )

    async def run_once(self) -> str:
        started = datetime.now(tz=timezone.utc)
        self.last_run_started_at = started
        status = "error"
        error: str | None = None
        timer_start = perf_counter()

        try:
            coordinator = self._build_coordinator()

            payload = await self.provider.fetch_status()
            house = self.settings.house
            active = evaluate_active(payload, house)
            self.metrics.mark_fetch_success(active, datetime.now(tz=timezone.utc))
            if not active:
                status = "no_outage"
                return status

            if not evaluate_scheduled(payload, house):
                status = "not_scheduled"
                return status

            current = extract_status(payload, house)
            text = compose_from_status(current, street=self.settings.street, house=house)
            outcome = await coordinator.notify(text, current.house.end_date)
            status = _OUTCOME_STATUS[outcome]
            return status

        except CredentialMissingError as exc:
            status = "config_error"
            error = str(exc)
            self._logger.error("Messaging credentials missing: %s", exc)
            raise
        except FetchFailure as exc:
            status = "fetch_error"
            error = str(exc)
            self._logger.error("Fetch error during check: %s", exc)
            raise
        except MissingDataError as exc:
            status = "missing_data"
            error = str(exc)
            self._logger.error("Portal payload incomplete: %s", exc)
            raise
        except Exception as exc:
            status = "error"
            error = str(exc)
            self._logger.exception("Unhandled check error")
            raise
        finally:
            finished = datetime.now(tz=timezone.utc)
            self.last_run_finished_at = finished
            self.last_run_status = status
            self.last_error = error

            self.metrics.mark_check_status(status)
            self.metrics.check_duration_seconds.observe(perf_counter() - timer_start)

            self.repository.record_check_run(
                started_at_utc=started,
                finished_at_utc=finished,
                result=CheckRunResult(status=status, error_message=error),
            )
            self.repository.purge_old_check_runs(self.settings.retention_days)

    async def _run_loop(self) -> None:
        await self._run_guarded()

        while not self._stop_event.is_set():
            sleep_seconds = self._next_sleep_seconds()
            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=sleep_seconds)
            except TimeoutError:
                pass

            if self._stop_event.is_set():
                break
            await self._run_guarded()

    async def _run_guarded(self) -> None:
        try:
            await self.run_once()
        except OutageWatchError:
            # Logged and recorded by run_once; the next tick is the retry.
            return
        except Exception:  # pragma: no cover
            return

    def _next_sleep_seconds(self) -> float:
        interval_seconds = max(self.settings.poll_interval_minutes, 1) * 60
        if not self.settings.poll_align_clock:
            return float(interval_seconds)

        now = datetime.now(tz=timezone.utc).timestamp()
        next_tick = ((int(now) // interval_seconds) + 1) * interval_seconds
        return max(next_tick - now, 1.0)
