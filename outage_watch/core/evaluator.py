from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from outage_watch.core.constants import NOT_SCHEDULED_TERMS
from outage_watch.core.errors import MissingDataError
from outage_watch.core.models import HouseStatus, OutageDecision, StatusPayload

_logger = logging.getLogger("outage_watch.evaluator")


def _as_text(raw: Any) -> str:
    if raw is None:
        return ""
    return str(raw)


def extract_status(payload: Any, house: str) -> StatusPayload:
    """Pick the target house entry out of a raw portal payload.

    A payload without a ``data`` mapping, or without an entry for ``house``,
    is treated as a broken fetch rather than as "no outage".
    """
    if not isinstance(payload, Mapping):
        raise MissingDataError("Power outage info missed: payload is not an object")

    data = payload.get("data")
    if not isinstance(data, Mapping) or not data:
        raise MissingDataError("Power outage info missed: no data section")

    entry = data.get(house)
    if not isinstance(entry, Mapping):
        raise MissingDataError(f"Power outage info missed for house {house!r}")

    return StatusPayload(
        house=HouseStatus(
            subtype=_as_text(entry.get("sub_type")),
            start_date=_as_text(entry.get("start_date")),
            end_date=_as_text(entry.get("end_date")),
            type=_as_text(entry.get("type")),
        ),
        update_timestamp=_as_text(payload.get("updateTimestamp")),
    )


def is_active(status: HouseStatus) -> bool:
    return any((status.subtype, status.start_date, status.end_date, status.type))


def is_scheduled(status: HouseStatus) -> bool:
    if not is_active(status):
        return False
    subtype = status.subtype.lower()
    return not any(term in subtype for term in NOT_SCHEDULED_TERMS)


def evaluate_active(payload: Any, house: str) -> bool:
    active = is_active(extract_status(payload, house).house)
    _logger.info("Power outage %s", "detected" if active else "not detected")
    return active


def evaluate_scheduled(payload: Any, house: str) -> bool:
    scheduled = is_scheduled(extract_status(payload, house).house)
    _logger.info("Power outage %s", "scheduled" if scheduled else "not scheduled")
    return scheduled


def evaluate(payload: Any, house: str) -> OutageDecision:
    status = extract_status(payload, house).house
    return OutageDecision(active=is_active(status), scheduled=is_scheduled(status))
