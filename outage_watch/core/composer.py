from __future__ import annotations

from outage_watch.core.models import StatusPayload


def capitalize_reason(text: str) -> str:
    if not text:
        return text
    return text[0].upper() + text[1:]


def compose(
    address_street: str,
    address_house: str,
    start_date: str,
    end_date: str,
    reason_text: str,
    update_timestamp: str,
) -> str:
    return "\n".join(
        [
            f"⚡️ <b>За адресою {address_street}, {address_house} зафіксовано відключення</b>",
            "",
            f"🪫 Час початку - {start_date}",
            f"🔌 Орієнтовний час відновлення - {end_date}",
            "",
            f"⚠️ <i>{capitalize_reason(reason_text)}.</i>",
            "",
            f"🔄 <i>Дата оновлення інформації – {update_timestamp}</i>",
        ]
    )


def compose_from_status(status: StatusPayload, *, street: str, house: str) -> str:
    return compose(
        address_street=street,
        address_house=house,
        start_date=status.house.start_date,
        end_date=status.house.end_date,
        reason_text=status.house.subtype,
        update_timestamp=status.update_timestamp,
    )
