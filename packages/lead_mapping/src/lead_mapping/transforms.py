"""Field transforms for the lead mapping table.

Each transform is a pure function with the signature
``(raw_value, document) -> value`` and never mutates its inputs. They are
registered against their target fields in tables.py.
"""

import re
from collections.abc import Mapping
from datetime import datetime, timedelta, timezone
from typing import Any

# =============================================================================
# Constants
# =============================================================================

PLACEHOLDER = "—"

# Fixed UTC+3, no DST
CRM_TIMEZONE = timezone(timedelta(hours=3))
CRM_DATETIME_FORMAT = "%d.%m.%Y %H:%M"

PHONE_VALUE_TYPE = "WORK"

_NON_DIGITS = re.compile(r"\D")

COMMENT_LABELS = {
    "agreements": "Договоренности",
    "client_facts": "Факты о клиенте",
    "sms_text": "SMS текст",
    "agreements_time": "Время договоренности",
    "lead_destination": "Направление лида",
    "agreement_status": "Статус",
    "phone": "Телефон",
    "duration": "Длительность звонка",
    "started_at": "Звонок начат",
    "ended_at": "Звонок завершен",
    "call_type": "Тип звонка",
    "call_status": "Статус звонка",
    "hangup_reason": "Причина завершения",
    "region": "Регион",
    "provider": "Оператор",
    "timezone": "Часовой пояс",
    "call_list": "Колл-лист",
    "tags": "Теги",
    "website": "Сайт",
    "page": "Страница",
    "ip": "IP",
}

CALL_TYPE_LABELS = {
    "outgoing": "Исходящий",
    "incoming": "Входящий",
}


# =============================================================================
# Helpers
# =============================================================================


def _section(document: Mapping[str, Any], *keys: str) -> Mapping[str, Any]:
    """Walk nested objects, returning {} as soon as a level is missing."""
    current: Any = document
    for key in keys:
        current = current.get(key) if isinstance(current, Mapping) else None
        if not isinstance(current, Mapping):
            return {}
    return current


def _text(value: Any) -> str:
    """Render a scalar, or the placeholder when absent."""
    if value is None:
        return PLACEHOLDER
    text = str(value).strip()
    return text or PLACEHOLDER


def digits_only(value: Any) -> str:
    """Strip everything except digits."""
    if value is None:
        return ""
    return _NON_DIGITS.sub("", str(value))


def format_duration(duration_ms: Any) -> str:
    """Format a millisecond duration as M:SS."""
    if duration_ms is None or isinstance(duration_ms, bool):
        return PLACEHOLDER
    try:
        total_seconds = int(float(duration_ms)) // 1000
    except (TypeError, ValueError, OverflowError):
        return PLACEHOLDER
    if total_seconds < 0:
        return PLACEHOLDER

    minutes, seconds = divmod(total_seconds, 60)
    return f"{minutes}:{seconds:02d}"


def _from_epoch_ms(value: float) -> datetime | None:
    try:
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    except (OverflowError, OSError, ValueError):
        return None


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string or epoch milliseconds into an aware UTC datetime."""
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return _from_epoch_ms(value)

    if isinstance(value, str) and value.strip():
        raw = value.strip()
        if raw.isdigit():
            return _from_epoch_ms(int(raw))
        try:
            parsed = datetime.fromisoformat(raw.replace("Z", "+00:00"))
        except ValueError:
            return None
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed

    return None


def format_timestamp(value: Any) -> str:
    """Render a UTC timestamp in CRM local time as DD.MM.YYYY HH:MM."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return PLACEHOLDER
    try:
        local = parsed.astimezone(CRM_TIMEZONE)
    except OverflowError:
        return PLACEHOLDER
    return local.strftime(CRM_DATETIME_FORMAT)


def format_phone(value: Any) -> str:
    """Digits-only phone with a leading +, or the placeholder."""
    digits = digits_only(value)
    return f"+{digits}" if digits else PLACEHOLDER


def format_list(values: Any, separator: str = ", ") -> str:
    """Join non-empty list items, or the placeholder for an empty/missing list."""
    if not isinstance(values, (list, tuple)):
        return PLACEHOLDER
    items = [str(v).strip() for v in values if v is not None and str(v).strip()]
    return separator.join(items) if items else PLACEHOLDER


def format_call_type(value: Any) -> str:
    if value is None or value == "":
        return PLACEHOLDER
    if value == "outgoing":
        return CALL_TYPE_LABELS["outgoing"]
    return CALL_TYPE_LABELS["incoming"]


def _line(key: str, value: str) -> str:
    return f"{COMMENT_LABELS[key]}: {value}"


# =============================================================================
# Registered transforms
# =============================================================================


def lead_name(value: Any, document: Mapping[str, Any]) -> str | None:
    """Client name with surrounding whitespace removed."""
    if value is None:
        return None
    return str(value).strip()


def lead_phone(value: Any, document: Mapping[str, Any]) -> list[dict[str, str]] | None:
    """CRM multi-field phone entry built from a free-form phone string."""
    digits = digits_only(value)
    if not digits:
        return None
    return [{"VALUE": digits, "VALUE_TYPE": PHONE_VALUE_TYPE}]


def lead_comments(value: Any, document: Mapping[str, Any]) -> str:
    """Human-readable call summary for the lead's comment field.

    Every line is always present; absent data is shown as the placeholder so
    that operators can tell "not provided" apart from a missing section.
    """
    call = _section(document, "call")
    agreements = _section(document, "call", "agreements")
    contact = _section(document, "contact")
    phone_info = _section(document, "contact", "dadataPhoneInfo")
    additional = _section(document, "contact", "additionalFields")
    call_list = _section(document, "callList")

    agreement_block = [
        _line("agreements", _text(agreements.get("agreements"))),
        _line("client_facts", _text(agreements.get("client_facts"))),
        _line("sms_text", _text(agreements.get("smsText"))),
        _line("agreements_time", _text(agreements.get("agreements_time"))),
        _line("lead_destination", _text(agreements.get("lead_destination"))),
        _line("agreement_status", _text(agreements.get("status"))),
    ]

    call_block = [
        _line("phone", format_phone(contact.get("phone"))),
        _line("duration", format_duration(call.get("duration"))),
        _line("started_at", format_timestamp(call.get("startedAt"))),
        _line("ended_at", format_timestamp(call.get("endedAt"))),
        _line("call_type", format_call_type(call.get("type"))),
        _line("call_status", _text(call.get("status"))),
        _line("hangup_reason", _text(call.get("hangupReason"))),
    ]

    contact_block = [
        _line("region", _text(phone_info.get("region"))),
        _line("provider", _text(phone_info.get("provider"))),
        _line("timezone", _text(phone_info.get("timezone"))),
        _line("call_list", _text(call_list.get("name"))),
        _line("tags", format_list(contact.get("tags"))),
        _line("website", _text(additional.get("website"))),
        _line("page", _text(additional.get("page"))),
        _line("ip", _text(additional.get("ip"))),
    ]

    return "\n\n".join(
        "\n".join(block) for block in (agreement_block, call_block, contact_block)
    )
