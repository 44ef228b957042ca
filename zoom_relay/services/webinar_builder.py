"""
Builds the body for Zoom's "create webinar" call from a loosely-structured request.

Pure function of its input: no I/O, no clock, no randomness. Validation runs in a
fixed order and the first failing rule raises ValidationError.
"""

import logging
from typing import Any, Dict, Mapping

from ..errors import ValidationError

logger = logging.getLogger(__name__)

SCHEDULED = 5
RECURRING = 9

DAILY = 1
WEEKLY = 2
MONTHLY = 3

# approval_type 2 means "no registration required" in Zoom
NO_REGISTRATION = 2

WEBINAR_DEFAULTS: Dict[str, Any] = {
    "type": SCHEDULED,
    "duration": 60,
    "timezone": "Asia/Kolkata",
}

SETTINGS_DEFAULTS: Dict[str, Any] = {
    "host_video": True,
    "panelists_video": True,
    "practice_session": True,
    "registrants_email_notification": True,
    "approval_type": 0,  # auto-approve
    "registration_type": 1,  # register once, attend any occurrence
    "meeting_authentication": True,
    "q_and_a": True,
    "enable_chat": True,
    "allow_multiple_devices": False,
    "auto_recording": "none",
    "on_demand": False,
}


def _present(data: Mapping, key: str) -> bool:
    return data.get(key) is not None


def _with_defaults(data: Mapping, defaults: Mapping) -> Dict[str, Any]:
    return {key: data[key] if _present(data, key) else default for key, default in defaults.items()}


def _as_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def validate_recurrence(recurrence: Any) -> Dict[str, Any]:
    """Check a recurrence rule and return its minimal form."""
    if not isinstance(recurrence, Mapping) or not _present(recurrence, "type"):
        raise ValidationError("recurrence required")
    if not _present(recurrence, "repeat_interval"):
        raise ValidationError("repeat_interval required")

    has_times = _present(recurrence, "end_times")
    has_date = _present(recurrence, "end_date_time")
    if has_times == has_date:
        raise ValidationError(
            "end condition required: supply exactly one of end_times or end_date_time"
        )

    rule = {
        "type": recurrence["type"],
        "repeat_interval": recurrence["repeat_interval"],
    }
    if has_times:
        rule["end_times"] = recurrence["end_times"]
    else:
        rule["end_date_time"] = recurrence["end_date_time"]

    kind = recurrence["type"]
    # JSON true/false would otherwise compare equal to 1/0
    if isinstance(kind, bool):
        raise ValidationError("invalid recurrence type")
    if kind == DAILY:
        pass
    elif kind == WEEKLY:
        if not _present(recurrence, "weekly_days"):
            raise ValidationError("weekly_days required for weekly recurrence")
        rule["weekly_days"] = recurrence["weekly_days"]
    elif kind == MONTHLY:
        if _present(recurrence, "monthly_day"):
            rule["monthly_day"] = recurrence["monthly_day"]
        elif _present(recurrence, "monthly_week") and _present(recurrence, "monthly_week_day"):
            rule["monthly_week"] = recurrence["monthly_week"]
            rule["monthly_week_day"] = recurrence["monthly_week_day"]
        else:
            raise ValidationError(
                "monthly_day or monthly_week and monthly_week_day required for monthly recurrence"
            )
    else:
        raise ValidationError("invalid recurrence type")

    return rule


def resolve_settings(data: Mapping) -> Dict[str, Any]:
    overrides = _as_mapping(data.get("settings"))
    settings = _with_defaults(overrides, SETTINGS_DEFAULTS)

    # registration stays required whatever the caller asks for
    if settings["approval_type"] == NO_REGISTRATION:
        settings["approval_type"] = SETTINGS_DEFAULTS["approval_type"]

    co_hosts = data.get("co_hosts")
    if co_hosts:
        if isinstance(co_hosts, (list, tuple)) and all(isinstance(host, str) for host in co_hosts):
            co_hosts = ",".join(co_hosts)
        elif not isinstance(co_hosts, str):
            raise ValidationError("co_hosts must be a string or a list of emails")
        settings["alternative_hosts"] = co_hosts
    return settings


def build_webinar_payload(data: Mapping) -> Dict[str, Any]:
    topic = data.get("topic")
    if not isinstance(topic, str) or not topic.strip():
        raise ValidationError("topic required")
    if not data.get("start_time"):
        raise ValidationError("start_time required")

    resolved = _with_defaults(data, WEBINAR_DEFAULTS)

    payload: Dict[str, Any] = {
        "topic": topic,
        "type": resolved["type"],
        "start_time": data["start_time"],
        "duration": resolved["duration"],
        "timezone": resolved["timezone"],
    }
    if _present(data, "agenda"):
        payload["agenda"] = data["agenda"]

    if payload["type"] == RECURRING:
        payload["recurrence"] = validate_recurrence(data.get("recurrence"))
    elif _present(data, "recurrence"):
        logger.warning("Ignoring recurrence for webinar type %s; only type %s recurs",
                       payload["type"], RECURRING)

    payload["settings"] = resolve_settings(data)
    return payload
