"""Blocked-services pause schedule: declared day ranges <-> AdGuard Home schedule object."""

from typing import Any, Dict, Optional

from adguard_gitops.constants import WEEKDAYS
from adguard_gitops.errors import MappingFailed
from adguard_gitops.models import ScheduleModel
from adguard_gitops.utils import minutes_to_ms, ms_to_minutes, safe_getattr

# Remote encoding of a day without restriction
EMPTY_DAY: Dict[str, int] = {"start": 0, "end": 0}


def schedule_to_remote(schedule: Optional[ScheduleModel]) -> Dict[str, Any]:
    """
    Build the remote schedule object.

    Days that are not declared are sent as start=end=0 and a missing
    time zone as "" so the appliance falls back to its own default.
    """
    schedule = schedule or ScheduleModel()
    remote: Dict[str, Any] = {"time_zone": schedule.time_zone or ""}
    for day in WEEKDAYS:
        slot = getattr(schedule, day)
        if slot is None:
            remote[day] = dict(EMPTY_DAY)
        else:
            remote[day] = {"start": minutes_to_ms(slot.start), "end": minutes_to_ms(slot.end)}
    return remote


def schedule_to_declared(remote: Any, subsystem: str = "schedule") -> Dict[str, Any]:
    """
    Extract declared schedule data from a remote schedule object.

    A day counts as declared only when its end is after midnight. The time
    zone is reported verbatim; whether it is trusted is decided by the
    caller (see quirks.ScheduleTimeZoneQuirk).

    Raises:
        MappingFailed: If the object or a day entry cannot be decoded
    """
    if remote is None:
        remote = {}
    if not isinstance(remote, dict):
        raise MappingFailed(f"{subsystem}: cannot decode schedule (got {type(remote).__name__})")

    time_zone = remote.get("time_zone")
    if time_zone is not None and not isinstance(time_zone, str):
        raise MappingFailed(f"{subsystem}.time_zone: expected string, got {time_zone!r}")

    declared: Dict[str, Any] = {"time_zone": time_zone}
    for day in WEEKDAYS:
        entry = remote.get(day)
        if entry is None:
            declared[day] = None
            continue
        start = safe_getattr(entry, "start", 0)
        end = safe_getattr(entry, "end", 0)
        if not isinstance(entry, dict) or not _is_number(start) or not _is_number(end):
            raise MappingFailed(f"{subsystem}.{day}: cannot decode day range {entry!r}")
        if end > 0:
            declared[day] = {"start": ms_to_minutes(start), "end": ms_to_minutes(end)}
        else:
            declared[day] = None
    return declared


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
