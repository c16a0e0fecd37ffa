"""
Known inconsistencies of the AdGuard Home API, masked on read.

Each subsystem owns a tuple of named quirks. A quirk rewrites the observed
declared-shape dictionary after mapping, before it becomes a model, so the
general mappers stay free of special cases.

Read modes:
    view      read-only observation, no prior state (persisted=False)
    adopt     persisted read without prior state (import of an existing object)
    refresh   persisted read with prior state (after create/update, or later)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from adguard_gitops.constants import (
    KIND_CONFIG,
    KIND_CLIENT,
    KIND_DNS_CONFIG,
    KIND_TLS,
    DNS_BLOCKING_MODE_CUSTOM_IP,
)
from adguard_gitops.utils import safe_getattr


@dataclass(frozen=True)
class ClearUnlessQuirk:
    """
    The appliance keeps stale values in `fields` after `controller` leaves
    the mode that uses them. Force them to `empty` unless the controller
    equals `active_value`.
    """
    name: str
    fields: Tuple[str, ...]
    controller: str
    active_value: Any
    empty: Any = ""

    def apply(self, observed: Dict[str, Any], prior: Optional[Dict[str, Any]], persisted: bool) -> None:
        if observed.get(self.controller) == self.active_value:
            return
        for field_name in self.fields:
            if field_name in observed:
                observed[field_name] = self.empty


@dataclass(frozen=True)
class EmptyAsNullQuirk:
    """
    The appliance reports unset optional lists as []. On persisted reads an
    empty list becomes null unless the prior state declared it as a list.
    """
    name: str
    fields: Tuple[str, ...]

    def apply(self, observed: Dict[str, Any], prior: Optional[Dict[str, Any]], persisted: bool) -> None:
        if not persisted:
            return
        for field_name in self.fields:
            if observed.get(field_name) == [] and safe_getattr(prior, field_name) is None:
                observed[field_name] = None


@dataclass(frozen=True)
class ScheduleTimeZoneQuirk:
    """
    The appliance reports its own default zone ("Local") for schedules that
    never had one, which must not be echoed back as declared.
    """
    name: str
    field: str = "blocked_services_pause_schedule"

    def apply(self, observed: Dict[str, Any], prior: Optional[Dict[str, Any]], persisted: bool) -> None:
        schedule = observed.get(self.field)
        if not isinstance(schedule, dict):
            return
        prior_schedule = safe_getattr(prior, self.field) if prior is not None else None
        if not trust_remote_time_zone(prior is not None, safe_getattr(prior_schedule, "time_zone"), persisted):
            schedule["time_zone"] = None


@dataclass(frozen=True)
class WriteOnlyQuirk:
    """
    The appliance stores `field` but never reports it back, only the
    `saved_flag` telling that a value exists. On persisted reads the prior
    declared value is reported while the flag is set.
    """
    name: str
    field: str
    saved_flag: str

    def apply(self, observed: Dict[str, Any], prior: Optional[Dict[str, Any]], persisted: bool) -> None:
        if not persisted or prior is None or observed.get(self.field):
            return
        if observed.get(self.saved_flag):
            observed[self.field] = safe_getattr(prior, self.field) or ""


@dataclass(frozen=True)
class NestedQuirks:
    """Apply another quirk table to a nested section."""
    name: str
    section: str
    quirks: Tuple[Any, ...]

    def apply(self, observed: Dict[str, Any], prior: Optional[Dict[str, Any]], persisted: bool) -> None:
        nested = observed.get(self.section)
        if not isinstance(nested, dict):
            return
        nested_prior = safe_getattr(prior, self.section) if prior is not None else None
        if prior is not None and nested_prior is None:
            nested_prior = {}
        for quirk in self.quirks:
            quirk.apply(nested, nested_prior, persisted)


def trust_remote_time_zone(has_prior: bool, prior_time_zone: Optional[str], persisted: bool) -> bool:
    """
    Decide whether the remote-reported schedule time zone is taken verbatim.

    Args:
        has_prior: A prior declared state exists for this read
        prior_time_zone: Time zone of the prior declared schedule
        persisted: Read for a managed object (False for read-only views)

    Returns:
        True if the remote value should be reported as declared
    """
    if not persisted:
        return True
    if not has_prior:
        return True
    return prior_time_zone is not None


# ============================================================================
# QUIRK TABLE
# ============================================================================

DNS_QUIRKS: Tuple[Any, ...] = (
    ClearUnlessQuirk(
        name="dns.blocking_addresses",
        fields=("blocking_ipv4", "blocking_ipv6"),
        controller="blocking_mode",
        active_value=DNS_BLOCKING_MODE_CUSTOM_IP,
    ),
    ClearUnlessQuirk(
        name="dns.edns_custom_ip",
        fields=("edns_cs_custom_ip",),
        controller="edns_cs_use_custom",
        active_value=True,
    ),
    EmptyAsNullQuirk(
        name="dns.empty_lists_as_null",
        fields=("fallback_dns", "rate_limit_whitelist"),
    ),
)

REMOTE_QUIRKS: Dict[str, Tuple[Any, ...]] = {
    KIND_CONFIG: (
        ScheduleTimeZoneQuirk(name="config.schedule_time_zone"),
        NestedQuirks(name="config.dns", section="dns", quirks=DNS_QUIRKS),
    ),
    KIND_CLIENT: (
        ScheduleTimeZoneQuirk(name="client.schedule_time_zone"),
    ),
    KIND_DNS_CONFIG: DNS_QUIRKS,
    KIND_TLS: (
        WriteOnlyQuirk(name="tls.private_key_write_only", field="private_key", saved_flag="private_key_saved"),
    ),
}


def apply_quirks(kind: str, observed: Dict[str, Any], prior: Optional[Dict[str, Any]] = None,
                 persisted: bool = False) -> Dict[str, Any]:
    """
    Run the quirk table of a subsystem over an observed declared-shape dict.

    Args:
        kind: Subsystem kind (see constants.KIND_*)
        observed: Mapped remote state, modified in place
        prior: Prior declared state as dict (None if there is none)
        persisted: Persisted read (True) or read-only view (False)

    Returns:
        The same dictionary, for chaining
    """
    for quirk in REMOTE_QUIRKS.get(kind, ()):
        quirk.apply(observed, prior, persisted)
    return observed
