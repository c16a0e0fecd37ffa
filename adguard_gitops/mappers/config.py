"""
Global configuration <-> the eight AdGuard Home settings endpoints.

The remote form is a dictionary with one entry per endpoint:

    filtering          /control/filtering/config        {"enabled", "interval" (hours)}
    safebrowsing       /control/safebrowsing/*           bool
    parental           /control/parental/*               bool
    safesearch         /control/safesearch/settings      flag object
    querylog           /control/querylog/config/update   {"enabled", "interval" (ms), ...}
    stats              /control/stats/config/update      {"enabled", "interval" (ms), "ignored"}
    blocked_services   /control/blocked_services/update  {"ids", "schedule"}
    dns                /control/dns_config               see mappers.dns
"""

from typing import Any, Dict, Iterable, Optional

from adguard_gitops.constants import KIND_CONFIG
from adguard_gitops.errors import MappingFailed
from adguard_gitops.mappers.dns import dns_to_remote, dns_to_dict
from adguard_gitops.mappers.fields import (
    bool_field,
    int_field,
    set_field,
    hours_field,
    fields_to_remote,
    fields_to_declared,
    sub_object,
    build_model,
)
from adguard_gitops.mappers.safesearch import services_to_flags, flags_to_services
from adguard_gitops.mappers.schedule import schedule_to_remote, schedule_to_declared
from adguard_gitops.models import ConfigModel
from adguard_gitops.quirks import apply_quirks
from adguard_gitops.utils import sorted_strings

SECTIONS = (
    "filtering",
    "safebrowsing",
    "parental",
    "safesearch",
    "querylog",
    "stats",
    "blocked_services",
    "dns",
)

# Filtering interval is already in hours on the wire
FILTERING_FIELDS = (
    bool_field("enabled"),
    int_field("update_interval", "interval"),
)

QUERYLOG_FIELDS = (
    bool_field("enabled"),
    hours_field("interval"),
    bool_field("anonymize_client_ip"),
    set_field("ignored", default=set()),
)

STATS_FIELDS = (
    bool_field("enabled"),
    hours_field("interval"),
    set_field("ignored", default=set()),
)


def config_to_remote(config: ConfigModel, known_services: Iterable[str] = ()) -> Dict[str, Any]:
    """
    Build the remote payloads for every global setting.

    Args:
        config: Normalized declared configuration (safe-search services resolved)
        known_services: Safe-search identifiers reported by the live appliance

    Returns:
        Dictionary keyed by section (see SECTIONS)

    Raises:
        MappingFailed: If a declared value cannot be converted
    """
    try:
        blocked_ids = sorted_strings(config.blocked_services, "config.blocked_services")
    except TypeError as e:
        raise MappingFailed(f"cannot convert config.blocked_services to remote form: {e}") from e

    return {
        "filtering": fields_to_remote(config.filtering, FILTERING_FIELDS, "config.filtering"),
        "safebrowsing": bool(config.safebrowsing),
        "parental": bool(config.parental_control),
        "safesearch": services_to_flags(
            config.safesearch.enabled,
            config.safesearch.services or (),
            known_services,
        ),
        "querylog": fields_to_remote(config.querylog, QUERYLOG_FIELDS, "config.querylog"),
        "stats": fields_to_remote(config.stats, STATS_FIELDS, "config.stats"),
        "blocked_services": {
            "ids": blocked_ids,
            "schedule": schedule_to_remote(config.blocked_services_pause_schedule),
        },
        "dns": dns_to_remote(config.dns, "config.dns"),
    }


def config_to_declared(remote: Dict[str, Any], prior: Optional[ConfigModel] = None,
                       persisted: bool = False) -> ConfigModel:
    """
    Map the collected remote settings back to a declared ConfigModel.

    Args:
        remote: Dictionary keyed by section, as produced by config_to_remote
            or assembled from the individual status endpoints
        prior: Prior declared state (drives the schedule time-zone rule)
        persisted: Persisted read (True) or read-only view (False)

    Returns:
        Observed declared configuration
    """
    for section in ("safebrowsing", "parental"):
        if not isinstance(remote.get(section), bool):
            raise MappingFailed(f"config.{section}: expected boolean, got {remote.get(section)!r}")

    safesearch_enabled, services = flags_to_services(remote.get("safesearch"), "config.safesearch")
    blocked = sub_object(remote, "blocked_services", KIND_CONFIG)
    try:
        blocked_ids = set(sorted_strings(blocked.get("ids"), "config.blocked_services"))
    except TypeError as e:
        raise MappingFailed(f"cannot convert config.blocked_services to declared form: {e}") from e

    observed: Dict[str, Any] = {
        "filtering": fields_to_declared(
            sub_object(remote, "filtering", KIND_CONFIG), FILTERING_FIELDS, "config.filtering"
        ),
        "safebrowsing": remote["safebrowsing"],
        "parental_control": remote["parental"],
        "safesearch": {"enabled": safesearch_enabled, "services": services},
        "querylog": fields_to_declared(
            sub_object(remote, "querylog", KIND_CONFIG), QUERYLOG_FIELDS, "config.querylog"
        ),
        "stats": fields_to_declared(
            sub_object(remote, "stats", KIND_CONFIG), STATS_FIELDS, "config.stats"
        ),
        "blocked_services": blocked_ids,
        "blocked_services_pause_schedule": schedule_to_declared(
            blocked.get("schedule"), "config.blocked_services_pause_schedule"
        ),
        "dns": dns_to_dict(sub_object(remote, "dns", KIND_CONFIG), "config.dns"),
    }

    prior_dict = prior.model_dump() if prior is not None else None
    apply_quirks(KIND_CONFIG, observed, prior_dict, persisted)
    return build_model(ConfigModel, observed, KIND_CONFIG)
